"""Voucher tools (receipts and expense documents)."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from mcp_server_sevdesk.payloads import Number, ToolArguments, build_payload, build_positions, build_query
from mcp_server_sevdesk.registry import ToolRegistry
from mcp_server_sevdesk.tools.common import BookingArguments, ListArguments, build_booking, embed_params

VOUCHER_REFERENCES = {
    "supplierId": ("supplier", "Contact"),
    "taxSetId": ("taxSet", "TaxSet"),
}

VOUCHER_POSITION_REFERENCES = {"accountingTypeId": ("accountingType", "AccountingType")}


class VoucherPositionArguments(ToolArguments):
    accounting_type_id: int = Field(..., description="Accounting type ID (expense account)")
    tax_rate: Number = Field(..., description="Tax rate in percent (e.g., 19)")
    sum_net: Number = Field(..., description="Net amount")
    sum_gross: Number = Field(..., description="Gross amount")
    net: bool = Field(..., description="Whether the amount is net (true) or gross (false)")
    is_asset: Optional[bool] = Field(None, description="Whether this is an asset")
    comment: Optional[str] = Field(None, description="Comment for this position")


class ListVouchersArguments(ListArguments):
    status: Optional[int] = Field(None, description="Filter by status (50=Draft, 100=Unpaid, 1000=Paid)")
    voucher_type: Optional[str] = Field(None, description="Filter by voucher type (VOU=Voucher, RV=Recurring voucher)")
    start_date: Optional[str] = Field(None, description="Filter by start date (YYYY-MM-DD)")
    end_date: Optional[str] = Field(None, description="Filter by end date (YYYY-MM-DD)")


class GetVoucherArguments(ToolArguments):
    voucher_id: str = Field(..., description="The ID of the voucher to retrieve")
    embed: Optional[List[str]] = Field(None, description="Related objects to embed (e.g., positions, supplier)")


class CreateVoucherArguments(ToolArguments):
    voucher_date: str = Field(..., description="Voucher date (YYYY-MM-DD)")
    positions: List[VoucherPositionArguments] = Field(..., description="Voucher line items")
    credit_debit: Literal["C", "D"] = Field(..., description="Credit (C) or Debit (D)")
    tax_type: str = Field(..., description="Tax type (default, eu, noteu, custom, ss)")
    supplier_id: Optional[int] = Field(None, description="The ID of the supplier contact")
    supplier_name: Optional[str] = Field(None, description="Supplier name (if no supplier contact)")
    description: Optional[str] = Field(None, description="Voucher description")
    status: Optional[int] = Field(None, description="Status (50=Draft, 100=Unpaid, 1000=Paid)")
    voucher_type: Optional[Literal["VOU", "RV"]] = Field(None, description="Voucher type (VOU=Voucher, RV=Recurring)")
    currency: Optional[str] = Field(None, description="Currency code (default: EUR)")
    tax_set_id: Optional[int] = Field(None, description="Tax set ID")
    payment_deadline: Optional[str] = Field(None, description="Payment deadline (YYYY-MM-DD)")
    delivery_date: Optional[str] = Field(None, description="Delivery date (YYYY-MM-DD)")
    delivery_date_until: Optional[str] = Field(None, description="Delivery end date (YYYY-MM-DD)")


class UpdateVoucherArguments(ToolArguments):
    voucher_id: str = Field(..., description="The ID of the voucher to update")
    description: Optional[str] = Field(None, description="Voucher description")
    status: Optional[int] = Field(None, description="Status (50=Draft, 100=Unpaid, 1000=Paid)")
    payment_deadline: Optional[str] = Field(None, description="Payment deadline (YYYY-MM-DD)")


class BookVoucherArguments(BookingArguments):
    voucher_id: str = Field(..., description="The ID of the voucher")


def build_voucher(args: CreateVoucherArguments) -> Dict[str, Any]:
    """Voucher header and positions, saved together in one request."""
    voucher = build_payload(
        args,
        VOUCHER_REFERENCES,
        exclude=("positions",),
        base={"objectName": "Voucher", "mapAll": True},
    )
    # voucher positions are accounting splits and carry no position number
    positions = build_positions(args.positions, "VoucherPos", VOUCHER_POSITION_REFERENCES, numbered=False)
    return {"voucher": voucher, "voucherPosSave": positions}


def register(registry: ToolRegistry) -> None:
    @registry.tool(
        "list_vouchers",
        "List vouchers (receipts/expense documents) with optional filters.",
        ListVouchersArguments,
    )
    async def list_vouchers(client, args: ListVouchersArguments):
        return await client.list_vouchers(build_query(args))

    @registry.tool("get_voucher", "Get detailed information about a specific voucher.", GetVoucherArguments)
    async def get_voucher(client, args: GetVoucherArguments):
        return await client.get_voucher(args.voucher_id, embed_params(args.embed))

    @registry.tool("create_voucher", "Create a new voucher (expense document) with positions.", CreateVoucherArguments)
    async def create_voucher(client, args: CreateVoucherArguments):
        return await client.create_voucher(build_voucher(args))

    @registry.tool(
        "update_voucher",
        "Update an existing voucher. Only works for draft vouchers (status 50).",
        UpdateVoucherArguments,
    )
    async def update_voucher(client, args: UpdateVoucherArguments):
        return await client.update_voucher(args.voucher_id, build_payload(args, exclude=("voucherId",)))

    @registry.tool("book_voucher", "Book a payment for a voucher.", BookVoucherArguments)
    async def book_voucher(client, args: BookVoucherArguments):
        return await client.book_voucher(args.voucher_id, build_booking(args, "voucherId"))
