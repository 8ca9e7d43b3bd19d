"""Invoice tools."""

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from mcp_server_sevdesk.payloads import (
    Number,
    ToolArguments,
    build_payload,
    build_positions,
    build_query,
    reference,
)
from mcp_server_sevdesk.registry import ToolRegistry
from mcp_server_sevdesk.tools.common import (
    DOCUMENT_REFERENCES,
    POSITION_REFERENCES,
    BookingArguments,
    EmailArguments,
    ListArguments,
    PositionArguments,
    build_booking,
    build_email,
    embed_params,
)

LIST_REFERENCES = {"contactId": ("contact", "Contact")}

INVOICE_REFERENCES = {
    **DOCUMENT_REFERENCES,
    "paymentMethodId": ("paymentMethod", "PaymentMethod"),
}


class ListInvoicesArguments(ListArguments):
    status: Optional[int] = Field(None, description="Filter by status (100=Draft, 200=Open, 1000=Paid)")
    invoice_number: Optional[str] = Field(None, description="Filter by invoice number")
    start_date: Optional[str] = Field(None, description="Filter by start date (YYYY-MM-DD)")
    end_date: Optional[str] = Field(None, description="Filter by end date (YYYY-MM-DD)")
    contact_id: Optional[str] = Field(None, description="Filter by contact ID")


class GetInvoiceArguments(ToolArguments):
    invoice_id: str = Field(..., description="The ID of the invoice to retrieve")
    embed: Optional[List[str]] = Field(None, description="Related objects to embed (e.g., positions, contact)")


class CreateInvoiceArguments(ToolArguments):
    contact_id: int = Field(..., description="The ID of the contact/customer")
    invoice_date: str = Field(..., description="Invoice date (YYYY-MM-DD)")
    positions: List[PositionArguments] = Field(..., description="Invoice line items")
    header: Optional[str] = Field(None, description="Invoice header/subject")
    head_text: Optional[str] = Field(None, description="Text before positions")
    foot_text: Optional[str] = Field(None, description="Text after positions")
    time_to_pay: Optional[int] = Field(None, description="Payment terms in days")
    discount: Optional[Number] = Field(None, description="Discount in percent")
    discount_time: Optional[int] = Field(None, description="Early payment discount time in days")
    delivery_date: Optional[str] = Field(None, description="Delivery date (YYYY-MM-DD)")
    delivery_date_until: Optional[str] = Field(None, description="Delivery end date (YYYY-MM-DD)")
    status: Optional[int] = Field(None, description="Status (100=Draft, 200=Open)")
    invoice_type: Optional[Literal["RE", "WKR", "SR", "MA", "TR", "ER"]] = Field(None, description="Invoice type")
    currency: Optional[str] = Field(None, description="Currency code (default: EUR)")
    show_net: Optional[bool] = Field(None, description="Show net prices")
    address_name: Optional[str] = Field(None, description="Custom address name")
    address_street: Optional[str] = Field(None, description="Custom address street")
    address_zip: Optional[str] = Field(None, description="Custom address ZIP")
    address_city: Optional[str] = Field(None, description="Custom address city")
    address_country_id: Optional[int] = Field(None, description="Custom address country ID")
    tax_rate: Optional[Number] = Field(None, description="Default tax rate")
    tax_type: Optional[str] = Field(None, description="Tax type (default, eu, noteu, custom)")
    tax_set_id: Optional[int] = Field(None, description="Tax set ID")
    payment_method_id: Optional[int] = Field(None, description="Payment method ID")
    small_settlement: Optional[bool] = Field(None, description="Small business regulation (Kleinunternehmer)")
    contact_person_id: Optional[int] = Field(None, description="ID of the sevDesk user acting as contact person")


class UpdateInvoiceArguments(ToolArguments):
    invoice_id: str = Field(..., description="The ID of the invoice to update")
    header: Optional[str] = Field(None, description="Invoice header/subject")
    head_text: Optional[str] = Field(None, description="Text before positions")
    foot_text: Optional[str] = Field(None, description="Text after positions")
    time_to_pay: Optional[int] = Field(None, description="Payment terms in days")
    discount: Optional[Number] = Field(None, description="Discount in percent")
    delivery_date: Optional[str] = Field(None, description="Delivery date (YYYY-MM-DD)")
    delivery_date_until: Optional[str] = Field(None, description="Delivery end date (YYYY-MM-DD)")
    status: Optional[int] = Field(None, description="Status (100=Draft, 200=Open)")


class InvoiceIdArguments(ToolArguments):
    invoice_id: str = Field(..., description="The ID of the invoice")


class SendInvoiceEmailArguments(EmailArguments):
    invoice_id: str = Field(..., description="The ID of the invoice to send")


class BookInvoicePaymentArguments(BookingArguments):
    invoice_id: str = Field(..., description="The ID of the invoice")


class OrderIdArguments(ToolArguments):
    order_id: str = Field(..., description="The ID of the order to convert")


def build_invoice_filters(args: ListInvoicesArguments) -> Dict[str, Any]:
    return build_query(args, LIST_REFERENCES)


def build_invoice(args: CreateInvoiceArguments) -> Dict[str, Any]:
    """Invoice header and positions, saved together in one request."""
    invoice = build_payload(
        args,
        INVOICE_REFERENCES,
        exclude=("positions",),
        base={"objectName": "Invoice", "mapAll": True},
    )
    return {
        "invoice": invoice,
        "invoicePosSave": build_positions(args.positions, "InvoicePos", POSITION_REFERENCES),
    }


def build_invoice_update(args: UpdateInvoiceArguments) -> Dict[str, Any]:
    return build_payload(args, exclude=("invoiceId",))


def register(registry: ToolRegistry) -> None:
    @registry.tool("list_invoices", "List invoices with optional filters.", ListInvoicesArguments)
    async def list_invoices(client, args: ListInvoicesArguments):
        return await client.list_invoices(build_invoice_filters(args))

    @registry.tool("get_invoice", "Get detailed information about a specific invoice.", GetInvoiceArguments)
    async def get_invoice(client, args: GetInvoiceArguments):
        return await client.get_invoice(args.invoice_id, embed_params(args.embed))

    @registry.tool("create_invoice", "Create a new invoice with positions.", CreateInvoiceArguments)
    async def create_invoice(client, args: CreateInvoiceArguments):
        return await client.create_invoice(build_invoice(args))

    @registry.tool(
        "update_invoice",
        "Update an existing invoice. Only works for draft invoices (status 100).",
        UpdateInvoiceArguments,
    )
    async def update_invoice(client, args: UpdateInvoiceArguments):
        return await client.update_invoice(args.invoice_id, build_invoice_update(args))

    @registry.tool(
        "delete_invoice",
        "Delete an invoice. Only works for draft invoices (status 100).",
        InvoiceIdArguments,
    )
    async def delete_invoice(client, args: InvoiceIdArguments):
        await client.delete_invoice(args.invoice_id)
        return f"Invoice {args.invoice_id} deleted successfully."

    @registry.tool("send_invoice_email", "Send an invoice via email.", SendInvoiceEmailArguments)
    async def send_invoice_email(client, args: SendInvoiceEmailArguments):
        return await client.send_invoice_email(args.invoice_id, build_email(args, "invoiceId"))

    @registry.tool("book_invoice_payment", "Book a payment for an invoice.", BookInvoicePaymentArguments)
    async def book_invoice_payment(client, args: BookInvoicePaymentArguments):
        return await client.book_invoice_payment(args.invoice_id, build_booking(args, "invoiceId"))

    @registry.tool(
        "enshrine_invoice",
        "Lock/enshrine an invoice. Once enshrined, it cannot be modified.",
        InvoiceIdArguments,
    )
    async def enshrine_invoice(client, args: InvoiceIdArguments):
        return await client.enshrine_invoice(args.invoice_id)

    @registry.tool(
        "reset_invoice_to_draft",
        "Reset an invoice back to draft status. Only possible if no payments have been booked.",
        InvoiceIdArguments,
    )
    async def reset_invoice_to_draft(client, args: InvoiceIdArguments):
        return await client.reset_invoice_to_draft(args.invoice_id)

    @registry.tool("get_invoice_pdf", "Get the PDF download information for an invoice.", InvoiceIdArguments)
    async def get_invoice_pdf(client, args: InvoiceIdArguments):
        return await client.get_invoice_pdf(args.invoice_id)

    @registry.tool("export_invoice_xml", "Export an invoice as XRechnung XML format.", InvoiceIdArguments)
    async def export_invoice_xml(client, args: InvoiceIdArguments):
        return await client.export_invoice_xml(args.invoice_id)

    @registry.tool("create_invoice_from_order", "Create an invoice from an existing order.", OrderIdArguments)
    async def create_invoice_from_order(client, args: OrderIdArguments):
        return await client.create_invoice_from_order({"order": reference(args.order_id, "Order")})
