"""Credit note tools."""

from typing import Any, Dict, List, Optional

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


class ListCreditNotesArguments(ListArguments):
    status: Optional[int] = Field(None, description="Filter by status (100=Draft, 200=Open, 1000=Paid)")
    credit_note_number: Optional[str] = Field(None, description="Filter by credit note number")
    start_date: Optional[str] = Field(None, description="Filter by start date (YYYY-MM-DD)")
    end_date: Optional[str] = Field(None, description="Filter by end date (YYYY-MM-DD)")
    contact_id: Optional[str] = Field(None, description="Filter by contact ID")


class GetCreditNoteArguments(ToolArguments):
    credit_note_id: str = Field(..., description="The ID of the credit note to retrieve")
    embed: Optional[List[str]] = Field(None, description="Related objects to embed (e.g., positions, contact)")


class CreateCreditNoteArguments(ToolArguments):
    contact_id: int = Field(..., description="The ID of the contact/customer")
    credit_note_date: str = Field(..., description="Credit note date (YYYY-MM-DD)")
    positions: List[PositionArguments] = Field(..., description="Credit note line items")
    header: Optional[str] = Field(None, description="Credit note header/subject")
    head_text: Optional[str] = Field(None, description="Text before positions")
    foot_text: Optional[str] = Field(None, description="Text after positions")
    status: Optional[int] = Field(None, description="Status (100=Draft, 200=Open)")
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
    contact_person_id: Optional[int] = Field(None, description="ID of the sevDesk user acting as contact person")


class UpdateCreditNoteArguments(ToolArguments):
    credit_note_id: str = Field(..., description="The ID of the credit note to update")
    header: Optional[str] = Field(None, description="Credit note header/subject")
    head_text: Optional[str] = Field(None, description="Text before positions")
    foot_text: Optional[str] = Field(None, description="Text after positions")
    status: Optional[int] = Field(None, description="Status (100=Draft, 200=Open)")


class CreditNoteIdArguments(ToolArguments):
    credit_note_id: str = Field(..., description="The ID of the credit note")


class SendCreditNoteEmailArguments(EmailArguments):
    credit_note_id: str = Field(..., description="The ID of the credit note to send")


class BookCreditNotePaymentArguments(BookingArguments):
    credit_note_id: str = Field(..., description="The ID of the credit note")


class InvoiceIdArguments(ToolArguments):
    invoice_id: str = Field(..., description="The ID of the invoice to convert")


def build_credit_note(args: CreateCreditNoteArguments) -> Dict[str, Any]:
    """Credit note header and positions, saved together in one request."""
    credit_note = build_payload(
        args,
        DOCUMENT_REFERENCES,
        exclude=("positions",),
        base={"objectName": "CreditNote", "mapAll": True},
    )
    return {
        "creditNote": credit_note,
        "creditNotePosSave": build_positions(args.positions, "CreditNotePos", POSITION_REFERENCES),
    }


def register(registry: ToolRegistry) -> None:
    @registry.tool("list_credit_notes", "List credit notes with optional filters.", ListCreditNotesArguments)
    async def list_credit_notes(client, args: ListCreditNotesArguments):
        return await client.list_credit_notes(build_query(args, LIST_REFERENCES))

    @registry.tool("get_credit_note", "Get detailed information about a specific credit note.", GetCreditNoteArguments)
    async def get_credit_note(client, args: GetCreditNoteArguments):
        return await client.get_credit_note(args.credit_note_id, embed_params(args.embed))

    @registry.tool("create_credit_note", "Create a new credit note with positions.", CreateCreditNoteArguments)
    async def create_credit_note(client, args: CreateCreditNoteArguments):
        return await client.create_credit_note(build_credit_note(args))

    @registry.tool(
        "update_credit_note",
        "Update an existing credit note. Only works for draft credit notes (status 100).",
        UpdateCreditNoteArguments,
    )
    async def update_credit_note(client, args: UpdateCreditNoteArguments):
        return await client.update_credit_note(args.credit_note_id, build_payload(args, exclude=("creditNoteId",)))

    @registry.tool(
        "delete_credit_note",
        "Delete a credit note. Only works for draft credit notes (status 100).",
        CreditNoteIdArguments,
    )
    async def delete_credit_note(client, args: CreditNoteIdArguments):
        await client.delete_credit_note(args.credit_note_id)
        return f"Credit note {args.credit_note_id} deleted successfully."

    @registry.tool("send_credit_note_email", "Send a credit note via email.", SendCreditNoteEmailArguments)
    async def send_credit_note_email(client, args: SendCreditNoteEmailArguments):
        return await client.send_credit_note_email(args.credit_note_id, build_email(args, "creditNoteId"))

    @registry.tool("book_credit_note_payment", "Book a payment for a credit note.", BookCreditNotePaymentArguments)
    async def book_credit_note_payment(client, args: BookCreditNotePaymentArguments):
        return await client.book_credit_note_payment(args.credit_note_id, build_booking(args, "creditNoteId"))

    @registry.tool(
        "enshrine_credit_note",
        "Lock/enshrine a credit note. Once enshrined, it cannot be modified.",
        CreditNoteIdArguments,
    )
    async def enshrine_credit_note(client, args: CreditNoteIdArguments):
        return await client.enshrine_credit_note(args.credit_note_id)

    @registry.tool(
        "create_credit_note_from_invoice",
        "Create a credit note from an existing invoice.",
        InvoiceIdArguments,
    )
    async def create_credit_note_from_invoice(client, args: InvoiceIdArguments):
        return await client.create_credit_note_from_invoice({"invoice": reference(args.invoice_id, "Invoice")})
