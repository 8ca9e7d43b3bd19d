"""Argument models and shaping shared by several document families."""

from typing import Any, Dict, List, Optional

from pydantic import Field

from mcp_server_sevdesk.payloads import Number, ToolArguments, build_payload

DEFAULT_LIMIT = 50

POSITION_REFERENCES = {
    "unityId": ("unity", "Unity"),
    "partId": ("part", "Part"),
}

BOOKING_REFERENCES = {
    "checkAccountId": ("checkAccount", "CheckAccount"),
    "checkAccountTransactionId": ("checkAccountTransaction", "CheckAccountTransaction"),
}

DOCUMENT_REFERENCES = {
    "contactId": ("contact", "Contact"),
    "addressCountryId": ("addressCountry", "StaticCountry"),
    "taxSetId": ("taxSet", "TaxSet"),
    "contactPersonId": ("contactPerson", "SevUser"),
}


class NoArguments(ToolArguments):
    pass


class ListArguments(ToolArguments):
    limit: int = Field(DEFAULT_LIMIT, description="Maximum number of results (default: 50)")
    offset: Optional[int] = Field(None, description="Number of results to skip for pagination")


class PositionArguments(ToolArguments):
    name: str = Field(..., description="Name/description of the position")
    quantity: Number = Field(..., description="Quantity")
    price: Number = Field(..., description="Unit price")
    tax_rate: Number = Field(..., description="Tax rate in percent (e.g., 19)")
    unity_id: int = Field(..., description="Unity ID (1=piece, 2=hour, etc.)")
    part_id: Optional[int] = Field(None, description="Optional part/article ID")
    discount: Optional[Number] = Field(None, description="Discount in percent")
    text: Optional[str] = Field(None, description="Additional text for this position")
    position_number: Optional[int] = Field(None, description="Position number for ordering")


class EmailArguments(ToolArguments):
    to_email: str = Field(..., description="Recipient email address")
    subject: str = Field(..., description="Email subject")
    text: str = Field(..., description="Email body text")
    send_copy: Optional[bool] = Field(None, alias="copy", description="Send a copy to yourself")
    cc_email: Optional[str] = Field(None, description="CC email address")
    bcc_email: Optional[str] = Field(None, description="BCC email address")
    additional_attachments: Optional[str] = Field(
        None, description="Comma-separated document IDs to attach in addition"
    )


class BookingArguments(ToolArguments):
    amount: Number = Field(..., description="Payment amount")
    date: str = Field(..., description="Payment date (YYYY-MM-DD)")
    type: str = Field(..., description='Payment type (e.g., "N" for normal)')
    check_account_id: Optional[int] = Field(None, description="ID of the check account")
    check_account_transaction_id: Optional[int] = Field(
        None, description="ID of the check account transaction to link"
    )
    create_feed: Optional[bool] = Field(None, description="Create a feed entry")


def embed_params(embed: Optional[List[str]]) -> Optional[Dict[str, Any]]:
    """Query parameters asking sevDesk to embed related objects."""
    if not embed:
        return None
    return {"embed": ",".join(embed)}


def build_email(args: EmailArguments, id_field: str) -> Dict[str, Any]:
    return build_payload(args, exclude=(id_field,))


def build_booking(args: BookingArguments, id_field: str) -> Dict[str, Any]:
    return build_payload(args, BOOKING_REFERENCES, exclude=(id_field,))
