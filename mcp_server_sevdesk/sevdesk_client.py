"""sevDesk REST API client for API communication."""

import json
import logging
import os
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError, field_validator

from mcp_server_sevdesk import __version__

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://my.sevdesk.de/api/v1"


class ConfigurationError(Exception):
    """Raised when the sevDesk credential or settings are missing or invalid."""


class SevDeskAPIError(Exception):
    """Error reported by sevDesk through its ``{"error": {...}}`` envelope."""

    def __init__(self, code: Any, message: str, status_code: Optional[int] = None) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(f"sevDesk API Error ({code}): {message}")


class SevDeskConfig(BaseModel):
    """Configuration for sevDesk connection."""

    api_url: str = Field(default=DEFAULT_API_URL, description="sevDesk API base URL (including /api/v1)")
    api_token: str = Field(..., description="sevDesk API token")
    timeout: float = Field(30.0, description="Request timeout in seconds")
    default_contact_person_id: Optional[int] = Field(
        None, description="SevUser used as contact person for new orders when none is given"
    )

    @field_validator("api_token")
    @classmethod
    def _token_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("api_token must not be empty")
        return value

    @classmethod
    def from_env(cls) -> "SevDeskConfig":
        """Build the configuration from SEVDESK_* environment variables."""
        token = os.getenv("SEVDESK_API_TOKEN", "").strip()
        if not token:
            raise ConfigurationError("SEVDESK_API_TOKEN environment variable is not set")

        values: Dict[str, Any] = {
            "api_token": token,
            "api_url": os.getenv("SEVDESK_API_URL", DEFAULT_API_URL),
        }
        if os.getenv("SEVDESK_TIMEOUT"):
            values["timeout"] = os.environ["SEVDESK_TIMEOUT"]
        if os.getenv("SEVDESK_DEFAULT_CONTACT_PERSON_ID"):
            values["default_contact_person_id"] = os.environ["SEVDESK_DEFAULT_CONTACT_PERSON_ID"]

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid sevDesk configuration: {e}") from e


class SevDeskClient:
    """Client for interacting with sevDesk via REST API."""

    def __init__(self, config: SevDeskConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        """Initialize sevDesk client with configuration."""
        self.config = config
        self.api_url = config.api_url.rstrip("/")

        # sevDesk expects the bare token, without a Bearer prefix
        self.client = httpx.AsyncClient(
            timeout=config.timeout,
            transport=transport,
            headers={
                "Authorization": config.api_token,
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": f"sevdesk-mcp-server/{__version__}",
            },
        )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Any] = None,
    ) -> httpx.Response:
        """Make a request to the sevDesk API and raise on error responses."""
        path = endpoint if endpoint.startswith("/") else f"/{endpoint}"
        url = f"{self.api_url}{path}"
        query = {key: value for key, value in (params or {}).items() if value is not None}

        logger.debug("%s %s params=%s", method, path, query)
        response = await self.client.request(
            method=method,
            url=url,
            params=query or None,
            json=json_data,
        )
        if response.is_error:
            self._raise_for_error(response)
        return response

    def _raise_for_error(self, response: httpx.Response) -> None:
        """Raise SevDeskAPIError from the error envelope, else the transport error."""
        try:
            payload = response.json()
        except ValueError:
            payload = None

        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, dict) and ("code" in error or "message" in error):
            logger.warning(
                "sevDesk rejected %s %s: %s %s",
                response.request.method,
                response.request.url.path,
                error.get("code"),
                error.get("message"),
            )
            raise SevDeskAPIError(error.get("code"), error.get("message"), status_code=response.status_code)

        response.raise_for_status()

    @staticmethod
    def _unwrap(response: httpx.Response) -> Any:
        """Return the payload under the ``objects`` key."""
        if not response.content:
            return None
        payload = response.json()
        if isinstance(payload, dict) and "objects" in payload:
            return payload["objects"]
        return payload

    async def fetch_list(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> List[Any]:
        """GET a collection."""
        response = await self._request("GET", endpoint, params=params)
        return self._unwrap(response) or []

    async def fetch_one(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET a single object."""
        response = await self._request("GET", endpoint, params=params)
        return self._unwrap(response)

    async def fetch_raw(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> bytes:
        """GET the undecoded response body."""
        response = await self._request("GET", endpoint, params=params)
        return response.content

    async def create(self, endpoint: str, body: Optional[Any] = None) -> Any:
        """Make a POST request."""
        response = await self._request("POST", endpoint, json_data=body)
        return self._unwrap(response)

    async def replace(self, endpoint: str, body: Optional[Any] = None) -> Any:
        """Make a PUT request."""
        response = await self._request("PUT", endpoint, json_data=body)
        return self._unwrap(response)

    async def remove(self, endpoint: str) -> None:
        """Make a DELETE request."""
        await self._request("DELETE", endpoint)

    # Contact methods
    async def list_contacts(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Fetch a list of contacts."""
        return await self.fetch_list("/Contact", params)

    async def get_contact(self, contact_id: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Fetch a specific contact."""
        return await self.fetch_one(f"/Contact/{contact_id}", params)

    async def create_contact(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a new contact."""
        return await self.create("/Contact", data)

    async def update_contact(self, contact_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Update an existing contact."""
        return await self.replace(f"/Contact/{contact_id}", data)

    async def delete_contact(self, contact_id: str) -> None:
        """Delete a contact."""
        await self.remove(f"/Contact/{contact_id}")

    async def get_next_customer_number(self) -> Any:
        """Generate the next free customer number."""
        return await self.fetch_one("/Contact/Factory/getNextCustomerNumber")

    async def list_contact_addresses(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Fetch the addresses matching a contact filter."""
        return await self.fetch_list("/ContactAddress", params)

    async def create_contact_address(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a new contact address."""
        return await self.create("/ContactAddress", data)

    # Invoice methods
    async def list_invoices(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Fetch a list of invoices."""
        return await self.fetch_list("/Invoice", params)

    async def get_invoice(self, invoice_id: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Fetch a specific invoice."""
        return await self.fetch_one(f"/Invoice/{invoice_id}", params)

    async def create_invoice(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Save an invoice together with its positions."""
        return await self.create("/Invoice/Factory/saveInvoice", data)

    async def update_invoice(self, invoice_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Update an existing invoice."""
        return await self.replace(f"/Invoice/{invoice_id}", data)

    async def delete_invoice(self, invoice_id: str) -> None:
        """Delete an invoice."""
        await self.remove(f"/Invoice/{invoice_id}")

    async def send_invoice_email(self, invoice_id: str, data: Dict[str, Any]) -> Any:
        """Send an invoice via email."""
        return await self.create(f"/Invoice/{invoice_id}/sendViaEmail", data)

    async def book_invoice_payment(self, invoice_id: str, data: Dict[str, Any]) -> Any:
        """Book an amount against an invoice."""
        return await self.replace(f"/Invoice/{invoice_id}/bookAmount", data)

    async def enshrine_invoice(self, invoice_id: str) -> Any:
        """Lock an invoice against further changes."""
        return await self.replace(f"/Invoice/{invoice_id}/enshrine", {})

    async def reset_invoice_to_draft(self, invoice_id: str) -> Any:
        """Reset an invoice to draft status."""
        return await self.replace(f"/Invoice/{invoice_id}/resetToDraft", {})

    async def get_invoice_pdf(self, invoice_id: str) -> Any:
        """Fetch the PDF document (base64 content) of an invoice.

        The whole response body is returned, envelope included.
        """
        return json.loads(await self.fetch_raw(f"/Invoice/{invoice_id}/getPdf", {"download": True}))

    async def export_invoice_xml(self, invoice_id: str) -> Any:
        """Fetch the XRechnung XML of an invoice."""
        return await self.fetch_one(f"/Invoice/{invoice_id}/getXml")

    async def create_invoice_from_order(self, data: Dict[str, Any]) -> Any:
        """Create an invoice from an order."""
        return await self.create("/Invoice/Factory/createInvoiceFromOrder", data)

    # Credit note methods
    async def list_credit_notes(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Fetch a list of credit notes."""
        return await self.fetch_list("/CreditNote", params)

    async def get_credit_note(self, credit_note_id: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Fetch a specific credit note."""
        return await self.fetch_one(f"/CreditNote/{credit_note_id}", params)

    async def create_credit_note(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Save a credit note together with its positions."""
        return await self.create("/CreditNote/Factory/saveCreditNote", data)

    async def update_credit_note(self, credit_note_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Update an existing credit note."""
        return await self.replace(f"/CreditNote/{credit_note_id}", data)

    async def delete_credit_note(self, credit_note_id: str) -> None:
        """Delete a credit note."""
        await self.remove(f"/CreditNote/{credit_note_id}")

    async def send_credit_note_email(self, credit_note_id: str, data: Dict[str, Any]) -> Any:
        """Send a credit note via email."""
        return await self.create(f"/CreditNote/{credit_note_id}/sendViaEmail", data)

    async def book_credit_note_payment(self, credit_note_id: str, data: Dict[str, Any]) -> Any:
        """Book an amount against a credit note."""
        return await self.replace(f"/CreditNote/{credit_note_id}/bookAmount", data)

    async def enshrine_credit_note(self, credit_note_id: str) -> Any:
        """Lock a credit note against further changes."""
        return await self.replace(f"/CreditNote/{credit_note_id}/enshrine", {})

    async def create_credit_note_from_invoice(self, data: Dict[str, Any]) -> Any:
        """Create a credit note from an invoice."""
        return await self.create("/CreditNote/Factory/createFromInvoice", data)

    # Order methods
    async def list_orders(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Fetch a list of orders."""
        return await self.fetch_list("/Order", params)

    async def get_order(self, order_id: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Fetch a specific order."""
        return await self.fetch_one(f"/Order/{order_id}", params)

    async def create_order(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Save an order together with its positions."""
        return await self.create("/Order/Factory/saveOrder", data)

    async def update_order(self, order_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Update an existing order."""
        return await self.replace(f"/Order/{order_id}", data)

    async def delete_order(self, order_id: str) -> None:
        """Delete an order."""
        await self.remove(f"/Order/{order_id}")

    async def send_order_email(self, order_id: str, data: Dict[str, Any]) -> Any:
        """Send an order via email."""
        return await self.create(f"/Order/{order_id}/sendViaEmail", data)

    async def get_next_order_number(self, order_type: str) -> Any:
        """Look up the next number of the order sequence for ``order_type``."""
        sequence = await self.fetch_one(
            "/SevSequence/Factory/getByType",
            {"objectType": "Order", "type": order_type},
        )
        if not isinstance(sequence, dict) or sequence.get("nextSequence") is None:
            raise ValueError(f"sevDesk returned no next order number for order type {order_type}: {sequence!r}")
        return sequence["nextSequence"]

    # Voucher methods
    async def list_vouchers(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Fetch a list of vouchers."""
        return await self.fetch_list("/Voucher", params)

    async def get_voucher(self, voucher_id: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Fetch a specific voucher."""
        return await self.fetch_one(f"/Voucher/{voucher_id}", params)

    async def create_voucher(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Save a voucher together with its positions."""
        return await self.create("/Voucher/Factory/saveVoucher", data)

    async def update_voucher(self, voucher_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Update an existing voucher."""
        return await self.replace(f"/Voucher/{voucher_id}", data)

    async def book_voucher(self, voucher_id: str, data: Dict[str, Any]) -> Any:
        """Book an amount against a voucher."""
        return await self.replace(f"/Voucher/{voucher_id}/bookAmount", data)

    # Check account and transaction methods
    async def list_check_accounts(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Fetch a list of check accounts."""
        return await self.fetch_list("/CheckAccount", params)

    async def list_transactions(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Fetch a list of check account transactions."""
        return await self.fetch_list("/CheckAccountTransaction", params)

    async def get_transaction(self, transaction_id: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Fetch a specific transaction."""
        return await self.fetch_one(f"/CheckAccountTransaction/{transaction_id}", params)

    async def create_transaction(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a new transaction."""
        return await self.create("/CheckAccountTransaction", data)

    async def update_transaction(self, transaction_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Update an existing transaction."""
        return await self.replace(f"/CheckAccountTransaction/{transaction_id}", data)

    # Part methods
    async def list_parts(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Fetch a list of parts."""
        return await self.fetch_list("/Part", params)

    async def get_part(self, part_id: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Fetch a specific part."""
        return await self.fetch_one(f"/Part/{part_id}", params)

    async def create_part(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a new part."""
        return await self.create("/Part", data)

    async def update_part(self, part_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Update an existing part."""
        return await self.replace(f"/Part/{part_id}", data)

    # Basics
    async def get_system_version(self) -> Any:
        """Fetch the sevDesk system version.

        The version endpoint body is returned as sent, without envelope unwrapping.
        """
        return json.loads(await self.fetch_raw("/Tools/getVersion"))

    async def get_next_sequence_number(self, object_type: str) -> Any:
        """Fetch the next sequence number for a document type."""
        return await self.fetch_one("/Tools/getNextSequenceNumber", {"objectType": object_type})

    async def export_data(self, object_type: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Fetch all objects of one type, optionally limited to a date range."""
        return await self.fetch_list(f"/{object_type}", params)

    # User methods
    async def list_users(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Fetch a list of sevDesk users."""
        return await self.fetch_list("/SevUser", params)

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        """Fetch a specific sevDesk user."""
        return await self.fetch_one(f"/SevUser/{user_id}")
