"""Order tools (quotes, order confirmations, delivery notes)."""

import logging
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from mcp_server_sevdesk.payloads import (
    Number,
    ToolArguments,
    build_payload,
    build_positions,
    build_query,
)
from mcp_server_sevdesk.registry import ToolRegistry
from mcp_server_sevdesk.sevdesk_client import SevDeskClient
from mcp_server_sevdesk.tools.common import (
    DOCUMENT_REFERENCES,
    POSITION_REFERENCES,
    EmailArguments,
    ListArguments,
    PositionArguments,
    build_email,
    embed_params,
)

logger = logging.getLogger(__name__)

LIST_REFERENCES = {"contactId": ("contact", "Contact")}

ORDER_REFERENCES = {
    **DOCUMENT_REFERENCES,
    "taxRuleId": ("taxRule", "TaxRule"),
}

DRAFT_STATUS = 100
DEFAULT_TAX_RULE_ID = 1

OrderType = Literal["AN", "AB", "LI"]


class OrderPositionArguments(PositionArguments):
    optional: Optional[bool] = Field(None, description="Mark position as optional")


class ListOrdersArguments(ListArguments):
    status: Optional[int] = Field(
        None,
        description="Filter by status (100=Draft, 200=Delivered, 300=Accepted, "
        "500=Partially invoiced, 750=Invoiced, 1000=Cancelled)",
    )
    order_number: Optional[str] = Field(None, description="Filter by order number")
    order_type: Optional[str] = Field(
        None, description="Filter by order type (AN=Quote, AB=Order confirmation, LI=Delivery note)"
    )
    start_date: Optional[str] = Field(None, description="Filter by start date (YYYY-MM-DD)")
    end_date: Optional[str] = Field(None, description="Filter by end date (YYYY-MM-DD)")
    contact_id: Optional[str] = Field(None, description="Filter by contact ID")


class GetOrderArguments(ToolArguments):
    order_id: str = Field(..., description="The ID of the order to retrieve")
    embed: Optional[List[str]] = Field(None, description="Related objects to embed (e.g., positions, contact)")


class CreateOrderArguments(ToolArguments):
    contact_id: int = Field(..., description="The ID of the contact/customer")
    order_date: str = Field(..., description="Order date (YYYY-MM-DD)")
    order_type: OrderType = Field(..., description="Order type (AN=Quote, AB=Order confirmation, LI=Delivery note)")
    positions: List[OrderPositionArguments] = Field(..., description="Order line items")
    header: Optional[str] = Field(None, description="Order header/subject")
    head_text: Optional[str] = Field(None, description="Text before positions")
    foot_text: Optional[str] = Field(None, description="Text after positions")
    delivery_date: Optional[str] = Field(None, description="Delivery date (YYYY-MM-DD)")
    delivery_date_until: Optional[str] = Field(None, description="Delivery end date (YYYY-MM-DD)")
    status: Optional[int] = Field(None, description="Status (100=Draft, 200=Delivered, etc.)")
    currency: Optional[str] = Field(None, description="Currency code (default: EUR)")
    show_net: Optional[bool] = Field(None, description="Show net prices")
    address_name: Optional[str] = Field(None, description="Custom address name")
    address_street: Optional[str] = Field(None, description="Custom address street")
    address_zip: Optional[str] = Field(None, description="Custom address ZIP")
    address_city: Optional[str] = Field(None, description="Custom address city")
    address_country_id: Optional[int] = Field(None, description="Custom address country ID")
    tax_rate: Optional[Number] = Field(None, description="Default tax rate")
    tax_type: Optional[str] = Field(None, description="Tax type (default, eu, noteu, custom)")
    tax_text: Optional[str] = Field(None, description='Tax description text (e.g. "Umsatzsteuer 20%")')
    tax_set_id: Optional[int] = Field(None, description="Tax set ID")
    tax_rule_id: Optional[int] = Field(
        None, description="Tax rule ID (default: 1 = Umsatzsteuerpflichtige Umsaetze)"
    )
    small_settlement: Optional[bool] = Field(None, description="Small business regulation (Kleinunternehmer)")
    contact_person_id: Optional[int] = Field(None, description="ID of the sevDesk user acting as contact person")


class UpdateOrderArguments(ToolArguments):
    order_id: str = Field(..., description="The ID of the order to update")
    header: Optional[str] = Field(None, description="Order header/subject")
    head_text: Optional[str] = Field(None, description="Text before positions")
    foot_text: Optional[str] = Field(None, description="Text after positions")
    delivery_date: Optional[str] = Field(None, description="Delivery date (YYYY-MM-DD)")
    delivery_date_until: Optional[str] = Field(None, description="Delivery end date (YYYY-MM-DD)")
    status: Optional[int] = Field(None, description="Status (100=Draft, 200=Delivered, etc.)")


class OrderIdArguments(ToolArguments):
    order_id: str = Field(..., description="The ID of the order")


class SendOrderEmailArguments(EmailArguments):
    order_id: str = Field(..., description="The ID of the order to send")


async def resolve_contact_person(client: SevDeskClient, args: CreateOrderArguments) -> Optional[Any]:
    """Pick the SevUser used as contact person on a new order.

    Order of precedence: the ``contactPersonId`` argument, the configured
    ``SEVDESK_DEFAULT_CONTACT_PERSON_ID``, then the first user sevDesk lists.
    """
    if args.contact_person_id is not None:
        return args.contact_person_id
    if client.config.default_contact_person_id is not None:
        return client.config.default_contact_person_id

    users = await client.list_users({"limit": 1})
    if not users:
        return None
    logger.warning(
        "no contact person given for new order, using first listed user %s; "
        "set SEVDESK_DEFAULT_CONTACT_PERSON_ID to pin it",
        users[0].get("id"),
    )
    return users[0].get("id")


def build_order(args: CreateOrderArguments, order_number: Any, contact_person_id: Optional[Any]) -> Dict[str, Any]:
    """Order header and positions, saved together in one request."""
    if order_number is None:
        raise ValueError("Cannot build an order without an order number")

    defaults = {
        "objectName": "Order",
        "orderNumber": order_number,
        "mapAll": True,
        "status": DRAFT_STATUS,
        "header": f"{args.order_type}-{order_number}",
        "currency": "EUR",
        "taxRate": 0,
        "taxType": "default",
        "taxText": "Umsatzsteuer",
        "taxRule": {"id": DEFAULT_TAX_RULE_ID, "objectName": "TaxRule"},
        "version": 0,
    }
    if contact_person_id is not None:
        defaults["contactPerson"] = {"id": contact_person_id, "objectName": "SevUser"}

    order = build_payload(args, ORDER_REFERENCES, exclude=("positions",), base=defaults)
    return {
        "order": order,
        "orderPosSave": build_positions(args.positions, "OrderPos", POSITION_REFERENCES),
    }


async def prepare_order(client: SevDeskClient, args: CreateOrderArguments) -> Dict[str, Any]:
    """Read the next order number and contact person, then shape the order."""
    order_number = await client.get_next_order_number(args.order_type)
    contact_person_id = await resolve_contact_person(client, args)
    return build_order(args, order_number, contact_person_id)


def register(registry: ToolRegistry) -> None:
    @registry.tool("list_orders", "List orders/quotes with optional filters.", ListOrdersArguments)
    async def list_orders(client, args: ListOrdersArguments):
        return await client.list_orders(build_query(args, LIST_REFERENCES))

    @registry.tool("get_order", "Get detailed information about a specific order/quote.", GetOrderArguments)
    async def get_order(client, args: GetOrderArguments):
        return await client.get_order(args.order_id, embed_params(args.embed))

    @registry.tool(
        "create_order",
        "Create a new order/quote with positions. The order number is assigned automatically.",
        CreateOrderArguments,
    )
    async def create_order(client, args: CreateOrderArguments):
        return await client.create_order(await prepare_order(client, args))

    @registry.tool(
        "update_order",
        "Update an existing order. Only works for draft orders (status 100).",
        UpdateOrderArguments,
    )
    async def update_order(client, args: UpdateOrderArguments):
        return await client.update_order(args.order_id, build_payload(args, exclude=("orderId",)))

    @registry.tool(
        "delete_order",
        "Delete an order. Only works for draft orders (status 100).",
        OrderIdArguments,
    )
    async def delete_order(client, args: OrderIdArguments):
        await client.delete_order(args.order_id)
        return f"Order {args.order_id} deleted successfully."

    @registry.tool("send_order_email", "Send an order/quote via email.", SendOrderEmailArguments)
    async def send_order_email(client, args: SendOrderEmailArguments):
        return await client.send_order_email(args.order_id, build_email(args, "orderId"))
