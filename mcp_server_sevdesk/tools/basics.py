"""System lookups and data export."""

from typing import Literal, Optional

from pydantic import Field

from mcp_server_sevdesk.payloads import ToolArguments, build_query
from mcp_server_sevdesk.registry import ToolRegistry
from mcp_server_sevdesk.tools.common import NoArguments

ExportableType = Literal[
    "Contact",
    "Invoice",
    "CreditNote",
    "Order",
    "Voucher",
    "Part",
    "CheckAccount",
    "CheckAccountTransaction",
]


class NextSequenceNumberArguments(ToolArguments):
    object_type: str = Field(..., description="Object type (e.g., Invoice, CreditNote, Order, Voucher)")


class ExportDataArguments(ToolArguments):
    object_type: ExportableType = Field(..., description="Type of objects to export")
    start_date: Optional[str] = Field(None, description="Filter by start date (YYYY-MM-DD)")
    end_date: Optional[str] = Field(None, description="Filter by end date (YYYY-MM-DD)")


def register(registry: ToolRegistry) -> None:
    @registry.tool("get_system_version", "Get the current sevDesk system version.", NoArguments)
    async def get_system_version(client, args: NoArguments):
        return await client.get_system_version()

    @registry.tool(
        "get_next_sequence_number",
        "Get the next sequence number for a specific document type.",
        NextSequenceNumberArguments,
    )
    async def get_next_sequence_number(client, args: NextSequenceNumberArguments):
        return await client.get_next_sequence_number(args.object_type)

    @registry.tool(
        "export_data",
        "Export data of a specific object type. Returns a list of objects.",
        ExportDataArguments,
    )
    async def export_data(client, args: ExportDataArguments):
        return await client.export_data(args.object_type, build_query(args, exclude=("objectType",)))
