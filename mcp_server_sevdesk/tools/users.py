"""sevDesk user (SevUser) lookups."""

from pydantic import Field

from mcp_server_sevdesk.payloads import ToolArguments, build_query
from mcp_server_sevdesk.registry import ToolRegistry
from mcp_server_sevdesk.tools.common import ListArguments


class GetUserArguments(ToolArguments):
    user_id: str = Field(..., description="The ID of the user to retrieve")


def register(registry: ToolRegistry) -> None:
    @registry.tool(
        "list_users",
        "List all sevDesk users (SevUser). Useful for getting user IDs to use as "
        "contactPerson in invoices, orders, and credit notes.",
        ListArguments,
    )
    async def list_users(client, args: ListArguments):
        return await client.list_users(build_query(args))

    @registry.tool("get_user", "Get detailed information about a specific sevDesk user by ID.", GetUserArguments)
    async def get_user(client, args: GetUserArguments):
        return await client.get_user(args.user_id)
