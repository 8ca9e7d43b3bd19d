"""Part (article) tools."""

from typing import List, Optional

from pydantic import Field

from mcp_server_sevdesk.payloads import Number, ToolArguments, build_payload, build_query
from mcp_server_sevdesk.registry import ToolRegistry
from mcp_server_sevdesk.tools.common import ListArguments, embed_params

PART_REFERENCES = {
    "unityId": ("unity", "Unity"),
    "categoryId": ("category", "Category"),
}


class ListPartsArguments(ListArguments):
    part_number: Optional[str] = Field(None, description="Filter by part number")
    name: Optional[str] = Field(None, description="Filter by name (partial match)")


class GetPartArguments(ToolArguments):
    part_id: str = Field(..., description="The ID of the part to retrieve")
    embed: Optional[List[str]] = Field(None, description="Related objects to embed")


class CreatePartArguments(ToolArguments):
    name: str = Field(..., description="Part name")
    part_number: str = Field(..., description="Part number (SKU)")
    unity_id: int = Field(..., description="Unity ID (1=piece, 2=hour, etc.)")
    tax_rate: Number = Field(..., description="Tax rate in percent (e.g., 19)")
    text: Optional[str] = Field(None, description="Part description")
    category_id: Optional[int] = Field(None, description="Category ID")
    stock: Optional[Number] = Field(None, description="Current stock quantity")
    stock_enabled: Optional[bool] = Field(None, description="Enable stock tracking")
    price: Optional[Number] = Field(None, description="Price (default: net)")
    price_net: Optional[Number] = Field(None, description="Net price")
    price_gross: Optional[Number] = Field(None, description="Gross price")
    price_purchase: Optional[Number] = Field(None, description="Purchase price")
    status: Optional[int] = Field(None, description="Status (0=Inactive, 100=Active)")
    internal_comment: Optional[str] = Field(None, description="Internal comment")


class UpdatePartArguments(ToolArguments):
    part_id: str = Field(..., description="The ID of the part to update")
    name: Optional[str] = Field(None, description="Part name")
    part_number: Optional[str] = Field(None, description="Part number (SKU)")
    text: Optional[str] = Field(None, description="Part description")
    stock: Optional[Number] = Field(None, description="Current stock quantity")
    stock_enabled: Optional[bool] = Field(None, description="Enable stock tracking")
    price: Optional[Number] = Field(None, description="Price (default: net)")
    price_net: Optional[Number] = Field(None, description="Net price")
    price_gross: Optional[Number] = Field(None, description="Gross price")
    price_purchase: Optional[Number] = Field(None, description="Purchase price")
    tax_rate: Optional[Number] = Field(None, description="Tax rate in percent")
    status: Optional[int] = Field(None, description="Status (0=Inactive, 100=Active)")
    internal_comment: Optional[str] = Field(None, description="Internal comment")


def register(registry: ToolRegistry) -> None:
    @registry.tool("list_parts", "List parts/articles with optional filters.", ListPartsArguments)
    async def list_parts(client, args: ListPartsArguments):
        return await client.list_parts(build_query(args))

    @registry.tool("get_part", "Get detailed information about a specific part/article.", GetPartArguments)
    async def get_part(client, args: GetPartArguments):
        return await client.get_part(args.part_id, embed_params(args.embed))

    @registry.tool("create_part", "Create a new part/article.", CreatePartArguments)
    async def create_part(client, args: CreatePartArguments):
        return await client.create_part(build_payload(args, PART_REFERENCES))

    @registry.tool("update_part", "Update an existing part/article.", UpdatePartArguments)
    async def update_part(client, args: UpdatePartArguments):
        return await client.update_part(args.part_id, build_payload(args, exclude=("partId",)))
