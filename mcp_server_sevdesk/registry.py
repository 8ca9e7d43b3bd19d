"""Tool registry binding argument models and handlers to the MCP server."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Type

from mcp.server import Server
from mcp.types import TextContent, Tool
from pydantic import BaseModel

from mcp_server_sevdesk.sevdesk_client import SevDeskClient

logger = logging.getLogger(__name__)

Handler = Callable[[SevDeskClient, Any], Awaitable[Any]]


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    arguments: Type[BaseModel]
    handler: Handler

    def as_tool(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.arguments.model_json_schema(by_alias=True),
        )


def render(result: Any) -> List[TextContent]:
    """Render a handler result as a single text block."""
    if isinstance(result, str):
        return [TextContent(type="text", text=result)]
    return [TextContent(type="text", text=json.dumps(result, indent=2))]


class ToolRegistry:
    """Named, schema-validated tools sharing one sevDesk client."""

    def __init__(self, client: SevDeskClient) -> None:
        self.client = client
        self._tools: Dict[str, ToolDefinition] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def names(self) -> List[str]:
        return list(self._tools)

    def add(self, name: str, description: str, arguments: Type[BaseModel], handler: Handler) -> None:
        if name in self._tools:
            raise ValueError(f"Tool already registered: {name}")
        self._tools[name] = ToolDefinition(name, description, arguments, handler)

    def tool(self, name: str, description: str, arguments: Type[BaseModel]) -> Callable[[Handler], Handler]:
        """Decorator registering an async ``handler(client, args)``."""

        def decorator(handler: Handler) -> Handler:
            self.add(name, description, arguments, handler)
            return handler

        return decorator

    async def list_tools(self) -> List[Tool]:
        """List available tools."""
        return [definition.as_tool() for definition in self._tools.values()]

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> List[TextContent]:
        """Validate arguments, run the handler and render its result.

        Errors propagate to the MCP framework, which reports them as a failed call.
        """
        definition = self._tools.get(name)
        if definition is None:
            raise ValueError(f"Unknown tool: {name}")

        # ValidationError here stops the call before any request is shaped
        args = definition.arguments.model_validate(arguments or {})

        logger.info("calling tool %s", name)
        try:
            result = await definition.handler(self.client, args)
        except Exception:
            logger.exception("tool %s failed", name)
            raise
        return render(result)

    def attach(self, server: Server) -> None:
        """Register list_tools/call_tool handlers on an MCP server."""
        server.list_tools()(self.list_tools)
        server.call_tool()(self.call_tool)
