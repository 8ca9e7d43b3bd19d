"""Tool families exposed by the server."""

from mcp_server_sevdesk.registry import ToolRegistry
from mcp_server_sevdesk.tools import (
    basics,
    contacts,
    credit_notes,
    invoices,
    orders,
    parts,
    transactions,
    users,
    vouchers,
)

FAMILIES = (contacts, invoices, credit_notes, orders, vouchers, transactions, parts, basics, users)


def register_all(registry: ToolRegistry) -> ToolRegistry:
    """Register the tools of every family."""
    for family in FAMILIES:
        family.register(registry)
    return registry
