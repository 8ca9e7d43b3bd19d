"""MCP server exposing the sevDesk accounting API as tools."""

__version__ = "0.1.0"
