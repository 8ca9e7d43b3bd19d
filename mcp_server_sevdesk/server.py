"""MCP server for sevDesk integration.

TOOL FAMILIES:
-------------
- contacts:      list/get/create/update/delete contacts, next customer number, addresses
- invoices:      CRUD, email dispatch, payment booking, enshrine, reset to draft,
                 PDF, XRechnung XML export, creation from an order
- credit notes:  CRUD, email dispatch, payment booking, enshrine, creation from an invoice
- orders:        CRUD and email dispatch; the order number is looked up before saving
- vouchers:      CRUD and payment booking
- transactions:  check accounts and their transactions
- parts:         articles
- basics:        system version, next sequence number, data export
- users:         sevDesk users (contact persons)

CONFIGURATION:
-------------
- SEVDESK_API_TOKEN (required): API token from the sevDesk user settings
- SEVDESK_API_URL: defaults to https://my.sevdesk.de/api/v1
- SEVDESK_TIMEOUT: request timeout in seconds
- SEVDESK_DEFAULT_CONTACT_PERSON_ID: SevUser put on new orders without a contact person
- SEVDESK_LOG_LEVEL: log level for the stderr log (default INFO)

Values can also come from a .env file. Logs go to stderr only; stdout carries
the MCP protocol.
"""

import asyncio
import logging
import os
import sys
import traceback
from typing import Optional

# Ensure package imports work whether run as a module or as a script path
if __package__ is None or __package__ == "":
    sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from dotenv import find_dotenv, load_dotenv
from mcp.server import Server

from mcp_server_sevdesk import __version__
from mcp_server_sevdesk.registry import ToolRegistry
from mcp_server_sevdesk.sevdesk_client import ConfigurationError, SevDeskClient, SevDeskConfig
from mcp_server_sevdesk.tools import register_all

SERVER_NAME = "sevdesk-mcp-server"

logger = logging.getLogger("mcp_server_sevdesk")


def configure_logging(level: Optional[str] = None) -> None:
    """Send log records to stderr."""
    logging.basicConfig(
        level=(level or os.getenv("SEVDESK_LOG_LEVEL", "INFO")).upper(),
        format="[sevdesk] %(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def load_environment() -> str:
    """Load a .env file (works even if CWD is not the project root)."""
    found_env = find_dotenv(usecwd=True)
    if not found_env:
        found_env = os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env")
    load_dotenv(found_env)
    return found_env


def create_server(client: SevDeskClient) -> Server:
    """Build the MCP server with every tool family bound to ``client``."""
    server = Server(SERVER_NAME, version=__version__)
    registry = register_all(ToolRegistry(client))
    registry.attach(server)
    logger.info("registered %d tools", len(registry))
    return server


async def main(config: Optional[SevDeskConfig] = None) -> None:
    """Main entry point for the server."""
    from mcp.server.stdio import stdio_server

    config = config or SevDeskConfig.from_env()
    async with SevDeskClient(config) as client:
        server = create_server(client)
        logger.info("entering stdio_server context")
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
        logger.info("server.run completed")


def run() -> None:
    """Console entry point: validate the credential, then serve over stdio."""
    configure_logging()
    env_file = load_environment()
    logger.debug("server module loaded; env file=%s", env_file)

    try:
        config = SevDeskConfig.from_env()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Please set your sevDesk API token:", file=sys.stderr)
        print("  export SEVDESK_API_TOKEN=your-api-token", file=sys.stderr)
        sys.exit(1)

    try:
        asyncio.run(main(config))
    except KeyboardInterrupt:
        logger.info("interrupted, shutting down")
    except Exception:
        print("sevDesk MCP server crashed with an unhandled exception:", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
        sys.stderr.flush()
        sys.exit(1)


if __name__ == "__main__":
    run()
