"""Shared fixtures for the sevDesk MCP server tests."""

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest
from unittest.mock import AsyncMock

from mcp_server_sevdesk.registry import ToolRegistry
from mcp_server_sevdesk.sevdesk_client import SevDeskClient, SevDeskConfig
from mcp_server_sevdesk.tools import register_all


@pytest.fixture
def config():
    return SevDeskConfig(api_token="test-token", api_url="https://sevdesk.test/api/v1")


@pytest.fixture
def mock_client(config):
    """A SevDeskClient stand-in whose endpoint methods are AsyncMocks."""
    client = AsyncMock(spec=SevDeskClient)
    client.config = config
    return client


@pytest.fixture
def registry(mock_client):
    return register_all(ToolRegistry(mock_client))


class RecordingTransport:
    """Collects requests and answers them with a canned response."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []
        self._responder = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def make_client(config):
    """Build a real SevDeskClient backed by httpx.MockTransport."""
    def factory(status_code: int = 200, body: Any = None, content: bytes = None, headers: Dict[str, str] = None):
        def respond(request: httpx.Request) -> httpx.Response:
            if content is not None:
                return httpx.Response(status_code, content=content, headers=headers)
            if body is None:
                return httpx.Response(status_code)
            return httpx.Response(status_code, json=body, headers=headers)

        recorder = RecordingTransport(respond)
        client = SevDeskClient(config, transport=httpx.MockTransport(recorder))
        return client, recorder

    return factory

