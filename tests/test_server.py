"""Tests for server bootstrap."""

from unittest.mock import MagicMock

import pytest
from mcp import types

from mcp_server_sevdesk import server


def test_missing_token_exits_with_hint(monkeypatch, capsys):
    monkeypatch.delenv("SEVDESK_API_TOKEN", raising=False)
    monkeypatch.setattr(server, "load_environment", lambda: "")
    main = MagicMock()
    monkeypatch.setattr(server, "main", main)

    with pytest.raises(SystemExit) as excinfo:
        server.run()

    assert excinfo.value.code == 1
    stderr = capsys.readouterr().err
    assert "SEVDESK_API_TOKEN" in stderr
    assert "export SEVDESK_API_TOKEN=your-api-token" in stderr
    main.assert_not_called()


def test_blank_token_exits(monkeypatch, capsys):
    monkeypatch.setenv("SEVDESK_API_TOKEN", "   ")
    monkeypatch.setattr(server, "load_environment", lambda: "")
    main = MagicMock()
    monkeypatch.setattr(server, "main", main)

    with pytest.raises(SystemExit) as excinfo:
        server.run()

    assert excinfo.value.code == 1
    main.assert_not_called()


def test_startup_crash_exits_with_traceback(monkeypatch, capsys):
    monkeypatch.setenv("SEVDESK_API_TOKEN", "test-token")
    monkeypatch.setattr(server, "load_environment", lambda: "")

    async def crash(config):
        raise RuntimeError("stdio transport unavailable")

    monkeypatch.setattr(server, "main", crash)

    with pytest.raises(SystemExit) as excinfo:
        server.run()

    assert excinfo.value.code == 1
    stderr = capsys.readouterr().err
    assert "crashed" in stderr
    assert "Traceback" in stderr
    assert "RuntimeError: stdio transport unavailable" in stderr


def test_create_server_registers_handlers(mock_client):
    mcp_server = server.create_server(mock_client)

    assert mcp_server.name == server.SERVER_NAME
    assert types.ListToolsRequest in mcp_server.request_handlers
    assert types.CallToolRequest in mcp_server.request_handlers
