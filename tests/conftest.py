"""Pytest configuration and shared fixtures."""

import json
from typing import Any

import pytest

from boost_mcp.config import ServerConfig
from boost_mcp.server import MCPServer
from boost_mcp.tools.base import ToolBase


class ListTransport:
    """In-memory transport replaying a fixed list of input lines."""

    def __init__(self, lines: list[str]) -> None:
        self._queue = list(lines)
        self.writes: list[str] = []
        self.closed = False

    def read(self) -> str | None:
        if not self._queue:
            return None
        return self._queue.pop(0)

    def write(self, message: str) -> None:
        self.writes.append(message)

    def close(self) -> None:
        self.closed = True

    def decoded_writes(self) -> list[dict[str, Any]]:
        return [json.loads(line) for line in self.writes]


class EchoTool(ToolBase):
    """Returns its arguments unchanged and counts calls."""

    def __init__(self, name: str = "echo") -> None:
        super().__init__()
        self._name = name
        self.calls: list[dict[str, Any]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return "Echoes the input"

    @property
    def input_schema(self) -> dict[str, Any]:
        return {"type": "object", "properties": {"x": {"type": "integer"}}}

    def execute(self, arguments: dict[str, Any]) -> Any:
        self.calls.append(arguments)
        return arguments


def request(msg_id: Any, method: str, params: dict[str, Any] | None = None) -> str:
    """Encode a JSON-RPC request line."""
    data: dict[str, Any] = {"jsonrpc": "2.0", "id": msg_id, "method": method}
    if params is not None:
        data["params"] = params
    return json.dumps(data)


def notification(method: str, params: dict[str, Any] | None = None) -> str:
    """Encode a JSON-RPC notification line."""
    data: dict[str, Any] = {"jsonrpc": "2.0", "method": method}
    if params is not None:
        data["params"] = params
    return json.dumps(data)


@pytest.fixture
def config(tmp_path) -> ServerConfig:
    """Configuration rooted in a temporary project directory."""
    return ServerConfig(base_path=str(tmp_path), log_path=str(tmp_path / "app.log"))


@pytest.fixture
def echo_tool() -> EchoTool:
    return EchoTool()


@pytest.fixture
def server(config: ServerConfig, echo_tool: EchoTool) -> MCPServer:
    """Server with the echo tool registered."""
    srv = MCPServer(config=config)
    srv.register_tool(echo_tool)
    return srv


@pytest.fixture
def initialized_server(server: MCPServer) -> MCPServer:
    """Server that has completed the initialize handshake."""
    server.handle_message(
        request(
            1,
            "initialize",
            {
                "protocolVersion": "2024-11-05",
                "clientInfo": {"name": "test", "version": "1.0"},
                "capabilities": {},
            },
        )
    )
    return server
