"""MCP lifecycle management.

Handles the initialize handshake and tracks whether the session may list or
call tools.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Supported MCP protocol versions (oldest first)
SUPPORTED_PROTOCOL_VERSIONS = ["2024-11-05", "2025-03-26", "2025-06-18"]
# Default version to advertise
MCP_PROTOCOL_VERSION = "2024-11-05"


class LifecycleState(Enum):
    """MCP session lifecycle states."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


class ProtocolError(Exception):
    """Raised when protocol constraints are violated."""

    pass


@dataclass(frozen=True)
class ServerInfo:
    """Identity reported to clients in the initialize response."""

    name: str = "boost-mcp"
    version: str = "1.0.0"

    def to_dict(self) -> dict[str, str]:
        """Convert to MCP serverInfo format."""
        return {"name": self.name, "version": self.version}


def _default_capabilities() -> dict[str, Any]:
    return {"tools": {}, "resources": {}, "prompts": {}}


@dataclass
class LifecycleManager:
    """Manages MCP session lifecycle.

    ``initialize`` moves the session to INITIALIZED from any state; it may be
    repeated and simply re-confirms the session.
    """

    server_info: ServerInfo = field(default_factory=ServerInfo)
    capabilities: dict[str, Any] = field(default_factory=_default_capabilities)
    state: LifecycleState = LifecycleState.UNINITIALIZED
    client_info: dict[str, Any] | None = None
    client_capabilities: dict[str, Any] | None = None

    @property
    def is_initialized(self) -> bool:
        """Check if the session accepts tool operations."""
        return self.state == LifecycleState.INITIALIZED

    @property
    def connected_client(self) -> dict[str, Any] | None:
        """Get information about the connected client.

        Returns:
            Client info dict with 'name' and 'version', or None if not sent.
        """
        return self.client_info

    def require_initialized(self) -> None:
        """Assert that the session has been initialized.

        Raises:
            ProtocolError: If initialize has not been called yet.
        """
        if self.state != LifecycleState.INITIALIZED:
            raise ProtocolError("Server not initialized")

    def negotiate_version(self, requested: Any) -> str:
        """Pick the protocol version to answer with.

        Args:
            requested: Version sent by the client, if any.

        Returns:
            The requested version when supported, else the default.
        """
        if isinstance(requested, str) and requested in SUPPORTED_PROTOCOL_VERSIONS:
            return requested
        return MCP_PROTOCOL_VERSION

    def handle_initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle initialize request.

        Args:
            params: Initialize request parameters.

        Returns:
            Initialize response result.
        """
        negotiated_version = self.negotiate_version(params.get("protocolVersion"))

        client_info = params.get("clientInfo")
        self.client_info = client_info if isinstance(client_info, dict) else None
        client_caps = params.get("capabilities")
        self.client_capabilities = client_caps if isinstance(client_caps, dict) else {}

        self.state = LifecycleState.INITIALIZED

        return {
            "protocolVersion": negotiated_version,
            "capabilities": self.capabilities,
            "serverInfo": self.server_info.to_dict(),
        }
