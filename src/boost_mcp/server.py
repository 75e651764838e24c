"""MCP Server - session dispatcher.

Integrates the codec, lifecycle, tool registry and result normalizer into a
single-client request loop.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from boost_mcp.audit import AuditLogger
from boost_mcp.config import ServerConfig
from boost_mcp.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    JsonRpcError,
    Message,
    decode,
    encode,
    error_response,
)
from boost_mcp.protocol.lifecycle import LifecycleManager, ProtocolError
from boost_mcp.protocol.transport import Transport
from boost_mcp.tools.base import ToolBase
from boost_mcp.tools.registry import ToolNotFoundError, ToolRegistry
from boost_mcp.tools.result import normalize_result, render_envelope


@dataclass(frozen=True)
class ToolSuccess:
    """A tool ran and its result was normalized."""

    envelope: dict[str, Any]
    duration_ms: float


@dataclass(frozen=True)
class ToolFailure:
    """A tool could not be resolved or raised while running."""

    code: int
    message: str
    data: dict[str, Any] | None = None


ToolOutcome = ToolSuccess | ToolFailure


def _no_log(message: str) -> None:
    pass


class MCPServer:
    """MCP Server implementation.

    Handles:
    - Lifecycle management (initialize, ping)
    - Tool listing and execution
    - Per-message failure isolation

    Every request gets exactly one well-formed response; notifications and
    responses get none.
    """

    def __init__(
        self,
        config: ServerConfig | None = None,
        registry: ToolRegistry | None = None,
        audit_logger: AuditLogger | None = None,
        log: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the server.

        Args:
            config: Server configuration (defaults apply when omitted).
            registry: Tool registry; may be shared read-only between servers.
            audit_logger: Audit log for tool calls. Created from
                ``config.audit_log_file`` when omitted and configured.
            log: Callback for operational log lines.
        """
        self._config = config or ServerConfig()
        self._registry = registry if registry is not None else ToolRegistry()
        self._lifecycle = LifecycleManager(server_info=self._config.server_info)
        self._log = log or _no_log

        if audit_logger is None and self._config.audit_log_file:
            audit_logger = AuditLogger(Path(self._config.audit_log_file))
        self._audit = audit_logger

        self._handlers: dict[str, Callable[[Message], Message]] = {
            "initialize": self._handle_initialize,
            "tools/list": self._handle_tools_list,
            "tools/call": self._handle_tools_call,
            "ping": self._handle_ping,
        }

    @property
    def config(self) -> ServerConfig:
        """Configuration the server was built with."""
        return self._config

    @property
    def registry(self) -> ToolRegistry:
        """Registry the server dispatches tools/call against."""
        return self._registry

    @property
    def lifecycle(self) -> LifecycleManager:
        """Session lifecycle state."""
        return self._lifecycle

    @property
    def is_initialized(self) -> bool:
        """Whether the initialize handshake has completed."""
        return self._lifecycle.is_initialized

    def register_tool(self, tool: ToolBase) -> None:
        """Register a tool.

        Args:
            tool: Tool to register.
        """
        self._registry.register(tool)

    def list_tools(self) -> list[dict[str, Any]]:
        """List all registered tools.

        Returns:
            List of tool definitions.
        """
        return self._registry.list()

    def serve(self, transport: Transport) -> None:
        """Run the request loop until the transport reaches end-of-stream.

        Args:
            transport: Line-oriented channel to the client.
        """
        try:
            while True:
                raw = transport.read()
                if raw is None:
                    self._log("EOF received, shutting down")
                    break
                if not raw.strip():
                    continue

                response = self.handle_message(raw)
                if response is not None:
                    transport.write(response)
        finally:
            transport.close()

    def handle_message(self, raw_message: str) -> str | None:
        """Handle an incoming JSON-RPC message.

        Never raises: any failure becomes a JSON-RPC error response.

        Args:
            raw_message: Raw JSON-RPC message string.

        Returns:
            Response string or None when no reply is due.
        """
        try:
            message = decode(raw_message, self._config.max_message_size)
        except JsonRpcError as e:
            self._log(f"Rejected message: {e}")
            return encode(error_response(None, e.code, str(e), e.data))
        except Exception as e:
            self._log(f"Failed to decode message: {e!r}")
            return encode(error_response(None, INTERNAL_ERROR, f"Internal error: {e}"))

        try:
            response = self.handle(message)
        except Exception as e:
            self._log(f"Unhandled error for {message.method!r}: {e!r}")
            if message.is_notification:
                return None
            response = error_response(message.id, INTERNAL_ERROR, f"Internal error: {e}")

        if response is None:
            return None

        try:
            return encode(response)
        except (TypeError, ValueError) as e:
            self._log(f"Failed to encode response: {e}")
            return encode(
                error_response(response.id, INTERNAL_ERROR, f"Response could not be encoded: {e}")
            )

    def handle(self, message: Message) -> Message | None:
        """Route a decoded message to its handler.

        Args:
            message: Decoded message.

        Returns:
            Response message, or None for notifications and responses.
        """
        if message.is_notification:
            self._log(f"Notification received: {message.method}")
            return None

        if not message.is_request:
            if message.is_response:
                self._log(f"Ignoring response message with id {message.id!r}")
                return None
            return error_response(
                message.id,
                INVALID_REQUEST,
                "Invalid Request: message is neither a request nor a response",
            )

        handler = self._handlers.get(message.method)
        if handler is None:
            return error_response(
                message.id, METHOD_NOT_FOUND, f"Method '{message.method}' not found"
            )
        return handler(message)

    def _handle_initialize(self, message: Message) -> Message:
        result = self._lifecycle.handle_initialize(message.params)
        client = self._lifecycle.connected_client or {}
        self._log(f"Initialized by client {client.get('name', 'unknown')!r}")
        return Message.success(message.id, result)

    def _handle_ping(self, message: Message) -> Message:
        return Message.success(message.id, {})

    def _handle_tools_list(self, message: Message) -> Message:
        try:
            self._lifecycle.require_initialized()
        except ProtocolError as e:
            return error_response(message.id, INTERNAL_ERROR, str(e))

        return Message.success(message.id, {"tools": self._registry.list()})

    def _handle_tools_call(self, message: Message) -> Message:
        try:
            self._lifecycle.require_initialized()
        except ProtocolError as e:
            return error_response(message.id, INTERNAL_ERROR, str(e))

        params = message.params
        name = params.get("name")
        if not isinstance(name, str) or not name:
            return error_response(message.id, INVALID_PARAMS, "Tool name is required")

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            return error_response(
                message.id, INVALID_PARAMS, "Tool arguments must be an object", {"tool": name}
            )

        outcome = self.call_tool(name, arguments, request_id=message.id)
        if isinstance(outcome, ToolFailure):
            return error_response(message.id, outcome.code, outcome.message, outcome.data)

        return Message.success(
            message.id,
            {"content": [{"type": "text", "text": render_envelope(outcome.envelope)}]},
        )

    def call_tool(
        self,
        name: str,
        arguments: dict[str, Any],
        request_id: int | str | None = None,
    ) -> ToolOutcome:
        """Resolve and run a tool, collapsing any failure into a ToolFailure.

        Args:
            name: Registered tool name.
            arguments: Tool arguments.
            request_id: JSON-RPC id, used for audit correlation.

        Returns:
            ToolSuccess with the normalized envelope, or ToolFailure.
        """
        try:
            tool = self._registry.get(name)
        except ToolNotFoundError as e:
            return ToolFailure(METHOD_NOT_FOUND, str(e), {"tool": name})

        if self._audit is not None:
            self._audit.log_request(request_id, name, arguments)

        start = time.perf_counter()
        try:
            raw = tool.execute(dict(arguments))
        except ToolNotFoundError as e:
            outcome: ToolOutcome = ToolFailure(METHOD_NOT_FOUND, str(e), {"tool": name})
        except Exception as e:
            self._log(f"Tool '{name}' failed: {e!r}")
            outcome = ToolFailure(
                INTERNAL_ERROR,
                str(e) or f"Tool '{name}' execution failed",
                {"tool": name, "exception": type(e).__name__},
            )
        else:
            duration_ms = (time.perf_counter() - start) * 1000
            outcome = ToolSuccess(normalize_result(name, raw, duration_ms), duration_ms)

        if self._audit is not None:
            if isinstance(outcome, ToolSuccess):
                status = str(outcome.envelope.get("status", "ok"))
                duration_ms = outcome.duration_ms
            else:
                status = "failed"
                duration_ms = (time.perf_counter() - start) * 1000
            self._audit.log_response(request_id, name, status, round(duration_ms, 3))

        return outcome

    def close(self) -> None:
        """Close the server and release the audit log."""
        if self._audit is not None:
            self._audit.close()

    def __enter__(self) -> MCPServer:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
