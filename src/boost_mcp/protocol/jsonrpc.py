"""JSON-RPC 2.0 message model, parsing and encoding.

Implements the JSON-RPC 2.0 specification for MCP protocol communication.
A single :class:`Message` type covers requests, notifications and responses;
which one it is depends only on which fields are set.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

JSONRPC_VERSION = "2.0"

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

ERROR_NAMES = {
    PARSE_ERROR: "ParseError",
    INVALID_REQUEST: "InvalidRequest",
    METHOD_NOT_FOUND: "MethodNotFound",
    INVALID_PARAMS: "InvalidParams",
    INTERNAL_ERROR: "InternalError",
}

# Maximum message size (1 MB)
MAX_MESSAGE_SIZE = 1_048_576


class JsonRpcError(Exception):
    """JSON-RPC error with code and message."""

    def __init__(self, code: int, message: str, data: Any | None = None) -> None:
        """Initialize the error.

        Args:
            code: JSON-RPC error code.
            message: Human-readable error message.
            data: Optional additional error data.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


@dataclass(frozen=True)
class Message:
    """A JSON-RPC message: request, notification or response.

    ``None`` marks an absent ``id``, ``method``, ``result`` or ``error``.
    """

    id: int | str | None = None
    method: str | None = None
    params: dict[str, Any] = field(default_factory=dict)
    result: Any | None = None
    error: dict[str, Any] | None = None
    jsonrpc: str = JSONRPC_VERSION

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        """Build a message from a parsed JSON object.

        Missing optional fields fall back to their defaults.

        Args:
            data: Dictionary parsed from the wire.

        Returns:
            Message instance.
        """
        return cls(
            id=data.get("id"),
            method=data.get("method"),
            params=dict(data.get("params") or {}),
            result=data.get("result"),
            error=data.get("error"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire format, emitting only the fields that are set.

        Responses always carry ``id``, which is null when the request id
        could not be determined.

        Returns:
            Dictionary ready for JSON serialization.
        """
        data: dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.id is not None or self.is_response:
            data["id"] = self.id
        if self.method is not None:
            data["method"] = self.method
        if self.params:
            data["params"] = self.params
        if self.result is not None:
            data["result"] = self.result
        if self.error is not None:
            data["error"] = self.error
        return data

    @property
    def is_request(self) -> bool:
        """True if the message carries a method."""
        return self.method is not None

    @property
    def is_response(self) -> bool:
        """True if the message carries a result or an error."""
        return self.result is not None or self.error is not None

    @property
    def is_notification(self) -> bool:
        """True if the message carries a method but no id."""
        return self.method is not None and self.id is None

    @classmethod
    def success(cls, msg_id: int | str | None, result: Any) -> Message:
        """Build a successful response.

        Args:
            msg_id: Request ID to echo back.
            result: Result payload.

        Returns:
            Response message.
        """
        return cls(id=msg_id, result=result)

    @classmethod
    def failure(
        cls,
        msg_id: int | str | None,
        code: int,
        message: str,
        data: Any | None = None,
    ) -> Message:
        """Build an error response.

        Args:
            msg_id: Request ID (or None when it could not be determined).
            code: Error code.
            message: Error message.
            data: Optional error data.

        Returns:
            Response message.
        """
        error_obj: dict[str, Any] = {
            "code": code,
            "message": message,
        }
        if data is not None:
            error_obj["data"] = data
        return cls(id=msg_id, error=error_obj)


def decode(raw: str, max_size: int = MAX_MESSAGE_SIZE) -> Message:
    """Parse a JSON-RPC message from a string.

    Args:
        raw: Raw JSON string.
        max_size: Largest accepted message, in characters.

    Returns:
        Parsed message.

    Raises:
        JsonRpcError: If the message is invalid.
    """
    # Check message size before parsing to prevent DoS
    if len(raw) > max_size:
        raise JsonRpcError(
            PARSE_ERROR, f"Message too large: {len(raw)} bytes exceeds {max_size} limit"
        )

    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as e:
        raise JsonRpcError(PARSE_ERROR, f"Parse error: {e}") from e

    if not isinstance(data, dict):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: message must be an object")

    if data.get("jsonrpc") != JSONRPC_VERSION:
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: jsonrpc must be '2.0'")

    method = data.get("method")
    if method is not None and not isinstance(method, str):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: method must be a string")

    params = data.get("params")
    if params is not None and not isinstance(params, dict):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: params must be an object")

    return Message.from_dict(data)


def encode(message: Message) -> str:
    """Serialize a message to a single wire line.

    Non-ASCII text and control characters are escaped, so tool output can
    never break line framing or the output encoding. NaN and infinity are
    not valid JSON and raise ValueError.

    Args:
        message: Message to serialize.

    Returns:
        JSON string.
    """
    return json.dumps(message.to_dict(), ensure_ascii=True, allow_nan=False)


def error_response(
    msg_id: int | str | None,
    code: int,
    message: str,
    data: Any | None = None,
) -> Message:
    """Build an error response message without raising.

    Args:
        msg_id: Request ID (or None for parse errors).
        code: Error code.
        message: Error message.
        data: Optional error data.

    Returns:
        Error response message.
    """
    return Message.failure(msg_id, code, message, data)
