"""MCP Protocol layer for JSON-RPC communication."""

from boost_mcp.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcError,
    Message,
    decode,
    encode,
    error_response,
)
from boost_mcp.protocol.lifecycle import (
    MCP_PROTOCOL_VERSION,
    LifecycleManager,
    LifecycleState,
    ProtocolError,
    ServerInfo,
)
from boost_mcp.protocol.transport import StdioTransport, Transport

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "JsonRpcError",
    "LifecycleManager",
    "LifecycleState",
    "MCP_PROTOCOL_VERSION",
    "METHOD_NOT_FOUND",
    "Message",
    "PARSE_ERROR",
    "ProtocolError",
    "ServerInfo",
    "StdioTransport",
    "Transport",
    "decode",
    "encode",
    "error_response",
]
