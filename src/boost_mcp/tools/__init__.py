"""Tool contract, registry and result envelopes."""

from boost_mcp.tools.base import ToolArgumentError, ToolBase
from boost_mcp.tools.builtin import GetConfig, ReadLogEntries, register_core_tools
from boost_mcp.tools.registry import InvalidToolSchemaError, ToolNotFoundError, ToolRegistry
from boost_mcp.tools.result import normalize_result, render_envelope

__all__ = [
    "GetConfig",
    "InvalidToolSchemaError",
    "ReadLogEntries",
    "ToolArgumentError",
    "ToolBase",
    "ToolNotFoundError",
    "ToolRegistry",
    "normalize_result",
    "register_core_tools",
    "render_envelope",
]
