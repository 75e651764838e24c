"""Tool registry - name-keyed collection of the tools a server exposes."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError

from boost_mcp.tools.base import ToolBase


class ToolNotFoundError(LookupError):
    """Raised when a tool is not found."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Tool '{name}' not found")
        self.name = name


class InvalidToolSchemaError(ValueError):
    """Raised when a tool declares an input schema that is not valid JSON Schema."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Invalid input schema for tool '{name}': {reason}")
        self.name = name


class ToolRegistry:
    """Holds the registered tools in registration order.

    Registering a name twice silently replaces the earlier tool, so tool
    sets assembled from several lists can override one another. The name
    keeps its original position.
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolBase] = {}

    def register(self, tool: ToolBase) -> None:
        """Register a tool under its declared name.

        Args:
            tool: Tool instance to register.

        Raises:
            InvalidToolSchemaError: If the tool's input schema is malformed.
        """
        try:
            Draft202012Validator.check_schema(tool.input_schema)
        except SchemaError as e:
            raise InvalidToolSchemaError(tool.name, e.message) from e
        self._tools[tool.name] = tool

    def get(self, name: str) -> ToolBase:
        """Look up a tool by name.

        Raises:
            ToolNotFoundError: If no tool is registered under ``name``.
        """
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def has(self, name: str) -> bool:
        return name in self._tools

    def names(self) -> list[str]:
        return list(self._tools)

    def list(self) -> list[dict[str, Any]]:
        """List all tools in MCP format, in registration order.

        Returns:
            A new list of tool definitions on every call.
        """
        return [tool.to_dict() for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolBase]:
        return iter(list(self._tools.values()))
