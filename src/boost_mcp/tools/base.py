"""Tool base class.

Defines the interface that every tool served over MCP must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ToolArgumentError(ValueError):
    """Raised by a tool when a required argument is missing or malformed."""

    pass


class ToolBase(ABC):
    """Abstract base class for all tools.

    Example:
        class EchoTool(ToolBase):
            @property
            def name(self) -> str:
                return "Echo"

            @property
            def description(self) -> str:
                return "Echo the given arguments"

            @property
            def input_schema(self) -> dict[str, Any]:
                return {"type": "object", "properties": {}}

            def execute(self, arguments: dict[str, Any]) -> Any:
                return arguments
    """

    def __init__(self, config: Any | None = None) -> None:
        """Initialize the tool.

        Args:
            config: Server configuration the tool may read from.
        """
        self._config = config

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the tool identifier used as the registry key."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Return a human-readable description."""
        pass

    @property
    @abstractmethod
    def input_schema(self) -> dict[str, Any]:
        """Return the JSON Schema for the tool's arguments."""
        pass

    @abstractmethod
    def execute(self, arguments: dict[str, Any]) -> Any:
        """Execute the tool.

        Args:
            arguments: Tool arguments.

        Returns:
            Any JSON-serializable value, a plain string, or a result envelope
            built with :mod:`boost_mcp.tools.result`.
        """
        pass

    def is_read_only(self) -> bool:
        """Whether the tool only reads state. Advisory, not enforced."""
        return True

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP tool format.

        Returns:
            Dictionary in MCP tools/list format.
        """
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }

    @staticmethod
    def require_arguments(arguments: dict[str, Any], *names: str) -> None:
        """Check that required arguments are present.

        Raises:
            ToolArgumentError: For the first missing argument.
        """
        for arg in names:
            if arguments.get(arg) is None:
                raise ToolArgumentError(f"Missing required argument: {arg}")
