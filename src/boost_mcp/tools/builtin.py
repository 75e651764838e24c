"""Built-in tools and the registrar that installs them.

Project-specific analysis tools live outside this package and are registered
the same way: build an instance and pass it to ``ToolRegistry.register``.
"""

from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import Any

from boost_mcp.config import ServerConfig
from boost_mcp.tools.base import ToolArgumentError, ToolBase
from boost_mcp.tools.registry import ToolRegistry

DEFAULT_LOG_LINES = 50


class GetConfig(ToolBase):
    """Read configuration values using dot notation."""

    def __init__(self, config: ServerConfig) -> None:
        super().__init__(config)
        self._config: ServerConfig = config

    @property
    def name(self) -> str:
        return "GetConfig"

    @property
    def description(self) -> str:
        return 'Read configuration values using dot notation (e.g., "database.default")'

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "key": {
                    "type": "string",
                    "description": "Configuration key using dot notation",
                },
                "default": {
                    "type": "string",
                    "description": "Default value if key not found",
                },
            },
            "required": ["key"],
        }

    def execute(self, arguments: dict[str, Any]) -> Any:
        self.require_arguments(arguments, "key")
        key = str(arguments["key"])

        value = self._config.get(key, arguments.get("default"))
        if value is None:
            return f"Configuration key '{key}' not found"

        return {"key": key, "value": value}


class ReadLogEntries(ToolBase):
    """Tail the application log."""

    def __init__(self, config: ServerConfig) -> None:
        super().__init__(config)
        self._config: ServerConfig = config

    @property
    def name(self) -> str:
        return "ReadLogEntries"

    @property
    def description(self) -> str:
        return "Read the last N entries from application logs"

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "lines": {
                    "type": "integer",
                    "description": "Number of lines to read from the end of the log",
                    "default": DEFAULT_LOG_LINES,
                },
                "file": {
                    "type": "string",
                    "description": "Log file path (optional, uses default if not provided)",
                },
            },
        }

    def execute(self, arguments: dict[str, Any]) -> Any:
        lines = arguments.get("lines", DEFAULT_LOG_LINES)
        if isinstance(lines, bool) or not isinstance(lines, int) or lines < 1:
            raise ToolArgumentError("lines must be a positive integer")

        file = arguments.get("file") or self._config.log_path
        if not file:
            raise RuntimeError("Log file path not configured")

        path = Path(file)
        if not path.is_absolute():
            path = Path(self._config.base_path) / path

        if not path.exists():
            return {
                "file": str(path),
                "entries": [],
                "message": "Log file does not exist",
            }

        entries = self._read_last_lines(path, lines)
        return {
            "file": str(path),
            "entries": entries,
            "count": len(entries),
        }

    @staticmethod
    def _read_last_lines(path: Path, lines: int) -> list[str]:
        """Return the last ``lines`` non-blank lines of ``path``."""
        with open(path, encoding="utf-8", errors="replace") as f:
            tail = deque((line.rstrip() for line in f if line.strip()), maxlen=lines)
        return list(tail)


def register_core_tools(registry: ToolRegistry, config: ServerConfig) -> None:
    """Register the built-in tools enabled in ``config``.

    Args:
        registry: Registry to populate.
        config: Server configuration; ``tools.enabled`` filters by name.
    """
    for tool in (GetConfig(config), ReadLogEntries(config)):
        if config.is_tool_enabled(tool.name):
            registry.register(tool)
