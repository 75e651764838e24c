"""Audit trail for tool calls.

Each ``tools/call`` appends two JSON Lines events to the audit file: a
``request`` event before the tool runs and a ``response`` event once its
outcome is known. Both carry the JSON-RPC id so they can be paired.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from boost_mcp.tools.result import utc_timestamp

REDACTED = "[REDACTED]"

# Argument names whose values never reach the audit file. Covers the
# connection settings that database and config tools commonly receive.
SENSITIVE_KEY = re.compile(
    r"pass(word|wd)|secret|token|auth|credential|api[_-]?key|private[_-]?key|dsn",
    re.IGNORECASE,
)


def _redact(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            key: REDACTED if SENSITIVE_KEY.search(str(key)) else _redact(item)
            for key, item in value.items()
        }
    if isinstance(value, list | tuple):
        return [_redact(item) for item in value]
    return value


def sanitize_arguments(arguments: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of tool arguments with sensitive values replaced.

    Keys are matched against ``SENSITIVE_KEY`` at every nesting level,
    including mappings inside lists.
    """
    return _redact(arguments)


class AuditLogger:
    """Appends tool call events to a JSON Lines file.

    The parent directory is created on demand and every event is flushed
    immediately. Events recorded after ``close()`` are dropped.
    """

    def __init__(self, log_path: Path) -> None:
        self._log_path = log_path
        log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(log_path, "a", encoding="utf-8")  # noqa: SIM115

    @property
    def path(self) -> Path:
        return self._log_path

    def _append(
        self, event: str, request_id: int | str | None, tool_name: str, **fields: Any
    ) -> None:
        if self._file.closed:
            return
        record = {
            "type": event,
            "timestamp": utc_timestamp(),
            "request_id": request_id,
            "tool_name": tool_name,
            **fields,
        }
        self._file.write(json.dumps(record, default=str) + "\n")
        self._file.flush()

    def log_request(
        self, request_id: int | str | None, tool_name: str, arguments: Mapping[str, Any]
    ) -> None:
        """Record a tool call before it runs, with redacted arguments."""
        self._append("request", request_id, tool_name, arguments=sanitize_arguments(arguments))

    def log_response(
        self, request_id: int | str | None, tool_name: str, status: str, duration_ms: float
    ) -> None:
        """Record how a tool call ended.

        Args:
            request_id: JSON-RPC id of the call.
            tool_name: Name of the tool.
            status: Envelope status, or ``failed`` when the tool raised.
            duration_ms: Execution time in milliseconds.
        """
        self._append(
            "response", request_id, tool_name, result_status=status, duration_ms=duration_ms
        )

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> AuditLogger:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
