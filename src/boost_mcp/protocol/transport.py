"""Transport contract and STDIO transport for MCP communication.

Messages are newline-delimited JSON-RPC over stdin/stdout per MCP spec.
"""

from __future__ import annotations

import sys
from typing import Protocol, TextIO


class Transport(Protocol):
    """Line-in/line-out channel consumed by the server loop."""

    def read(self) -> str | None:
        """Block until one message is available.

        Returns None at end-of-stream and an empty string for a blank line.
        """
        ...

    def write(self, message: str) -> None:
        """Send one complete encoded message."""
        ...

    def close(self) -> None:
        """Release I/O resources. Safe to call more than once."""
        ...


def _replace_undecodable(stream: TextIO) -> None:
    """Decode invalid bytes as U+FFFD instead of raising.

    A bad line then reaches the codec as malformed JSON rather than ending
    the stream.
    """
    reconfigure = getattr(stream, "reconfigure", None)
    if callable(reconfigure):
        try:
            reconfigure(errors="replace")
        except (OSError, ValueError):
            pass


class StdioTransport:
    """STDIO transport for MCP communication.

    Reads JSON-RPC messages from stdin and writes responses to stdout.
    Logging goes to stderr to avoid corrupting the protocol stream.
    """

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            stdin: Input stream (defaults to sys.stdin).
            stdout: Output stream (defaults to sys.stdout).
            stderr: Log stream (defaults to sys.stderr).
        """
        self._stdin = stdin or sys.stdin
        _replace_undecodable(self._stdin)
        self._stdout = stdout or sys.stdout
        self._stderr = stderr or sys.stderr
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        return self._closed

    def read(self) -> str | None:
        """Read one line from stdin.

        Returns:
            Message string (stripped, possibly empty), or None on EOF.
        """
        if self._closed:
            return None

        try:
            line = self._stdin.readline()
        except (OSError, ValueError):
            return None

        if not line:  # EOF
            return None

        return line.strip()

    def write(self, message: str) -> None:
        """Write a message to stdout.

        Args:
            message: JSON string to write.
        """
        self._stdout.write(message + "\n")
        self._stdout.flush()

    def log(self, message: str) -> None:
        """Write a log message to stderr.

        Args:
            message: Log message.
        """
        self._stderr.write(f"[MCP] {message}\n")
        self._stderr.flush()

    def close(self) -> None:
        """Stop reading and flush pending output.

        The streams belong to the caller and stay open; after close() every
        read reports end-of-stream.
        """
        if self._closed:
            return
        self._closed = True
        if not self._stdout.closed:
            self._stdout.flush()
