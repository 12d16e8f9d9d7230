"""STDIO transport for newline-delimited JSON-RPC.

stdout carries protocol messages only; every diagnostic goes to stderr.
"""

from __future__ import annotations

import sys
from typing import TextIO


class TransportError(Exception):
    """Raised when the protocol stream cannot be read or written."""

    pass


class StdioTransport:
    """Line-oriented transport over a pair of text streams.

    Reads one JSON-RPC message per line and writes one response per line,
    flushing after each write so the peer never waits on a buffered reply.
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
        self._stdout = stdout or sys.stdout
        self._stderr = stderr or sys.stderr

    def read_message(self) -> str | None:
        """Read the next non-blank line.

        Returns:
            Message string (stripped), or None at end of stream.

        Raises:
            TransportError: If the input stream fails.
        """
        while True:
            try:
                line = self._stdin.readline()
            except (OSError, ValueError) as e:
                raise TransportError(f"Failed to read from input stream: {e}") from e

            if not line:  # EOF
                return None

            line = line.strip()
            if line:
                return line

    def write_message(self, message: str) -> None:
        """Write one message line and flush it.

        Args:
            message: JSON string to write. Must not contain a newline.

        Raises:
            TransportError: If the output stream fails.
        """
        try:
            self._stdout.write(message + "\n")
            self._stdout.flush()
        except (OSError, ValueError) as e:
            raise TransportError(f"Failed to write to output stream: {e}") from e

    def log(self, message: str) -> None:
        """Write a log message to stderr.

        Args:
            message: Log message.
        """
        self._stderr.write(f"[MCP] {message}\n")
        self._stderr.flush()
