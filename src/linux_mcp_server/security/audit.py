"""Audit trail of commands run on the remote host.

Each tool call appends one JSON Lines record; the file is flushed after every
record so the trail survives an abrupt exit.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any


def _get_timestamp() -> str:
    """Get current UTC timestamp in ISO 8601 format."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class CommandAuditLog:
    """Append-only JSON Lines log of executed commands."""

    def __init__(self, log_path: Path) -> None:
        """Open (or create) the audit file.

        Args:
            log_path: Path to the audit log file. Missing parent
                directories are created.
        """
        self._log_path = log_path
        log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(log_path, "a", encoding="utf-8")  # noqa: SIM115

    @property
    def path(self) -> Path:
        return self._log_path

    def record(self, tool_name: str, command: str, is_error: bool, duration_ms: float) -> None:
        """Append one tool call to the trail.

        Args:
            tool_name: Tool that was called.
            command: Command line sent to the remote host.
            is_error: Whether the call produced an error-flagged result.
            duration_ms: Wall time spent in the executor.
        """
        entry: dict[str, Any] = {
            "timestamp": _get_timestamp(),
            "tool_name": tool_name,
            "command": command,
            "status": "error" if is_error else "success",
            "duration_ms": round(duration_ms, 3),
        }
        self._file.write(json.dumps(entry) + "\n")
        self._file.flush()

    def close(self) -> None:
        """Close the log file."""
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> CommandAuditLog:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
