"""Tool execution against the remote command executor.

Both built-in tools reduce to a single shell command line run over the
executor's connection. Executor faults are reported as error-flagged tool
results, never as protocol errors.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from linux_mcp_server.tools.registry import LINUX_COMMAND, READ_FILE

if TYPE_CHECKING:
    from linux_mcp_server.security.audit import CommandAuditLog

logger = logging.getLogger(__name__)

# Prefix of the text returned when the executor fails
ERROR_MARKER = "SSH Error: "


class ToolNotFoundError(Exception):
    """Raised when a tool is not found."""

    pass


class CommandExecutor(Protocol):
    """What the tools need from a remote shell."""

    def connect(self) -> None: ...

    def execute(self, command: str) -> str: ...


@dataclass
class ToolResult:
    """Result of a tool execution."""

    content: list[dict[str, Any]]
    is_error: bool = False

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> ToolResult:
        """Build a result holding a single text block."""
        return cls(content=[{"type": "text", "text": text}], is_error=is_error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP result format.

        Returns:
            Dictionary in MCP tools/call result format.
        """
        return {
            "content": self.content,
            "isError": self.is_error,
        }


def _string_argument(arguments: dict[str, Any], key: str) -> str:
    # Missing arguments read as empty strings
    value = arguments.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def build_command_line(tool_name: str, arguments: dict[str, Any]) -> str:
    """Translate a tool call into the shell command line to run.

    ``read_file`` wraps the path in double quotes so paths with spaces work.
    Quotes and shell metacharacters inside the path are passed through
    unescaped and are interpreted by the remote shell.

    Args:
        tool_name: Name of a built-in tool.
        arguments: Tool arguments from ``params.arguments``.

    Returns:
        The command line to execute.

    Raises:
        ToolNotFoundError: If the tool is not a built-in tool.
    """
    if tool_name == LINUX_COMMAND.name:
        return _string_argument(arguments, "command")
    if tool_name == READ_FILE.name:
        return f'cat "{_string_argument(arguments, "path")}"'
    raise ToolNotFoundError(f"Tool not found: {tool_name}")


class RemoteToolRunner:
    """Runs built-in tools through a command executor."""

    def __init__(self, executor: CommandExecutor, audit: CommandAuditLog | None = None) -> None:
        """Initialize the runner.

        Args:
            executor: Remote shell used for every tool call.
            audit: Optional audit trail receiving one record per call.
        """
        self._executor = executor
        self._audit = audit

    def call(self, tool_name: str, arguments: dict[str, Any]) -> ToolResult:
        """Run a tool and wrap its output.

        Args:
            tool_name: Name of the tool to run.
            arguments: Tool arguments.

        Returns:
            ToolResult with the command output, or the executor's error
            message flagged with ``is_error``.

        Raises:
            ToolNotFoundError: If the tool is unknown.
        """
        command = build_command_line(tool_name, arguments)
        started = time.perf_counter()

        try:
            self._executor.connect()
            result = ToolResult.text(self._executor.execute(command))
        except Exception as e:
            logger.warning("Tool %s failed: %s", tool_name, e)
            result = ToolResult.text(f"{ERROR_MARKER}{e}", is_error=True)

        if self._audit is not None:
            duration_ms = (time.perf_counter() - started) * 1000
            self._audit.record(tool_name, command, result.is_error, duration_ms)

        return result
