"""MCP tools/list and tools/call handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jsonschema import Draft202012Validator

from linux_mcp_server.tools.registry import ToolRegistry
from linux_mcp_server.tools.remote import RemoteToolRunner, ToolNotFoundError, ToolResult


class InvalidArguments(Exception):
    """Raised when tool arguments do not match the tool's input schema."""

    pass


@dataclass
class ToolsListResult:
    """Result of tools/list request."""

    tools: list[dict[str, Any]]

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP result format."""
        return {"tools": self.tools}


class ToolsHandler:
    """Handles tools/list and tools/call MCP requests.

    By default arguments are passed through leniently: missing values reach
    the tool as empty strings. With ``strict_arguments`` the arguments are
    checked against the tool's input schema first.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        runner: RemoteToolRunner,
        strict_arguments: bool = False,
    ) -> None:
        """Initialize the handler.

        Args:
            registry: Catalog of available tools.
            runner: Executes tool calls on the remote host.
            strict_arguments: Reject arguments that fail schema validation.
        """
        self._registry = registry
        self._runner = runner
        self._strict_arguments = strict_arguments

    def handle_list(self) -> ToolsListResult:
        """Handle tools/list request.

        Returns:
            ToolsListResult with every registered tool, in registry order.
        """
        return ToolsListResult(tools=self._registry.to_wire())

    def handle_call(self, name: str, arguments: Any) -> ToolResult:
        """Handle tools/call request.

        Args:
            name: Name of the tool to call.
            arguments: Tool arguments; anything but an object is treated as
                no arguments.

        Returns:
            ToolResult from the remote execution.

        Raises:
            ToolNotFoundError: If no tool has that name.
            InvalidArguments: If strict validation is on and fails.
        """
        definition = self._registry.describe(name)
        if definition is None:
            raise ToolNotFoundError(f"Tool not found: {name}")

        if not isinstance(arguments, dict):
            arguments = {}

        if self._strict_arguments:
            errors = list(Draft202012Validator(definition.input_schema).iter_errors(arguments))
            if errors:
                error = errors[0]
                path = ".".join(str(p) for p in error.path) if error.path else "root"
                raise InvalidArguments(
                    f"Invalid arguments for {name} at '{path}': {error.message}"
                )

        return self._runner.call(name, arguments)
