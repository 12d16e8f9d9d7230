"""Static catalog of the tools this server offers.

The registry is built once at startup and never mutated; tools/list returns
its contents in registration order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ToolDefinition:
    """Name, description and input schema of one tool."""

    name: str
    description: str
    input_schema: dict[str, Any]

    @property
    def required(self) -> list[str]:
        """Names of the arguments the schema marks as required."""
        return list(self.input_schema.get("required", []))

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


def _string_argument_schema(argument: str, description: str) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {argument: {"type": "string", "description": description}},
        "required": [argument],
    }


LINUX_COMMAND = ToolDefinition(
    name="linux_command",
    description=(
        "Execute a shell command on the Linux box. The model should translate natural "
        "language user requests (e.g. 'check disk space', 'list files') into the "
        "appropriate shell command (e.g. 'df -h', 'ls -la') before calling this tool."
    ),
    input_schema=_string_argument_schema("command", "The shell command to execute"),
)

READ_FILE = ToolDefinition(
    name="read_file",
    description="Read the complete contents of a file from the Linux remote machine.",
    input_schema=_string_argument_schema("path", "The absolute path to the file to read"),
)

BUILTIN_TOOLS: tuple[ToolDefinition, ...] = (LINUX_COMMAND, READ_FILE)


class ToolRegistry:
    """Read-only, ordered lookup of tool definitions."""

    def __init__(self, definitions: Iterable[ToolDefinition]) -> None:
        """Initialize the registry.

        Args:
            definitions: Tool definitions in the order they should be listed.

        Raises:
            ValueError: If two definitions share a name.
        """
        self._tools: dict[str, ToolDefinition] = {}
        for definition in definitions:
            if definition.name in self._tools:
                raise ValueError(f"Duplicate tool name: {definition.name}")
            self._tools[definition.name] = definition

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def list(self) -> list[ToolDefinition]:
        """Return all definitions in registration order."""
        return list(self._tools.values())

    def names(self) -> list[str]:
        """Return all tool names in registration order."""
        return list(self._tools)

    def describe(self, name: str) -> ToolDefinition | None:
        """Look up a tool by exact name.

        Args:
            name: Tool name.

        Returns:
            The definition, or None if no such tool exists.
        """
        return self._tools.get(name)

    def to_wire(self) -> list[dict[str, Any]]:
        """Return all definitions in MCP tools/list format."""
        return [tool.to_dict() for tool in self._tools.values()]


def default_registry() -> ToolRegistry:
    """Create the registry holding the built-in tools."""
    return ToolRegistry(BUILTIN_TOOLS)
