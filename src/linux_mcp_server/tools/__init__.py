"""Built-in tools and their execution on the remote host."""

from linux_mcp_server.tools.registry import (
    BUILTIN_TOOLS,
    LINUX_COMMAND,
    READ_FILE,
    ToolDefinition,
    ToolRegistry,
    default_registry,
)
from linux_mcp_server.tools.remote import (
    RemoteToolRunner,
    ToolNotFoundError,
    ToolResult,
    build_command_line,
)

__all__ = [
    "BUILTIN_TOOLS",
    "LINUX_COMMAND",
    "READ_FILE",
    "RemoteToolRunner",
    "ToolDefinition",
    "ToolNotFoundError",
    "ToolRegistry",
    "ToolResult",
    "build_command_line",
    "default_registry",
]
