"""MCP Server - wires the protocol core to the remote host.

Messages are handled strictly one at a time: a line is decoded, dispatched
and answered before the next line is read.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from linux_mcp_server.config import ServerConfig
from linux_mcp_server.protocol.dispatcher import MethodDispatcher
from linux_mcp_server.protocol.jsonrpc import MalformedMessage, format_error, parse_message
from linux_mcp_server.protocol.lifecycle import LifecycleManager
from linux_mcp_server.protocol.tools import ToolsHandler
from linux_mcp_server.protocol.transport import StdioTransport, TransportError
from linux_mcp_server.remote.ssh import SshCommandExecutor
from linux_mcp_server.security.audit import CommandAuditLog
from linux_mcp_server.tools.registry import ToolRegistry, default_registry
from linux_mcp_server.tools.remote import CommandExecutor, RemoteToolRunner

logger = logging.getLogger(__name__)


class MCPServer:
    """MCP server exposing a remote Linux host.

    Provides:
    - initialize / notifications/initialized / ping
    - tools/list and tools/call for linux_command and read_file
    - an optional audit trail of executed commands
    """

    def __init__(
        self,
        config: ServerConfig | None = None,
        executor: CommandExecutor | None = None,
        registry: ToolRegistry | None = None,
    ) -> None:
        """Initialize the server.

        Args:
            config: Runtime configuration (defaults to built-in defaults,
                which select demo mode).
            executor: Remote command executor; built from ``config.ssh``
                when omitted.
            registry: Tool catalog; the built-in tools when omitted.
        """
        self._config = config if config is not None else ServerConfig()
        self._executor = executor if executor is not None else SshCommandExecutor(self._config.ssh)
        self._registry = registry if registry is not None else default_registry()

        self._audit: CommandAuditLog | None = None
        if self._config.audit_log_file:
            self._audit = CommandAuditLog(Path(self._config.audit_log_file))

        self._lifecycle = LifecycleManager()
        self._runner = RemoteToolRunner(self._executor, audit=self._audit)
        self._tools_handler = ToolsHandler(
            self._registry, self._runner, strict_arguments=self._config.strict_arguments
        )
        self._dispatcher = MethodDispatcher(self._lifecycle, self._tools_handler)

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def executor(self) -> CommandExecutor:
        return self._executor

    def list_tools(self) -> list[dict[str, Any]]:
        """List all registered tools.

        Returns:
            List of tool definitions in MCP format.
        """
        return self._registry.to_wire()

    def handle_message(self, raw_message: str) -> str | None:
        """Handle one incoming line.

        Args:
            raw_message: Raw JSON-RPC message string.

        Returns:
            Response line, or None for notifications and undecodable lines.
            A malformed request that still carries a usable id is answered
            with an error envelope.
        """
        try:
            message = parse_message(raw_message)
        except MalformedMessage as e:
            if e.msg_id is not None:
                logger.warning("Rejecting invalid request %r (%d): %s", e.msg_id, e.code, e.message)
                return format_error(e.msg_id, e.code, e.message)
            logger.warning("Dropping malformed message (%d): %s", e.code, e.message)
            return None

        logger.debug("Received method: %s", message.method)
        return self._dispatcher.dispatch(message)

    def serve(self, transport: StdioTransport) -> int:
        """Run the message loop until the input stream ends.

        Args:
            transport: Line transport carrying the protocol.

        Returns:
            Exit code: 0 at end of stream, 1 on transport failure, 130 on
            interrupt.
        """
        transport.log("Linux MCP Server started")
        if getattr(self._executor, "is_demo", False):
            transport.log("Demo mode: commands return canned output")

        try:
            while True:
                message = transport.read_message()
                if message is None:
                    transport.log("EOF received, shutting down")
                    return 0

                response = self.handle_message(message)
                if response is not None:
                    transport.write_message(response)

        except KeyboardInterrupt:
            transport.log("Interrupted, shutting down")
            return 130

        except TransportError as e:
            transport.log(f"Transport error: {e}")
            return 1

    def close(self) -> None:
        """Close the remote connection and the audit trail."""
        close = getattr(self._executor, "close", None)
        if close is not None:
            close()
        if self._audit is not None:
            self._audit.close()

    def __enter__(self) -> MCPServer:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
