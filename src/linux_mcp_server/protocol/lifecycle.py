"""MCP initialize/initialized handling.

The server advertises a fixed protocol version and capability set; there is
no negotiation and no ordering is enforced on later requests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

MCP_PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "LinuxMcpServer"
SERVER_VERSION = "1.0.0"


@dataclass
class LifecycleManager:
    """Answers the initialization handshake.

    Client details from ``initialize`` are kept for diagnostics only.
    """

    server_info: dict[str, str] = field(
        default_factory=lambda: {"name": SERVER_NAME, "version": SERVER_VERSION}
    )
    capabilities: dict[str, Any] = field(default_factory=lambda: {"tools": {}})
    client_info: dict[str, Any] | None = None

    @property
    def client_name(self) -> str:
        """Name the client reported in ``initialize``, or "unknown"."""
        if self.client_info and isinstance(self.client_info.get("name"), str):
            return self.client_info["name"]
        return "unknown"

    def handle_initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle initialize request.

        Args:
            params: Initialize request parameters.

        Returns:
            Initialize response result.
        """
        client_info = params.get("clientInfo")
        self.client_info = client_info if isinstance(client_info, dict) else None
        logger.info(
            "Initialize from client %s (requested protocol %s)",
            self.client_name,
            params.get("protocolVersion", "unspecified"),
        )

        return {
            "protocolVersion": MCP_PROTOCOL_VERSION,
            "capabilities": self.capabilities,
            "serverInfo": self.server_info,
        }

    def handle_initialized(self) -> None:
        """Handle initialized notification.

        Nothing is gated on it; the notification is only logged.
        """
        logger.debug("Client %s finished initialization", self.client_name)
