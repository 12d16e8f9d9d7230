"""Method dispatch for decoded JSON-RPC messages.

Each method name maps to a handler entry tagged as answering requests or
consuming notifications. Requests always get exactly one response line;
notifications never get one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from linux_mcp_server.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    JsonRpcNotification,
    JsonRpcRequest,
    format_error,
    format_response,
)
from linux_mcp_server.protocol.lifecycle import LifecycleManager
from linux_mcp_server.protocol.tools import InvalidArguments, ToolsHandler
from linux_mcp_server.tools.remote import ToolNotFoundError

logger = logging.getLogger(__name__)


class HandlerKind(Enum):
    """Whether a method is answered or only consumed."""

    REQUEST = "request"
    NOTIFICATION = "notification"


@dataclass(frozen=True)
class MethodHandler:
    """A dispatch table entry."""

    kind: HandlerKind
    func: Callable[[dict[str, Any]], Any]


class MethodDispatcher:
    """Routes decoded messages to method handlers."""

    def __init__(self, lifecycle: LifecycleManager, tools_handler: ToolsHandler) -> None:
        """Initialize the dispatcher.

        Args:
            lifecycle: Answers initialize and initialized.
            tools_handler: Answers tools/list and tools/call.
        """
        self._lifecycle = lifecycle
        self._tools_handler = tools_handler
        self._methods: dict[str, MethodHandler] = {
            "initialize": MethodHandler(HandlerKind.REQUEST, self._lifecycle.handle_initialize),
            "notifications/initialized": MethodHandler(
                HandlerKind.NOTIFICATION, self._handle_initialized
            ),
            "tools/list": MethodHandler(HandlerKind.REQUEST, self._handle_tools_list),
            "tools/call": MethodHandler(HandlerKind.REQUEST, self._handle_tools_call),
            "ping": MethodHandler(HandlerKind.REQUEST, self._handle_ping),
        }

    def methods(self) -> list[str]:
        """Return the names of all handled methods."""
        return list(self._methods)

    def dispatch(self, message: JsonRpcRequest | JsonRpcNotification) -> str | None:
        """Handle one decoded message.

        Args:
            message: Decoded request or notification.

        Returns:
            Response line for requests, None for notifications.
        """
        if isinstance(message, JsonRpcNotification):
            self._dispatch_notification(message)
            return None
        return self._dispatch_request(message)

    def _dispatch_notification(self, notification: JsonRpcNotification) -> None:
        handler = self._methods.get(notification.method)
        if handler is None or handler.kind is not HandlerKind.NOTIFICATION:
            logger.debug("Ignoring notification: %s", notification.method)
            return

        try:
            handler.func(notification.params or {})
        except Exception:
            # A notification has nobody to report to
            logger.exception("Notification handler failed: %s", notification.method)

    def _dispatch_request(self, request: JsonRpcRequest) -> str:
        handler = self._methods.get(request.method)
        if handler is None or handler.kind is not HandlerKind.REQUEST:
            return format_error(request.id, METHOD_NOT_FOUND, f"Method not found: {request.method}")

        try:
            result = handler.func(request.params or {})
        except (ToolNotFoundError, InvalidArguments) as e:
            return format_error(request.id, INVALID_PARAMS, str(e))
        except Exception as e:
            logger.exception("Request handler failed: %s", request.method)
            return format_error(request.id, INTERNAL_ERROR, f"Internal error: {e}")

        return format_response(request.id, result)

    def _handle_initialized(self, params: dict[str, Any]) -> None:
        self._lifecycle.handle_initialized()

    def _handle_tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        return self._tools_handler.handle_list().to_dict()

    def _handle_tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name", "")
        if not isinstance(name, str):
            raise InvalidArguments("Tool name must be a string")
        result = self._tools_handler.handle_call(name, params.get("arguments", {}))
        return result.to_dict()

    def _handle_ping(self, params: dict[str, Any]) -> dict[str, Any]:
        return {}
