"""MCP protocol layer for JSON-RPC communication."""

from linux_mcp_server.protocol.dispatcher import HandlerKind, MethodDispatcher, MethodHandler
from linux_mcp_server.protocol.jsonrpc import (
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    MalformedMessage,
    format_error,
    format_response,
    parse_message,
)
from linux_mcp_server.protocol.lifecycle import MCP_PROTOCOL_VERSION, LifecycleManager
from linux_mcp_server.protocol.tools import (
    InvalidArguments,
    ToolsHandler,
    ToolsListResult,
)
from linux_mcp_server.protocol.transport import StdioTransport, TransportError

__all__ = [
    "HandlerKind",
    "InvalidArguments",
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcRequest",
    "LifecycleManager",
    "MCP_PROTOCOL_VERSION",
    "MalformedMessage",
    "MethodDispatcher",
    "MethodHandler",
    "StdioTransport",
    "ToolsHandler",
    "ToolsListResult",
    "TransportError",
    "format_error",
    "format_response",
    "parse_message",
]
