"""JSON-RPC 2.0 message decoding and encoding.

One message per line: a decoded line is either a request (carries an ``id``)
or a notification (no ``id``). Responses echo the request ``id`` unchanged.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

JSONRPC_VERSION = "2.0"

# Maximum accepted line length (1 MiB)
MAX_MESSAGE_SIZE = 1_048_576


class JsonRpcError(Exception):
    """JSON-RPC error with code and message."""

    def __init__(self, code: int, message: str, data: Any | None = None) -> None:
        """Initialize the error.

        Args:
            code: JSON-RPC error code.
            message: Human-readable error message.
            data: Optional additional error data.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


class MalformedMessage(JsonRpcError):
    """Raised when a line cannot be decoded into a request or notification.

    ``msg_id`` is set when the line still carried a usable request id, in
    which case the fault is answered with an error envelope instead of
    being dropped.
    """

    def __init__(
        self,
        code: int,
        message: str,
        data: Any | None = None,
        msg_id: int | str | None = None,
    ) -> None:
        super().__init__(code, message, data)
        self.msg_id = msg_id


@dataclass
class JsonRpcRequest:
    """A message that expects a response with the same id."""

    id: int | str
    method: str
    params: dict[str, Any] | None = None


@dataclass
class JsonRpcNotification:
    """A message that is never answered."""

    method: str
    params: dict[str, Any] | None = None


def parse_message(raw: str) -> JsonRpcRequest | JsonRpcNotification:
    """Decode one line into a request or notification.

    Args:
        raw: Raw JSON text of a single line.

    Returns:
        JsonRpcRequest when the document has an ``id`` key, otherwise
        JsonRpcNotification.

    Raises:
        MalformedMessage: If the line is not a usable JSON-RPC message.
    """
    size = len(raw.encode("utf-8"))
    if size > MAX_MESSAGE_SIZE:
        raise MalformedMessage(
            PARSE_ERROR, f"Message too large: {size} bytes exceeds {MAX_MESSAGE_SIZE} limit"
        )

    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as e:
        raise MalformedMessage(PARSE_ERROR, f"Parse error: {e}") from e

    if not isinstance(data, dict):
        raise MalformedMessage(INVALID_REQUEST, "Invalid Request: message must be an object")

    if "id" in data:
        msg_id = data["id"]
        if isinstance(msg_id, bool) or not isinstance(msg_id, int | str):
            raise MalformedMessage(INVALID_REQUEST, "Invalid Request: id must be integer or string")
    else:
        msg_id = None

    method = data.get("method")
    if not isinstance(method, str):
        raise MalformedMessage(INVALID_REQUEST, "Invalid Request: method must be a string")

    # Clients that omit the version member are tolerated
    if "jsonrpc" in data and data["jsonrpc"] != JSONRPC_VERSION:
        raise MalformedMessage(
            INVALID_REQUEST, "Invalid Request: jsonrpc must be '2.0'", msg_id=msg_id
        )

    params = data.get("params")
    if params is not None and not isinstance(params, dict):
        raise MalformedMessage(
            INVALID_REQUEST, "Invalid Request: params must be an object", msg_id=msg_id
        )

    if msg_id is None:
        return JsonRpcNotification(method=method, params=params)
    return JsonRpcRequest(id=msg_id, method=method, params=params)


def _encode(envelope: dict[str, Any]) -> str:
    # Compact separators keep the envelope on a single line
    return json.dumps(envelope, separators=(",", ":"))


def format_response(msg_id: int | str, result: Any) -> str:
    """Format a successful JSON-RPC response.

    Args:
        msg_id: Request ID to echo back.
        result: Result payload.

    Returns:
        Single-line JSON string.
    """
    return _encode({"jsonrpc": JSONRPC_VERSION, "id": msg_id, "result": result})


def format_error(
    msg_id: int | str | None,
    code: int,
    message: str,
    data: Any | None = None,
) -> str:
    """Format a JSON-RPC error response.

    Args:
        msg_id: Request ID (or None when it could not be determined).
        code: Error code.
        message: Error message.
        data: Optional error data.

    Returns:
        Single-line JSON string.
    """
    error_obj: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error_obj["data"] = data

    return _encode({"jsonrpc": JSONRPC_VERSION, "id": msg_id, "error": error_obj})
