"""Shared fixtures for server tests."""

from __future__ import annotations

import json
from typing import Any

import pytest

from linux_mcp_server.config import ServerConfig
from linux_mcp_server.remote.ssh import RemoteConnectionError, SshSettings
from linux_mcp_server.server import MCPServer


class RecordingExecutor:
    """Command executor double that records calls and returns fixed output."""

    def __init__(self, output: str = "ok", connect_error: Exception | None = None) -> None:
        self.output = output
        self.connect_error = connect_error
        self.connect_calls = 0
        self.commands: list[str] = []
        self.closed = False

    def connect(self) -> None:
        self.connect_calls += 1
        if self.connect_error is not None:
            raise self.connect_error

    def execute(self, command: str) -> str:
        self.commands.append(command)
        return self.output

    def close(self) -> None:
        self.closed = True


def rpc(method: str, msg_id: int | str | None = None, params: dict[str, Any] | None = None) -> str:
    """Build one JSON-RPC line; omitting msg_id builds a notification."""
    message: dict[str, Any] = {"jsonrpc": "2.0", "method": method}
    if msg_id is not None:
        message["id"] = msg_id
    if params is not None:
        message["params"] = params
    return json.dumps(message)


def tool_call(msg_id: int | str, name: str, arguments: dict[str, Any]) -> str:
    """Build a tools/call request line."""
    return rpc("tools/call", msg_id, {"name": name, "arguments": arguments})


@pytest.fixture
def demo_config() -> ServerConfig:
    """Configuration selecting demo mode."""
    return ServerConfig(ssh=SshSettings(host="demo"))


@pytest.fixture
def demo_server(demo_config: ServerConfig) -> MCPServer:
    """Server backed by the demo executor."""
    return MCPServer(demo_config)


@pytest.fixture
def recording_executor() -> RecordingExecutor:
    return RecordingExecutor(output="hello from remote")


@pytest.fixture
def recording_server(recording_executor: RecordingExecutor) -> MCPServer:
    """Server backed by a recording executor."""
    return MCPServer(ServerConfig(), executor=recording_executor)


@pytest.fixture
def unreachable_server() -> MCPServer:
    """Server whose executor cannot connect."""
    executor = RecordingExecutor(connect_error=RemoteConnectionError("Connection refused"))
    return MCPServer(ServerConfig(), executor=executor)
