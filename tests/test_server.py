"""Tests for method dispatch and the server message loop."""

import io
import json

import pytest
from conftest import RecordingExecutor, rpc, tool_call

from linux_mcp_server.config import ServerConfig
from linux_mcp_server.protocol.jsonrpc import INVALID_PARAMS, INVALID_REQUEST, METHOD_NOT_FOUND
from linux_mcp_server.protocol.transport import StdioTransport
from linux_mcp_server.remote.ssh import SshSettings, demo_response
from linux_mcp_server.server import MCPServer
from linux_mcp_server.tools.remote import ERROR_MARKER


def run_session(server: MCPServer, lines: list[str]) -> tuple[int, list[dict]]:
    """Feed lines through serve() and return the exit code and responses."""
    stdin = io.StringIO("".join(line + "\n" for line in lines))
    stdout = io.StringIO()
    transport = StdioTransport(stdin=stdin, stdout=stdout, stderr=io.StringIO())
    code = server.serve(transport)
    return code, [json.loads(line) for line in stdout.getvalue().splitlines()]


class TestMethods:
    """Tests for the individual protocol methods."""

    def test_initialize(self, demo_server: MCPServer):
        response = json.loads(
            demo_server.handle_message(
                rpc("initialize", 1, {"protocolVersion": "2024-11-05", "capabilities": {}})
            )
        )

        assert response["jsonrpc"] == "2.0"
        assert response["id"] == 1
        assert response["result"] == {
            "protocolVersion": "2024-11-05",
            "capabilities": {"tools": {}},
            "serverInfo": {"name": "LinuxMcpServer", "version": "1.0.0"},
        }

    def test_initialized_notification_has_no_response(self, demo_server: MCPServer):
        assert demo_server.handle_message(rpc("notifications/initialized")) is None

    @pytest.mark.parametrize("msg_id", [1, 0, -5, 99999999999, "abc", ""])
    def test_ping_echoes_id(self, demo_server: MCPServer, msg_id):
        """Should answer ping with an empty result and the same id."""
        response = json.loads(demo_server.handle_message(rpc("ping", msg_id)))

        assert response["id"] == msg_id
        assert type(response["id"]) is type(msg_id)
        assert response["result"] == {}

    def test_tools_list(self, demo_server: MCPServer):
        first = json.loads(demo_server.handle_message(rpc("tools/list", 2)))
        second = json.loads(demo_server.handle_message(rpc("tools/list", 3)))

        names = [t["name"] for t in first["result"]["tools"]]
        assert names == ["linux_command", "read_file"]
        assert first["result"] == second["result"]

    def test_tools_list_schema(self, demo_server: MCPServer):
        response = json.loads(demo_server.handle_message(rpc("tools/list", 2)))
        tools = {t["name"]: t for t in response["result"]["tools"]}

        assert tools["linux_command"]["inputSchema"]["required"] == ["command"]
        assert tools["read_file"]["inputSchema"]["required"] == ["path"]

    def test_no_initialization_required(self, demo_server: MCPServer):
        """Should serve tool calls before initialize."""
        response = json.loads(demo_server.handle_message(tool_call(1, "linux_command", {"command": "whoami"})))

        assert response["result"]["content"][0]["text"] == "root"

    def test_list_tools_matches_wire(self, demo_server: MCPServer):
        response = json.loads(demo_server.handle_message(rpc("tools/list", 1)))

        assert demo_server.list_tools() == response["result"]["tools"]


class TestErrors:
    """Tests for error envelopes."""

    def test_unknown_method(self, demo_server: MCPServer):
        response = json.loads(demo_server.handle_message(rpc("resources/list", 5)))

        assert response["id"] == 5
        assert response["error"]["code"] == METHOD_NOT_FOUND
        assert "result" not in response

    def test_unknown_tool(self, demo_server: MCPServer):
        """Should answer an unknown tool with an error instead of silence."""
        response = json.loads(demo_server.handle_message(tool_call("t1", "rm_everything", {})))

        assert response["id"] == "t1"
        assert response["error"]["code"] == INVALID_PARAMS
        assert "rm_everything" in response["error"]["message"]

    def test_non_string_tool_name(self, demo_server: MCPServer):
        response = json.loads(demo_server.handle_message(rpc("tools/call", 1, {"name": 3})))

        assert response["error"]["code"] == INVALID_PARAMS

    def test_notification_form_of_initialize_is_ignored(self, demo_server: MCPServer):
        """Should not answer a request method sent without an id."""
        assert demo_server.handle_message(rpc("initialize")) is None

    def test_unknown_notification_is_ignored(self, demo_server: MCPServer):
        assert demo_server.handle_message(rpc("notifications/cancelled", params={"requestId": 1})) is None

    def test_malformed_line_produces_no_output(self, demo_server: MCPServer):
        assert demo_server.handle_message("{oops") is None
        assert demo_server.handle_message('{"jsonrpc": "2.0", "id": 1}') is None

    @pytest.mark.parametrize(
        "line",
        [
            '{"jsonrpc":"2.0","id":7,"method":"ping","params":[]}',
            '{"jsonrpc":"1.0","id":7,"method":"ping"}',
        ],
    )
    def test_invalid_request_with_id_is_answered(self, demo_server: MCPServer, line):
        """Should answer a structurally invalid request that still has an id."""
        response = json.loads(demo_server.handle_message(line))

        assert response["id"] == 7
        assert response["error"]["code"] == INVALID_REQUEST
        assert "result" not in response

    def test_invalid_notification_produces_no_output(self, demo_server: MCPServer):
        assert demo_server.handle_message('{"jsonrpc":"2.0","method":"notifications/initialized","params":[]}') is None

    def test_strict_arguments_error(self):
        server = MCPServer(ServerConfig(ssh=SshSettings(host="demo"), strict_arguments=True))
        response = json.loads(server.handle_message(tool_call(9, "linux_command", {})))

        assert response["id"] == 9
        assert response["error"]["code"] == INVALID_PARAMS


class TestToolCalls:
    """Tests for tools/call through the whole server."""

    def test_demo_whoami_is_deterministic(self, demo_server: MCPServer):
        for msg_id in range(3):
            response = json.loads(
                demo_server.handle_message(tool_call(msg_id, "linux_command", {"command": "whoami"}))
            )
            assert response["result"] == {
                "content": [{"type": "text", "text": "root"}],
                "isError": False,
            }

    def test_demo_ls(self, demo_server: MCPServer):
        response = json.loads(demo_server.handle_message(tool_call(1, "linux_command", {"command": "ls"})))

        assert response["result"]["content"][0]["text"] == "bin\netc\nhome\nvar"

    def test_read_file_against_demo(self, demo_server: MCPServer):
        """read_file is not a canned command, so the demo fallback text comes back."""
        line = (
            '{"jsonrpc":"2.0","id":1,"method":"tools/call","params":'
            '{"name":"read_file","arguments":{"path":"/etc/hostname"}}}'
        )
        response = json.loads(demo_server.handle_message(line))

        assert response["id"] == 1
        assert response["result"]["content"][0]["text"] == demo_response('cat "/etc/hostname"')
        assert response["result"]["isError"] is False

    def test_uses_injected_executor(self, recording_server: MCPServer, recording_executor: RecordingExecutor):
        response = json.loads(recording_server.handle_message(tool_call(1, "read_file", {"path": "/var/log/my app.log"})))

        assert recording_executor.commands == ['cat "/var/log/my app.log"']
        assert response["result"]["content"][0]["text"] == "hello from remote"

    def test_connection_failure_is_tool_error(self, unreachable_server: MCPServer):
        """Should deliver connection failures as a successful envelope with isError."""
        response = json.loads(unreachable_server.handle_message(tool_call(1, "linux_command", {"command": "ls"})))

        assert "error" not in response
        assert response["result"]["isError"] is True
        assert response["result"]["content"][0]["text"].startswith(ERROR_MARKER)


class TestServeLoop:
    """Tests for the line loop over a transport."""

    def test_full_session(self, demo_server: MCPServer):
        code, responses = run_session(
            demo_server,
            [
                rpc("initialize", 1, {"protocolVersion": "2024-11-05"}),
                rpc("notifications/initialized"),
                rpc("tools/list", 2),
                tool_call(3, "linux_command", {"command": "uptime"}),
                rpc("ping", "last"),
            ],
        )

        assert code == 0
        assert [r["id"] for r in responses] == [1, 2, 3, "last"]

    def test_notifications_write_nothing(self, demo_server: MCPServer):
        code, responses = run_session(
            demo_server,
            [rpc("notifications/initialized"), rpc("notifications/cancelled"), rpc("ping")],
        )

        assert code == 0
        assert responses == []

    def test_survives_malformed_line(self, demo_server: MCPServer):
        """Should keep serving after invalid JSON."""
        code, responses = run_session(demo_server, ["this is not json", "", rpc("ping", 2)])

        assert code == 0
        assert responses == [{"jsonrpc": "2.0", "id": 2, "result": {}}]

    def test_survives_deeply_nested_line(self, demo_server: MCPServer):
        """Should skip JSON nested past the parser's depth and keep serving."""
        code, responses = run_session(demo_server, ["[" * 200_000, rpc("ping", 2)])

        assert code == 0
        assert responses == [{"jsonrpc": "2.0", "id": 2, "result": {}}]

    def test_answers_invalid_request_and_continues(self, demo_server: MCPServer):
        code, responses = run_session(
            demo_server,
            [
                '{"jsonrpc":"2.0","id":7,"method":"ping","params":[]}',
                '{"jsonrpc":"1.0","id":8,"method":"ping"}',
                rpc("ping", 9),
            ],
        )

        assert code == 0
        assert [r["id"] for r in responses] == [7, 8, 9]
        assert responses[0]["error"]["code"] == INVALID_REQUEST
        assert responses[1]["error"]["code"] == INVALID_REQUEST
        assert responses[2]["result"] == {}

    def test_survives_connection_failure(self, unreachable_server: MCPServer):
        code, responses = run_session(
            unreachable_server,
            [tool_call(1, "linux_command", {"command": "ls"}), rpc("ping", 2)],
        )

        assert code == 0
        assert responses[0]["result"]["isError"] is True
        assert responses[1] == {"jsonrpc": "2.0", "id": 2, "result": {}}

    def test_write_failure_ends_session(self, demo_server: MCPServer):
        stdout = io.StringIO()
        stdout.close()
        transport = StdioTransport(stdin=io.StringIO(rpc("ping", 1) + "\n"), stdout=stdout, stderr=io.StringIO())

        assert demo_server.serve(transport) == 1

    def test_empty_input_exits_cleanly(self, demo_server: MCPServer):
        assert run_session(demo_server, []) == (0, [])


class TestLifecycle:
    """Tests for server resource handling."""

    def test_close_closes_executor(self, recording_server: MCPServer, recording_executor: RecordingExecutor):
        with recording_server:
            pass

        assert recording_executor.closed is True

    def test_audit_log_written(self, tmp_path, recording_executor: RecordingExecutor):
        log_path = tmp_path / "audit" / "commands.jsonl"
        with MCPServer(ServerConfig(audit_log_file=str(log_path)), executor=recording_executor) as server:
            server.handle_message(tool_call(1, "linux_command", {"command": "uptime"}))

        entries = [json.loads(line) for line in log_path.read_text().splitlines()]
        assert len(entries) == 1
        assert entries[0]["command"] == "uptime"
        assert entries[0]["status"] == "success"
