"""Linux MCP Server - command line entry point.

Runs an MCP server on stdio that lets an LLM client run shell commands and
read files on a remote Linux host over SSH.

By default it speaks JSON-RPC on stdin/stdout; all logging goes to stderr
because every byte on stdout belongs to the protocol. With ``--interactive``
it instead starts a REPL that turns natural-language requests into shell
commands through Ollama and runs them on the same host.

CONFIGURATION
-------------
Settings are read from an optional YAML file (``--config``) and then from
the environment:

    SSH_HOST, SSH_PORT, SSH_USER, SSH_PASS   remote host and credentials
    OLLAMA_URL, OLLAMA_MODEL                 translator for --interactive
    MCP_AUDIT_LOG                            JSON Lines audit trail

With no host configured (or SSH_HOST=demo) the server runs in demo mode and
answers from canned output, which is handy for wiring up a client.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from linux_mcp_server import __version__
from linux_mcp_server.config import ConfigLoadError, load_config
from linux_mcp_server.interactive import run_interactive
from linux_mcp_server.protocol.transport import StdioTransport
from linux_mcp_server.remote.ssh import SshCommandExecutor
from linux_mcp_server.remote.translator import OllamaTranslator
from linux_mcp_server.server import MCPServer

LOG_FORMAT = "[MCP] %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    """Send all log records to stderr."""
    logging.basicConfig(stream=sys.stderr, level=level.upper(), format=LOG_FORMAT, force=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linux-mcp-server",
        description="MCP server for a remote Linux host",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (environment variables override it)",
    )
    parser.add_argument(
        "--interactive",
        "--client",
        "-i",
        action="store_true",
        help="Run the natural-language REPL instead of the stdio server",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for stderr diagnostics (default: INFO)",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"linux-mcp-server {__version__}",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the MCP server or the interactive client.

    Args:
        argv: Command line arguments (defaults to sys.argv).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = load_config(args.config)
    except ConfigLoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.interactive:
        with (
            SshCommandExecutor(config.ssh) as executor,
            OllamaTranslator(config.ollama_url, config.ollama_model) as translator,
        ):
            return run_interactive(executor, translator, sys.stdin, sys.stdout)

    try:
        server = MCPServer(config)
    except OSError as e:
        print(f"Error starting server: {e}", file=sys.stderr)
        return 1

    transport = StdioTransport()
    transport.log(f"Remote host: {config.ssh.username}@{config.ssh.host}:{config.ssh.port}")
    with server:
        return server.serve(transport)


if __name__ == "__main__":
    sys.exit(main())
