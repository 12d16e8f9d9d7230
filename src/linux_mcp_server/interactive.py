"""Interactive REPL: natural language in, remote command output out.

Each line is translated into a shell command, echoed, and run through the
same executor the MCP tools use.
"""

from __future__ import annotations

import logging
from typing import Protocol, TextIO

from linux_mcp_server.tools.registry import LINUX_COMMAND
from linux_mcp_server.tools.remote import CommandExecutor

logger = logging.getLogger(__name__)

EXIT_COMMAND = "exit"
PROMPT = "> "

BANNER = (
    "--- Linux MCP Interactive Client (Powered by Ollama) ---\n"
    "Enter a natural language request (e.g. 'check disk space') or a command.\n"
    "Type 'exit' to quit."
)


class Translator(Protocol):
    def translate(self, text: str) -> str: ...


def run_interactive(
    executor: CommandExecutor,
    translator: Translator,
    stdin: TextIO,
    stdout: TextIO,
) -> int:
    """Run the REPL until ``exit`` or end of input.

    Args:
        executor: Remote shell.
        translator: Natural language to command translator.
        stdin: Where requests are read from.
        stdout: Where prompts and output are written.

    Returns:
        Exit code: 1 if the initial connection fails, otherwise 0.
    """
    print(BANNER, file=stdout)

    stdout.write("Connecting to SSH...")
    stdout.flush()
    try:
        executor.connect()
    except Exception as e:
        print(f"\nFailed to connect: {e}", file=stdout)
        return 1
    print(" Connected!", file=stdout)

    while True:
        stdout.write(PROMPT)
        stdout.flush()
        line = stdin.readline()
        if not line:
            break

        request = line.strip()
        if not request:
            continue
        if request.lower() == EXIT_COMMAND:
            break

        stdout.write("Thinking...")
        stdout.flush()
        command = translator.translate(request)
        print(f"\r[AI] Executing: {command}", file=stdout)
        logger.info("Calling tool '%s' with command: %s", LINUX_COMMAND.name, command)

        try:
            output = executor.execute(command)
        except Exception as e:
            print(f"Error: {e}", file=stdout)
            continue

        print("Output:", file=stdout)
        print(output, file=stdout)

    return 0
