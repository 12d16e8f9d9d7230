"""Collaborators that reach outside the process: SSH and Ollama."""

from linux_mcp_server.remote.ssh import (
    RemoteCommandError,
    RemoteConnectionError,
    SshCommandExecutor,
    SshSettings,
)
from linux_mcp_server.remote.translator import OllamaTranslator

__all__ = [
    "OllamaTranslator",
    "RemoteCommandError",
    "RemoteConnectionError",
    "SshCommandExecutor",
    "SshSettings",
]
