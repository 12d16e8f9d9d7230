"""SSH command executor for the remote Linux host.

Owns a single lazily established paramiko connection that is reused across
tool calls and re-established only when found inactive. A sentinel demo
configuration answers from canned output without touching the network.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import paramiko

logger = logging.getLogger(__name__)

DEMO_HOST = "demo"

# Out-of-the-box host/user pair, also treated as demo mode
DEFAULT_HOST = "localhost"
DEFAULT_USER = "user"

DEMO_RESPONSES: dict[str, str] = {
    "whoami": "root",
    "ls": "bin\netc\nhome\nvar",
    "uptime": " 12:00:00 up 1 day,  1:00,  1 user,  load average: 0.00, 0.01, 0.05",
}


class RemoteConnectionError(ConnectionError):
    """Raised when the remote host is unreachable or rejects the credentials."""

    pass


class RemoteCommandError(Exception):
    """Raised when a command cannot be run over an open connection."""

    pass


@dataclass(frozen=True)
class SshSettings:
    """Connection parameters for the remote host."""

    host: str = DEFAULT_HOST
    port: int = 22
    username: str = DEFAULT_USER
    password: str = "password"
    connect_timeout: float = 10.0

    @property
    def is_demo(self) -> bool:
        """True for the sentinel settings that enable canned responses."""
        return self.host == DEMO_HOST or (
            self.host == DEFAULT_HOST and self.username == DEFAULT_USER
        )


def demo_response(command: str) -> str:
    """Return the canned output for a command in demo mode."""
    canned = DEMO_RESPONSES.get(command.strip())
    if canned is not None:
        return canned
    return f"[Demo Mode] Executed: {command}\n(Real execution requires a valid SSH_HOST)"


class SshCommandExecutor:
    """Runs shell command lines on the remote host over SSH."""

    def __init__(
        self,
        settings: SshSettings,
        client_factory: Callable[[], Any] = paramiko.SSHClient,
    ) -> None:
        """Initialize the executor without connecting.

        Args:
            settings: Remote host and credentials.
            client_factory: Creates the SSH client; replaced in tests.
        """
        self._settings = settings
        self._client_factory = client_factory
        self._client: Any | None = None

    @property
    def settings(self) -> SshSettings:
        return self._settings

    @property
    def is_demo(self) -> bool:
        return self._settings.is_demo

    @property
    def is_connected(self) -> bool:
        """Whether an active SSH transport is held."""
        if self._client is None:
            return False
        transport = self._client.get_transport()
        return bool(transport and transport.is_active())

    def connect(self) -> None:
        """Connect if not already connected.

        Raises:
            RemoteConnectionError: If the host is unreachable or the
                credentials are rejected.
        """
        if self.is_demo or self.is_connected:
            return

        self.close()
        settings = self._settings
        client = self._client_factory()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        logger.info("Connecting to %s@%s:%d", settings.username, settings.host, settings.port)
        try:
            client.connect(
                hostname=settings.host,
                port=settings.port,
                username=settings.username,
                password=settings.password,
                timeout=settings.connect_timeout,
                allow_agent=False,
                look_for_keys=False,
            )
        except paramiko.AuthenticationException as e:
            client.close()
            raise RemoteConnectionError(
                f"Authentication failed for {settings.username}@{settings.host}: {e}"
            ) from e
        except (paramiko.SSHException, OSError) as e:
            client.close()
            raise RemoteConnectionError(
                f"Could not connect to {settings.host}:{settings.port}: {e}"
            ) from e

        self._client = client

    def execute(self, command: str) -> str:
        """Run a command line and collect its output.

        Args:
            command: Shell command line, passed through verbatim.

        Returns:
            The command's stdout, followed by an ``Error:`` section when it
            wrote to stderr.

        Raises:
            RemoteConnectionError: If a connection cannot be established.
            RemoteCommandError: If the command cannot be run.
        """
        if self.is_demo:
            return demo_response(command)

        self.connect()
        logger.debug("Executing: %s", command)
        try:
            _, stdout, stderr = self._client.exec_command(command)
            output = stdout.read().decode("utf-8", errors="replace")
            error_output = stderr.read().decode("utf-8", errors="replace")
        except (paramiko.SSHException, OSError) as e:
            raise RemoteCommandError(f"Failed to execute command: {e}") from e

        if error_output:
            return output + "\nError: " + error_output
        return output

    def close(self) -> None:
        """Disconnect and drop the client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> SshCommandExecutor:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
