"""Server configuration loading.

Settings come from an optional YAML file, then environment variables
override individual values. String values in the file may reference
environment variables with ``${VAR_NAME}``.

Example file::

    ssh:
      host: build01.internal
      port: 22
      username: ops
      password: ${BUILD01_PASSWORD}
    ollama:
      url: http://localhost:11434
      model: llama3
    tools:
      strict_arguments: false
    audit:
      log_file: ${HOME}/.linux-mcp/audit.jsonl
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from linux_mcp_server.remote.ssh import SshSettings
from linux_mcp_server.remote.translator import DEFAULT_OLLAMA_MODEL, DEFAULT_OLLAMA_URL

ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


class ConfigLoadError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def expand_env_vars(value: str) -> str:
    """Expand environment variables in a string.

    Supports ${VAR_NAME} syntax. Unknown variables are left unchanged.

    Args:
        value: String potentially containing environment variable references.

    Returns:
        String with known environment variables expanded.
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value
        if var_name == "HOME":
            return os.path.expanduser("~")
        return match.group(0)

    return ENV_VAR_PATTERN.sub(replacer, value)


def _expand(value: Any) -> Any:
    if isinstance(value, str):
        return expand_env_vars(value)
    return value


def _parse_port(value: Any) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigLoadError(f"Invalid SSH port: {value!r}") from e
    if not 0 < port < 65536:
        raise ConfigLoadError(f"SSH port out of range: {port}")
    return port


def _parse_timeout(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigLoadError(f"Invalid SSH connect_timeout: {value!r}") from e


def _parse_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigLoadError(f"Config value '{name}' must be true or false, got {value!r}")
    return value


def _section(config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = config.get(name) or {}
    if not isinstance(section, Mapping):
        raise ConfigLoadError(f"Config section '{name}' must be a mapping")
    return section


@dataclass(frozen=True)
class ServerConfig:
    """Complete runtime configuration."""

    ssh: SshSettings = field(default_factory=SshSettings)
    ollama_url: str = DEFAULT_OLLAMA_URL
    ollama_model: str = DEFAULT_OLLAMA_MODEL
    strict_arguments: bool = False
    audit_log_file: str = ""

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> ServerConfig:
        """Create a ServerConfig from a configuration dictionary.

        Args:
            config: Dictionary parsed from YAML configuration.

        Returns:
            ServerConfig with defaults for anything not given.

        Raises:
            ConfigLoadError: If a value has the wrong shape.
        """
        ssh = _section(config, "ssh")
        ollama = _section(config, "ollama")
        tools = _section(config, "tools")
        audit = _section(config, "audit")

        defaults = SshSettings()
        ssh_settings = SshSettings(
            host=str(_expand(ssh.get("host", defaults.host))),
            port=_parse_port(_expand(ssh.get("port", defaults.port))),
            username=str(_expand(ssh.get("username", defaults.username))),
            password=str(_expand(ssh.get("password", defaults.password))),
            connect_timeout=_parse_timeout(_expand(ssh.get("connect_timeout", defaults.connect_timeout))),
        )

        return cls(
            ssh=ssh_settings,
            ollama_url=str(_expand(ollama.get("url", DEFAULT_OLLAMA_URL))),
            ollama_model=str(_expand(ollama.get("model", DEFAULT_OLLAMA_MODEL))),
            strict_arguments=_parse_bool(tools.get("strict_arguments", False), "tools.strict_arguments"),
            audit_log_file=str(_expand(audit.get("log_file", "") or "")),
        )

    def with_env_overrides(self, environ: Mapping[str, str] | None = None) -> ServerConfig:
        """Apply the SSH_*, OLLAMA_* and MCP_AUDIT_LOG environment variables.

        Args:
            environ: Environment mapping (defaults to os.environ).

        Returns:
            A new ServerConfig with overrides applied.
        """
        env = os.environ if environ is None else environ

        ssh = self.ssh
        if "SSH_HOST" in env:
            ssh = replace(ssh, host=env["SSH_HOST"])
        if "SSH_PORT" in env:
            ssh = replace(ssh, port=_parse_port(env["SSH_PORT"]))
        if "SSH_USER" in env:
            ssh = replace(ssh, username=env["SSH_USER"])
        if "SSH_PASS" in env:
            ssh = replace(ssh, password=env["SSH_PASS"])

        return replace(
            self,
            ssh=ssh,
            ollama_url=env.get("OLLAMA_URL", self.ollama_url),
            ollama_model=env.get("OLLAMA_MODEL", self.ollama_model),
            audit_log_file=env.get("MCP_AUDIT_LOG", self.audit_log_file),
        )


def load_config(path: Path | None = None, environ: Mapping[str, str] | None = None) -> ServerConfig:
    """Load configuration from an optional YAML file plus the environment.

    Args:
        path: Path to the YAML file, or None to use defaults.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        ServerConfig instance.

    Raises:
        ConfigLoadError: If the file cannot be found, parsed, or validated.
    """
    if path is None:
        return ServerConfig().with_env_overrides(environ)

    if not path.exists():
        raise ConfigLoadError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Failed to parse config YAML: {e}") from e

    # An empty file means "all defaults"
    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ConfigLoadError("Config must be a YAML mapping")

    return ServerConfig.from_dict(config).with_env_overrides(environ)
