"""Proxy configuration loader.

Configuration is read from an optional YAML file. Every key has a default, so
the proxy runs without any configuration file at all.
"""

from __future__ import annotations

import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

DEFAULT_HOST = "127.0.0.1"
DEFAULT_BASE_PORT = 47100
DEFAULT_MAX_SESSIONS = 8


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
    pattern = re.compile(r"\$\{([^}]+)\}")

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value
        if var_name == "HOME":
            return os.path.expanduser("~")
        if var_name == "TMPDIR":
            return tempfile.gettempdir()
        return match.group(0)  # Return unchanged if not found

    return pattern.sub(replacer, value)


def default_log_file() -> str:
    """Traffic log location used when none is configured."""
    return str(Path(tempfile.gettempdir()) / "mcp-session-proxy.log")


@dataclass
class ProxyConfig:
    """Proxy configuration.

    Session addresses are ``host:base_port + n`` for session numbers
    ``1..max_sessions``.
    """

    session_host: str = DEFAULT_HOST
    session_base_port: int = DEFAULT_BASE_PORT
    max_sessions: int = DEFAULT_MAX_SESSIONS
    redial_interval: float = 0.5
    probe_timeout: float = 0.5
    log_file: str = ""
    tools_source: str | None = None

    def __post_init__(self) -> None:
        if not self.log_file:
            self.log_file = default_log_file()

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> ProxyConfig:
        """Create a ProxyConfig from a configuration dictionary.

        Args:
            config: Dictionary parsed from YAML configuration.

        Returns:
            ProxyConfig instance with all settings populated.

        Raises:
            ConfigLoadError: If a section or value has the wrong type.
        """
        session = config.get("session") or {}
        log = config.get("log") or {}
        tools = config.get("tools") or {}
        for section_name, section in (("session", session), ("log", log), ("tools", tools)):
            if not isinstance(section, dict):
                raise ConfigLoadError(f"'{section_name}' must be a mapping")

        source = tools.get("source")
        try:
            return cls(
                session_host=str(session.get("host", DEFAULT_HOST)),
                session_base_port=int(session.get("base_port", DEFAULT_BASE_PORT)),
                max_sessions=int(session.get("max_sessions", DEFAULT_MAX_SESSIONS)),
                redial_interval=float(session.get("redial_interval", 0.5)),
                probe_timeout=float(session.get("probe_timeout", 0.5)),
                log_file=expand_env_vars(str(log.get("file", ""))),
                tools_source=expand_env_vars(str(source)) if source else None,
            )
        except (TypeError, ValueError) as e:
            raise ConfigLoadError(f"Invalid configuration value: {e}") from e

    def session_port(self, session: int) -> int:
        """TCP port a session with the given number listens on."""
        return self.session_base_port + session


def load_config(path: Path | None = None) -> ProxyConfig:
    """Load proxy configuration from a YAML file.

    Args:
        path: Path to the configuration file, or None for defaults.

    Returns:
        ProxyConfig instance.

    Raises:
        ConfigLoadError: If the file cannot be found or parsed.
    """
    if path is None:
        return ProxyConfig()

    if not path.exists():
        raise ConfigLoadError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Failed to parse config YAML: {e}") from e

    if config is None:
        return ProxyConfig()

    if not isinstance(config, dict):
        raise ConfigLoadError("Config must be a YAML mapping")

    return ProxyConfig.from_dict(config)
