"""Server configuration loader.

This module loads server settings from YAML configuration files. String
values may reference environment variables with ``${VAR}`` syntax.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from boost_mcp.protocol.jsonrpc import MAX_MESSAGE_SIZE
from boost_mcp.protocol.lifecycle import ServerInfo

PROJECT_PATH_ENV = "BOOST_PROJECT_PATH"


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
        return match.group(0)

    return pattern.sub(replacer, value)


def _default_base_path() -> str:
    return os.environ.get(PROJECT_PATH_ENV) or os.getcwd()


@dataclass(frozen=True)
class ServerConfig:
    """Server configuration.

    Immutable configuration loaded from a YAML file (or built from defaults)
    and handed to the server and to every built-in tool.
    """

    server_name: str = "boost-mcp"
    server_version: str = "1.0.0"
    base_path: str = field(default_factory=_default_base_path)
    log_path: str = ""
    audit_log_file: str = ""
    max_message_size: int = MAX_MESSAGE_SIZE
    tools_enabled: list[str] = field(default_factory=list)
    settings: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> ServerConfig:
        """Create a ServerConfig from a configuration dictionary.

        Args:
            config: Dictionary parsed from YAML configuration.

        Returns:
            ServerConfig instance with all settings populated.
        """
        server = _section(config, "server")
        audit = _section(config, "audit")
        protocol = _section(config, "protocol")
        tools = _section(config, "tools")

        base_path = expand_env_vars(str(config.get("base_path") or "")) or _default_base_path()
        log_path = expand_env_vars(str(config.get("log_path") or ""))
        if not log_path:
            log_path = _guess_log_path(base_path)

        max_size = protocol.get("max_message_size", MAX_MESSAGE_SIZE)
        if not isinstance(max_size, int) or max_size <= 0:
            raise ConfigLoadError("protocol.max_message_size must be a positive integer")

        enabled = tools.get("enabled") or []
        if not isinstance(enabled, list):
            raise ConfigLoadError("tools.enabled must be a list of tool names")

        settings = config.get("settings") or {}
        if not isinstance(settings, dict):
            raise ConfigLoadError("settings must be a mapping")

        return cls(
            server_name=str(server.get("name", "boost-mcp")),
            server_version=str(server.get("version", "1.0.0")),
            base_path=base_path.rstrip("/") or "/",
            log_path=log_path,
            audit_log_file=expand_env_vars(str(audit.get("log_file") or "")),
            max_message_size=max_size,
            tools_enabled=[str(name) for name in enabled],
            settings=settings,
        )

    @property
    def server_info(self) -> ServerInfo:
        """Identity reported in the initialize response."""
        return ServerInfo(name=self.server_name, version=self.server_version)

    def is_tool_enabled(self, tool_name: str) -> bool:
        """Check if a built-in tool should be registered.

        An empty ``tools.enabled`` list enables every tool.
        """
        return not self.tools_enabled or tool_name in self.tools_enabled

    def get(self, key: str, default: Any = None) -> Any:
        """Read a value from ``settings`` using dot notation.

        Args:
            key: Dotted key, e.g. ``database.driver``.
            default: Value returned when any segment is missing.

        Returns:
            The configured value or ``default``.
        """
        value: Any = self.settings
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value


def _section(config: dict[str, Any], name: str) -> dict[str, Any]:
    section = config.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigLoadError(f"{name} must be a mapping")
    return section


def _guess_log_path(base_path: str) -> str:
    """Pick the application log under ``base_path``, preferring laravel.log."""
    logs = Path(base_path) / "storage" / "logs"
    candidate = logs / "laravel.log"
    if candidate.exists():
        return str(candidate)
    return str(logs / "app.log")


def load_config(path: Path) -> ServerConfig:
    """Load server configuration from a YAML file.

    Args:
        path: Path to the configuration YAML file.

    Returns:
        ServerConfig instance.

    Raises:
        ConfigLoadError: If the file cannot be found, parsed, or validated.
    """
    if not path.exists():
        raise ConfigLoadError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Failed to parse config YAML: {e}") from e

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ConfigLoadError("Config must be a YAML mapping")

    return ServerConfig.from_dict(config)
