"""Configuration management for artq."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from artq.exceptions import (
    ConfigParseError,
    ConfigValidationError,
)

DEFAULT_RETURN_FIELDS: tuple[str, ...] = (
    '"name"',
    '"repo"',
    '"path"',
    '"actual_md5"',
    '"actual_sha1"',
    '"size"',
)
DEFAULT_ENV_INCLUDE = "*"
DEFAULT_ENV_EXCLUDE = "*password*;*secret*;*key*"


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "artq" / "config.toml"


def get_default_build_root() -> Path:
    """Get the default directory holding recorded build data."""
    return Path.home() / ".cache" / "artq" / "builds"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        server_url: Base URL of the repository server, always ending in ``/``.
        user: User name for basic authentication.
        password: Password for basic authentication.
        api_key: API key, sent instead of basic auth when set.
        return_fields: Fields projected by compiled queries.
        build_root: Directory holding recorded build data.
        env_include: ``;``-separated patterns of env keys to publish.
        env_exclude: ``;``-separated patterns of env keys to withhold.
        colored_output: Whether to use colored terminal output.
        config_path: Path where config was loaded from (None if defaults).
    """

    server_url: str | None = None
    user: str | None = None
    password: str | None = None
    api_key: str | None = None
    return_fields: list[str] = field(default_factory=lambda: list(DEFAULT_RETURN_FIELDS))
    build_root: Path = field(default_factory=get_default_build_root)
    env_include: str = DEFAULT_ENV_INCLUDE
    env_exclude: str = DEFAULT_ENV_EXCLUDE
    colored_output: bool = True
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.
        """
        warnings: list[str] = []

        self.build_root = self.build_root.expanduser()

        if self.server_url is not None:
            if not self.server_url.startswith(("http://", "https://")):
                warnings.append(f"Server URL has no http(s) scheme: {self.server_url}")
            if not self.server_url.endswith("/"):
                self.server_url += "/"

        if self.password is not None and self.api_key is not None:
            warnings.append("Both server.password and server.api_key are set; using api_key")

        if not self.return_fields:
            warnings.append("query.return_fields is empty; queries will project no fields")

        return warnings


def load_config(
    config_path: Path | None = None,
    server_url: str | None = None,
) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.
        server_url: Overrides ``server.url`` before validation.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        config = Config()
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: artq init-config"
        )
    else:
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigParseError(config_path, str(e)) from e
        config = _parse_config_dict(data, config_path)

    if server_url is not None:
        config.server_url = server_url

    return config, warnings + config.validate()


def _optional_str(section: dict[str, Any], name: str, key: str) -> str | None:
    value = section[name]
    if value is not None and not isinstance(value, str):
        raise ConfigValidationError(key, value, "must be a string or null")
    return value


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [server] section
    server = data.get("server", {})
    if "url" in server:
        config.server_url = _optional_str(server, "url", "server.url")
    if "user" in server:
        config.user = _optional_str(server, "user", "server.user")
    if "password" in server:
        config.password = _optional_str(server, "password", "server.password")
    if "api_key" in server:
        config.api_key = _optional_str(server, "api_key", "server.api_key")

    # Parse [query] section
    query = data.get("query", {})
    if "return_fields" in query:
        value = query["return_fields"]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigValidationError(
                "query.return_fields", value, "must be a list of strings"
            )
        config.return_fields = list(value)

    # Parse [build] section
    build = data.get("build", {})
    if "root" in build:
        value = build["root"]
        if not isinstance(value, str):
            raise ConfigValidationError("build.root", value, "must be a string path")
        config.build_root = Path(value)

    if "env_include" in build:
        value = build["env_include"]
        if not isinstance(value, str):
            raise ConfigValidationError("build.env_include", value, "must be a string")
        config.env_include = value

    if "env_exclude" in build:
        value = build["env_exclude"]
        if not isinstance(value, str):
            raise ConfigValidationError("build.env_exclude", value, "must be a string")
        config.env_exclude = value

    # Parse [display] section
    display = data.get("display", {})
    if "colored_output" in display:
        value = display["colored_output"]
        if not isinstance(value, bool):
            raise ConfigValidationError("display.colored_output", value, "must be a boolean")
        config.colored_output = value

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.
    """
    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {
        "query": {
            "return_fields": list(config.return_fields),
        },
        "build": {
            "root": str(config.build_root),
            "env_include": config.env_include,
            "env_exclude": config.env_exclude,
        },
        "display": {
            "colored_output": config.colored_output,
        },
    }

    # Build [server] section (only keys that are set)
    server_data: dict[str, Any] = {}
    if config.server_url is not None:
        server_data["url"] = config.server_url
    if config.user is not None:
        server_data["user"] = config.user
    if config.password is not None:
        server_data["password"] = config.password
    if config.api_key is not None:
        server_data["api_key"] = config.api_key
    if server_data:
        data["server"] = server_data

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
