"""Configuration management for the BLT MCP server.

Configuration is loaded once at startup and injected into the components
that need it. There is no hot-reload.

Configuration precedence (highest to lowest):
1. Environment variables (BLT_*)
2. YAML config file
3. Default values

Example blt_config.yml:
    api_base: "https://blt.owasp.org/api"
    timeout_seconds: 10
    log_level: "INFO"
    log_format: "json"

Usage:
    config = load_config()
    client = BLTClient(config)
"""

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://blt.owasp.org/api"
DEFAULT_CONFIG_FILE = "blt_config.yml"

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_VALID_LOG_FORMATS = ("text", "json")


@dataclass(frozen=True)
class ServerConfig:
    """Process-wide server configuration.

    Attributes:
        api_base: Base URL of the BLT REST API (no trailing slash)
        api_key: Bearer token; empty means unauthenticated requests
        timeout_seconds: Hard wall-clock bound for each outbound call
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "text" or "json"
        server_name: Name announced during MCP initialization
        server_version: Version announced during MCP initialization
    """

    api_base: str = DEFAULT_API_BASE
    api_key: str = field(default="", repr=False)
    timeout_seconds: float = 10.0
    log_level: str = "INFO"
    log_format: str = "text"
    server_name: str = "blt-mcp"
    server_version: str = "1.0.0"

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.api_base.startswith(("http://", "https://")):
            msg = "api_base must be an http(s) URL"
            raise ValueError(msg)
        object.__setattr__(self, "api_base", self.api_base.rstrip("/"))

        if self.timeout_seconds <= 0:
            msg = f"timeout_seconds must be > 0, got {self.timeout_seconds}"
            raise ValueError(msg)

        level = self.log_level.upper()
        if level not in _VALID_LOG_LEVELS:
            msg = f"log_level must be one of {list(_VALID_LOG_LEVELS)}, got '{self.log_level}'"
            raise ValueError(msg)
        object.__setattr__(self, "log_level", level)

        if self.log_format not in _VALID_LOG_FORMATS:
            msg = f"log_format must be 'text' or 'json', got '{self.log_format}'"
            raise ValueError(msg)

    @property
    def key_configured(self) -> bool:
        """Whether requests carry a bearer token."""
        return bool(self.api_key)

    def safe_summary(self) -> dict[str, Any]:
        """Describe the configuration without the base URL or the key."""
        return {
            "server_name": self.server_name,
            "server_version": self.server_version,
            "api_key_configured": self.key_configured,
            "timeout_seconds": self.timeout_seconds,
            "log_level": self.log_level,
        }


def _read_yaml(config_path: Path) -> dict[str, Any]:
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        msg = "top-level YAML value must be a mapping"
        raise ValueError(msg)
    known = {fld.name for fld in fields(ServerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
    return {k: v for k, v in data.items() if k in known}


def load_config(
    config_path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> ServerConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Optional path to config YAML file (default: ./blt_config.yml)
        environ: Environment mapping (default: ``os.environ``)

    Returns:
        Immutable ServerConfig

    Raises:
        ValueError: If a configured value is invalid

    Environment variables:
        BLT_API_BASE: API base URL
        BLT_API_KEY: API key sent as a bearer token
        BLT_TIMEOUT_SECONDS: Outbound request timeout
        BLT_LOG_LEVEL: Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL)
        BLT_LOG_FORMAT: Log format (text/json)
    """
    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}

    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_FILE)

    if config_path.exists():
        logger.info("Loading configuration from %s", config_path)
        try:
            values.update(_read_yaml(config_path))
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning("Failed to load config from %s: %s", config_path, e)
            logger.info("Using default configuration with environment overrides")

    if env.get("BLT_API_BASE"):
        values["api_base"] = env["BLT_API_BASE"]
    if env.get("BLT_API_KEY"):
        values["api_key"] = env["BLT_API_KEY"]
    if env.get("BLT_TIMEOUT_SECONDS"):
        try:
            values["timeout_seconds"] = float(env["BLT_TIMEOUT_SECONDS"])
        except ValueError:
            msg = "BLT_TIMEOUT_SECONDS must be a number"
            raise ValueError(msg) from None
    if env.get("BLT_LOG_LEVEL"):
        values["log_level"] = env["BLT_LOG_LEVEL"]
    if env.get("BLT_LOG_FORMAT"):
        values["log_format"] = env["BLT_LOG_FORMAT"]

    return ServerConfig(**values)


def with_overrides(config: ServerConfig, **overrides: Any) -> ServerConfig:
    """Return a copy of ``config`` with non-None overrides applied."""
    return replace(config, **{k: v for k, v in overrides.items() if v is not None})


__all__ = [
    "DEFAULT_API_BASE",
    "ServerConfig",
    "load_config",
    "with_overrides",
]
