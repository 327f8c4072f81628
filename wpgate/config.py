"""Configuration management for the gateway.

Configuration precedence (highest to lowest):
1. Environment variables
2. YAML config file (wpgate.yml)
3. Default values

Example wpgate.yml:
    wordpress:
      site_url: "https://example.com"
      username: "admin"
      app_password: "abcd efgh ijkl mnop"

    server:
      host: "0.0.0.0"
      port: 3000
      api_key: "change-me"
      log_level: "INFO"

Usage:
    config = load_config()
    if config.wordpress.has_credentials:
        credential = config.wordpress.credential()
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from wpgate.framework.errors import ConfigurationError
from wpgate.wordpress.auth import Credential

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("wpgate.yml")
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class WordPressConfig:
    """Upstream WordPress site and the identity used against it.

    Attributes:
        site_url: Site root, e.g. https://example.com (no /wp-json suffix)
        username: WordPress user name
        app_password: WordPress application password
        timeout_seconds: Per-request timeout for the REST client
    """

    site_url: str | None = None
    username: str | None = None
    app_password: str | None = field(default=None, repr=False)
    timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.timeout_seconds <= 0:
            msg = f"timeout_seconds must be > 0, got {self.timeout_seconds}"
            raise ValueError(msg)
        if self.site_url:
            object.__setattr__(self, "site_url", self.site_url.rstrip("/"))

    @property
    def has_credentials(self) -> bool:
        return bool(self.site_url and self.username and self.app_password)

    def credential(self) -> Credential:
        """Build the Basic-auth credential, naming the first missing variable."""
        if not self.site_url:
            msg = "WORDPRESS_SITE_URL environment variable is required"
            raise ConfigurationError(msg, setting="WORDPRESS_SITE_URL")
        if not self.username:
            msg = "WORDPRESS_USERNAME environment variable is required"
            raise ConfigurationError(msg, setting="WORDPRESS_USERNAME")
        if not self.app_password:
            msg = "WORDPRESS_APP_PASSWORD environment variable is required"
            raise ConfigurationError(msg, setting="WORDPRESS_APP_PASSWORD")
        return Credential(identity=self.username, secret=self.app_password)


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server configuration.

    Attributes:
        host: Bind address
        port: Bind port
        api_key: Shared secret for the streaming endpoints (None = open access)
        sse_path: Path of the session-opening SSE endpoint
        message_path: Path of the message-submission endpoint
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured_logging: Emit JSON log lines
    """

    host: str = "0.0.0.0"  # S104: intentional, runs inside containers
    port: int = 3000
    api_key: str | None = field(default=None, repr=False)
    sse_path: str = "/sse"
    message_path: str = "/messages"
    log_level: str = "INFO"
    structured_logging: bool = False

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not (0 < self.port < 65536):
            msg = f"port must be 1-65535, got {self.port}"
            raise ValueError(msg)

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            msg = f"log_level must be one of {VALID_LOG_LEVELS}, got '{self.log_level}'"
            raise ValueError(msg)
        object.__setattr__(self, "log_level", self.log_level.upper())

        for name in ("sse_path", "message_path"):
            value = getattr(self, name)
            if not value.startswith("/"):
                msg = f"{name} must start with '/', got '{value}'"
                raise ValueError(msg)

        # Empty string means "not configured"
        if not self.api_key:
            object.__setattr__(self, "api_key", None)


@dataclass(frozen=True)
class GatewayConfig:
    """Root configuration object."""

    wordpress: WordPressConfig = field(default_factory=WordPressConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    config_path: Path | None = None

    def secrets(self) -> list[str]:
        """Values that must be masked in logs."""
        return [s for s in (self.wordpress.app_password, self.server.api_key) if s]

    def describe(self) -> dict[str, str]:
        """Set / not-set summary safe for logging."""
        return {
            "WORDPRESS_SITE_URL": "Set" if self.wordpress.site_url else "Not set",
            "WORDPRESS_USERNAME": "Set" if self.wordpress.username else "Not set",
            "WORDPRESS_APP_PASSWORD": (
                "Set (hidden)" if self.wordpress.app_password else "Not set"
            ),
            "API_KEY": "Protected" if self.server.api_key else "Not set (open access)",
        }


def _read_yaml(config_path: Path) -> dict[str, Any]:
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        msg = f"Config file {config_path} must contain a mapping"
        raise ConfigurationError(msg)
    return data


def load_config(
    config_path: Path | str | None = None,
    env: Mapping[str, str] | None = None,
) -> GatewayConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Optional path to config YAML file (default: ./wpgate.yml, if present)
        env: Environment mapping (default: os.environ)

    Returns:
        GatewayConfig object

    Environment variables:
        WORDPRESS_SITE_URL, WORDPRESS_USERNAME, WORDPRESS_APP_PASSWORD
        WORDPRESS_TIMEOUT: REST client timeout in seconds
        HOST, PORT: HTTP bind address
        API_KEY: Shared secret for /sse and /messages
        WPGATE_LOG_LEVEL: Log level
        WPGATE_STRUCTURED_LOGS: Emit JSON logs (true/false)

    Raises:
        ConfigurationError: If an explicit config file is missing or values are invalid
    """
    env = os.environ if env is None else env

    explicit = config_path is not None
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH

    file_config: dict[str, Any] = {}
    if path.exists():
        logger.info("Loading configuration from %s", path)
        file_config = _read_yaml(path)
    elif explicit:
        msg = f"Config file not found: {path}"
        raise ConfigurationError(msg)

    wp_dict = dict(file_config.get("wordpress") or {})
    server_dict = dict(file_config.get("server") or {})

    # Environment overrides
    wp_env = {
        "site_url": env.get("WORDPRESS_SITE_URL"),
        "username": env.get("WORDPRESS_USERNAME"),
        "app_password": env.get("WORDPRESS_APP_PASSWORD"),
        "timeout_seconds": env.get("WORDPRESS_TIMEOUT"),
    }
    server_env = {
        "host": env.get("HOST"),
        "port": env.get("PORT"),
        "api_key": env.get("API_KEY"),
        "log_level": env.get("WPGATE_LOG_LEVEL"),
        "structured_logging": env.get("WPGATE_STRUCTURED_LOGS"),
    }
    wp_dict.update({k: v for k, v in wp_env.items() if v is not None})
    server_dict.update({k: v for k, v in server_env.items() if v is not None})

    try:
        if "timeout_seconds" in wp_dict:
            wp_dict["timeout_seconds"] = float(wp_dict["timeout_seconds"])
        if "port" in server_dict:
            server_dict["port"] = int(server_dict["port"])
        if isinstance(server_dict.get("structured_logging"), str):
            server_dict["structured_logging"] = (
                server_dict["structured_logging"].strip().lower() in _TRUTHY
            )

        wordpress = WordPressConfig(**wp_dict)
        server = ServerConfig(**server_dict)
    except (TypeError, ValueError) as e:
        msg = f"Invalid configuration: {e}"
        raise ConfigurationError(msg) from e

    return GatewayConfig(
        wordpress=wordpress,
        server=server,
        config_path=path if path.exists() else None,
    )


__all__ = [
    "GatewayConfig",
    "ServerConfig",
    "WordPressConfig",
    "load_config",
]
