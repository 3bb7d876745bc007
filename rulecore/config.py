"""
Server Configuration

Settings for the API server, read from RULECORE_* environment variables.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging
import os

from rulecore.engine import ConfigurationError


def _default_cors_origins() -> list[str]:
    return ["*"]


@dataclass
class ServerConfig:
    """Configuration for the API server."""

    # Network settings
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = field(default_factory=_default_cors_origins)

    # Card data: extra JSON catalog merged into the built-in sets
    catalog_path: Optional[str] = None

    # Game settings
    starting_life: int = 20

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> 'ServerConfig':
        """Create config from environment variables, falling back to defaults."""
        env = os.environ
        config = cls()

        config.host = env.get("RULECORE_HOST", config.host)
        config.port = _int_setting("RULECORE_PORT", config.port)
        config.starting_life = _int_setting("RULECORE_STARTING_LIFE", config.starting_life)
        config.catalog_path = env.get("RULECORE_CATALOG_PATH") or None
        config.log_level = env.get("RULECORE_LOG_LEVEL", config.log_level).upper()

        origins = env.get("RULECORE_CORS_ORIGINS")
        if origins:
            config.cors_origins = [o.strip() for o in origins.split(",") if o.strip()]

        if logging.getLevelName(config.log_level) == f"Level {config.log_level}":
            raise ConfigurationError(f"Unknown log level: {config.log_level}")
        return config


def _int_setting(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging for the server process."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("rulecore").setLevel(level)
