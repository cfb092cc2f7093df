"""Configuration management with pydantic-settings for evg-client.

Credentials come from the Evergreen CLI auth file (``~/.evergreen.yml``) with
environment variables (EVG_ prefix) as a fallback:

    user: jane.doe
    api_key: 0123456789abcdef
    api_server_host: https://evergreen.mongodb.com

The config is frozen after load and shared by every request a client makes.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError

logger = logging.getLogger("evg_client.config")

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "EvgConfig",
    "default_config_path",
    "get_config",
    "reset_config",
]

DEFAULT_CONFIG_FILE = ".evergreen.yml"


class EvgConfig(BaseSettings):
    """Configuration for the Evergreen API client.

    Loads from (in order of precedence):
    1. Values read from the auth file (see from_file)
    2. Environment variables with the EVG_ prefix
    3. Default values

    Attributes:
        user: Evergreen user name, sent as the Api-User header
        api_key: Evergreen API key, sent as the Api-Key header
        api_server_host: Base URL of the API server (trailing slash stripped)
        ui_server_host: Base URL of the web UI, informational only
        timeout: Request timeout in seconds; None disables timeouts entirely
        log_level: Logging level used by the CLI
        log_format: Log format used by the CLI (json or text)
    """

    model_config = SettingsConfigDict(
        env_prefix="EVG_",
        env_ignore_empty=True,
        case_sensitive=False,
        frozen=True,
        extra="ignore",  # auth files carry unrelated CLI settings
    )

    user: str = Field(..., min_length=1, description="Evergreen user name")
    api_key: SecretStr = Field(..., description="Evergreen API key")
    api_server_host: str = Field(..., min_length=1, description="API server base URL")
    ui_server_host: str | None = Field(default=None, description="Web UI base URL")

    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Request timeout in seconds. None means wait indefinitely.",
    )

    log_level: str = Field(default="WARNING")
    log_format: str = Field(default="json")

    @field_validator("api_server_host", "ui_server_host")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"log_level must be one of {sorted(valid)}, got {v!r}")
        return upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        lower = v.lower()
        if lower not in {"json", "text"}:
            raise ValueError(f"log_format must be 'json' or 'text', got {v!r}")
        return lower

    @classmethod
    def from_file(cls, path: Path | str) -> "EvgConfig":
        """Load configuration from an Evergreen auth file.

        Args:
            path: Path to a YAML file with user, api_key and api_server_host

        Returns:
            Validated EvgConfig instance.

        Raises:
            ConfigError: If the file is missing, not YAML, or fails validation.
        """
        path = Path(path).expanduser()
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"Cannot read Evergreen config {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in Evergreen config {path}: {e}") from e

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ConfigError(f"Evergreen config {path} must be a mapping")

        try:
            config = cls(**raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid Evergreen config {path}: {e}") from e

        logger.debug(
            "evg_config_loaded",
            extra={"path": str(path), "api_server_host": config.api_server_host},
        )
        return config

    def auth_headers(self) -> dict[str, str]:
        """Static authentication headers sent with every request."""
        return {
            "Api-User": self.user,
            "Api-Key": self.api_key.get_secret_value(),
        }


def default_config_path() -> Path:
    """Return the auth file location: EVG_CONFIG_FILE or ~/.evergreen.yml."""
    override = os.getenv("EVG_CONFIG_FILE")
    if override:
        return Path(override).expanduser()
    return Path.home() / DEFAULT_CONFIG_FILE


@lru_cache(maxsize=1)
def get_config() -> EvgConfig:
    """Get global configuration singleton.

    Reads the auth file when it exists, otherwise builds the config from
    EVG_* environment variables alone.

    Raises:
        ConfigError: If neither source yields a valid configuration.
    """
    path = default_config_path()
    if path.is_file():
        return EvgConfig.from_file(path)

    try:
        return EvgConfig()
    except ValidationError as e:
        raise ConfigError(
            f"No Evergreen config at {path} and EVG_* environment incomplete: {e}"
        ) from e


def reset_config() -> None:
    """Reset configuration singleton for testing."""
    get_config.cache_clear()
