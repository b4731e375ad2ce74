"""Configuration management for environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

from wiki_importer.common.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_KEY_CORRELATION,
    DEFAULT_USER_COUNT,
    KEY_CORRELATION_CHOICES,
)
from wiki_importer.utils.exceptions import ConfigurationError
from wiki_importer.utils.logger import LOG_FORMAT_CHOICES, LOG_FORMAT_JSON

TRUTHY_VALUES = {"1", "true", "yes", "on"}


def parse_import_paths(raw: str | None) -> list[str]:
    """Split a comma-separated list of dump paths.

    Args:
        raw: Value such as "/data/kowiki.xml, /data/namuwiki.json"

    Returns:
        Trimmed, non-empty paths in their original order
    """
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Load configuration from .env file and environment."""
        env_path = Path(".env")
        if env_path.exists():
            load_dotenv(env_path)

        # Required configuration
        self.database_url = self._get_required("DATABASE_URL")

        # Optional configuration with defaults
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_format = os.getenv("LOG_FORMAT", LOG_FORMAT_JSON).lower()
        if self.log_format not in LOG_FORMAT_CHOICES:
            raise ConfigurationError(
                f"LOG_FORMAT must be one of {', '.join(LOG_FORMAT_CHOICES)}, "
                f"got {self.log_format!r}"
            )
        self.import_enabled = os.getenv("WIKI_IMPORT_ENABLED", "false").lower() in TRUTHY_VALUES
        self.import_paths = parse_import_paths(os.getenv("WIKI_IMPORT_PATH"))
        self.batch_size = self._get_int("IMPORT_BATCH_SIZE", DEFAULT_BATCH_SIZE, minimum=1)
        self.user_count = self._get_int("IMPORT_USER_COUNT", DEFAULT_USER_COUNT, minimum=1)
        self.random_seed = self._get_optional_int("IMPORT_RANDOM_SEED")
        self.key_correlation = os.getenv("IMPORT_KEY_CORRELATION", DEFAULT_KEY_CORRELATION).lower()
        if self.key_correlation not in KEY_CORRELATION_CHOICES:
            raise ConfigurationError(
                f"IMPORT_KEY_CORRELATION must be one of {', '.join(KEY_CORRELATION_CHOICES)}, "
                f"got {self.key_correlation!r}"
            )

    def _get_required(self, key: str) -> str:
        """Get required environment variable or raise error.

        Args:
            key: Environment variable name

        Returns:
            Environment variable value

        Raises:
            ConfigurationError: If variable is not set
        """
        value = os.getenv(key)
        if not value:
            raise ConfigurationError(f"{key} environment variable is not set")
        return value

    def _get_int(self, key: str, default: int, minimum: int | None = None) -> int:
        """Get integer environment variable with default value.

        Raises:
            ConfigurationError: If the value is not an integer or below minimum
        """
        value = self._get_optional_int(key)
        if value is None:
            return default
        if minimum is not None and value < minimum:
            raise ConfigurationError(f"{key} must be >= {minimum}, got {value}")
        return value

    def _get_optional_int(self, key: str) -> int | None:
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            return None
        try:
            return int(raw)
        except ValueError as e:
            raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from e
