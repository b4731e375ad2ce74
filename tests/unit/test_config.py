"""Tests for configuration management."""

from unittest.mock import patch

import pytest

from wiki_importer.utils.config import Config, ConfigurationError, parse_import_paths

IMPORT_ENV_VARS = (
    "LOG_LEVEL",
    "LOG_FORMAT",
    "WIKI_IMPORT_ENABLED",
    "WIKI_IMPORT_PATH",
    "IMPORT_BATCH_SIZE",
    "IMPORT_USER_COUNT",
    "IMPORT_RANDOM_SEED",
    "IMPORT_KEY_CORRELATION",
)


@pytest.fixture
def base_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Environment with only DATABASE_URL set."""
    monkeypatch.setenv("DATABASE_URL", "sqlite:///test.db")
    for key in IMPORT_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_config_missing_required_env_var(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that Config raises error when DATABASE_URL is missing."""
    monkeypatch.delenv("DATABASE_URL", raising=False)

    # Mock load_dotenv to prevent loading from .env file
    with patch("wiki_importer.utils.config.load_dotenv"):
        with pytest.raises(ConfigurationError, match="DATABASE_URL"):
            Config()


def test_config_defaults(base_env: pytest.MonkeyPatch) -> None:
    """Test default values when only the database URL is set."""
    with patch("wiki_importer.utils.config.load_dotenv"):
        config = Config()

    assert config.database_url == "sqlite:///test.db"
    assert config.log_level == "INFO"
    assert config.log_format == "json"
    assert config.import_enabled is False
    assert config.import_paths == []
    assert config.batch_size == 1000
    assert config.user_count == 100_000
    assert config.random_seed is None
    assert config.key_correlation == "returning"


def test_config_custom_values(base_env: pytest.MonkeyPatch) -> None:
    """Test that every import setting is read from the environment."""
    base_env.setenv("LOG_LEVEL", "DEBUG")
    base_env.setenv("LOG_FORMAT", "Console")
    base_env.setenv("WIKI_IMPORT_ENABLED", "TRUE")
    base_env.setenv("WIKI_IMPORT_PATH", " /data/a.xml , /data/b.json ")
    base_env.setenv("IMPORT_BATCH_SIZE", "250")
    base_env.setenv("IMPORT_USER_COUNT", "10")
    base_env.setenv("IMPORT_RANDOM_SEED", "42")
    base_env.setenv("IMPORT_KEY_CORRELATION", "MAX_ID")

    with patch("wiki_importer.utils.config.load_dotenv"):
        config = Config()

    assert config.log_level == "DEBUG"
    assert config.log_format == "console"
    assert config.import_enabled is True
    assert config.import_paths == ["/data/a.xml", "/data/b.json"]
    assert config.batch_size == 250
    assert config.user_count == 10
    assert config.random_seed == 42
    assert config.key_correlation == "max_id"


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("IMPORT_BATCH_SIZE", "abc"),
        ("IMPORT_BATCH_SIZE", "0"),
        ("IMPORT_USER_COUNT", "-1"),
        ("IMPORT_RANDOM_SEED", "seed"),
        ("IMPORT_KEY_CORRELATION", "guess"),
        ("LOG_FORMAT", "xml"),
    ],
)
def test_config_invalid_values(base_env: pytest.MonkeyPatch, key: str, value: str) -> None:
    """Test that malformed settings raise ConfigurationError naming the variable."""
    base_env.setenv(key, value)

    with patch("wiki_importer.utils.config.load_dotenv"):
        with pytest.raises(ConfigurationError, match=key):
            Config()


def test_parse_import_paths() -> None:
    """Test comma splitting with blanks removed."""
    assert parse_import_paths(None) == []
    assert parse_import_paths("") == []
    assert parse_import_paths("a.xml,, b.json ,") == ["a.xml", "b.json"]
