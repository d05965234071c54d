"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from src.core.config import Settings, constants


def test_defaults() -> None:
    """Test interpreter and listing defaults without any environment."""
    settings = Settings(_env_file=None)

    assert settings.sqlite_db_path == "pantry.db"
    assert settings.logfire_token is None
    assert settings.default_expiry_days == 7
    assert settings.default_item_name == "Pantry item"
    assert settings.default_list_limit == 50
    assert settings.voice_list_limit == 10
    assert settings.expiring_soon_days == 3


def test_environment_overrides(monkeypatch) -> None:
    """Test settings are read from environment variables case-insensitively."""
    monkeypatch.setenv("DEFAULT_EXPIRY_DAYS", "14")
    monkeypatch.setenv("sqlite_db_path", "/tmp/other.db")

    settings = Settings(_env_file=None)

    assert settings.default_expiry_days == 14
    assert settings.sqlite_db_path == "/tmp/other.db"


@pytest.mark.parametrize(
    "overrides",
    [{"default_expiry_days": 0}, {"default_item_name": ""}, {"voice_list_limit": 0}],
)
def test_invalid_values_rejected(overrides) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)


def test_list_limit_bounds() -> None:
    assert Settings(_env_file=None).default_list_limit <= constants.MAX_LIST_LIMIT
