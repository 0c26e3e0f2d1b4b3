import pytest
from pydantic import ValidationError

from collectible.config import Settings


class TestSettings:
    """Tests for environment configuration."""

    def test_defaults(self, monkeypatch):
        """Test values used when nothing is set."""
        for name in ("COLLECTIBLE_BRAND", "COLLECTIBLE_OWNER", "COLLECTIBLE_PRICE",
                     "COLLECTIBLE_MAX_SUPPLY", "COLLECTIBLE_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.brand == "brand"
        assert settings.owner is None
        assert settings.price_per_unit == 100
        assert settings.max_supply == 1000
        assert settings.log_level == "INFO"

    def test_from_env(self, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("COLLECTIBLE_BRAND", "0xbrand")
        monkeypatch.setenv("COLLECTIBLE_OWNER", "0xadmin")
        monkeypatch.setenv("COLLECTIBLE_PRICE", "250")
        monkeypatch.setenv("COLLECTIBLE_MAX_SUPPLY", "42")
        monkeypatch.setenv("COLLECTIBLE_LOG_LEVEL", "debug")

        settings = Settings.from_env()

        assert settings.brand == "0xbrand"
        assert settings.owner == "0xadmin"
        assert settings.price_per_unit == 250
        assert settings.max_supply == 42
        assert settings.log_level == "DEBUG"

    def test_rejects_non_positive_supply(self, monkeypatch):
        """Test that invalid sale parameters fail at load time."""
        monkeypatch.setenv("COLLECTIBLE_MAX_SUPPLY", "0")

        with pytest.raises(ValidationError):
            Settings.from_env()
