"""Tests for configuration validation"""
import pytest

from gramps_memory import config
from gramps_memory.exceptions import ConfigurationError


class TestDefaults:
    """Test default configuration values"""

    def test_defaults_are_usable(self):
        """Test the shipped defaults pass validation"""
        assert config.DB_POOL_MIN_SIZE >= 1
        assert config.DB_POOL_MAX_SIZE >= config.DB_POOL_MIN_SIZE
        assert config.LEDGER_WRITE_RETRIES >= 0
        config.validate_config()


class TestValidateConfig:
    """Test validate_config"""

    def test_missing_database_url(self, monkeypatch):
        monkeypatch.setattr(config, "DATABASE_URL", "")

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == "DATABASE_URL"

    def test_invalid_pool_sizes(self, monkeypatch):
        """Test max pool size below min size is rejected"""
        monkeypatch.setattr(config, "DB_POOL_MIN_SIZE", 5)
        monkeypatch.setattr(config, "DB_POOL_MAX_SIZE", 2)

        with pytest.raises(ConfigurationError):
            config.validate_config()

    def test_negative_ledger_retries(self, monkeypatch):
        monkeypatch.setattr(config, "LEDGER_WRITE_RETRIES", -1)

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == "LEDGER_WRITE_RETRIES"

    def test_unknown_timezone(self, monkeypatch):
        monkeypatch.setattr(config, "STREAK_TIMEZONE", "Mars/Olympus_Mons")

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate_config()

        assert exc_info.value.config_key == "STREAK_TIMEZONE"

    def test_valid_timezone(self, monkeypatch):
        monkeypatch.setattr(config, "STREAK_TIMEZONE", "Europe/Berlin")

        config.validate_config()
