"""Unit tests for settings loading and validation."""

import pytest
from pydantic import ValidationError

from condoledger.services.config import Settings, get_settings


class TestSettings:
    """Tests for Settings defaults, environment and validation."""

    def test_defaults(self, monkeypatch):
        """Test defaults match the local accounting conventions."""
        monkeypatch.delenv("CONDOLEDGER_DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)

        assert settings.currency_code == "AOA"
        assert settings.decimal_separator == ","
        assert settings.thousands_separator == "."
        assert settings.fraction_digits == 2
        assert settings.mild_overdue_days == 15
        assert settings.moderate_overdue_days == 30
        assert settings.default_page_size == 20
        assert settings.database_url.startswith("sqlite")

    def test_environment_overrides(self, monkeypatch):
        """Test CONDOLEDGER_* variables override defaults."""
        monkeypatch.setenv("CONDOLEDGER_CURRENCY_CODE", "EUR")
        monkeypatch.setenv("CONDOLEDGER_MILD_OVERDUE_DAYS", "7")
        monkeypatch.setenv("CONDOLEDGER_DEFAULT_PAGE_SIZE", "50")

        settings = Settings(_env_file=None)

        assert settings.currency_code == "EUR"
        assert settings.mild_overdue_days == 7
        assert settings.default_page_size == 50

    def test_env_file(self, tmp_path):
        """Test values are read from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text("CONDOLEDGER_LOCALE=en_US\nCONDOLEDGER_LOG_LEVEL=debug\n")

        settings = Settings(_env_file=str(env_file))

        assert settings.locale == "en_US"
        assert settings.log_level == "DEBUG"

    def test_get_settings_applies_overrides(self):
        """Test explicit overrides win over the environment."""
        settings = get_settings(_env_file=None, fraction_digits=3)
        assert settings.fraction_digits == 3

    def test_identical_separators_rejected(self):
        """Test decimal and thousands separators must differ."""
        with pytest.raises(ValidationError, match="must differ"):
            Settings(_env_file=None, decimal_separator=".", thousands_separator=".")

    def test_multi_character_separator_rejected(self):
        """Test separators are single characters."""
        with pytest.raises(ValidationError, match="single character"):
            Settings(_env_file=None, thousands_separator="..")

    def test_unknown_locale_rejected(self):
        """Test the locale must be known to babel."""
        with pytest.raises(ValidationError, match="Unknown locale"):
            Settings(_env_file=None, locale="xx_NOPE")

    def test_bucket_order_enforced(self):
        """Test the moderate boundary cannot precede the mild one."""
        with pytest.raises(ValidationError, match="moderate_overdue_days"):
            Settings(_env_file=None, mild_overdue_days=20, moderate_overdue_days=10)

    def test_fraction_digits_bounds(self):
        """Test fraction digits are limited to 0..4."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, fraction_digits=5)
