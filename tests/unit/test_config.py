"""
Unit tests for configuration module.
"""

import pytest
from pydantic import ValidationError

from family_finance.config import Settings, get_settings


@pytest.mark.unit
class TestSettings:
    """Test Settings configuration class."""

    def test_default_settings(self):
        """Test default settings values."""
        settings = Settings()

        assert settings.app_name == "family-finance-analytics"
        assert settings.pattern_months == 3
        assert settings.recommendation_months == 6
        assert settings.forecast_months == 3
        assert settings.smart_budget_months == 12
        assert settings.forecast_split_months is None
        assert settings.default_extra_payment == 0.0

    def test_settings_from_env(self, monkeypatch):
        """Test settings loaded from environment variables."""
        monkeypatch.setenv("RECOMMENDATION_MONTHS", "12")
        monkeypatch.setenv("LOG_LEVEL", "warning")
        monkeypatch.setenv("ENVIRONMENT", "Staging")

        settings = Settings()

        assert settings.recommendation_months == 12
        assert settings.log_level == "WARNING"
        assert settings.environment == "staging"

    def test_invalid_log_level(self):
        """Test invalid log level raises validation error."""
        with pytest.raises(ValidationError):
            Settings(log_level="VERBOSE")

    def test_invalid_log_format(self):
        with pytest.raises(ValidationError):
            Settings(log_format="xml")

    def test_invalid_environment(self):
        """Test invalid environment raises validation error."""
        with pytest.raises(ValidationError):
            Settings(environment="qa")

    def test_window_months_must_be_positive(self):
        """Test analysis windows reject zero months."""
        with pytest.raises(ValidationError):
            Settings(pattern_months=0)
        with pytest.raises(ValidationError):
            Settings(forecast_split_months=0)

    def test_extra_payment_ladder_parsing(self):
        """Test the extra-payment ladder is parsed into floats."""
        settings = Settings(extra_payment_ladder="50000, 150000,,300000")

        assert settings.get_extra_payment_ladder() == [50000.0, 150000.0, 300000.0]

    def test_empty_extra_payment_ladder(self):
        settings = Settings(extra_payment_ladder="")

        assert settings.get_extra_payment_ladder() == []

    def test_environment_properties(self):
        """Test environment helper properties."""
        assert Settings(environment="development").is_development
        assert Settings(environment="testing").is_testing
        assert Settings(environment="production").is_production

    def test_get_settings_returns_instance(self):
        assert isinstance(get_settings(), Settings)
