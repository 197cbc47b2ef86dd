"""
Tests for configuration management
"""

import os
from decimal import Decimal
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from storefront.infrastructure.configuration.config import (
    ConfigValidator,
    Settings,
    get_config,
    reset_config,
)


class TestSettings:
    """Test Settings model"""

    def test_settings_from_environment(self):
        settings = Settings()
        assert settings.database_url == "sqlite:///:memory:"
        assert settings.environment == "test"
        assert settings.log_level == "DEBUG"
        assert settings.payment_key_secret == "test_key_secret"

    def test_pricing_defaults(self):
        settings = Settings()
        assert settings.delivery_fee == Decimal("18")
        assert settings.tax_rate_percent == Decimal("2.5")
        assert settings.currency == "INR"

    def test_pricing_overrides(self):
        with patch.dict(os.environ, {"DELIVERY_FEE": "25", "TAX_RATE_PERCENT": "9"}):
            settings = Settings()
        assert settings.delivery_fee == Decimal("25")
        assert settings.tax_rate_percent == Decimal("9")

    def test_log_level_is_normalized(self):
        assert Settings(log_level="warning").log_level == "WARNING"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"log_level": "LOUD"},
            {"currency": "RUPEES"},
            {"delivery_fee": Decimal("-1")},
            {"tax_rate_percent": Decimal("101")},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValidationError):
            Settings(**kwargs)


class TestGetConfig:
    def test_cached_instance(self):
        assert get_config() is get_config()

    def test_reset_rereads_environment(self):
        first = get_config()
        with patch.dict(os.environ, {"ENVIRONMENT": "staging"}):
            reset_config()
            assert get_config().environment == "staging"
        assert get_config() is not first


class TestConfigValidator:
    """Production readiness checks"""

    def test_valid_test_configuration(self, settings):
        validator = ConfigValidator(settings)

        assert validator.validate_all()
        report = validator.get_validation_report()
        assert report["valid"]
        assert report["config_summary"]["database_type"] == "sqlite"
        assert report["config_summary"]["payments_configured"]

    def test_missing_secret_warns_outside_production(self):
        validator = ConfigValidator(Settings(environment="development", payment_key_secret=""))

        assert validator.validate_all()
        assert any("PAYMENT_KEY_SECRET" in warning for warning in validator.warnings)

    def test_missing_secret_fails_in_production(self):
        validator = ConfigValidator(
            Settings(
                environment="production",
                payment_key_secret="",
                database_url="postgresql://db/storefront",
            )
        )

        assert not validator.validate_all()
        assert validator.errors == ["PAYMENT_KEY_SECRET is required in production"]

    def test_unknown_environment_warns(self):
        validator = ConfigValidator(Settings(environment="qa"))

        validator.validate_all()

        assert "Unknown environment: qa" in validator.warnings

    def test_debug_in_production_warns(self):
        validator = ConfigValidator(Settings(environment="production", log_level="DEBUG"))

        validator.validate_all()

        assert any("DEBUG" in warning for warning in validator.warnings)

    def test_uses_global_config_by_default(self):
        validator = ConfigValidator()

        assert validator.validate_all()
        assert validator.config is get_config()
