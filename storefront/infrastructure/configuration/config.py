"""
Configuration management for the storefront
"""

import logging
import threading
from decimal import Decimal
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

VALID_ENVIRONMENTS = ("development", "test", "staging", "production")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Database configuration
    database_url: str = Field(
        default="sqlite:///data/storefront.db", description="Database connection URL"
    )

    # Application settings
    log_level: str = Field(default="INFO", description="Logging level")
    environment: str = Field(default="development", description="Application environment")
    log_dir: str = Field(default="logs", description="Directory for rotating log files")

    # Pricing settings
    currency: str = Field(default="INR", description="Currency code")
    delivery_fee: Decimal = Field(default=Decimal("18"), ge=0, description="Flat delivery fee")
    tax_rate_percent: Decimal = Field(
        default=Decimal("2.5"), ge=0, le=100, description="Rate of each of the two taxes (SGST, CGST)"
    )

    # Payment gateway shared secret used to verify confirmation signatures
    payment_key_secret: str = Field(default="", description="Payment gateway key secret")

    # Anonymous cart mirror
    local_cart_dir: str = Field(
        default="data/local_cart", description="Directory for the local cart snapshot"
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("currency")
    @classmethod
    def _check_currency(cls, value: str) -> str:
        if not value or len(value) != 3:
            raise ValueError("Currency must be a 3-letter code")
        return value.upper()


_settings_instance: Settings | None = None
_settings_lock = threading.Lock()


def get_config() -> Settings:
    """Get the global settings instance, ensuring thread safety."""
    global _settings_instance
    if _settings_instance is None:
        with _settings_lock:
            if _settings_instance is None:
                _settings_instance = Settings()
    return _settings_instance


def reset_config() -> None:
    """Drop the cached settings so the next get_config() re-reads the environment."""
    global _settings_instance
    with _settings_lock:
        _settings_instance = None


class ConfigValidator:
    """Validates configuration for production readiness"""

    def __init__(self, config: Settings | None = None):
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.config = config

    def validate_all(self) -> bool:
        """Run all validation checks and collect results"""
        if self.config is None:
            try:
                self.config = get_config()
            except ValueError as exc:
                self.errors.append(f"Failed to load configuration: {exc}")
                return False

        self._validate_database_configuration()
        self._validate_environment_settings()
        self._validate_payment_settings()

        self._log_validation_results()
        return not self.errors

    def get_validation_report(self) -> dict[str, object]:
        """Return detailed report after running `validate_all()`."""
        return {
            "valid": not self.errors,
            "errors": self.errors,
            "warnings": self.warnings,
            "config_summary": {
                "environment": self.config.environment if self.config else None,
                "database_type": (
                    "sqlite"
                    if self.config and self.config.database_url.startswith("sqlite")
                    else "other"
                ),
                "payments_configured": bool(self.config and self.config.payment_key_secret),
            },
        }

    def _validate_database_configuration(self):
        database_url = self.config.database_url
        if not database_url:
            self.errors.append("DATABASE_URL is required")
            return

        if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
            db_path = Path(database_url.replace("sqlite:///", "", 1))
            if not db_path.parent.exists():
                self.warnings.append(f"Database directory will be created: {db_path.parent}")

    def _validate_environment_settings(self):
        if self.config.environment not in VALID_ENVIRONMENTS:
            self.warnings.append(f"Unknown environment: {self.config.environment}")
        if self.config.environment == "production" and self.config.log_level == "DEBUG":
            self.warnings.append("DEBUG logging in production may impact performance")

    def _validate_payment_settings(self):
        if not self.config.payment_key_secret:
            if self.config.environment == "production":
                self.errors.append("PAYMENT_KEY_SECRET is required in production")
            else:
                self.warnings.append("PAYMENT_KEY_SECRET not set - online payments disabled")

    def _log_validation_results(self):
        if self.errors:
            logger.error(
                "Configuration validation failed",
                extra={"errors": self.errors, "warnings": self.warnings},
            )
        elif self.warnings:
            logger.warning(
                "Configuration validation passed with warnings", extra={"warnings": self.warnings}
            )
        else:
            logger.info("Configuration validation passed successfully")
