"""
Application constants for the storefront

Centralizes magic numbers and fixed business tables so pricing, validation
and persistence code share one definition.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Final


class DatabaseSettings:
    """Database connection and pool configuration"""

    POOL_RECYCLE_SECONDS: Final[int] = 3600  # 1 hour
    CONNECTION_TIMEOUT_SECONDS: Final[int] = 30

    PRODUCTION_POOL_SIZE: Final[int] = 20
    PRODUCTION_MAX_OVERFLOW: Final[int] = 30

    DEVELOPMENT_POOL_SIZE: Final[int] = 5
    DEVELOPMENT_MAX_OVERFLOW: Final[int] = 10


class LoggingSettings:
    """Logging file sizes and rotation settings"""

    MAX_LOG_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10MB
    MAIN_LOG_BACKUP_COUNT: Final[int] = 10
    ERROR_LOG_BACKUP_COUNT: Final[int] = 10


class FileSettings:
    """File names used by logging and the local cart store"""

    MAIN_LOG_FILE: Final[str] = "storefront.log"
    ERROR_LOG_FILE: Final[str] = "storefront_errors.log"

    LOCAL_CART_FILE: Final[str] = "cartItems.json"
    LOCAL_PROMO_FILE: Final[str] = "appliedPromo.json"


class CatalogSettings:
    """Catalog vocabulary"""

    STATUS_IN_STOCK: Final[str] = "in-stock"
    STATUS_OUT_OF_STOCK: Final[str] = "out-of-stock"
    STATUS_COMING_SOON: Final[str] = "coming-soon"
    ITEM_STATUSES: Final[tuple] = (STATUS_IN_STOCK, STATUS_OUT_OF_STOCK, STATUS_COMING_SOON)

    DEFAULT_VARIANT: Final[str] = "g250"
    VARIANT_LABELS: Final[dict] = {
        "g250": "250 gm",
        "g500": "500 gm",
        "kg1": "1 kg",
    }

    # "itemId_variant" storage encoding of a cart key
    CART_KEY_SEPARATOR: Final[str] = "_"


class PricingSettings:
    """Monetary rounding"""

    AMOUNT_QUANTUM: Final[Decimal] = Decimal("0.01")
    PERCENT_DIVISOR: Final[Decimal] = Decimal("100")


@dataclass(frozen=True)
class PromoRule:
    """A single entry of the promo table"""

    code: str
    min_subtotal: Decimal
    discount_percent: Decimal
    description: str = ""


class PromoSettings:
    """Fixed promo code table, keyed by upper-case code"""

    PROMO_CODES: Final[dict] = {
        "ABOVE500": PromoRule(
            "ABOVE500", Decimal("500"), Decimal("5"), description="5% off orders above 500"
        ),
        "ABOVE1000": PromoRule(
            "ABOVE1000", Decimal("1000"), Decimal("10"), description="10% off orders above 1000"
        ),
    }


class ValidationSettings:
    """Input validation patterns"""

    PHONE_PATTERN: Final[str] = r"^\d{10}$"
    EMAIL_PATTERN: Final[str] = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
    ADDRESS_REQUIRED_FIELDS: Final[tuple] = (
        "first_name",
        "last_name",
        "email",
        "phone",
        "street",
        "city",
        "state",
        "country",
        "zipcode",
    )


class ErrorCodes:
    """Error codes attached to StorefrontError subclasses"""

    GENERAL_ERROR: Final[str] = "GENERAL_ERROR"
    NOT_FOUND: Final[str] = "NOT_FOUND"
    VALIDATION_ERROR: Final[str] = "VALIDATION_ERROR"
    BUSINESS_ERROR: Final[str] = "BUSINESS_ERROR"
    DATABASE_ERROR: Final[str] = "DATABASE_ERROR"
    SYNC_FAILURE: Final[str] = "SYNC_FAILURE"
    EMPTY_CART: Final[str] = "EMPTY_CART"
    STALE_CATALOG: Final[str] = "STALE_CATALOG"
    INVALID_PROMO_CODE: Final[str] = "INVALID_PROMO_CODE"
    PROMO_MINIMUM_NOT_MET: Final[str] = "PROMO_MINIMUM_NOT_MET"
    INVALID_STATUS_TRANSITION: Final[str] = "INVALID_STATUS_TRANSITION"
    ORDER_DELETION_NOT_ALLOWED: Final[str] = "ORDER_DELETION_NOT_ALLOWED"
    PAYMENT_SIGNATURE_MISMATCH: Final[str] = "PAYMENT_SIGNATURE_MISMATCH"
    PAYMENT_CONFIGURATION: Final[str] = "PAYMENT_CONFIGURATION"
    AUTHENTICATION_REQUIRED: Final[str] = "AUTHENTICATION_REQUIRED"
