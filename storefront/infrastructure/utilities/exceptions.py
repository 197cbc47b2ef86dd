"""
Custom exceptions for the storefront
"""

import logging
import traceback

from .constants import ErrorCodes

logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    """Base exception for the storefront"""

    def __init__(self, message: str, user_message: str = None, error_code: str = None):
        super().__init__(message)
        self.user_message = user_message or "An error occurred. Please try again."
        self.error_code = error_code or ErrorCodes.GENERAL_ERROR


class NotFoundError(StorefrontError):
    """Referenced item, order or address does not exist"""

    def __init__(self, message: str, user_message: str = None):
        super().__init__(message, user_message or message, ErrorCodes.NOT_FOUND)


class ItemNotFoundError(NotFoundError):
    """Catalog item not found"""

    def __init__(self, item_id: str):
        super().__init__(
            f"Catalog item not found: {item_id}",
            "Sorry, this product is no longer available.",
        )
        self.item_id = item_id


class OrderNotFoundError(NotFoundError):
    """Order not found"""

    def __init__(self, order_id: str):
        super().__init__(f"Order not found: {order_id}", f"Order #{order_id} not found.")
        self.order_id = order_id


class AddressNotFoundError(NotFoundError):
    """Saved address not found"""

    def __init__(self, address_id: str):
        super().__init__(f"Address not found: {address_id}", "Address not found.")
        self.address_id = address_id


class ValidationError(StorefrontError):
    """Input validation errors"""

    def __init__(self, message: str, field: str = None):
        super().__init__(
            message, message, ErrorCodes.VALIDATION_ERROR  # Validation errors are user-friendly
        )
        self.field = field


class InvalidAddressError(ValidationError):
    """Address is missing a required field or has a malformed phone/email"""


class BusinessLogicError(StorefrontError):
    """Business rule violations"""

    def __init__(self, message: str, user_message: str = None, error_code: str = None):
        super().__init__(message, user_message or message, error_code or ErrorCodes.BUSINESS_ERROR)


class EmptyCartError(BusinessLogicError):
    """Cart is empty when operation requires items"""

    def __init__(self):
        super().__init__(
            "Cart is empty",
            "Your cart is empty. Please add some items first.",
            ErrorCodes.EMPTY_CART,
        )


class StaleCatalogError(BusinessLogicError):
    """Item or variant is no longer purchasable"""

    def __init__(self, item_id: str, variant: str = None):
        detail = f"{item_id} ({variant})" if variant else item_id
        super().__init__(
            f"Catalog item no longer purchasable: {detail}",
            "This product is currently unavailable.",
            ErrorCodes.STALE_CATALOG,
        )
        self.item_id = item_id
        self.variant = variant


class InvalidPromoCodeError(BusinessLogicError):
    """Promo code does not exist"""

    def __init__(self, code: str):
        super().__init__(
            f"Invalid promo code: {code!r}", "Invalid promocode", ErrorCodes.INVALID_PROMO_CODE
        )
        self.code = code


class PromoMinimumNotMetError(BusinessLogicError):
    """Cart subtotal is below the promo code's minimum"""

    def __init__(self, code: str, min_subtotal):
        super().__init__(
            f"Promo code {code} requires a subtotal of at least {min_subtotal}",
            f"This code is valid only for orders above {min_subtotal}",
            ErrorCodes.PROMO_MINIMUM_NOT_MET,
        )
        self.code = code
        self.min_subtotal = min_subtotal


class InvalidStatusTransitionError(BusinessLogicError):
    """Order status change not allowed from the current status"""

    def __init__(self, current_status: str, new_status: str, allowed=()):
        allowed_text = ", ".join(allowed) if allowed else "none"
        super().__init__(
            f"Invalid status transition: {current_status} -> {new_status}. "
            f"Valid transitions from {current_status}: {allowed_text}",
            error_code=ErrorCodes.INVALID_STATUS_TRANSITION,
        )
        self.current_status = current_status
        self.new_status = new_status


class OrderDeletionNotAllowedError(BusinessLogicError):
    """Only delivered orders may be deleted"""

    def __init__(self, order_id: str, status: str):
        super().__init__(
            f"Order {order_id} has status {status}; only delivered orders can be deleted",
            "Only delivered orders can be deleted",
            ErrorCodes.ORDER_DELETION_NOT_ALLOWED,
        )
        self.order_id = order_id
        self.status = status


class PaymentSignatureMismatchError(BusinessLogicError):
    """Gateway confirmation signature did not verify"""

    def __init__(self, order_id: str):
        super().__init__(
            f"Payment signature mismatch for order {order_id}",
            "Payment verification failed - invalid signature",
            ErrorCodes.PAYMENT_SIGNATURE_MISMATCH,
        )
        self.order_id = order_id


class PaymentConfigurationError(BusinessLogicError):
    """Payment verification attempted without a shared secret"""

    def __init__(self):
        super().__init__(
            "PAYMENT_KEY_SECRET is not configured",
            "Online payment is currently unavailable.",
            ErrorCodes.PAYMENT_CONFIGURATION,
        )


class AuthenticationRequiredError(BusinessLogicError):
    """Operation needs a signed-in user"""

    def __init__(self, operation: str):
        super().__init__(
            f"Authentication required for {operation}",
            "Please sign in to continue.",
            ErrorCodes.AUTHENTICATION_REQUIRED,
        )
        self.operation = operation


class DatabaseError(StorefrontError):
    """Database-related errors"""

    def __init__(self, message: str, operation: str = None, error_code: str = None):
        super().__init__(
            message,
            "Sorry, there was a problem with our system. Please try again in a moment.",
            error_code or ErrorCodes.DATABASE_ERROR,
        )
        self.operation = operation


class SyncFailureError(DatabaseError):
    """Server-side cart sync failed; transient and non-fatal"""

    def __init__(self, message: str, operation: str = None):
        super().__init__(message, operation, ErrorCodes.SYNC_FAILURE)


# pylint: disable=too-few-public-methods
class ErrorReporter:
    """Error reporting helpers"""

    @staticmethod
    def report_critical_error(error: Exception):
        """Report critical errors to the log with a traceback"""
        logger.critical(
            "CRITICAL ERROR: %s",
            error,
            extra={
                "error_type": type(error).__name__,
                "traceback": traceback.format_exc(),
            },
        )

    @staticmethod
    def report_business_error(error: StorefrontError, user_id: str = None):
        """Report business errors for analysis"""
        logger.info(
            "Business error: %s - %s",
            error.error_code,
            error,
            extra={
                "error_code": error.error_code,
                "user_id": user_id,
                "error_type": type(error).__name__,
            },
        )
