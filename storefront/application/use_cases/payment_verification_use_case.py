"""
Payment verification use case

Confirms or fails an online order from the gateway's signed callback.
"""

import hashlib
import hmac
import logging
from typing import Optional

from storefront.application.dtos.order_dtos import OrderInfo, PaymentVerificationRequest
from storefront.application.use_cases.cart_management_use_case import SYNC_ERRORS, CartEngine
from storefront.domain.entities.order_entity import (
    OrderStatus,
    PaymentInfo,
    PaymentMethod,
    PaymentStatus,
    StatusActor,
    allowed_transitions,
)
from storefront.domain.repositories.cart_repository import CartRepository
from storefront.domain.repositories.order_repository import OrderRepository
from storefront.domain.value_objects.order_id import OrderId
from storefront.infrastructure.configuration.config import Settings, get_config
from storefront.infrastructure.logging.logging_config import get_structured_logger
from storefront.infrastructure.utilities.exceptions import (
    InvalidStatusTransitionError,
    PaymentConfigurationError,
    PaymentSignatureMismatchError,
)

audit_logger = get_structured_logger("storefront.audit.payments")


def compute_signature(secret: str, gateway_order_id: str, gateway_payment_id: str) -> str:
    """Hex HMAC-SHA256 of ``"{gateway_order_id}|{gateway_payment_id}"``"""
    message = f"{gateway_order_id}|{gateway_payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


class PaymentVerificationUseCase:
    """Use case for verifying online payments"""

    def __init__(
        self,
        order_repository: OrderRepository,
        cart_repository: CartRepository,
        config: Optional[Settings] = None,
    ):
        self._order_repository = order_repository
        self._cart_repository = cart_repository
        self._config = config
        self._logger = logging.getLogger(self.__class__.__name__)

    async def verify_payment(
        self, request: PaymentVerificationRequest, cart: Optional[CartEngine] = None
    ) -> OrderInfo:
        """
        Check the gateway signature and record the outcome on the order.

        A valid signature confirms the order, completes the payment and
        clears the buyer's cart (the server copy, and ``cart`` when the
        buyer's session is at hand). An invalid one fails both.

        Raises:
            PaymentConfigurationError: no shared secret is configured.
            OrderNotFoundError: no such order.
            InvalidStatusTransitionError: the order is not awaiting payment.
            PaymentSignatureMismatchError: the signature did not verify; the
                order has already been moved to ``payment_failed``.
        """
        secret = (self._config or get_config()).payment_key_secret
        if not secret:
            raise PaymentConfigurationError()

        order_id = OrderId(request.order_id)
        order = await self._order_repository.get_order(order_id)
        allowed = allowed_transitions(order.status, StatusActor.SYSTEM)
        if not allowed:
            raise InvalidStatusTransitionError(
                order.status.value, OrderStatus.CONFIRMED.value, [status.value for status in allowed]
            )

        expected = compute_signature(secret, request.gateway_order_id, request.gateway_payment_id)
        if not hmac.compare_digest(expected, request.signature or ""):
            await self._order_repository.update_order_status(
                order_id,
                OrderStatus.PAYMENT_FAILED,
                PaymentInfo(
                    method=PaymentMethod.ONLINE,
                    status=PaymentStatus.FAILED,
                    gateway_order_id=request.gateway_order_id,
                ),
            )
            self._logger.warning("⚠️ PAYMENT SIGNATURE MISMATCH: Order %s", order_id.value)
            audit_logger.warning(
                "payment_failed", order_id=order_id.value, user_id=order.user_id
            )
            raise PaymentSignatureMismatchError(order_id.value)

        updated = await self._order_repository.update_order_status(
            order_id,
            OrderStatus.CONFIRMED,
            PaymentInfo(
                method=PaymentMethod.ONLINE,
                status=PaymentStatus.COMPLETED,
                transaction_id=request.gateway_payment_id,
                gateway_order_id=request.gateway_order_id,
            ),
        )
        audit_logger.info(
            "payment_completed",
            order_id=order_id.value,
            user_id=order.user_id,
            transaction_id=request.gateway_payment_id,
            amount=str(order.amount),
        )

        await self._clear_buyer_cart(order.user_id, cart)
        return OrderInfo.from_order(updated)

    async def _clear_buyer_cart(self, user_id: str, cart: Optional[CartEngine]) -> None:
        if cart is not None and cart.user_id == user_id:
            try:
                await cart.clear()
                cart.clear_promo()
            except OSError as e:
                self._logger.error("💥 LOCAL CART CLEAR FAILED for %s: %s", user_id, e)
            return

        try:
            await self._cart_repository.clear_cart(user_id)
        except SYNC_ERRORS as e:
            self._logger.error("💥 CART CLEAR FAILED after payment for %s: %s", user_id, e)
