"""
Order creation use case

Turns a cart into an immutable order snapshot. Prices are re-read from the
catalog at submission time and lines that are no longer purchasable are left
out of the order and reported back to the caller.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from storefront.application.dtos.order_dtos import OrderInfo
from storefront.application.use_cases.cart_management_use_case import CartEngine
from storefront.domain.entities.address import Address
from storefront.domain.entities.catalog_item import CatalogItem
from storefront.domain.entities.order_entity import (
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentInfo,
    PaymentMethod,
    PaymentStatus,
)
from storefront.domain.pricing import compute_totals
from storefront.domain.repositories.catalog_repository import CatalogRepository
from storefront.domain.repositories.order_repository import OrderRepository
from storefront.domain.value_objects.cart_key import CartKey
from storefront.domain.value_objects.order_id import OrderId
from storefront.domain.value_objects.product_id import ProductId
from storefront.infrastructure.logging.logging_config import get_structured_logger
from storefront.infrastructure.utilities.exceptions import (
    AuthenticationRequiredError,
    EmptyCartError,
    ItemNotFoundError,
    StaleCatalogError,
)

audit_logger = get_structured_logger("storefront.audit.orders")


class OrderAssembler:
    """
    Use case for placing orders

    Handles:
    1. Cart and address validation
    2. Re-deriving prices from the catalog
    3. Writing the order snapshot
    4. Clearing the cart once the order is stored

    Placement is serialized per user so two checkouts from the same account
    cannot interleave.
    """

    def __init__(self, catalog_repository: CatalogRepository, order_repository: OrderRepository):
        self._catalog_repository = catalog_repository
        self._order_repository = order_repository
        self._user_locks: Dict[str, asyncio.Lock] = {}
        self._lock_holders: Dict[str, int] = {}
        self._logger = logging.getLogger(self.__class__.__name__)

    @asynccontextmanager
    async def _user_lock(self, user_id: str):
        """Hold the per-user lock; the entry is dropped once nobody holds or awaits it"""
        lock = self._user_locks.setdefault(user_id, asyncio.Lock())
        self._lock_holders[user_id] = self._lock_holders.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_holders[user_id] -= 1
            if not self._lock_holders[user_id]:
                del self._lock_holders[user_id]
                del self._user_locks[user_id]

    async def place_order(
        self,
        cart: CartEngine,
        address: Address,
        payment_method: PaymentMethod,
        gateway_order_id: Optional[str] = None,
    ) -> OrderInfo:
        """
        Place an order for the signed-in owner of ``cart``.

        Cash orders are confirmed straight away and the cart is cleared.
        Online orders wait for payment verification, which clears the cart.

        Raises:
            AuthenticationRequiredError: the cart has no signed-in user.
            EmptyCartError: nothing in the cart, or nothing left after
                excluding lines that are no longer purchasable.
            InvalidAddressError: a required address field is missing or
                the phone or email is malformed.
        """
        if not cart.is_authenticated:
            raise AuthenticationRequiredError("place_order")
        user_id = cart.user_id
        payment_method = PaymentMethod(payment_method)

        async with self._user_lock(user_id):
            self._logger.info(
                "🛒 PLACE ORDER: User %s, %d lines, %s", user_id, len(cart.lines), payment_method.value
            )
            if cart.is_empty():
                raise EmptyCartError()
            address = address.validate()

            included, catalog, excluded = await self._rederive_lines(cart.lines)
            if not included:
                self._logger.warning("🚫 ORDER ABORTED: every line of %s is unavailable", user_id)
                raise EmptyCartError()
            if excluded:
                self._logger.warning(
                    "⚠️ EXCLUDED %d unavailable lines from order: %s",
                    len(excluded),
                    ", ".join(map(str, excluded)),
                )

            order = self._build_order(
                user_id, included, catalog, cart, address, payment_method, gateway_order_id
            )
            order_id = await self._order_repository.create_order(order)

            audit_logger.info(
                "order_placed",
                order_id=order_id.value,
                user_id=user_id,
                amount=str(order.amount),
                payment_method=payment_method.value,
                excluded=[str(key) for key in excluded],
            )

            if payment_method == PaymentMethod.COD:
                await self._clear_cart(cart)

        return OrderInfo.from_order(order, excluded)

    async def _rederive_lines(self, lines: Dict[CartKey, int]):
        """Split cart lines into purchasable ones and those to leave out"""
        catalog: Dict[str, CatalogItem] = {}
        included: Dict[CartKey, int] = {}
        excluded: List[CartKey] = []

        for key, quantity in lines.items():
            try:
                item = catalog.get(key.item_id)
                if item is None:
                    item = await self._catalog_repository.get_item(ProductId(key.item_id))
                    catalog[item.id] = item
                item.ensure_purchasable(key.variant)
            except (ItemNotFoundError, StaleCatalogError):
                excluded.append(key)
                continue
            included[key] = quantity

        return included, catalog, excluded

    def _build_order(
        self, user_id, lines, catalog, cart, address, payment_method, gateway_order_id
    ) -> Order:
        totals = compute_totals(lines, catalog, cart.promo_code, cart.policy)
        items = tuple(
            OrderLineItem(
                item_id=key.item_id,
                name=catalog[key.item_id].name,
                price=catalog[key.item_id].price_for(key.variant),
                market_price=catalog[key.item_id].market_price_for(key.variant),
                quantity=quantity,
                size=key.variant,
                image=catalog[key.item_id].image,
            )
            for key, quantity in lines.items()
        )

        if payment_method == PaymentMethod.COD:
            status = OrderStatus.CONFIRMED
            payment = PaymentInfo(PaymentMethod.COD, PaymentStatus.PENDING)
        else:
            status = OrderStatus.AWAITING_PAYMENT
            payment = PaymentInfo(
                PaymentMethod.ONLINE, PaymentStatus.INITIATED, gateway_order_id=gateway_order_id
            )

        return Order(
            id=OrderId.generate().value,
            user_id=user_id,
            items=items,
            subtotal=totals.subtotal,
            sgst=totals.sgst,
            cgst=totals.cgst,
            delivery_fee=totals.delivery_fee,
            discount=totals.discount,
            savings=totals.savings,
            amount=totals.final_amount,
            address=address,
            payment=payment,
            status=status,
            promo_code=totals.promo_code,
        )

    async def _clear_cart(self, cart: CartEngine) -> None:
        # The order is already stored; a failed clear must not undo it
        try:
            await cart.clear()
            cart.clear_promo()
        except OSError as e:
            self._logger.error("💥 CART CLEAR FAILED after order placement: %s", e)
