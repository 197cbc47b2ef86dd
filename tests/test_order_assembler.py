"""
Order Assembler Tests
"""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from storefront.application.use_cases.cart_management_use_case import CartEngine
from storefront.application.use_cases.order_creation_use_case import OrderAssembler
from storefront.domain.entities.order_entity import OrderStatus, PaymentMethod, PaymentStatus
from storefront.domain.value_objects.cart_key import CartKey
from storefront.domain.value_objects.order_id import OrderId
from storefront.infrastructure.storage.local_cart_storage import InMemoryCartStore
from storefront.infrastructure.utilities.exceptions import (
    AuthenticationRequiredError,
    DatabaseError,
    EmptyCartError,
    InvalidAddressError,
)


class FailingClearStore(InMemoryCartStore):
    """Local store whose clear fails, as a full or read-only disk would"""

    def clear_lines(self) -> None:
        raise OSError("disk unavailable")


@pytest.fixture
def order_repository():
    repo = MagicMock()
    repo.create_order = AsyncMock(side_effect=lambda order: OrderId(order.id))
    return repo


@pytest.fixture
def assembler(catalog_repository, order_repository):
    return OrderAssembler(catalog_repository, order_repository)


@pytest.fixture
def cart(catalog_repository, cart_repository, local_store, settings):
    return CartEngine(
        catalog_repository, cart_repository, local_store, config=settings, user_id="user-1"
    )


def _placed_order(order_repository):
    return order_repository.create_order.await_args.args[0]


class TestPlaceOrder:
    """place_order preconditions, snapshot and cart clearing"""

    @pytest.mark.asyncio
    async def test_cash_order_is_confirmed_and_clears_cart(
        self, assembler, cart, valid_address, order_repository, cart_repository, local_store
    ):
        await cart.add_line("itemA")
        await cart.add_line("itemA")

        info = await assembler.place_order(cart, valid_address, PaymentMethod.COD)
        await cart.wait_for_sync()

        order = _placed_order(order_repository)
        assert order.status == OrderStatus.CONFIRMED
        assert order.payment.status == PaymentStatus.PENDING
        assert order.subtotal == Decimal("200.00")
        assert order.savings == Decimal("40.00")
        assert order.amount == Decimal("228.00")
        assert order.address.email == "asha@example.com"

        assert info.order_id == order.id
        assert info.status == "confirmed"
        assert info.excluded_items == []

        assert cart.is_empty()
        assert local_store.load_lines() == {}
        cart_repository.clear_cart.assert_awaited_with("user-1")

    @pytest.mark.asyncio
    async def test_promo_is_applied_and_cleared(self, assembler, cart, valid_address, order_repository):
        await cart.add_line("itemC")
        await cart.add_line("itemC")
        await cart.apply_promo_code("ABOVE1000")

        await assembler.place_order(cart, valid_address, "COD")

        order = _placed_order(order_repository)
        assert order.promo_code == "ABOVE1000"
        assert order.discount == Decimal("100.00")
        assert order.amount == Decimal("968.00")
        assert cart.promo_code is None

    @pytest.mark.asyncio
    async def test_online_order_waits_for_payment(
        self, assembler, cart, valid_address, order_repository
    ):
        await cart.add_line("itemA")

        info = await assembler.place_order(
            cart, valid_address, PaymentMethod.ONLINE, gateway_order_id="gw_order_1"
        )

        order = _placed_order(order_repository)
        assert order.status == OrderStatus.AWAITING_PAYMENT
        assert order.payment.status == PaymentStatus.INITIATED
        assert info.gateway_order_id == "gw_order_1"
        # Cleared once the payment is verified
        assert cart.quantity("itemA") == 1

    @pytest.mark.asyncio
    async def test_out_of_stock_line_is_excluded(
        self, assembler, cart, valid_address, catalog, order_repository
    ):
        await cart.add_line("itemA")
        await cart.add_line("itemA")
        await cart.add_line("itemC")
        catalog["itemC"].status = "out-of-stock"

        info = await assembler.place_order(cart, valid_address, PaymentMethod.COD)

        order = _placed_order(order_repository)
        assert [item.item_id for item in order.items] == ["itemA"]
        assert order.subtotal == Decimal("200.00")
        assert order.amount == Decimal("228.00")
        assert info.excluded_items == [CartKey("itemC", "g250")]

    @pytest.mark.asyncio
    async def test_prices_are_read_at_submission(
        self, assembler, cart, valid_address, catalog, order_repository
    ):
        await cart.add_line("itemA")
        catalog["itemA"].prices["g250"] = Decimal("110")

        await assembler.place_order(cart, valid_address, PaymentMethod.COD)

        order = _placed_order(order_repository)
        assert order.items[0].price == Decimal("110")
        assert order.items[0].market_price == Decimal("120")
        assert order.subtotal == Decimal("110.00")

    @pytest.mark.asyncio
    async def test_empty_cart_is_rejected(self, assembler, cart, valid_address, order_repository):
        with pytest.raises(EmptyCartError):
            await assembler.place_order(cart, valid_address, PaymentMethod.COD)
        order_repository.create_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_all_lines_stale_is_rejected(
        self, assembler, cart, valid_address, catalog, order_repository
    ):
        await cart.add_line("itemA")
        del catalog["itemA"]

        with pytest.raises(EmptyCartError):
            await assembler.place_order(cart, valid_address, PaymentMethod.COD)
        order_repository.create_order.assert_not_awaited()
        assert cart.quantity("itemA") == 1

    @pytest.mark.asyncio
    async def test_invalid_address_is_rejected(self, assembler, cart, valid_address, order_repository):
        await cart.add_line("itemA")
        valid_address.phone = "12345"

        with pytest.raises(InvalidAddressError):
            await assembler.place_order(cart, valid_address, PaymentMethod.COD)
        order_repository.create_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_anonymous_cart_is_rejected(
        self, assembler, catalog_repository, cart_repository, settings, valid_address
    ):
        anonymous = CartEngine(catalog_repository, cart_repository, InMemoryCartStore(), config=settings)
        await anonymous.add_line("itemA")

        with pytest.raises(AuthenticationRequiredError):
            await assembler.place_order(anonymous, valid_address, PaymentMethod.COD)

    @pytest.mark.asyncio
    async def test_failed_order_write_keeps_cart(
        self, assembler, cart, valid_address, order_repository
    ):
        await cart.add_line("itemA")
        order_repository.create_order.side_effect = DatabaseError("insert failed", "create_order")

        with pytest.raises(DatabaseError):
            await assembler.place_order(cart, valid_address, PaymentMethod.COD)
        assert cart.quantity("itemA") == 1

    @pytest.mark.asyncio
    async def test_failed_cart_clear_still_places_order(
        self, assembler, catalog_repository, cart_repository, settings, valid_address, order_repository
    ):
        cart = CartEngine(
            catalog_repository, cart_repository, FailingClearStore(), config=settings, user_id="user-1"
        )
        await cart.add_line("itemA")

        info = await assembler.place_order(cart, valid_address, PaymentMethod.COD)

        assert info.status == "confirmed"
        order_repository.create_order.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_concurrent_placements_create_one_order(
        self, assembler, cart, valid_address, order_repository
    ):
        await cart.add_line("itemA")

        results = await asyncio.gather(
            assembler.place_order(cart, valid_address, PaymentMethod.COD),
            assembler.place_order(cart, valid_address, PaymentMethod.COD),
            return_exceptions=True,
        )

        assert sum(isinstance(result, EmptyCartError) for result in results) == 1
        order_repository.create_order.assert_awaited_once()
        assert assembler._user_locks == {}

    @pytest.mark.asyncio
    async def test_user_lock_is_released_after_placement(
        self, assembler, cart, valid_address, order_repository
    ):
        await cart.add_line("itemA")

        await assembler.place_order(cart, valid_address, PaymentMethod.COD)
        with pytest.raises(EmptyCartError):
            await assembler.place_order(cart, valid_address, PaymentMethod.COD)

        assert assembler._user_locks == {}
        assert assembler._lock_holders == {}
