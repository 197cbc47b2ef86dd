"""
Order Status Management Tests
"""

from dataclasses import replace
from unittest.mock import AsyncMock, MagicMock

import pytest

from storefront.application.use_cases.order_status_management_use_case import (
    OrderStatusManagementUseCase,
)
from storefront.domain.entities.order_entity import OrderStatus
from storefront.domain.value_objects.order_id import OrderId
from storefront.infrastructure.utilities.exceptions import (
    InvalidStatusTransitionError,
    OrderDeletionNotAllowedError,
    OrderNotFoundError,
    ValidationError,
)


@pytest.fixture
def order_repository():
    repo = MagicMock()
    repo.get_order = AsyncMock()
    repo.update_order_status = AsyncMock(
        side_effect=lambda order_id, status, payment=None: replace(
            repo.get_order.return_value, status=status
        )
    )
    repo.delete_order = AsyncMock(return_value=None)
    repo.list_orders = AsyncMock(return_value=[])
    repo.list_orders_by_user = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def use_case(order_repository):
    return OrderStatusManagementUseCase(order_repository)


class TestStatusTransitions:
    """Operator status moves"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.CONFIRMED, OrderStatus.PACKING),
            (OrderStatus.PACKING, OrderStatus.OUT_FOR_DELIVERY),
            (OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED),
            (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
            (OrderStatus.PENDING, OrderStatus.CANCELLED),
        ],
    )
    async def test_allowed_moves(self, use_case, order_repository, make_order, current, target):
        order_repository.get_order.return_value = make_order(status=current)

        info = await use_case.update_order_status("order-1", target.value)

        assert info.status == target.value
        order_repository.update_order_status.assert_awaited_once_with(OrderId("order-1"), target)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.CONFIRMED, OrderStatus.DELIVERED),
            (OrderStatus.PACKING, OrderStatus.CONFIRMED),
            (OrderStatus.PACKING, OrderStatus.CANCELLED),
            (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
            (OrderStatus.CANCELLED, OrderStatus.CONFIRMED),
            (OrderStatus.AWAITING_PAYMENT, OrderStatus.CONFIRMED),
        ],
    )
    async def test_rejected_moves(self, use_case, order_repository, make_order, current, target):
        order_repository.get_order.return_value = make_order(status=current)

        with pytest.raises(InvalidStatusTransitionError):
            await use_case.update_order_status("order-1", target)
        order_repository.update_order_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_status_is_rejected(self, use_case, order_repository):
        with pytest.raises(ValidationError) as exc_info:
            await use_case.update_order_status("order-1", "shipped")

        assert exc_info.value.field == "status"
        order_repository.get_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_order(self, use_case, order_repository):
        order_repository.get_order.side_effect = OrderNotFoundError("missing")

        with pytest.raises(OrderNotFoundError):
            await use_case.update_order_status("missing", OrderStatus.PACKING)


class TestOrderDeletion:
    """Only delivered orders can be deleted"""

    @pytest.mark.asyncio
    async def test_delete_delivered_order(self, use_case, order_repository, make_order):
        order_repository.get_order.return_value = make_order(status=OrderStatus.DELIVERED)

        await use_case.delete_order("order-1")

        order_repository.delete_order.assert_awaited_once_with(OrderId("order-1"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status", [OrderStatus.CONFIRMED, OrderStatus.PACKING, OrderStatus.CANCELLED]
    )
    async def test_delete_undelivered_order_is_refused(
        self, use_case, order_repository, make_order, status
    ):
        order_repository.get_order.return_value = make_order(status=status)

        with pytest.raises(OrderDeletionNotAllowedError):
            await use_case.delete_order("order-1")
        order_repository.delete_order.assert_not_awaited()


class TestOrderQueries:
    @pytest.mark.asyncio
    async def test_list_orders_with_filter(self, use_case, order_repository, make_order):
        order_repository.list_orders.return_value = [make_order(status=OrderStatus.PACKING)]

        orders = await use_case.list_orders("packing")

        order_repository.list_orders.assert_awaited_once_with(OrderStatus.PACKING)
        assert [order.status for order in orders] == ["packing"]

    @pytest.mark.asyncio
    async def test_list_orders_without_filter(self, use_case, order_repository):
        await use_case.list_orders()
        order_repository.list_orders.assert_awaited_once_with(None)

    @pytest.mark.asyncio
    async def test_list_user_orders(self, use_case, order_repository, make_order):
        order_repository.list_orders_by_user.return_value = [make_order(), make_order(order_id="order-2")]

        orders = await use_case.list_user_orders("user-1")

        assert [order.order_id for order in orders] == ["order-1", "order-2"]
        order_repository.list_orders_by_user.assert_awaited_once_with("user-1")

    @pytest.mark.asyncio
    async def test_get_order(self, use_case, order_repository, make_order):
        order_repository.get_order.return_value = make_order()

        info = await use_case.get_order("order-1")

        assert info.amount == make_order().amount
        assert info.items[0].total_price == info.subtotal
