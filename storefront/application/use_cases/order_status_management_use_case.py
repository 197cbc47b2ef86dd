"""
Order Status Management Use Case

Operator-driven status changes, order deletion and order queries.
"""

import logging
from typing import List, Optional

from storefront.application.dtos.order_dtos import OrderInfo
from storefront.domain.entities.order_entity import OrderStatus, StatusActor, allowed_transitions
from storefront.domain.repositories.order_repository import OrderRepository
from storefront.domain.value_objects.order_id import OrderId
from storefront.infrastructure.logging.logging_config import get_structured_logger
from storefront.infrastructure.utilities.exceptions import (
    InvalidStatusTransitionError,
    OrderDeletionNotAllowedError,
    ValidationError,
)

audit_logger = get_structured_logger("storefront.audit.orders")


def _parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError as e:
        raise ValidationError(f"Unknown order status: {value}", field="status") from e


class OrderStatusManagementUseCase:
    """Use case for managing order status transitions"""

    def __init__(self, order_repository: OrderRepository):
        self._order_repository = order_repository
        self._logger = logging.getLogger(self.__class__.__name__)

    async def update_order_status(self, order_id: str, new_status) -> OrderInfo:
        """
        Move an order to ``new_status`` on behalf of an operator.

        Only forward moves along confirmed → packing → out-for-delivery →
        delivered, or cancellation before packing, are accepted. Payment
        outcomes are recorded by payment verification, not here.

        Raises:
            OrderNotFoundError: no such order.
            InvalidStatusTransitionError: the move is not allowed.
        """
        new_status = _parse_status(new_status)
        self._logger.info("📝 STATUS UPDATE: Order %s → %s", order_id, new_status.value)

        order = await self._order_repository.get_order(OrderId(order_id))
        allowed = allowed_transitions(order.status, StatusActor.OPERATOR)
        if new_status not in allowed:
            raise InvalidStatusTransitionError(
                order.status.value, new_status.value, [status.value for status in allowed]
            )

        updated = await self._order_repository.update_order_status(OrderId(order_id), new_status)
        audit_logger.info(
            "order_status_changed",
            order_id=order_id,
            old_status=order.status.value,
            new_status=new_status.value,
        )
        self._logger.info(
            "✅ STATUS UPDATED: Order #%s %s → %s", order_id, order.status.value, new_status.value
        )
        return OrderInfo.from_order(updated)

    async def delete_order(self, order_id: str) -> None:
        """
        Permanently delete a delivered order.

        Raises:
            OrderDeletionNotAllowedError: the order is not delivered; it is
                left untouched.
        """
        order = await self._order_repository.get_order(OrderId(order_id))
        if not order.is_deletable:
            raise OrderDeletionNotAllowedError(order_id, order.status.value)

        await self._order_repository.delete_order(OrderId(order_id))
        audit_logger.info("order_deleted", order_id=order_id, user_id=order.user_id)

    async def get_order(self, order_id: str) -> OrderInfo:
        order = await self._order_repository.get_order(OrderId(order_id))
        return OrderInfo.from_order(order)

    async def list_orders(self, status=None) -> List[OrderInfo]:
        """All orders newest first, optionally only those in ``status``"""
        status_filter: Optional[OrderStatus] = _parse_status(status) if status else None
        orders = await self._order_repository.list_orders(status_filter)
        self._logger.info(
            "📊 FOUND %d ORDERS with status %s", len(orders), status_filter.value if status_filter else "any"
        )
        return [OrderInfo.from_order(order) for order in orders]

    async def list_user_orders(self, user_id: str) -> List[OrderInfo]:
        """A customer's own orders, newest first"""
        orders = await self._order_repository.list_orders_by_user(user_id)
        return [OrderInfo.from_order(order) for order in orders]
