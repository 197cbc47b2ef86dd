"""
SQLAlchemy Order Repository

Concrete implementation of OrderRepository using SQLAlchemy ORM.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from storefront.domain.entities.address import Address
from storefront.domain.entities.order_entity import (
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentInfo,
    PaymentMethod,
    PaymentStatus,
)
from storefront.domain.repositories.order_repository import OrderRepository
from storefront.domain.value_objects.order_id import OrderId
from storefront.infrastructure.database.models import Order as SQLOrder
from storefront.infrastructure.repositories.session_handler import (
    SessionFactory,
    get_or_create_customer,
    managed_session,
)
from storefront.infrastructure.utilities.exceptions import DatabaseError, OrderNotFoundError


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo on the way back
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_entity(row: SQLOrder) -> Order:
    return Order(
        id=row.id,
        user_id=row.customer_id,
        items=tuple(OrderLineItem.from_dict(item) for item in row.items),
        subtotal=row.subtotal,
        sgst=row.sgst,
        cgst=row.cgst,
        delivery_fee=row.delivery_fee,
        discount=row.discount,
        savings=row.savings,
        amount=row.amount,
        address=Address.from_dict(row.address),
        payment=PaymentInfo(
            method=PaymentMethod(row.payment_method),
            status=PaymentStatus(row.payment_status),
            transaction_id=row.transaction_id,
            gateway_order_id=row.gateway_order_id,
        ),
        status=OrderStatus(row.status),
        promo_code=row.promo_code,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class SQLAlchemyOrderRepository(OrderRepository):
    """SQLAlchemy implementation of OrderRepository"""

    def __init__(self, session_factory: Optional[SessionFactory] = None):
        self._session_factory = session_factory
        self._logger = logging.getLogger(self.__class__.__name__)

    async def create_order(self, order: Order) -> OrderId:
        """Create a new order"""
        order_id = OrderId(order.id) if order.id else OrderId.generate()
        self._logger.info("📝 CREATE ORDER: Customer %s", order.user_id)
        try:
            with managed_session(self._session_factory) as session:
                get_or_create_customer(session, order.user_id)
                session.add(
                    SQLOrder(
                        id=order_id.value,
                        customer_id=order.user_id,
                        items=[item.to_dict() for item in order.items],
                        subtotal=order.subtotal,
                        sgst=order.sgst,
                        cgst=order.cgst,
                        delivery_fee=order.delivery_fee,
                        discount=order.discount,
                        savings=order.savings,
                        amount=order.amount,
                        promo_code=order.promo_code,
                        address=order.address.to_dict(),
                        payment_method=order.payment.method.value,
                        payment_status=order.payment.status.value,
                        transaction_id=order.payment.transaction_id,
                        gateway_order_id=order.payment.gateway_order_id,
                        status=order.status.value,
                        created_at=order.created_at,
                        updated_at=order.updated_at,
                    )
                )
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR creating order: %s", e)
            raise DatabaseError(f"Failed to create order: {e}", "create_order") from e

        self._logger.info("✅ ORDER CREATION SUCCESS: #%s", order_id.value)
        return order_id

    async def get_order(self, order_id: OrderId) -> Order:
        """Get order by ID"""
        try:
            with managed_session(self._session_factory) as session:
                row = session.get(SQLOrder, order_id.value)
                order = _to_entity(row) if row is not None else None
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR loading order %s: %s", order_id.value, e)
            raise DatabaseError(f"Failed to load order {order_id.value}", "get_order") from e

        if order is None:
            self._logger.info("📭 ORDER NOT FOUND: ID %s", order_id.value)
            raise OrderNotFoundError(order_id.value)
        return order

    async def update_order_status(
        self, order_id: OrderId, status: OrderStatus, payment: Optional[PaymentInfo] = None
    ) -> Order:
        """Update order status and, when given, the payment sub-record"""
        try:
            with managed_session(self._session_factory) as session:
                row = session.get(SQLOrder, order_id.value)
                if row is not None:
                    row.status = status.value
                    row.updated_at = datetime.now(timezone.utc)
                    if payment is not None:
                        row.payment_method = payment.method.value
                        row.payment_status = payment.status.value
                        row.transaction_id = payment.transaction_id
                        row.gateway_order_id = payment.gateway_order_id
                    session.flush()
                    order = _to_entity(row)
                else:
                    order = None
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR updating order %s: %s", order_id.value, e)
            raise DatabaseError(
                f"Failed to update order {order_id.value}", "update_order_status"
            ) from e

        if order is None:
            raise OrderNotFoundError(order_id.value)
        self._logger.info("✅ ORDER STATUS UPDATED: #%s → %s", order_id.value, status.value)
        return order

    async def delete_order(self, order_id: OrderId) -> None:
        """Delete an order"""
        try:
            with managed_session(self._session_factory) as session:
                deleted = session.query(SQLOrder).filter(SQLOrder.id == order_id.value).delete()
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR deleting order %s: %s", order_id.value, e)
            raise DatabaseError(f"Failed to delete order {order_id.value}", "delete_order") from e

        if not deleted:
            raise OrderNotFoundError(order_id.value)
        self._logger.info("🗑️ ORDER DELETED: #%s", order_id.value)

    async def list_orders(self, status: Optional[OrderStatus] = None) -> List[Order]:
        """Get all orders with optional status filtering"""
        try:
            with managed_session(self._session_factory) as session:
                query = session.query(SQLOrder)
                if status is not None:
                    query = query.filter(SQLOrder.status == status.value)
                rows = query.order_by(SQLOrder.created_at.desc()).all()
                return [_to_entity(row) for row in rows]
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR listing orders: %s", e)
            raise DatabaseError("Failed to list orders", "list_orders") from e

    async def list_orders_by_user(self, user_id: str) -> List[Order]:
        """Get a user's orders, newest first"""
        try:
            with managed_session(self._session_factory) as session:
                rows = (
                    session.query(SQLOrder)
                    .filter(SQLOrder.customer_id == user_id)
                    .order_by(SQLOrder.created_at.desc())
                    .all()
                )
                return [_to_entity(row) for row in rows]
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR listing orders for %s: %s", user_id, e)
            raise DatabaseError(
                f"Failed to list orders for {user_id}", "list_orders_by_user"
            ) from e
