"""
Order repository interface

Defines the contract for order data access operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from storefront.domain.entities.order_entity import Order, OrderStatus, PaymentInfo
from storefront.domain.value_objects.order_id import OrderId


class OrderRepository(ABC):
    """Repository interface for order operations"""

    @abstractmethod
    async def create_order(self, order: Order) -> OrderId:
        """Persist a new order snapshot and return its id"""

    @abstractmethod
    async def get_order(self, order_id: OrderId) -> Order:
        """Get an order; raises OrderNotFoundError when absent"""

    @abstractmethod
    async def update_order_status(
        self, order_id: OrderId, status: OrderStatus, payment: Optional[PaymentInfo] = None
    ) -> Order:
        """Set the status (and optionally the payment sub-record) of an order"""

    @abstractmethod
    async def delete_order(self, order_id: OrderId) -> None:
        """Hard-delete an order; callers check the deletion rule first"""

    @abstractmethod
    async def list_orders(self, status: Optional[OrderStatus] = None) -> List[Order]:
        """All orders, newest first, optionally filtered by status"""

    @abstractmethod
    async def list_orders_by_user(self, user_id: str) -> List[Order]:
        """A user's orders, newest first"""
