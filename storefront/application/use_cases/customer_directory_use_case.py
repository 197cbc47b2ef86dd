"""
Customer directory use case

Operator view of who has ordered, built from the delivery addresses on
orders and keyed by email and phone.
"""

import logging
from typing import Dict, List

from storefront.application.dtos.order_dtos import CustomerSummary
from storefront.domain.repositories.order_repository import OrderRepository


class CustomerDirectoryUseCase:
    """Use case for listing customers"""

    def __init__(self, order_repository: OrderRepository):
        self._order_repository = order_repository
        self._logger = logging.getLogger(self.__class__.__name__)

    async def list_customers(self) -> List[CustomerSummary]:
        """
        One entry per ``email-phone`` pair seen on orders.

        Name, city and zipcode come from the customer's most recent order.
        Sorted by most recent order first.
        """
        orders = await self._order_repository.list_orders()
        customers: Dict[str, CustomerSummary] = {}

        for order in sorted(orders, key=lambda o: o.created_at):
            address = order.address
            key = f"{address.email}-{address.phone}"
            summary = customers.get(key)
            if summary is None:
                customers[key] = CustomerSummary(
                    name=address.full_name,
                    email=address.email,
                    phone=address.phone,
                    city=address.city,
                    zipcode=address.zipcode,
                    order_count=1,
                    first_order_at=order.created_at,
                    last_order_at=order.created_at,
                )
                continue

            summary.order_count += 1
            summary.last_order_at = order.created_at
            summary.name = address.full_name
            summary.city = address.city
            summary.zipcode = address.zipcode

        result = sorted(customers.values(), key=lambda c: c.last_order_at, reverse=True)
        self._logger.info("👥 CUSTOMER DIRECTORY: %d customers from %d orders", len(result), len(orders))
        return result
