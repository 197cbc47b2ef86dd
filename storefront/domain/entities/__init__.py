"""
Domain entities
"""

from .address import Address, AddressBook, GeoLocation
from .catalog_item import CatalogItem
from .order_entity import (
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentInfo,
    PaymentMethod,
    PaymentStatus,
    StatusActor,
)

__all__ = [
    "Address",
    "AddressBook",
    "CatalogItem",
    "GeoLocation",
    "Order",
    "OrderLineItem",
    "OrderStatus",
    "PaymentInfo",
    "PaymentMethod",
    "PaymentStatus",
    "StatusActor",
]
