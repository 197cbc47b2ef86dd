"""
Domain repository interfaces

Contains abstract repository interfaces that define contracts for data access.
These follow the Repository pattern and Dependency Inversion principle.
"""

from .address_repository import AddressRepository
from .cart_repository import CartRepository
from .catalog_repository import CatalogRepository
from .local_cart_store import LocalCartStore
from .order_repository import OrderRepository

__all__ = [
    "AddressRepository",
    "CartRepository",
    "CatalogRepository",
    "LocalCartStore",
    "OrderRepository",
]
