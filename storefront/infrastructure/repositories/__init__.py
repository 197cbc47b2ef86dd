"""
SQLAlchemy repository implementations
"""

from .sqlalchemy_address_repository import SQLAlchemyAddressRepository
from .sqlalchemy_cart_repository import SQLAlchemyCartRepository
from .sqlalchemy_catalog_repository import SQLAlchemyCatalogRepository
from .sqlalchemy_order_repository import SQLAlchemyOrderRepository

__all__ = [
    "SQLAlchemyAddressRepository",
    "SQLAlchemyCartRepository",
    "SQLAlchemyCatalogRepository",
    "SQLAlchemyOrderRepository",
]
