"""
Database Infrastructure

Contains SQLAlchemy models and engine/session management.
"""

from .models import Base
from .models import Customer as CustomerModel
from .models import Order as OrderModel
from .models import Product as ProductModel
from .models import SavedAddress as SavedAddressModel
from .operations import DatabaseManager, get_db_manager, get_db_session, init_db, reset_db_manager

__all__ = [
    "Base",
    "CustomerModel",
    "DatabaseManager",
    "OrderModel",
    "ProductModel",
    "SavedAddressModel",
    "get_db_manager",
    "get_db_session",
    "init_db",
    "reset_db_manager",
]
