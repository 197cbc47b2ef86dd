"""
Domain value objects

Immutable, self-validating values used by entities and use cases.
"""

from .cart_key import CartKey
from .email_address import EmailAddress
from .order_id import OrderId
from .phone_number import PhoneNumber
from .product_id import ProductId

__all__ = ["CartKey", "EmailAddress", "OrderId", "PhoneNumber", "ProductId"]
