"""
Application DTOs
"""

from .cart_dtos import CartLineInfo, CartSummary
from .order_dtos import CustomerSummary, OrderInfo, OrderItemInfo, PaymentVerificationRequest

__all__ = [
    "CartLineInfo",
    "CartSummary",
    "CustomerSummary",
    "OrderInfo",
    "OrderItemInfo",
    "PaymentVerificationRequest",
]
