"""
Application use cases
"""

from .address_book_use_case import AddressBookUseCase
from .cart_management_use_case import CartEngine
from .customer_directory_use_case import CustomerDirectoryUseCase
from .order_creation_use_case import OrderAssembler
from .order_status_management_use_case import OrderStatusManagementUseCase
from .payment_verification_use_case import PaymentVerificationUseCase

__all__ = [
    "AddressBookUseCase",
    "CartEngine",
    "CustomerDirectoryUseCase",
    "OrderAssembler",
    "OrderStatusManagementUseCase",
    "PaymentVerificationUseCase",
]
