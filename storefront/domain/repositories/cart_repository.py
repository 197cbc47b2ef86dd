"""
Cart repository interface

Server-side cart storage. Writes are full replacements of the user's cart
(last write wins), never deltas.
"""

from abc import ABC, abstractmethod
from typing import Dict

from storefront.domain.value_objects.cart_key import CartKey


class CartRepository(ABC):
    """Repository interface for cart operations"""

    @abstractmethod
    async def get_cart(self, user_id: str) -> Dict[CartKey, int]:
        """Get the saved cart for a user, empty when none"""

    @abstractmethod
    async def put_cart(self, user_id: str, lines: Dict[CartKey, int]) -> None:
        """Replace the user's saved cart with exactly ``lines``"""

    @abstractmethod
    async def clear_cart(self, user_id: str) -> None:
        """Empty the user's saved cart"""
