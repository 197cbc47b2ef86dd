"""
Local cart store interface

The per-session mirror of the cart (the browser's local storage in a web
client). It is the source of truth for the current session; the server copy
is synced from it.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from storefront.domain.value_objects.cart_key import CartKey


class LocalCartStore(ABC):
    """Synchronous key/value mirror of the cart lines and the applied promo code"""

    @abstractmethod
    def load_lines(self) -> Dict[CartKey, int]:
        """Last saved cart lines, empty when nothing is stored"""

    @abstractmethod
    def save_lines(self, lines: Dict[CartKey, int]) -> None:
        """Overwrite the stored cart lines"""

    @abstractmethod
    def clear_lines(self) -> None:
        """Remove the stored cart lines"""

    @abstractmethod
    def load_promo(self) -> Optional[str]:
        """Stored promo code string, if any"""

    @abstractmethod
    def save_promo(self, code: str) -> None:
        """Store the applied promo code string"""

    @abstractmethod
    def clear_promo(self) -> None:
        """Remove the stored promo code"""
