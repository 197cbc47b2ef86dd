"""
SQLAlchemy Cart Repository

The server cart lives on the customer row as a JSON mapping of
``"itemId_variant"`` storage keys to quantities.
"""

import logging
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from storefront.domain.repositories.cart_repository import CartRepository
from storefront.domain.value_objects.cart_key import CartKey
from storefront.infrastructure.database.models import Customer
from storefront.infrastructure.repositories.session_handler import (
    SessionFactory,
    get_or_create_customer,
    managed_session,
)
from storefront.infrastructure.utilities.exceptions import SyncFailureError

logger = logging.getLogger(__name__)


def encode_cart(lines: Dict[CartKey, int]) -> Dict[str, int]:
    return {key.to_storage_key(): int(quantity) for key, quantity in lines.items() if quantity > 0}


def decode_cart(data: Optional[Dict[str, int]]) -> Dict[CartKey, int]:
    """Parse a stored cart; malformed entries are skipped with a warning"""
    lines: Dict[CartKey, int] = {}
    for storage_key, quantity in (data or {}).items():
        try:
            key = CartKey.from_storage_key(storage_key)
            quantity = int(quantity)
        except (TypeError, ValueError):
            logger.warning("⚠️ Skipping malformed server cart entry %r: %r", storage_key, quantity)
            continue
        if quantity > 0:
            lines[key] = quantity
    return lines


class SQLAlchemyCartRepository(CartRepository):
    """SQLAlchemy implementation of cart repository"""

    def __init__(self, session_factory: Optional[SessionFactory] = None):
        self._session_factory = session_factory
        self._logger = logging.getLogger(self.__class__.__name__)

    async def get_cart(self, user_id: str) -> Dict[CartKey, int]:
        """Get the saved cart for a user"""
        self._logger.info("🔍 GET CART: Fetching cart for user %s", user_id)
        try:
            with managed_session(self._session_factory) as session:
                customer = session.get(Customer, user_id)
                if customer is None:
                    self._logger.info("📭 NO CART: User %s has no cart", user_id)
                    return {}
                return decode_cart(customer.cart_data)
        except SQLAlchemyError as e:
            raise SyncFailureError(f"Failed to load cart for {user_id}: {e}", "get_cart") from e

    async def put_cart(self, user_id: str, lines: Dict[CartKey, int]) -> None:
        """Replace the saved cart with exactly ``lines``"""
        try:
            with managed_session(self._session_factory) as session:
                customer = get_or_create_customer(session, user_id)
                # Reassign rather than mutate so the JSON column is marked dirty
                customer.cart_data = encode_cart(lines)
            self._logger.info("💾 CART SAVED: User %s, %d lines", user_id, len(lines))
        except SQLAlchemyError as e:
            raise SyncFailureError(f"Failed to save cart for {user_id}: {e}", "put_cart") from e

    async def clear_cart(self, user_id: str) -> None:
        """Empty the saved cart"""
        try:
            with managed_session(self._session_factory) as session:
                customer = session.get(Customer, user_id)
                if customer is not None:
                    customer.cart_data = {}
            self._logger.info("🧹 CART CLEARED: User %s", user_id)
        except SQLAlchemyError as e:
            raise SyncFailureError(f"Failed to clear cart for {user_id}: {e}", "clear_cart") from e
