"""
SQLAlchemy implementation of CatalogRepository
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from storefront.domain.entities.catalog_item import CatalogItem
from storefront.domain.repositories.catalog_repository import CatalogRepository
from storefront.domain.value_objects.product_id import ProductId
from storefront.infrastructure.database.models import Product as SQLProduct
from storefront.infrastructure.repositories.session_handler import (
    SessionFactory,
    managed_session,
)
from storefront.infrastructure.utilities.exceptions import DatabaseError, ItemNotFoundError


def _to_entity(product: SQLProduct) -> CatalogItem:
    return CatalogItem(
        id=product.id,
        name=product.name,
        status=product.status,
        prices=dict(product.prices or {}),
        market_prices=dict(product.market_prices or {}),
        quantity_options=dict(product.quantity_options or {}),
        image=product.image or "",
        description=product.description or "",
        category=product.category or "",
    )


def _price_map(values) -> dict:
    # JSON columns cannot hold Decimal
    return {variant: str(amount) for variant, amount in values.items()}


class SQLAlchemyCatalogRepository(CatalogRepository):
    """SQLAlchemy implementation of catalog repository"""

    def __init__(self, session_factory: Optional[SessionFactory] = None):
        self._session_factory = session_factory
        self._logger = logging.getLogger(self.__class__.__name__)

    async def get_item(self, item_id: ProductId) -> CatalogItem:
        """Find catalog item by ID"""
        try:
            with managed_session(self._session_factory) as session:
                product = session.get(SQLProduct, item_id.value)
                item = _to_entity(product) if product is not None else None
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR loading item %s: %s", item_id.value, e)
            raise DatabaseError(f"Failed to load item {item_id.value}", "get_item") from e

        if item is None:
            raise ItemNotFoundError(item_id.value)
        return item

    async def list_items(self) -> List[CatalogItem]:
        """Every catalog item ordered by name"""
        try:
            with managed_session(self._session_factory) as session:
                products = session.query(SQLProduct).order_by(SQLProduct.name).all()
                return [_to_entity(product) for product in products]
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR listing catalog: %s", e)
            raise DatabaseError("Failed to list catalog", "list_items") from e

    async def save_item(self, item: CatalogItem) -> CatalogItem:
        """Insert or update a catalog item"""
        try:
            with managed_session(self._session_factory) as session:
                product = session.get(SQLProduct, item.id)
                if product is None:
                    product = SQLProduct(id=item.id)
                    session.add(product)
                product.name = item.name
                product.status = item.status
                product.prices = _price_map(item.prices)
                product.market_prices = _price_map(item.market_prices)
                product.quantity_options = dict(item.quantity_options)
                product.image = item.image
                product.description = item.description
                product.category = item.category
            self._logger.info("✅ CATALOG ITEM SAVED: %s", item.id)
            return item
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR saving item %s: %s", item.id, e)
            raise DatabaseError(f"Failed to save item {item.id}", "save_item") from e
