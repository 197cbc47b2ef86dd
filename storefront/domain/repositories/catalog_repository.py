"""
Catalog repository interface

Defines the contract for reading the product catalog.
"""

from abc import ABC, abstractmethod
from typing import List

from storefront.domain.entities.catalog_item import CatalogItem
from storefront.domain.value_objects.product_id import ProductId


class CatalogRepository(ABC):
    """Repository interface for catalog operations"""

    @abstractmethod
    async def get_item(self, item_id: ProductId) -> CatalogItem:
        """Get a catalog item; raises ItemNotFoundError when absent"""

    @abstractmethod
    async def list_items(self) -> List[CatalogItem]:
        """Get every catalog item"""

    @abstractmethod
    async def save_item(self, item: CatalogItem) -> CatalogItem:
        """Insert or update a catalog item"""
