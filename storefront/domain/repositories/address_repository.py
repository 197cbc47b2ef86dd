"""
Address repository interface
"""

from abc import ABC, abstractmethod
from typing import List

from storefront.domain.entities.address import Address


class AddressRepository(ABC):
    """Repository interface for a user's saved addresses"""

    @abstractmethod
    async def get_addresses(self, user_id: str) -> List[Address]:
        """Get the user's addresses in insertion order"""

    @abstractmethod
    async def replace_addresses(self, user_id: str, addresses: List[Address]) -> List[Address]:
        """Write the whole address list in one transaction; returns it with ids assigned"""
