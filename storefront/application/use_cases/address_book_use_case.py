"""
Address book use case

Saved delivery addresses per customer. Whenever the list is non-empty,
exactly one address is the default.
"""

import logging
import uuid
from dataclasses import replace
from typing import List, Optional

from storefront.domain.entities.address import Address, AddressBook
from storefront.domain.repositories.address_repository import AddressRepository
from storefront.infrastructure.utilities.exceptions import AddressNotFoundError


class AddressBookUseCase:
    """Use case for managing a customer's saved addresses"""

    def __init__(self, address_repository: AddressRepository):
        self._address_repository = address_repository
        self._logger = logging.getLogger(self.__class__.__name__)

    async def _load(self, user_id: str) -> AddressBook:
        return AddressBook(user_id, await self._address_repository.get_addresses(user_id))

    async def _save(self, book: AddressBook) -> List[Address]:
        book.normalize_default()
        return await self._address_repository.replace_addresses(book.user_id, book.addresses)

    def _require(self, book: AddressBook, address_id: str) -> Address:
        address = book.find(address_id)
        if address is None:
            raise AddressNotFoundError(address_id)
        return address

    async def list_addresses(self, user_id: str) -> List[Address]:
        return (await self._load(user_id)).addresses

    async def get_default(self, user_id: str) -> Optional[Address]:
        return (await self._load(user_id)).default

    async def add_address(self, user_id: str, address: Address) -> Address:
        """
        Validate and save a new address.

        The first address always becomes the default; a later one does when
        it is flagged ``is_default``, which clears the flag on the others.
        """
        new_address = replace(address.validate(), id=uuid.uuid4().hex)
        book = await self._load(user_id)
        book.addresses.append(new_address)
        if len(book.addresses) == 1 or new_address.is_default:
            book.mark_default(new_address.id)

        await self._save(book)
        self._logger.info("📍 ADDRESS ADDED: User %s, %s", user_id, new_address.id)
        return new_address

    async def update_address(self, user_id: str, address_id: str, address: Address) -> Address:
        """
        Replace the fields of an existing address.

        Setting ``is_default`` moves the default here. Clearing it on the
        current default hands the flag to the first other address; a sole
        address stays the default.
        """
        book = await self._load(user_id)
        current = self._require(book, address_id)
        updated = replace(address.validate(), id=address_id)

        index = book.addresses.index(current)
        book.addresses[index] = updated
        if updated.is_default:
            book.mark_default(address_id)
        elif current.is_default:
            successor = next((a for a in book.addresses if a.id != address_id), updated)
            book.mark_default(successor.id)

        await self._save(book)
        self._logger.info("📍 ADDRESS UPDATED: User %s, %s", user_id, address_id)
        return updated

    async def delete_address(self, user_id: str, address_id: str) -> None:
        """Delete an address; removing the default promotes the first remaining one"""
        book = await self._load(user_id)
        address = self._require(book, address_id)
        book.addresses.remove(address)
        if address.is_default and book.addresses:
            book.mark_default(book.addresses[0].id)

        await self._save(book)
        self._logger.info("🗑️ ADDRESS DELETED: User %s, %s", user_id, address_id)

    async def set_default(self, user_id: str, address_id: str) -> Address:
        book = await self._load(user_id)
        address = self._require(book, address_id)
        book.mark_default(address_id)
        await self._save(book)
        return address
