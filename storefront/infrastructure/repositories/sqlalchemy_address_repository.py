"""
SQLAlchemy Address Repository
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from storefront.domain.entities.address import Address, GeoLocation
from storefront.domain.repositories.address_repository import AddressRepository
from storefront.infrastructure.database.models import SavedAddress
from storefront.infrastructure.repositories.session_handler import (
    SessionFactory,
    get_or_create_customer,
    managed_session,
)
from storefront.infrastructure.utilities.exceptions import DatabaseError


def _to_entity(row: SavedAddress) -> Address:
    location = None
    if row.latitude is not None and row.longitude is not None:
        location = GeoLocation(row.latitude, row.longitude, row.location_address or "")
    return Address(
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        phone=row.phone,
        street=row.street,
        city=row.city,
        state=row.state,
        country=row.country,
        zipcode=row.zipcode,
        location=location,
        is_default=row.is_default,
        id=row.id,
    )


def _to_row(user_id: str, position: int, address: Address) -> SavedAddress:
    return SavedAddress(
        id=address.id,
        customer_id=user_id,
        position=position,
        first_name=address.first_name,
        last_name=address.last_name,
        email=address.email,
        phone=address.phone,
        street=address.street,
        city=address.city,
        state=address.state,
        country=address.country,
        zipcode=address.zipcode,
        latitude=address.location.latitude if address.location else None,
        longitude=address.location.longitude if address.location else None,
        location_address=address.location.address if address.location else None,
        is_default=address.is_default,
    )


class SQLAlchemyAddressRepository(AddressRepository):
    """SQLAlchemy implementation of address repository"""

    def __init__(self, session_factory: Optional[SessionFactory] = None):
        self._session_factory = session_factory
        self._logger = logging.getLogger(self.__class__.__name__)

    async def get_addresses(self, user_id: str) -> List[Address]:
        try:
            with managed_session(self._session_factory) as session:
                rows = (
                    session.query(SavedAddress)
                    .filter(SavedAddress.customer_id == user_id)
                    .order_by(SavedAddress.position)
                    .all()
                )
                return [_to_entity(row) for row in rows]
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR loading addresses for %s: %s", user_id, e)
            raise DatabaseError(f"Failed to load addresses for {user_id}", "get_addresses") from e

    async def replace_addresses(self, user_id: str, addresses: List[Address]) -> List[Address]:
        """Delete and rewrite the user's address list in a single transaction"""
        for address in addresses:
            if not address.id:
                address.id = uuid.uuid4().hex
        try:
            with managed_session(self._session_factory) as session:
                get_or_create_customer(session, user_id)
                session.query(SavedAddress).filter(SavedAddress.customer_id == user_id).delete()
                session.flush()
                for position, address in enumerate(addresses):
                    session.add(_to_row(user_id, position, address))
            self._logger.info("💾 ADDRESSES SAVED: User %s, %d addresses", user_id, len(addresses))
            return addresses
        except SQLAlchemyError as e:
            self._logger.error("💥 DATABASE ERROR saving addresses for %s: %s", user_id, e)
            raise DatabaseError(
                f"Failed to save addresses for {user_id}", "replace_addresses"
            ) from e
