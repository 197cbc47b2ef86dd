# pylint: disable=too-many-instance-attributes
"""
Address Entity - a delivery address saved in a customer's address book
"""

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Optional

from storefront.domain.value_objects.email_address import EmailAddress
from storefront.domain.value_objects.phone_number import PhoneNumber
from storefront.infrastructure.utilities.constants import ValidationSettings
from storefront.infrastructure.utilities.exceptions import InvalidAddressError

# camelCase keys accepted from API payloads
_CAMEL_CASE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isDefault": "is_default",
    "_id": "id",
}


@dataclass(frozen=True)
class GeoLocation:
    """Optional map pin attached to an address"""

    latitude: float
    longitude: float
    address: str = ""

    def __post_init__(self):
        if not -90 <= self.latitude <= 90:
            raise ValueError("Latitude must be between -90 and 90")
        if not -180 <= self.longitude <= 180:
            raise ValueError("Longitude must be between -180 and 180")


@dataclass
class Address:
    """Delivery address"""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    zipcode: str = ""
    location: Optional[GeoLocation] = None
    is_default: bool = False
    id: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def validate(self) -> "Address":
        """
        Check required fields, phone and email.

        Returns a copy with whitespace stripped and the email lower-cased.

        Raises:
            InvalidAddressError: naming the first offending field.
        """
        for field_name in ValidationSettings.ADDRESS_REQUIRED_FIELDS:
            value = getattr(self, field_name)
            if not value or not str(value).strip():
                label = field_name.replace("_", " ").capitalize()
                raise InvalidAddressError(f"{label} is required", field=field_name)

        try:
            phone = PhoneNumber(self.phone)
        except ValueError as e:
            raise InvalidAddressError(str(e), field="phone") from e
        try:
            email = EmailAddress(self.email)
        except ValueError as e:
            raise InvalidAddressError(str(e), field="email") from e

        cleaned = {
            name: str(getattr(self, name)).strip()
            for name in ValidationSettings.ADDRESS_REQUIRED_FIELDS
        }
        cleaned["phone"] = phone.value
        cleaned["email"] = email.value
        return replace(self, **cleaned)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["location"] = asdict(self.location) if self.location else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Address":
        values = {_CAMEL_CASE_FIELDS.get(key, key): value for key, value in data.items()}
        location = values.get("location")
        if isinstance(location, dict):
            if location.get("latitude") is not None and location.get("longitude") is not None:
                location = GeoLocation(
                    latitude=float(location["latitude"]),
                    longitude=float(location["longitude"]),
                    address=location.get("address") or "",
                )
            else:
                location = None
        known = {f for f in cls.__dataclass_fields__}  # pylint: disable=no-member
        kwargs = {key: value for key, value in values.items() if key in known}
        kwargs["location"] = location
        if kwargs.get("id") is not None:
            kwargs["id"] = str(kwargs["id"])
        kwargs["is_default"] = bool(kwargs.get("is_default", False))
        return cls(**kwargs)


@dataclass
class AddressBook:
    """A customer's saved addresses with the single-default invariant"""

    user_id: str
    addresses: list = field(default_factory=list)

    @property
    def default(self) -> Optional[Address]:
        return next((a for a in self.addresses if a.is_default), None)

    def find(self, address_id: str) -> Optional[Address]:
        return next((a for a in self.addresses if a.id == address_id), None)

    def mark_default(self, address_id: str) -> None:
        for address in self.addresses:
            address.is_default = address.id == address_id

    def normalize_default(self) -> None:
        """Leave exactly one default when non-empty: keep the first flagged one, else the first"""
        if not self.addresses:
            return
        current = self.default or self.addresses[0]
        self.mark_default(current.id)
