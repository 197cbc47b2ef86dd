"""
Phone Number value object

Represents a validated contact phone number.
"""

import re
from dataclasses import dataclass
from typing import ClassVar

from storefront.infrastructure.utilities.constants import ValidationSettings


@dataclass(frozen=True)
class PhoneNumber:
    """
    Phone number value object: exactly ten digits once surrounding
    whitespace is stripped
    """

    value: str

    PATTERN: ClassVar[str] = ValidationSettings.PHONE_PATTERN

    def __post_init__(self):
        """Validate phone number on creation"""
        if not self.value or not str(self.value).strip():
            raise ValueError("Phone number cannot be empty")

        normalized = str(self.value).strip()
        if not re.match(self.PATTERN, normalized):
            raise ValueError("Phone number must be 10 digits")

        # Use object.__setattr__ because the class is frozen
        object.__setattr__(self, "value", normalized)

    @classmethod
    def is_valid(cls, phone: str) -> bool:
        """Check a raw string without raising"""
        return bool(phone) and re.match(cls.PATTERN, str(phone).strip()) is not None

    def display_format(self) -> str:
        """Return phone number in display format, e.g. 98765-43210"""
        return f"{self.value[:5]}-{self.value[5:]}"

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"PhoneNumber('{self.value}')"
