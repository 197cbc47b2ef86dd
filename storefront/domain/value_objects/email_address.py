"""
Email Address value object
"""

import re
from dataclasses import dataclass
from typing import ClassVar

from storefront.infrastructure.utilities.constants import ValidationSettings


@dataclass(frozen=True)
class EmailAddress:
    """Email address with a basic ``local@domain.tld`` check, stored lower-cased"""

    value: str

    PATTERN: ClassVar[str] = ValidationSettings.EMAIL_PATTERN

    def __post_init__(self):
        if not self.value or not str(self.value).strip():
            raise ValueError("Email cannot be empty")

        cleaned = str(self.value).strip()
        if not re.match(self.PATTERN, cleaned):
            raise ValueError("Invalid email format")

        object.__setattr__(self, "value", cleaned.lower())

    @classmethod
    def is_valid(cls, email: str) -> bool:
        return bool(email) and re.match(cls.PATTERN, str(email).strip()) is not None

    def __str__(self) -> str:
        return self.value
