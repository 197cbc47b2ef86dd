"""Order ID value object"""

import uuid
from dataclasses import dataclass


@dataclass(frozen=True)
class OrderId:
    """Order identifier value object"""

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("Order ID must be a non-empty string")

    @classmethod
    def generate(cls) -> "OrderId":
        return cls(uuid.uuid4().hex)

    def __str__(self) -> str:
        return self.value
