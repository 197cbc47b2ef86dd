"""
Cart DTOs

Data Transfer Objects for cart-related operations.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from storefront.domain.pricing import CartTotals


@dataclass
class CartLineInfo:
    """One cart line priced against the current catalog"""

    item_id: str
    variant: str
    variant_label: str
    name: str
    quantity: int
    unit_price: Optional[Decimal]
    market_price: Optional[Decimal]
    line_total: Decimal
    counted: bool  # in stock and priced, so included in totals
    image: str = ""


@dataclass
class CartSummary:
    """Cart summary information"""

    lines: List[CartLineInfo] = field(default_factory=list)
    totals: Optional[CartTotals] = None
    user_id: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.lines
