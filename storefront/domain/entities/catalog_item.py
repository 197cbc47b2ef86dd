# pylint: disable=too-many-instance-attributes
"""
Catalog Item Entity - what the storefront can sell and at what price
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional

from storefront.infrastructure.utilities.constants import CatalogSettings
from storefront.infrastructure.utilities.exceptions import StaleCatalogError


def _to_decimal_map(values: Optional[Dict[str, Any]]) -> Dict[str, Decimal]:
    return {
        variant: Decimal(str(amount))
        for variant, amount in (values or {}).items()
        if amount is not None
    }


@dataclass
class CatalogItem:
    """
    Catalog entry with per-variant pricing.

    ``prices`` and ``market_prices`` are keyed by variant (``g250``, ``g500``,
    ``kg1``); ``quantity_options`` says which variants are currently enabled.
    """

    id: str
    name: str
    status: str = CatalogSettings.STATUS_IN_STOCK
    prices: Dict[str, Decimal] = field(default_factory=dict)
    market_prices: Dict[str, Decimal] = field(default_factory=dict)
    quantity_options: Dict[str, bool] = field(default_factory=dict)
    image: str = ""
    description: str = ""
    category: str = ""

    def __post_init__(self):
        if not self.id:
            raise ValueError("Catalog item id cannot be empty")
        if self.status not in CatalogSettings.ITEM_STATUSES:
            raise ValueError(f"Unknown catalog status: {self.status}")

        self.prices = _to_decimal_map(self.prices)
        self.market_prices = _to_decimal_map(self.market_prices)
        for variant, price in self.prices.items():
            if price < 0:
                raise ValueError(f"Price for {variant} cannot be negative")

    @property
    def is_in_stock(self) -> bool:
        return self.status == CatalogSettings.STATUS_IN_STOCK

    def is_variant_enabled(self, variant: str) -> bool:
        return bool(self.quantity_options.get(variant, False))

    def price_for(self, variant: str) -> Optional[Decimal]:
        return self.prices.get(variant)

    def market_price_for(self, variant: str) -> Optional[Decimal]:
        """Market price for a variant, falling back to the selling price"""
        market_price = self.market_prices.get(variant)
        if market_price is None:
            return self.price_for(variant)
        return market_price

    def is_purchasable(self, variant: str) -> bool:
        """In stock, variant enabled and priced"""
        return (
            self.is_in_stock
            and self.is_variant_enabled(variant)
            and self.price_for(variant) is not None
        )

    def ensure_purchasable(self, variant: str) -> None:
        if not self.is_purchasable(variant):
            raise StaleCatalogError(self.id, variant)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CatalogItem":
        """
        Build from a catalog payload.

        Accepts both snake_case and the camelCase keys used by the catalog API
        (``marketPrices``, ``quantityOptions``). Payloads with a single
        ``price`` get a one-variant price map on the default variant, which
        is then enabled.
        """
        default_variant = CatalogSettings.DEFAULT_VARIANT
        prices = data.get("prices")
        if not prices and data.get("price") is not None:
            prices = {default_variant: data["price"]}
        market_prices = data.get("market_prices", data.get("marketPrices"))
        if not market_prices and data.get("marketPrice") is not None:
            market_prices = {default_variant: data["marketPrice"]}
        quantity_options = data.get("quantity_options", data.get("quantityOptions"))
        if quantity_options is None:
            quantity_options = {default_variant: True}

        return cls(
            id=str(data.get("id") or data.get("_id") or ""),
            name=data.get("name", ""),
            status=data.get("status") or CatalogSettings.STATUS_IN_STOCK,
            prices=prices or {},
            market_prices=market_prices or {},
            quantity_options=dict(quantity_options),
            image=data.get("image", ""),
            description=data.get("description", ""),
            category=data.get("category", ""),
        )
