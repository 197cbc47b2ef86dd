"""
Cart pricing

Pure totals computation shared by the cart engine and the order assembler.
Nothing here reads configuration or storage; callers pass the cart lines, a
catalog snapshot, the stored promo code and a pricing policy.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Optional

from storefront.domain.entities.catalog_item import CatalogItem
from storefront.domain.value_objects.cart_key import CartKey
from storefront.infrastructure.utilities.constants import (
    PricingSettings,
    PromoRule,
    PromoSettings,
)
from storefront.infrastructure.utilities.exceptions import (
    InvalidPromoCodeError,
    PromoMinimumNotMetError,
)

ZERO = Decimal("0")


def quantize_amount(value: Decimal) -> Decimal:
    """Round a money amount to two decimal places, half up"""
    return Decimal(value).quantize(PricingSettings.AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)


def normalize_promo_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def lookup_promo(code: Optional[str]) -> Optional[PromoRule]:
    """Case-insensitive lookup in the promo table"""
    return PromoSettings.PROMO_CODES.get(normalize_promo_code(code))


def validate_promo(code: Optional[str], subtotal: Decimal) -> PromoRule:
    """
    Resolve a promo code against the current subtotal.

    Raises:
        InvalidPromoCodeError: the code is not in the table.
        PromoMinimumNotMetError: the subtotal is below the code's minimum.
    """
    rule = lookup_promo(code)
    if rule is None:
        raise InvalidPromoCodeError(code or "")
    if subtotal < rule.min_subtotal:
        raise PromoMinimumNotMetError(rule.code, rule.min_subtotal)
    return rule


@dataclass(frozen=True)
class PricingPolicy:
    """Delivery fee and per-tax rate applied to a subtotal"""

    delivery_fee: Decimal = Decimal("18")
    tax_rate_percent: Decimal = Decimal("2.5")

    @classmethod
    def from_settings(cls, settings) -> "PricingPolicy":
        return cls(
            delivery_fee=Decimal(settings.delivery_fee),
            tax_rate_percent=Decimal(settings.tax_rate_percent),
        )


@dataclass(frozen=True)
class CartTotals:
    """Derived money values for one cart state"""

    subtotal: Decimal
    savings: Decimal
    delivery_fee: Decimal
    sgst: Decimal
    cgst: Decimal
    discount: Decimal
    final_amount: Decimal
    item_count: int = 0
    promo_code: Optional[str] = None
    discount_percent: Decimal = ZERO
    promo_invalidated: bool = False

    @property
    def tax_total(self) -> Decimal:
        return self.sgst + self.cgst


def is_counted(key: CartKey, catalog: Mapping[str, CatalogItem]) -> bool:
    """A line counts toward totals when its item is in stock and priced for the variant"""
    item = catalog.get(key.item_id)
    return item is not None and item.is_in_stock and item.price_for(key.variant) is not None


def compute_totals(
    lines: Mapping[CartKey, int],
    catalog: Mapping[str, CatalogItem],
    promo_code: Optional[str] = None,
    policy: Optional[PricingPolicy] = None,
) -> CartTotals:
    """
    Compute subtotal, savings, taxes, delivery fee, discount and final amount.

    Lines whose item is missing from ``catalog`` or not in stock are left out
    of every sum. A promo code that is unknown or whose minimum exceeds the
    subtotal yields no discount and sets ``promo_invalidated``.
    """
    policy = policy or PricingPolicy()

    subtotal = ZERO
    savings = ZERO
    item_count = 0
    for key, quantity in lines.items():
        if quantity <= 0 or not is_counted(key, catalog):
            continue
        item = catalog[key.item_id]
        price = item.price_for(key.variant)
        market_price = item.market_price_for(key.variant)
        subtotal += price * quantity
        savings += (market_price - price) * quantity
        item_count += quantity

    subtotal = quantize_amount(subtotal)
    savings = quantize_amount(savings)

    rule = None
    promo_invalidated = False
    if normalize_promo_code(promo_code):
        rule = lookup_promo(promo_code)
        if rule is None or subtotal < rule.min_subtotal:
            rule = None
            promo_invalidated = True

    discount_percent = rule.discount_percent if rule else ZERO
    discount = quantize_amount(subtotal * discount_percent / PricingSettings.PERCENT_DIVISOR)

    if subtotal == ZERO:
        delivery_fee = quantize_amount(ZERO)
    else:
        delivery_fee = quantize_amount(policy.delivery_fee)

    tax = quantize_amount(subtotal * policy.tax_rate_percent / PricingSettings.PERCENT_DIVISOR)
    final_amount = quantize_amount(subtotal + delivery_fee + tax + tax - discount)

    return CartTotals(
        subtotal=subtotal,
        savings=savings,
        delivery_fee=delivery_fee,
        sgst=tax,
        cgst=tax,
        discount=discount,
        final_amount=final_amount,
        item_count=item_count,
        promo_code=rule.code if rule else None,
        discount_percent=discount_percent,
        promo_invalidated=promo_invalidated,
    )
