"""
Cart key value object

Composite identity of a cart line: one catalog item in one size variant.
"""

from dataclasses import dataclass

from storefront.infrastructure.utilities.constants import CatalogSettings


@dataclass(frozen=True)
class CartKey:
    """(item_id, variant) pair with value equality and hashing"""

    item_id: str
    variant: str = CatalogSettings.DEFAULT_VARIANT

    def __post_init__(self):
        if not isinstance(self.item_id, str) or not self.item_id.strip():
            raise ValueError("Cart key item id cannot be empty")
        if not isinstance(self.variant, str) or not self.variant.strip():
            raise ValueError("Cart key variant cannot be empty")
        if CatalogSettings.CART_KEY_SEPARATOR in self.variant:
            raise ValueError(f"Variant cannot contain {CatalogSettings.CART_KEY_SEPARATOR!r}")

        object.__setattr__(self, "item_id", self.item_id.strip())
        object.__setattr__(self, "variant", self.variant.strip())

    @classmethod
    def from_storage_key(cls, key: str) -> "CartKey":
        """Parse the persisted ``"itemId_variant"`` form.

        The variant is everything after the last separator, so item ids may
        themselves contain the separator. A key without a separator maps to
        the default variant.
        """
        if not key:
            raise ValueError("Storage key cannot be empty")
        item_id, sep, variant = key.rpartition(CatalogSettings.CART_KEY_SEPARATOR)
        if not sep:
            return cls(key)
        return cls(item_id, variant)

    def to_storage_key(self) -> str:
        return f"{self.item_id}{CatalogSettings.CART_KEY_SEPARATOR}{self.variant}"

    def __str__(self) -> str:
        return self.to_storage_key()
