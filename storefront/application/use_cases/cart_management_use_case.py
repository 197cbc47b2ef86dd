"""
Cart management use case

The cart engine: the session's record of which item and size variant it
intends to buy, mirrored to local storage on every mutation and synced to
the server cart while a user is signed in.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Set

from storefront.application.dtos.cart_dtos import CartLineInfo, CartSummary
from storefront.domain.entities.catalog_item import CatalogItem
from storefront.domain.pricing import (
    ZERO,
    CartTotals,
    PricingPolicy,
    compute_totals,
    is_counted,
    validate_promo,
)
from storefront.domain.repositories.cart_repository import CartRepository
from storefront.domain.repositories.catalog_repository import CatalogRepository
from storefront.domain.repositories.local_cart_store import LocalCartStore
from storefront.domain.value_objects.cart_key import CartKey
from storefront.domain.value_objects.product_id import ProductId
from storefront.infrastructure.configuration.config import Settings, get_config
from storefront.infrastructure.utilities.constants import CatalogSettings, PromoRule
from storefront.infrastructure.utilities.exceptions import (
    DatabaseError,
    InvalidPromoCodeError,
    ItemNotFoundError,
    PromoMinimumNotMetError,
)

# Server sync failures are logged and absorbed
SYNC_ERRORS = (DatabaseError, OSError)


class CartEngine:
    """
    Cart engine for one session.

    Handles:
    1. Adding and removing lines keyed by (item, variant)
    2. Mirroring every change to the local store
    3. Fire-and-forget server sync while signed in (full snapshot, last write wins)
    4. Server-wins reconciliation on login
    5. Promo codes and derived totals
    """

    def __init__(
        self,
        catalog_repository: CatalogRepository,
        cart_repository: CartRepository,
        local_store: LocalCartStore,
        config: Optional[Settings] = None,
        user_id: Optional[str] = None,
    ):
        self._catalog_repository = catalog_repository
        self._cart_repository = cart_repository
        self._local_store = local_store
        self._policy = PricingPolicy.from_settings(config or get_config())
        self._user_id = user_id
        self._lines: Dict[CartKey, int] = local_store.load_lines()
        self._promo_code: Optional[str] = local_store.load_promo()
        self._catalog: Dict[str, CatalogItem] = {}
        self._missing_items: Set[str] = set()
        self._sync_task: Optional[asyncio.Task] = None
        self._pending_tasks: Set[asyncio.Task] = set()
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def is_authenticated(self) -> bool:
        return self._user_id is not None

    @property
    def lines(self) -> Dict[CartKey, int]:
        return dict(self._lines)

    @property
    def promo_code(self) -> Optional[str]:
        return self._promo_code

    @property
    def catalog(self) -> Dict[str, CatalogItem]:
        return dict(self._catalog)

    @property
    def policy(self) -> PricingPolicy:
        return self._policy

    def is_empty(self) -> bool:
        return not self._lines

    def quantity(self, item_id: str, variant: str = CatalogSettings.DEFAULT_VARIANT) -> int:
        return self._lines.get(CartKey(item_id, variant), 0)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add_line(self, item_id: str, variant: str = CatalogSettings.DEFAULT_VARIANT) -> bool:
        """
        Add one unit of ``item_id`` in ``variant``.

        The item is re-read from the catalog first. Missing items, items not
        in stock and disabled variants are refused without raising.

        Returns:
            True when the line was incremented.
        """
        key = CartKey(item_id, variant)
        try:
            item = await self._catalog_repository.get_item(ProductId(key.item_id))
        except ItemNotFoundError:
            self._missing_items.add(key.item_id)
            self._logger.info("🚫 ADD REFUSED: %s is not in the catalog", key)
            return False

        self._catalog[item.id] = item
        self._missing_items.discard(item.id)
        if not item.is_purchasable(key.variant):
            self._logger.info("🚫 ADD REFUSED: %s is not purchasable (status=%s)", key, item.status)
            return False

        self._lines[key] = self._lines.get(key, 0) + 1
        self._logger.debug("🛒 ADDED: %s → %d", key, self._lines[key])
        self._persist()
        return True

    async def remove_line(self, item_id: str, variant: str = CatalogSettings.DEFAULT_VARIANT) -> None:
        """Remove one unit; the line disappears at zero. Unknown lines are ignored."""
        key = CartKey(item_id, variant)
        quantity = self._lines.get(key)
        if quantity is None:
            return

        if quantity <= 1:
            del self._lines[key]
        else:
            self._lines[key] = quantity - 1
        self._logger.debug("🛒 REMOVED: %s → %d", key, self._lines.get(key, 0))
        self._persist()

    async def clear(self) -> None:
        """Empty the cart locally and, when signed in, on the server"""
        self._lines = {}
        self._local_store.clear_lines()
        if self.is_authenticated:
            self._schedule(self._push_clear(self._user_id))
        self._logger.info("🧹 CART CLEARED")

    async def restore(self) -> CartTotals:
        """
        Load catalog entries for lines restored from the local store.

        Totals are only trustworthy once every line's item has been looked
        up, so a session resumed from local storage awaits this before
        showing prices. The stored promo is re-validated here.
        """
        await self._load_items(self._unresolved_item_ids())
        self._logger.info("♻️ CART RESTORED: %d lines, promo %s", len(self._lines), self._promo_code)
        return self.get_totals()

    async def refresh_catalog(self) -> List[CartKey]:
        """
        Reload the catalog and prune lines that are no longer purchasable.

        Returns:
            The keys that were removed.
        """
        items = await self._catalog_repository.list_items()
        self._catalog = {item.id: item for item in items}
        self._missing_items = set()

        pruned = [
            key
            for key in self._lines
            if key.item_id not in self._catalog
            or not self._catalog[key.item_id].is_purchasable(key.variant)
        ]
        for key in pruned:
            del self._lines[key]

        if pruned:
            self._logger.info("✂️ PRUNED %d stale lines: %s", len(pruned), ", ".join(map(str, pruned)))
            self._persist()
        return pruned

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    async def login(self, user_id: str) -> Dict[CartKey, int]:
        """
        Attach the session to ``user_id`` and reconcile with the server cart.

        The server cart wins: its lines are kept when still purchasable and
        lines that only exist locally are dropped. If the server cart cannot
        be read, the local snapshot is kept as is.
        """
        self._user_id = user_id
        self._cancel_sync()

        try:
            server_lines = await self._cart_repository.get_cart(user_id)
        except SYNC_ERRORS as e:
            self._logger.warning("⚠️ LOGIN SYNC FAILED for %s, keeping local cart: %s", user_id, e)
            return self.lines

        await self._load_items({key.item_id for key in server_lines})

        merged = {
            key: quantity
            for key, quantity in server_lines.items()
            if quantity > 0
            and key.item_id in self._catalog
            and self._catalog[key.item_id].is_purchasable(key.variant)
        }
        discarded = [key for key in self._lines if key not in server_lines]
        if discarded:
            self._logger.info(
                "🔀 LOGIN MERGE: discarding %d local-only lines for %s", len(discarded), user_id
            )

        self._lines = merged
        self._local_store.save_lines(self._lines)
        if merged != server_lines:
            self._schedule_sync()
        self._logger.info("🔑 LOGGED IN: %s with %d lines", user_id, len(merged))
        return self.lines

    def logout(self) -> None:
        """Detach the user; the local cart stays as it is"""
        self._logger.info("👋 LOGGED OUT: %s", self._user_id)
        self._user_id = None

    # ------------------------------------------------------------------
    # Promo codes and totals
    # ------------------------------------------------------------------

    async def apply_promo_code(self, code: str) -> PromoRule:
        """
        Apply a promo code against the current subtotal.

        Items of lines not yet looked up are loaded first so the subtotal
        covers the whole cart.

        Raises:
            InvalidPromoCodeError: unknown code.
            PromoMinimumNotMetError: subtotal below the code's minimum.

        In both cases any previously applied code is cleared.
        """
        await self._load_items(self._unresolved_item_ids())
        subtotal = compute_totals(self._lines, self._catalog, None, self._policy).subtotal
        try:
            rule = validate_promo(code, subtotal)
        except (InvalidPromoCodeError, PromoMinimumNotMetError) as e:
            self._logger.info("🏷️ PROMO REJECTED: %s", e)
            self.clear_promo()
            raise

        self._promo_code = rule.code
        self._local_store.save_promo(rule.code)
        self._logger.info("🏷️ PROMO APPLIED: %s (%s%%)", rule.code, rule.discount_percent)
        return rule

    def clear_promo(self) -> None:
        self._promo_code = None
        self._local_store.clear_promo()

    def get_totals(self) -> CartTotals:
        """
        Recompute totals; a promo the subtotal no longer qualifies for is dropped.

        Until every line's item has been looked up (see ``restore``) the
        stored promo is kept, since the subtotal is still partial.
        """
        totals = compute_totals(self._lines, self._catalog, self._promo_code, self._policy)
        if totals.promo_invalidated and not self._unresolved_item_ids():
            self._logger.info("🏷️ PROMO INVALIDATED: %s", self._promo_code)
            self.clear_promo()
        return totals

    def get_subtotal(self):
        return self.get_totals().subtotal

    def get_total_savings(self):
        return self.get_totals().savings

    def get_final_amount(self):
        return self.get_totals().final_amount

    def get_summary(self) -> CartSummary:
        """Lines priced against the catalog snapshot plus totals"""
        line_infos = []
        for key, quantity in self._lines.items():
            item = self._catalog.get(key.item_id)
            unit_price = item.price_for(key.variant) if item else None
            counted = is_counted(key, self._catalog)
            line_infos.append(
                CartLineInfo(
                    item_id=key.item_id,
                    variant=key.variant,
                    variant_label=CatalogSettings.VARIANT_LABELS.get(key.variant, key.variant),
                    name=item.name if item else "",
                    quantity=quantity,
                    unit_price=unit_price,
                    market_price=item.market_price_for(key.variant) if item else None,
                    line_total=unit_price * quantity if counted else ZERO,
                    counted=counted,
                    image=item.image if item else "",
                )
            )
        return CartSummary(lines=line_infos, totals=self.get_totals(), user_id=self._user_id)

    # ------------------------------------------------------------------
    # Server sync
    # ------------------------------------------------------------------

    async def wait_for_sync(self) -> None:
        """Wait until every scheduled server write has finished or been cancelled"""
        while self._pending_tasks:
            await asyncio.gather(*list(self._pending_tasks), return_exceptions=True)

    def _persist(self) -> None:
        self._local_store.save_lines(self._lines)
        if self.is_authenticated:
            self._schedule_sync()

    def _schedule_sync(self) -> None:
        self._schedule(self._push_lines(self._user_id, dict(self._lines)))

    def _schedule(self, coroutine) -> None:
        # A newer write supersedes whatever is still in flight
        self._cancel_sync()
        task = asyncio.create_task(coroutine)
        self._sync_task = task
        self._pending_tasks.add(task)
        task.add_done_callback(self._pending_tasks.discard)

    def _cancel_sync(self) -> None:
        if self._sync_task is not None and not self._sync_task.done():
            self._sync_task.cancel()
        self._sync_task = None

    async def _push_lines(self, user_id: str, snapshot: Dict[CartKey, int]) -> None:
        try:
            await self._cart_repository.put_cart(user_id, snapshot)
        except SYNC_ERRORS as e:
            self._logger.warning("⚠️ CART SYNC FAILED for %s: %s", user_id, e)

    async def _push_clear(self, user_id: str) -> None:
        try:
            await self._cart_repository.clear_cart(user_id)
        except SYNC_ERRORS as e:
            self._logger.warning("⚠️ CART CLEAR SYNC FAILED for %s: %s", user_id, e)

    def _unresolved_item_ids(self) -> Set[str]:
        return {
            key.item_id
            for key in self._lines
            if key.item_id not in self._catalog and key.item_id not in self._missing_items
        }

    async def _load_items(self, item_ids) -> None:
        for item_id in item_ids:
            try:
                item = await self._catalog_repository.get_item(ProductId(item_id))
            except ItemNotFoundError:
                self._catalog.pop(item_id, None)
                self._missing_items.add(item_id)
                continue
            self._catalog[item.id] = item
            self._missing_items.discard(item.id)
