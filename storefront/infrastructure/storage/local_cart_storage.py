"""
Local cart stores

``InMemoryCartStore`` keeps the session mirror in process memory;
``JsonFileCartStore`` writes it as two small JSON documents, one for the cart
lines and one for the applied promo code, the same split a browser client
keeps in local storage.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from storefront.domain.repositories.local_cart_store import LocalCartStore
from storefront.domain.value_objects.cart_key import CartKey
from storefront.infrastructure.utilities.constants import FileSettings

logger = logging.getLogger(__name__)


class InMemoryCartStore(LocalCartStore):
    """Process-local cart mirror"""

    def __init__(self):
        self._lines: Dict[CartKey, int] = {}
        self._promo: Optional[str] = None

    def load_lines(self) -> Dict[CartKey, int]:
        return dict(self._lines)

    def save_lines(self, lines: Dict[CartKey, int]) -> None:
        self._lines = dict(lines)

    def clear_lines(self) -> None:
        self._lines = {}

    def load_promo(self) -> Optional[str]:
        return self._promo

    def save_promo(self, code: str) -> None:
        self._promo = code

    def clear_promo(self) -> None:
        self._promo = None


class JsonFileCartStore(LocalCartStore):
    """
    Cart mirror persisted under a directory.

    A missing or unreadable file reads as empty; the mirror is never worth
    failing a cart operation over.
    """

    def __init__(self, directory: str):
        self._directory = Path(directory)
        self._lines_path = self._directory / FileSettings.LOCAL_CART_FILE
        self._promo_path = self._directory / FileSettings.LOCAL_PROMO_FILE

    def load_lines(self) -> Dict[CartKey, int]:
        data = self._read(self._lines_path)
        if not isinstance(data, dict):
            return {}
        lines: Dict[CartKey, int] = {}
        for storage_key, quantity in data.items():
            try:
                key = CartKey.from_storage_key(storage_key)
                quantity = int(quantity)
            except (TypeError, ValueError):
                logger.warning("⚠️ Skipping malformed local cart entry %r", storage_key)
                continue
            if quantity > 0:
                lines[key] = quantity
        return lines

    def save_lines(self, lines: Dict[CartKey, int]) -> None:
        self._write(
            self._lines_path,
            {key.to_storage_key(): quantity for key, quantity in lines.items()},
        )

    def clear_lines(self) -> None:
        self._lines_path.unlink(missing_ok=True)

    def load_promo(self) -> Optional[str]:
        data = self._read(self._promo_path)
        if isinstance(data, dict) and isinstance(data.get("code"), str):
            return data["code"]
        return None

    def save_promo(self, code: str) -> None:
        self._write(self._promo_path, {"code": code})

    def clear_promo(self) -> None:
        self._promo_path.unlink(missing_ok=True)

    def _read(self, path: Path):
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("⚠️ Could not read %s: %s", path, e)
            return None

    def _write(self, path: Path, data) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f)
        tmp_path.replace(path)
