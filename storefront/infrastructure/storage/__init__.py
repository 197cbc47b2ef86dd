"""
Local cart storage implementations
"""

from .local_cart_storage import InMemoryCartStore, JsonFileCartStore

__all__ = ["InMemoryCartStore", "JsonFileCartStore"]
