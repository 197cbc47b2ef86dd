"""
Storefront

Cart, checkout and order lifecycle for a small online shop.
"""

__version__ = "1.0.0"
