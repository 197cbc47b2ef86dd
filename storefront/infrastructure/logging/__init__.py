"""
Logging Infrastructure

Structured logging setup shared by the application.
"""

from .logging_config import StorefrontJsonFormatter, get_structured_logger, setup_logging

__all__ = [
    "StorefrontJsonFormatter",
    "get_structured_logger",
    "setup_logging",
]
