"""
Configuration Infrastructure

Contains application configuration management.
"""

from .config import ConfigValidator, Settings, get_config, reset_config

__all__ = ["ConfigValidator", "get_config", "reset_config", "Settings"]
