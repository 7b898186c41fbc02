"""Configuration management."""

from config.settings import Settings, get_settings
from config.universe import TRADABLE_FUNDS

__all__ = [
    "Settings",
    "get_settings",
    "TRADABLE_FUNDS",
]
