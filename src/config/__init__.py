"""Configuration module."""

from src.config.logging import configure_logging, get_logger
from src.config.settings import (
    AuthSettings,
    InventorySettings,
    Settings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "AuthSettings",
    "InventorySettings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
]
