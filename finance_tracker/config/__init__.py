"""Configuration package."""

from finance_tracker.config.settings import (
    AppSettings,
    CurrencySettings,
    SeedSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "CurrencySettings",
    "SeedSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
