"""Services package."""

from finance_tracker.services.currency import CurrencyService
from finance_tracker.services.storage import (
    AuditStorageInterface,
    InMemoryStorage,
    JsonFileStorage,
    KeyValueAuditStorage,
    KeyValueStorageInterface,
    LocalStorageService,
    NotFoundError,
    RecordStore,
    StorageError,
    StorageUnavailableError,
)

__all__ = [
    # Currency services
    "CurrencyService",
    # Storage services
    "AuditStorageInterface",
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueAuditStorage",
    "KeyValueStorageInterface",
    "LocalStorageService",
    "NotFoundError",
    "RecordStore",
    "StorageError",
    "StorageUnavailableError",
]
