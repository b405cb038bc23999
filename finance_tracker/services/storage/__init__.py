"""
Storage Services Package

Provides the abstract key-value interface, local JSON-file and in-memory
backends, the typed storage service with seed fallback, and the
in-memory record stores.
"""

from finance_tracker.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStorageInterface,
    NotFoundError,
    StorageError,
    StorageUnavailableError,
)
from finance_tracker.services.storage.local_storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueAuditStorage,
    LocalStorageService,
)
from finance_tracker.services.storage.record_store import RecordStore
from finance_tracker.services.storage.seed import (
    SeedData,
    build_sample_history,
    build_seed_data,
    build_setup_records,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStorageInterface",
    # Exceptions
    "NotFoundError",
    "StorageError",
    "StorageUnavailableError",
    # Local implementation
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueAuditStorage",
    "LocalStorageService",
    # Records
    "RecordStore",
    "SeedData",
    "build_sample_history",
    "build_seed_data",
    "build_setup_records",
]
