"""
Local Storage Implementation

DESIGN DECISION: Data lives on the user's machine as one JSON document
per key, the same layout a browser's local storage would hold:
1. No database setup required
2. Files are human-readable and easy to back up
3. Documents written by the browser version of the app load unchanged

TRADEOFFS:
- Every save rewrites the whole collection (fine for personal use)
- No transactions across keys (collections are independent anyway)

Reads never fail the caller: missing, unreadable or corrupt data is
replaced by seed data and the fallback is logged.
"""

import os
import tempfile
from pathlib import Path
from typing import Callable, Optional, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.audit.logger import AuditLogger
from finance_tracker.config.settings import StorageSettings
from finance_tracker.models.audit import AuditEvent
from finance_tracker.models.finance import Account, Investment, Transaction
from finance_tracker.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStorageInterface,
    StorageError,
    StorageUnavailableError,
)
from finance_tracker.services.storage.seed import SeedData


RecordT = TypeVar("RecordT", bound=BaseModel)

_TRANSACTIONS = TypeAdapter(list[Transaction])
_INVESTMENTS = TypeAdapter(list[Investment])
_ACCOUNTS = TypeAdapter(list[Account])
_AUDIT_EVENTS = TypeAdapter(list[AuditEvent])


class InMemoryStorage(KeyValueStorageInterface):
    """Dict-backed storage for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class JsonFileStorage(KeyValueStorageInterface):
    """
    One `<key>.json` file per key inside a data directory.

    Transient OS errors are retried before being surfaced as
    StorageUnavailableError. A file that is not UTF-8 raises it too.
    """

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        safe_key = key.replace("/", "_").replace("\\", "_")
        return self._data_dir / f"{safe_key}.json"

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _read(self, path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write(self, path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        # Write to a sibling temp file first so a crash never leaves half a document
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> Optional[str]:
        try:
            return self._read(self._path_for(key))
        except OSError as e:
            raise StorageUnavailableError(f"Could not read '{key}': {e}") from e
        except UnicodeDecodeError as e:
            raise StorageUnavailableError(f"'{key}' is not valid UTF-8: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        try:
            self._write(self._path_for(key), value)
        except OSError as e:
            raise StorageUnavailableError(f"Could not write '{key}': {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            self._path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageUnavailableError(f"Could not remove '{key}': {e}") from e


class KeyValueAuditStorage(AuditStorageInterface):
    """Keeps the most recent audit events as a JSON list under one key."""

    def __init__(
        self,
        backend: KeyValueStorageInterface,
        key: str,
        max_events: int = 500,
    ):
        self._backend = backend
        self._key = key
        self._max_events = max_events

    def _load(self) -> list[AuditEvent]:
        raw = self._backend.get_item(self._key)
        if raw is None:
            return []
        try:
            return _AUDIT_EVENTS.validate_json(raw)
        except ValidationError:
            # A corrupt trail is restarted rather than blocking new events
            return []

    def append_event(self, event: AuditEvent) -> bool:
        events = self._load()
        events.append(event)
        events = events[-self._max_events:]
        self._backend.set_item(self._key, _AUDIT_EVENTS.dump_json(events).decode("utf-8"))
        return True

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        events = self._load()
        return list(reversed(events))[:limit]


class LocalStorageService:
    """
    Typed access to the three persisted collections.

    GUARANTEES:
    - get_* never raises; defaults are substituted and the fallback logged
    - save_* never raises; failures are logged and reported as False
    """

    def __init__(
        self,
        backend: KeyValueStorageInterface,
        settings: Optional[StorageSettings] = None,
        seed_provider: Optional[Callable[[], SeedData]] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._backend = backend
        self._settings = settings or StorageSettings()
        self._seed_provider = seed_provider or SeedData
        self._seed: Optional[SeedData] = None
        self._audit = audit_logger or AuditLogger()

    @property
    def backend(self) -> KeyValueStorageInterface:
        return self._backend

    def _seed_data(self) -> SeedData:
        if self._seed is None:
            self._seed = self._seed_provider()
        return self._seed

    def _load(
        self,
        key: str,
        adapter: TypeAdapter,
        collection: str,
        default: Callable[[], list[RecordT]],
    ) -> list[RecordT]:
        try:
            raw = self._backend.get_item(key)
        except StorageError as e:
            self._audit.log_storage_fallback(collection, f"storage unavailable: {e}")
            return list(default())

        if raw is None:
            self._audit.log_storage_fallback(collection, "no stored data")
            return list(default())

        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            self._audit.log_storage_fallback(
                collection, f"stored data is invalid ({e.error_count()} errors)"
            )
            return list(default())

    def _save(self, key: str, adapter: TypeAdapter, collection: str, records: list) -> bool:
        try:
            payload = adapter.dump_json(list(records), by_alias=True).decode("utf-8")
            self._backend.set_item(key, payload)
            return True
        except StorageError as e:
            self._audit.log_storage_write_failed(collection, str(e))
            return False

    def get_transactions(self) -> list[Transaction]:
        return self._load(
            self._settings.transactions_key,
            _TRANSACTIONS,
            "transactions",
            lambda: self._seed_data().transactions,
        )

    def save_transactions(self, transactions: list[Transaction]) -> bool:
        return self._save(self._settings.transactions_key, _TRANSACTIONS, "transactions", transactions)

    def get_investments(self) -> list[Investment]:
        return self._load(
            self._settings.investments_key,
            _INVESTMENTS,
            "investments",
            lambda: self._seed_data().investments,
        )

    def save_investments(self, investments: list[Investment]) -> bool:
        return self._save(self._settings.investments_key, _INVESTMENTS, "investments", investments)

    def get_accounts(self) -> list[Account]:
        return self._load(
            self._settings.accounts_key,
            _ACCOUNTS,
            "accounts",
            lambda: self._seed_data().accounts,
        )

    def save_accounts(self, accounts: list[Account]) -> bool:
        return self._save(self._settings.accounts_key, _ACCOUNTS, "accounts", accounts)

    def clear_all_data(self) -> bool:
        """Remove the three collections. The next read falls back to seed data."""
        try:
            for key in (
                self._settings.transactions_key,
                self._settings.investments_key,
                self._settings.accounts_key,
            ):
                self._backend.remove_item(key)
        except StorageError as e:
            self._audit.log_storage_write_failed("all", str(e))
            return False
        # The next read rebuilds the seed
        self._seed = None
        return True
