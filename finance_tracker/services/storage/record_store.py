"""
Record Store

In-memory collections of transactions, investments and accounts.
This is the only mutable state in the system.

Every mutation is immediately followed by:
1. A persistence write through the supplied save callback
2. A notification to subscribers
3. An audit event

Readers (the analytics engine, reports) only ever get `list()` snapshots,
which are immutable tuples of frozen records.
"""

from typing import Any, Callable, Generic, Iterable, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel

from finance_tracker.audit.logger import AuditLogger
from finance_tracker.services.storage.interface import NotFoundError


RecordT = TypeVar("RecordT", bound=BaseModel)

Subscriber = Callable[[tuple], None]


class RecordStore(Generic[RecordT]):
    """
    One collection of records keyed by `id`.

    New records are prepended so the newest shows first.
    """

    def __init__(
        self,
        model: type[RecordT],
        entity_type: str,
        records: Iterable[RecordT] = (),
        persist: Optional[Callable[[list[RecordT]], Any]] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._model = model
        self._entity_type = entity_type
        self._records: list[RecordT] = list(records)
        self._persist = persist
        self._audit = audit_logger or AuditLogger()
        self._subscribers: list[Subscriber] = []

    @property
    def entity_type(self) -> str:
        return self._entity_type

    def __len__(self) -> int:
        return len(self._records)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback receiving the new snapshot after every change.

        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _commit(self) -> None:
        if self._persist is not None:
            self._persist(list(self._records))
        snapshot = self.list()
        for callback in list(self._subscribers):
            callback(snapshot)

    def list(self) -> tuple[RecordT, ...]:
        """Snapshot of the current collection."""
        return tuple(self._records)

    def get(self, record_id: str) -> Optional[RecordT]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def create(self, record: RecordT) -> RecordT:
        self._records.insert(0, record)
        self._commit()
        self._audit.log_record_created(self._entity_type, record.id)
        return record

    def update(self, record_id: str, changes: dict[str, Any]) -> RecordT:
        """
        Merge `changes` into the record and re-validate it.

        The id cannot be changed. Field names may be given in
        snake_case or camelCase.

        Raises:
            NotFoundError: If no record has this id
            pydantic.ValidationError: If the merged record is invalid
        """
        for index, record in enumerate(self._records):
            if record.id == record_id:
                break
        else:
            raise NotFoundError(f"{self._entity_type} {record_id} not found")

        aliases = {
            field.alias: name
            for name, field in self._model.model_fields.items()
            if field.alias
        }
        normalised = {aliases.get(key, key): value for key, value in changes.items()}
        merged = {**record.model_dump(), **normalised, "id": record.id}
        updated = self._model.model_validate(merged)
        self._records[index] = updated
        self._commit()
        self._audit.log_record_updated(
            self._entity_type,
            record.id,
            sorted(key for key in normalised if key != "id"),
        )
        return updated

    def delete(self, record_id: str) -> bool:
        """Remove a record. Returns False if no record has this id."""
        remaining = [record for record in self._records if record.id != record_id]
        if len(remaining) == len(self._records):
            return False
        self._records = remaining
        self._commit()
        self._audit.log_record_deleted(self._entity_type, record_id)
        return True

    def replace_all(
        self,
        records: Iterable[RecordT],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self._records = list(records)
        self._commit()
        self._audit.log_records_replaced(self._entity_type, len(self._records), correlation_id)
