"""
Audit Logger

DESIGN DECISION: Every change to stored records is logged.
So is every degraded path (seed fallback, failed writes).
This provides:
1. Traceability of edits
2. Debugging capability
3. User can see the history of imports, resets and setup runs

The audit logger:
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity

if TYPE_CHECKING:
    from finance_tracker.services.storage.interface import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(log_level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at `log_level`."""
    logging.basicConfig(format="%(message)s", level=log_level.upper())
    logging.getLogger().setLevel(log_level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence and user visibility), if configured
    """

    def __init__(
        self,
        storage: Optional["AuditStorageInterface"] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("finance_tracker.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Most recent persisted events, newest first. Empty without storage."""
        if not self._storage:
            return []
        return self._storage.get_recent_events(limit)

    def log_record_created(
        self,
        entity_type: str,
        entity_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.record_created(entity_type, entity_id, correlation_id))

    def log_record_updated(
        self,
        entity_type: str,
        entity_id: str,
        fields: list[str],
    ) -> None:
        self.log(AuditEventBuilder.record_updated(entity_type, entity_id, fields))

    def log_record_deleted(self, entity_type: str, entity_id: str) -> None:
        self.log(AuditEventBuilder.record_deleted(entity_type, entity_id))

    def log_records_replaced(
        self,
        entity_type: str,
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.records_replaced(entity_type, count, correlation_id))

    def log_storage_fallback(self, collection: str, reason: str) -> None:
        """Log that defaults replaced unreadable or missing stored data."""
        self.log(AuditEventBuilder.storage_fallback(collection, reason))

    def log_storage_write_failed(self, collection: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_write_failed(collection, error_message))

    def log_setup_completed(
        self,
        accounts: int,
        investments: int,
        transactions: int,
        correlation_id: UUID,
    ) -> None:
        self.log(
            AuditEventBuilder.setup_completed(
                accounts=accounts,
                investments=investments,
                transactions=transactions,
                correlation_id=correlation_id,
            )
        )

    def log_data_exported(self, destination: str, record_count: int) -> None:
        self.log(AuditEventBuilder.data_exported(destination, record_count))

    def log_data_imported(self, record_count: int, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.data_imported(record_count, correlation_id))

    def log_data_cleared(self) -> None:
        self.log(AuditEventBuilder.data_cleared())

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(
            AuditEventBuilder.system_error(
                error_type=error_type,
                error_message=error_message,
                details=details,
            )
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a multi-record user action (setup, import).
    Pass it through all subsequent operations.
    """
    return uuid4()
