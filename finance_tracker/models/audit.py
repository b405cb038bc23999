"""
Audit Models for the Finance Tracker

Every change to the stored records, and every degraded path the system
takes instead of failing, is logged as an audit event.
This provides:
1. Traceability of edits made to transactions, investments and accounts
2. Visibility of silent fallbacks (seed data, missing exchange rates)
3. A history the user can inspect after an import or a reset

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Record store mutations
    RECORD_CREATED = "record_created"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"
    RECORDS_REPLACED = "records_replaced"

    # Persistence
    STORAGE_FALLBACK = "storage_fallback"
    STORAGE_WRITE_FAILED = "storage_write_failed"

    # User flows
    SETUP_COMPLETED = "setup_completed"
    DATA_EXPORTED = "data_exported"
    DATA_IMPORTED = "data_imported"
    DATA_CLEARED = "data_cleared"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred (local time)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Collection the entity belongs to (e.g. 'transaction')"
    )
    entity_id: Optional[str] = None

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g. all records of one setup run)"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_created("transaction", tx.id)
        event = AuditEventBuilder.storage_fallback("transactions", reason)
    """

    @staticmethod
    def record_created(
        entity_type: str,
        entity_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_CREATED,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Created {entity_type} {entity_id}",
            is_user_action=True,
        )

    @staticmethod
    def record_updated(
        entity_type: str,
        entity_id: str,
        fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_UPDATED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"Updated {entity_type} {entity_id}",
            details={"fields": fields},
            is_user_action=True,
        )

    @staticmethod
    def record_deleted(entity_type: str, entity_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"Deleted {entity_type} {entity_id}",
            is_user_action=True,
        )

    @staticmethod
    def records_replaced(
        entity_type: str,
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORDS_REPLACED,
            entity_type=entity_type,
            correlation_id=correlation_id,
            description=f"Replaced all {entity_type} records ({count})",
            details={"count": count},
        )

    @staticmethod
    def storage_fallback(collection: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_FALLBACK,
            severity=AuditSeverity.WARNING,
            entity_type=collection,
            description=f"Using default {collection}: {reason}",
            details={"collection": collection, "reason": reason},
        )

    @staticmethod
    def storage_write_failed(collection: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type=collection,
            description=f"Failed to save {collection}",
            error_message=error_message,
        )

    @staticmethod
    def setup_completed(
        accounts: int,
        investments: int,
        transactions: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SETUP_COMPLETED,
            correlation_id=correlation_id,
            description="Initial setup completed",
            details={
                "accounts": accounts,
                "investments": investments,
                "transactions": transactions,
            },
            is_user_action=True,
        )

    @staticmethod
    def data_exported(destination: str, record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_EXPORTED,
            description=f"Exported {record_count} records",
            details={"destination": destination, "record_count": record_count},
            is_user_action=True,
        )

    @staticmethod
    def data_imported(record_count: int, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_IMPORTED,
            correlation_id=correlation_id,
            description=f"Imported {record_count} records",
            details={"record_count": record_count},
            is_user_action=True,
        )

    @staticmethod
    def data_cleared() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_CLEARED,
            severity=AuditSeverity.WARNING,
            description="All stored data cleared",
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
