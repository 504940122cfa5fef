"""
Audit Models for SupportBank

Every significant action in the system is logged for audit purposes.
This provides:
1. A record of every file imported or exported
2. A trace of every field that was repaired, with its source line
3. Debugging information when things go wrong

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every step of a session command has its own event type.
    """
    # Session
    SESSION_STARTED = "session_started"
    SESSION_ENDED = "session_ended"
    COMMAND_RECEIVED = "command_received"
    INVALID_COMMAND = "invalid_command"

    # Import
    IMPORT_STARTED = "import_started"
    IMPORT_COMPLETED = "import_completed"
    IMPORT_FAILED = "import_failed"
    LEDGER_WIPED = "ledger_wiped"
    RECORD_REPAIRED = "record_repaired"

    # Export
    EXPORT_COMPLETED = "export_completed"
    EXPORT_FAILED = "export_failed"

    # Query operations
    QUERY_EXECUTED = "query_executed"
    QUERY_FAILED = "query_failed"

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
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what is this about? (a file path, an account name, ...)
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'file', 'account', 'record')"
    )
    entity_ref: Optional[str] = Field(
        default=None,
        description="Reference of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events of one import)"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    # Additional data (event-specific)
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    # User action tracking
    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user command?"
    )

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
            "entity_ref": self.entity_ref,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.import_started(path, "csv", correlation_id)
        event = AuditEventBuilder.record_repaired(issue, correlation_id)
    """

    @staticmethod
    def session_started(correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_STARTED,
            correlation_id=correlation_id,
            description="Started program.",
        )

    @staticmethod
    def session_ended(correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_ENDED,
            correlation_id=correlation_id,
            description="Terminated program safely.",
        )

    @staticmethod
    def command_received(
        command: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMAND_RECEIVED,
            entity_type="command",
            entity_ref=command,
            correlation_id=correlation_id,
            description=f"User input: {command}"[:500],
            is_user_action=True,
        )

    @staticmethod
    def invalid_command(
        command: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVALID_COMMAND,
            severity=AuditSeverity.WARNING,
            entity_type="command",
            entity_ref=command,
            correlation_id=correlation_id,
            description="Invalid command rejected",
            is_user_action=True,
        )

    @staticmethod
    def import_started(
        path: str,
        file_format: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_STARTED,
            entity_type="file",
            entity_ref=path,
            correlation_id=correlation_id,
            description=f"Parsing {file_format.upper()}.",
            details={
                "format": file_format,
            },
        )

    @staticmethod
    def import_completed(
        path: str,
        transaction_count: int,
        repair_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_COMPLETED,
            entity_type="file",
            entity_ref=path,
            correlation_id=correlation_id,
            description=f"Imported {transaction_count} transactions from {path}"[:500],
            details={
                "transaction_count": transaction_count,
                "repair_count": repair_count,
            },
        )

    @staticmethod
    def import_failed(
        path: str,
        error_kind: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="file",
            entity_ref=path,
            correlation_id=correlation_id,
            description=f"Import failed: {error_kind}",
            error_code=error_kind,
            error_message=error_message,
        )

    @staticmethod
    def ledger_wiped(
        account_count: int,
        transaction_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_WIPED,
            entity_type="ledger",
            correlation_id=correlation_id,
            description="Ledger reset before import",
            details={
                "accounts_dropped": account_count,
                "transactions_dropped": transaction_count,
            },
        )

    @staticmethod
    def record_repaired(
        field: str,
        issue_type: str,
        value: str,
        replacement: str,
        line_number: Optional[int],
        message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_REPAIRED,
            severity=AuditSeverity.ERROR,
            entity_type="record",
            entity_ref=str(line_number) if line_number is not None else None,
            correlation_id=correlation_id,
            description=message[:500],
            error_code=issue_type,
            details={
                "field": field,
                "value": value,
                "replacement": replacement,
                "line_number": line_number,
            },
        )

    @staticmethod
    def export_completed(
        path: str,
        file_format: str,
        transaction_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_COMPLETED,
            entity_type="file",
            entity_ref=path,
            correlation_id=correlation_id,
            description=f"Exported {transaction_count} transactions as {file_format.upper()}",
            details={
                "format": file_format,
                "transaction_count": transaction_count,
            },
        )

    @staticmethod
    def export_failed(
        path: str,
        error_kind: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="file",
            entity_ref=path,
            correlation_id=correlation_id,
            description=f"Export failed: {error_kind}",
            error_code=error_kind,
            error_message=error_message,
        )

    @staticmethod
    def query_executed(
        query_description: str,
        result_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.QUERY_EXECUTED,
            entity_type="query",
            correlation_id=correlation_id,
            description=f"Query executed: {query_description} returned {result_count} results"[:500],
            details={
                "result_count": result_count,
            },
        )

    @staticmethod
    def query_failed(
        query_description: str,
        error_kind: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.QUERY_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="query",
            correlation_id=correlation_id,
            description=f"Query failed: {query_description}"[:500],
            error_code=error_kind,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
