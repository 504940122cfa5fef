"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. A trace of every import, export and query
2. A record of every repaired field, with its source line
3. Debugging capability after the session has ended

The audit logger:
- Never prints; console output belongs to the caller
- Gracefully handles failures (a broken log never stops a command)
- Supports correlation IDs to trace the events of one command
"""

import logging
from pathlib import Path
from typing import Optional, Union
from uuid import UUID, uuid4

import structlog

from supportbank.audit.storage import AuditStorageInterface
from supportbank.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from supportbank.models.transaction import RepairIssue


PACKAGE_LOGGER_NAME = "supportbank"

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

# Silent until an application attaches a handler.
logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())

_FILE_HANDLER: Optional[logging.Handler] = None


def configure_file_logging(
    path: Union[str, Path],
    level: Union[int, str] = logging.DEBUG,
) -> logging.Handler:
    """
    Send the package log to a file, once per process.

    Entry points call this at startup. Library code never attaches
    handlers of its own.
    """
    global _FILE_HANDLER
    if _FILE_HANDLER is not None:
        return _FILE_HANDLER

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = logging.FileHandler(path, encoding="utf-8", delay=True)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(level)

    logger.setLevel(level)
    logger.addHandler(handler)
    # Avoid double emission via the root logger.
    logger.propagate = False

    _FILE_HANDLER = handler
    return handler


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for the audit trail.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(f"{PACKAGE_LOGGER_NAME}.audit")

    def _emit(self, event: AuditEvent) -> None:
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if every write succeeded.
        """
        ok = True

        try:
            self._emit(event)
        except Exception:
            # Logging is a side channel; it must not break the command.
            ok = False

        if self._storage:
            try:
                ok = self._storage.append_event(event) and ok
            except Exception as e:
                try:
                    self._logger.error(
                        "audit_storage_failed",
                        error=str(e),
                        event_id=str(event.event_id),
                    )
                except Exception:
                    pass
                ok = False

        return ok

    def log_session_started(self, correlation_id: UUID) -> None:
        """Log session start."""
        self.log(AuditEventBuilder.session_started(correlation_id))

    def log_session_ended(self, correlation_id: UUID) -> None:
        """Log session end."""
        self.log(AuditEventBuilder.session_ended(correlation_id))

    def log_command_received(
        self,
        command: str,
        correlation_id: UUID,
    ) -> None:
        """Log raw user input."""
        self.log(AuditEventBuilder.command_received(
            command=command,
            correlation_id=correlation_id,
        ))

    def log_invalid_command(
        self,
        command: str,
        correlation_id: UUID,
    ) -> None:
        """Log a rejected command."""
        self.log(AuditEventBuilder.invalid_command(
            command=command,
            correlation_id=correlation_id,
        ))

    def log_import_started(
        self,
        path: str,
        file_format: str,
        correlation_id: UUID,
    ) -> None:
        """Log the start of an import."""
        self.log(AuditEventBuilder.import_started(
            path=path,
            file_format=file_format,
            correlation_id=correlation_id,
        ))

    def log_import_completed(
        self,
        path: str,
        transaction_count: int,
        repair_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a successful import."""
        self.log(AuditEventBuilder.import_completed(
            path=path,
            transaction_count=transaction_count,
            repair_count=repair_count,
            correlation_id=correlation_id,
        ))

    def log_import_failed(
        self,
        path: str,
        error_kind: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a failed import."""
        self.log(AuditEventBuilder.import_failed(
            path=path,
            error_kind=error_kind,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_ledger_wiped(
        self,
        account_count: int,
        transaction_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a ledger reset."""
        self.log(AuditEventBuilder.ledger_wiped(
            account_count=account_count,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        ))

    def log_record_repaired(
        self,
        issue: RepairIssue,
        correlation_id: UUID,
    ) -> None:
        """Log one repaired field."""
        self.log(AuditEventBuilder.record_repaired(
            field=issue.field,
            issue_type=issue.issue_type,
            value=issue.value,
            replacement=issue.replacement,
            line_number=issue.line_number,
            message=issue.message,
            correlation_id=correlation_id,
        ))

    def log_export_completed(
        self,
        path: str,
        file_format: str,
        transaction_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a successful export."""
        self.log(AuditEventBuilder.export_completed(
            path=path,
            file_format=file_format,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        ))

    def log_export_failed(
        self,
        path: str,
        error_kind: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a failed export."""
        self.log(AuditEventBuilder.export_failed(
            path=path,
            error_kind=error_kind,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_query_executed(
        self,
        query_description: str,
        result_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log query execution."""
        self.log(AuditEventBuilder.query_executed(
            query_description=query_description,
            result_count=result_count,
            correlation_id=correlation_id,
        ))

    def log_query_failed(
        self,
        query_description: str,
        error_kind: str,
        correlation_id: UUID,
    ) -> None:
        """Log a query that could not be answered."""
        self.log(AuditEventBuilder.query_failed(
            query_description=query_description,
            error_kind=error_kind,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user command (e.g., an import).
    Pass it through all subsequent operations.
    """
    return uuid4()
