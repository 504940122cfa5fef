"""
Main Orchestrator for SupportBank

This module ties together all the components and defines the
end-to-end flows for:
1. Import (file → adapter → repair → ledger)
2. Export (ledger → adapter → file)
3. Query (ledger → balance / history rows)

DESIGN DECISION: The orchestrator enforces the boundaries:
- A file is fully read, parsed and repaired before the ledger is touched
- Fatal conditions come back as result objects, never as exceptions
- Repairs come back alongside a successful result and are audited
- Every step is audited

The ledger is owned by the session object, and the session is owned
by the caller. Nothing here is module-level state.
"""

from pathlib import Path
from typing import Callable, Optional, Union
from uuid import UUID

from supportbank.audit import (
    AuditLogger,
    AuditStorageInterface,
    create_correlation_id,
)
from supportbank.config import get_settings
from supportbank.formats import (
    AdapterRegistry,
    FormatError,
    IOFailureError,
    MalformedFileError,
    UnknownFormatError,
)
from supportbank.ledger import Ledger
from supportbank.models.results import (
    ErrorKind,
    ExportResult,
    ImportResult,
    QueryOutcome,
)
from supportbank.models.transaction import AccountId, RepairIssue, TransactionFormat
from supportbank.queries import (
    EmptyLedgerError,
    QueryExecutionError,
    QueryExecutor,
    UnknownAccountError,
)
from supportbank.validation import RecordRepairer


DiagnosticCallback = Callable[[RepairIssue], None]


def _error_kind(error: Union[FormatError, QueryExecutionError]) -> ErrorKind:
    if isinstance(error, UnknownFormatError):
        return ErrorKind.UNKNOWN_FORMAT
    if isinstance(error, MalformedFileError):
        return ErrorKind.MALFORMED_FILE
    if isinstance(error, EmptyLedgerError):
        return ErrorKind.EMPTY_LEDGER
    if isinstance(error, UnknownAccountError):
        return ErrorKind.UNKNOWN_ACCOUNT
    return ErrorKind.IO_FAILURE


class LedgerSession:
    """
    One user's working session over a single Ledger.

    Flow for an import:
    1. Resolve → Pick the adapter from the file suffix
    2. Load → Read and parse the whole file
    3. Repair → Canonical records plus diagnostics
    4. Wipe → Reset the ledger (default) or keep it
    5. Apply → Every record, in file order

    Steps 1-3 may fail; step 4 only runs once they have all succeeded.
    """

    def __init__(
        self,
        ledger: Optional[Ledger] = None,
        registry: Optional[AdapterRegistry] = None,
        repairer: Optional[RecordRepairer] = None,
        audit_logger: Optional[AuditLogger] = None,
        on_diagnostic: Optional[DiagnosticCallback] = None,
        wipe_on_import: Optional[bool] = None,
    ):
        self._ledger = ledger if ledger is not None else Ledger()
        self._registry = registry or AdapterRegistry()
        self._repairer = repairer or RecordRepairer(self._registry.date_formats())
        self._queries = QueryExecutor(self._ledger)
        self._audit_logger = audit_logger or AuditLogger()
        self._on_diagnostic = on_diagnostic
        if wipe_on_import is None:
            wipe_on_import = get_settings().imports.wipe_existing
        self._wipe_on_import = wipe_on_import

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def import_file(
        self,
        path: Union[str, Path],
        wipe_existing: Optional[bool] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ImportResult:
        """
        Import one transaction file.

        Args:
            path: File to read; the suffix selects the format
            wipe_existing: Reset the ledger first. Defaults to the
                           session setting (wipe unless configured otherwise).

        Returns:
            ImportResult. On failure the ledger is exactly as it was.
        """
        correlation_id = correlation_id or create_correlation_id()
        path = str(path)
        wipe = self._wipe_on_import if wipe_existing is None else wipe_existing

        file_format: Optional[TransactionFormat] = None
        try:
            adapter = self._registry.for_path(path)
            file_format = adapter.format
            self._audit_logger.log_import_started(
                path=path,
                file_format=file_format.value,
                correlation_id=correlation_id,
            )
            raw_records = adapter.load(path)
        except (UnknownFormatError, IOFailureError, MalformedFileError) as e:
            kind = _error_kind(e)
            self._audit_logger.log_import_failed(
                path=path,
                error_kind=kind.value,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return ImportResult(
                success=False,
                path=path,
                format=file_format,
                error_kind=kind,
                error_message=str(e),
            )

        repaired = self._repairer.repair_all(raw_records)
        issues = [issue for result in repaired for issue in result.issues]
        for issue in issues:
            self._audit_logger.log_record_repaired(issue, correlation_id)
            if self._on_diagnostic:
                self._on_diagnostic(issue)

        if wipe:
            self._audit_logger.log_ledger_wiped(
                account_count=len(self._ledger.accounts),
                transaction_count=len(self._ledger.transactions),
                correlation_id=correlation_id,
            )
        transactions = self._ledger.import_records(
            (result.record for result in repaired),
            wipe_existing=wipe,
        )

        self._audit_logger.log_import_completed(
            path=path,
            transaction_count=len(transactions),
            repair_count=len(issues),
            correlation_id=correlation_id,
        )

        return ImportResult(
            success=True,
            path=path,
            format=file_format,
            wiped=wipe,
            transactions_applied=len(transactions),
            issues=issues,
            summary=self._repairer.get_user_friendly_summary(repaired),
        )

    def export_file(
        self,
        path: Union[str, Path],
        correlation_id: Optional[UUID] = None,
    ) -> ExportResult:
        """
        Write every transaction in the ledger to a file.

        The target is overwritten. A failed write leaves the ledger as it is.
        """
        correlation_id = correlation_id or create_correlation_id()
        path = str(path)

        file_format: Optional[TransactionFormat] = None
        try:
            adapter = self._registry.for_path(path)
            file_format = adapter.format
            written = adapter.dump(path, self._ledger.transactions)
        except (UnknownFormatError, IOFailureError) as e:
            kind = _error_kind(e)
            self._audit_logger.log_export_failed(
                path=path,
                error_kind=kind.value,
                error_message=str(e),
                correlation_id=correlation_id,
            )
            return ExportResult(
                success=False,
                path=path,
                format=file_format,
                error_kind=kind,
                error_message=str(e),
            )

        self._audit_logger.log_export_completed(
            path=path,
            file_format=file_format.value,
            transaction_count=written,
            correlation_id=correlation_id,
        )

        return ExportResult(
            success=True,
            path=path,
            format=file_format,
            transactions_written=written,
        )

    def list_all(self, correlation_id: Optional[UUID] = None) -> QueryOutcome:
        """Balances of all accounts, in first-seen order."""
        correlation_id = correlation_id or create_correlation_id()
        description = "Listing all account balances"

        try:
            balances = self._queries.list_all()
        except QueryExecutionError as e:
            return self._query_failed(description, e, correlation_id)

        self._audit_logger.log_query_executed(
            query_description=description,
            result_count=len(balances),
            correlation_id=correlation_id,
        )
        return QueryOutcome(
            success=True,
            query_description=description,
            balances=balances,
        )

    def list_account(
        self,
        name: Union[AccountId, str],
        correlation_id: Optional[UUID] = None,
    ) -> QueryOutcome:
        """Directional history of one account, in application order."""
        correlation_id = correlation_id or create_correlation_id()
        description = f"Listing transactions of {name}"

        try:
            history = self._queries.list_account(name)
        except QueryExecutionError as e:
            return self._query_failed(description, e, correlation_id)

        self._audit_logger.log_query_executed(
            query_description=description,
            result_count=len(history),
            correlation_id=correlation_id,
        )
        return QueryOutcome(
            success=True,
            query_description=description,
            history=history,
        )

    def _query_failed(
        self,
        description: str,
        error: QueryExecutionError,
        correlation_id: UUID,
    ) -> QueryOutcome:
        kind = _error_kind(error)
        self._audit_logger.log_query_failed(
            query_description=description,
            error_kind=kind.value,
            correlation_id=correlation_id,
        )
        return QueryOutcome(
            success=False,
            error_kind=kind,
            error_message=str(error),
            query_description=f"Query failed: {error}",
        )


def create_session(
    audit_storage: Optional[AuditStorageInterface] = None,
    on_diagnostic: Optional[DiagnosticCallback] = None,
) -> LedgerSession:
    """
    Factory function to create a session with default components.

    Args:
        audit_storage: Where to keep the audit trail besides the local log.
        on_diagnostic: Called with every repair as it is made.

    Returns:
        A LedgerSession over a fresh, empty Ledger
    """
    return LedgerSession(
        audit_logger=AuditLogger(audit_storage),
        on_diagnostic=on_diagnostic,
    )
