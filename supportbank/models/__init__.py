"""
Data Models Package

This package contains all Pydantic models used in SupportBank.
All data flowing through the system must conform to these schemas.
"""

from supportbank.models.transaction import (
    NO_DATE,
    Account,
    AccountId,
    BalanceLine,
    CanonicalRecord,
    Direction,
    HistoryEntry,
    RawRecord,
    RepairIssue,
    RepairResult,
    Transaction,
    TransactionFormat,
    format_money,
)
from supportbank.models.results import (
    ErrorKind,
    ExportResult,
    ImportResult,
    OperationResult,
    QueryOutcome,
)
from supportbank.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "NO_DATE",
    "Account",
    "AccountId",
    "BalanceLine",
    "CanonicalRecord",
    "Direction",
    "HistoryEntry",
    "RawRecord",
    "RepairIssue",
    "RepairResult",
    "Transaction",
    "TransactionFormat",
    "format_money",
    # Result models
    "ErrorKind",
    "ExportResult",
    "ImportResult",
    "OperationResult",
    "QueryOutcome",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
