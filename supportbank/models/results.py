"""
Result Models for SupportBank

DESIGN DECISION: Fatal conditions and recoverable repairs travel on
separate channels. Inside the core, fatal conditions are exceptions.
At the session boundary they are turned into these result objects,
so the caller always gets a value back and decides what to show.
Repairs never fail an operation; they ride along in `issues`.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from supportbank.models.transaction import (
    BalanceLine,
    HistoryEntry,
    RepairIssue,
    TransactionFormat,
)


class ErrorKind(str, Enum):
    """Kinds of failure an operation can report."""
    IO_FAILURE = "io_failure"
    UNKNOWN_FORMAT = "unknown_format"
    MALFORMED_FILE = "malformed_file"
    UNKNOWN_ACCOUNT = "unknown_account"
    EMPTY_LEDGER = "empty_ledger"


class OperationResult(BaseModel):
    """Fields shared by every session operation result."""

    operation_id: UUID = Field(
        default_factory=uuid4
    )
    completed_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    success: bool
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None


class ImportResult(OperationResult):
    """Result of importing one transaction file."""

    path: str
    format: Optional[TransactionFormat] = None
    wiped: bool = Field(
        default=False,
        description="Was the ledger reset before loading?"
    )
    transactions_applied: int = Field(
        default=0,
        ge=0
    )
    issues: list[RepairIssue] = Field(
        default_factory=list,
        description="Repairs made while loading (non-fatal)"
    )
    summary: str = Field(
        default="",
        description="One-paragraph account of the repairs"
    )

    @property
    def has_repairs(self) -> bool:
        return len(self.issues) > 0


class ExportResult(OperationResult):
    """Result of exporting the ledger to a file."""

    path: str
    format: Optional[TransactionFormat] = None
    transactions_written: int = Field(
        default=0,
        ge=0
    )


class QueryOutcome(OperationResult):
    """
    Result of a read-only ledger query.

    Exactly one of `balances` / `history` is filled on success,
    depending on the query that was run.
    """

    query_description: str = Field(
        ...,
        description="Human-readable description of what was queried"
    )
    balances: list[BalanceLine] = Field(default_factory=list)
    history: list[HistoryEntry] = Field(default_factory=list)

    @property
    def lines(self) -> list[str]:
        """Rendered output lines, in ledger order."""
        return [row.render() for row in (*self.balances, *self.history)]
