"""
Core Data Models for SupportBank

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Give every file format one shared record shape
2. Keep format-specific field names out of the ledger
3. Make applied transactions immutable
4. Carry repair diagnostics alongside the data they describe

DESIGN DECISION: We use Pydantic v2 with frozen models for anything
that must not change once it has been validated (account names,
canonical records, transactions). Accounts are the only mutable
entity, and only the Ledger mutates them.
"""

import math
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictStr,
    field_validator,
)


# Written in place of a date that could not be parsed.
NO_DATE = "No date listed"

ISO_DATE_FORMAT = "%Y-%m-%d"

# Stands for any ISO-8601 date or timestamp in a list of accepted date patterns.
ISO_8601 = "ISO-8601"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionFormat(str, Enum):
    """
    Supported transaction file formats.

    The value doubles as the (case-sensitive) file suffix without the dot.
    """
    CSV = "csv"
    JSON = "json"
    XML = "xml"

    @property
    def suffix(self) -> str:
        return f".{self.value}"

    @property
    def label(self) -> str:
        return self.value.upper()


class Direction(str, Enum):
    """Direction of a transaction as seen from one account."""
    OUTBOUND = "outbound"  # account paid the counterparty
    INBOUND = "inbound"    # account was paid by the counterparty


# =============================================================================
# IDENTITY
# =============================================================================

class AccountId(BaseModel):
    """
    Immutable account name.

    Names are compared exactly: no trimming, no case folding.
    "alice" and "Alice" are two different accounts.
    """
    model_config = ConfigDict(frozen=True)

    name: StrictStr = Field(
        ...,
        description="Account holder name, case-sensitive"
    )

    @classmethod
    def of(cls, value: Union["AccountId", str]) -> "AccountId":
        if isinstance(value, AccountId):
            return value
        return cls(name=value)

    def __str__(self) -> str:
        return self.name


# =============================================================================
# INGESTION MODELS
# =============================================================================

class RawRecord(BaseModel):
    """
    One transaction as read from a file, before repair.

    CRITICAL: This is UNTRUSTED data. Every field is kept as text
    exactly as the adapter found it; the repairer decides what is valid.
    """

    source: TransactionFormat = Field(
        ...,
        description="Format the record was read from"
    )
    date: str = ""
    from_name: str = ""
    to_name: str = ""
    amount: str = ""
    narrative: str = ""
    line_number: Optional[int] = Field(
        default=None,
        ge=1,
        description="Line (or record position) in the source file"
    )

    @field_validator('date', 'from_name', 'to_name', 'amount', 'narrative', mode='before')
    @classmethod
    def coerce_to_text(cls, v: Any) -> str:
        """Missing values become empty text; anything else is stringified."""
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)


class CanonicalRecord(BaseModel):
    """
    The normalized transaction shape shared by every format.

    Parsers produce it (via the repairer), writers consume it.
    Once built it is frozen and holds no reference to ledger state.
    """
    model_config = ConfigDict(frozen=True)

    date: str = Field(
        ...,
        description="ISO calendar date (YYYY-MM-DD) or NO_DATE"
    )
    from_account: AccountId
    to_account: AccountId
    amount: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Amount moved from the payer to the payee"
    )
    amount_text: str = Field(
        ...,
        description="Amount literal as consumed from the source file"
    )
    narrative: str = ""

    @field_validator('from_account', 'to_account', mode='before')
    @classmethod
    def wrap_account_name(cls, v: Any) -> Any:
        if isinstance(v, str):
            return AccountId(name=v)
        return v

    @field_validator('date')
    @classmethod
    def validate_date(cls, v: str) -> str:
        """Only ISO dates or the repair sentinel are allowed."""
        if v == NO_DATE:
            return v
        try:
            datetime.strptime(v, ISO_DATE_FORMAT)
        except ValueError:
            raise ValueError(f"Date must be YYYY-MM-DD or '{NO_DATE}', got {v!r}")
        return v

    @property
    def has_date(self) -> bool:
        return self.date != NO_DATE


# =============================================================================
# LEDGER ENTITIES
# =============================================================================

class Transaction(BaseModel):
    """
    A canonical record that has been applied to the ledger.

    CRITICAL: Only the Ledger creates Transactions. They are immutable
    and shared by reference between the two account histories and
    the global log.
    """
    model_config = ConfigDict(frozen=True)

    transaction_id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    sequence: int = Field(
        ...,
        ge=0,
        description="Position in the global transaction log"
    )
    record: CanonicalRecord

    @property
    def date(self) -> str:
        return self.record.date

    @property
    def from_account(self) -> AccountId:
        return self.record.from_account

    @property
    def to_account(self) -> AccountId:
        return self.record.to_account

    @property
    def amount(self) -> float:
        return self.record.amount

    @property
    def amount_text(self) -> str:
        return self.record.amount_text

    @property
    def narrative(self) -> str:
        return self.record.narrative


class Account(BaseModel):
    """
    A named balance holder.

    The balance starts at zero and is signed: paying out more than
    has been received leaves it negative.
    """

    name: AccountId
    balance: float = 0.0
    history: list[Transaction] = Field(default_factory=list)


# =============================================================================
# REPAIR MODELS
# =============================================================================

class RepairIssue(BaseModel):
    """A single field that was malformed and has been replaced."""

    field: str = Field(
        ...,
        pattern="^(date|amount)$",
        description="Field that was repaired"
    )
    issue_type: str = Field(
        ...,
        pattern="^(malformed_date|malformed_amount)$",
        description="Kind of defect found"
    )
    value: str = Field(
        ...,
        description="The offending value as read"
    )
    replacement: str = Field(
        ...,
        description="Value substituted by the repair"
    )
    line_number: Optional[int] = None
    source: Optional[TransactionFormat] = None
    message: str = Field(
        ...,
        description="Human-readable description of the repair"
    )
    severity: str = Field(
        default="warning",
        pattern="^(error|warning|info)$"
    )


class RepairResult(BaseModel):
    """Outcome of repairing one raw record."""

    record: CanonicalRecord
    issues: list[RepairIssue] = Field(default_factory=list)

    @property
    def was_repaired(self) -> bool:
        return len(self.issues) > 0


# =============================================================================
# QUERY VIEWS
# =============================================================================

def format_money(value: float) -> str:
    """Two decimal places, never a negative zero."""
    if math.copysign(1.0, value) < 0 and value == 0:
        value = 0.0
    return f"{value:.2f}"


class BalanceLine(BaseModel):
    """One row of the all-accounts balance listing."""
    model_config = ConfigDict(frozen=True)

    account: AccountId
    balance: float

    def render(self) -> str:
        return f"{self.account}: {format_money(self.balance)}"


class HistoryEntry(BaseModel):
    """One transaction as seen from a single account."""
    model_config = ConfigDict(frozen=True)

    direction: Direction
    counterparty: AccountId
    amount: float
    narrative: str
    date: str

    def render(self) -> str:
        arrow = "-->" if self.direction == Direction.OUTBOUND else "<--"
        return (
            f"{arrow} {self.counterparty}: {format_money(self.amount)} "
            f"for '{self.narrative}' ({self.date})"
        )
