"""
Tests for SupportBank models

Test strategy:
1. Unit tests for individual components (models, adapters, repairer, ledger)
2. Integration tests for flows (session, commands) against temp files
3. No shared global state between tests (each builds its own ledger)
"""

import pytest
from uuid import uuid4

from pydantic import ValidationError

from supportbank.models.transaction import (
    NO_DATE,
    AccountId,
    BalanceLine,
    CanonicalRecord,
    Direction,
    HistoryEntry,
    RawRecord,
    RepairIssue,
    TransactionFormat,
    format_money,
)
from supportbank.models.results import ErrorKind, QueryOutcome
from supportbank.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestAccountId:
    """Tests for the account name value type."""

    def test_names_are_case_sensitive(self):
        """Test that names differing only in case are different accounts."""
        assert AccountId(name="Alice") != AccountId(name="alice")

    def test_equal_names_hash_equal(self):
        """Test that AccountId works as a mapping key."""
        accounts = {AccountId(name="Alice"): 1}
        assert accounts[AccountId.of("Alice")] == 1

    def test_whitespace_is_kept(self):
        """Test that names are not trimmed."""
        assert AccountId.of(" Bob").name == " Bob"

    def test_rejects_non_string(self):
        """Test that only strings are accepted as names."""
        with pytest.raises(ValidationError):
            AccountId(name=42)

    def test_is_immutable(self):
        """Test that the name cannot be reassigned."""
        account_id = AccountId.of("Alice")
        with pytest.raises(ValidationError):
            account_id.name = "Mallory"


class TestCanonicalRecord:
    """Tests for the canonical record shape."""

    def test_creation_wraps_names(self):
        """Test that plain names become AccountIds."""
        record = CanonicalRecord(
            date="2015-01-01",
            from_account="Alice",
            to_account="Bob",
            amount=10.0,
            amount_text="10.00",
            narrative="Lunch",
        )
        assert record.from_account == AccountId.of("Alice")
        assert record.has_date is True

    def test_accepts_no_date_sentinel(self):
        """Test that the repair sentinel is a valid date."""
        record = CanonicalRecord(
            date=NO_DATE,
            from_account="Alice",
            to_account="Bob",
            amount=0,
            amount_text="0",
        )
        assert record.has_date is False

    def test_rejects_non_iso_date(self):
        """Test that unrepaired dates cannot reach a canonical record."""
        with pytest.raises(ValidationError, match="YYYY-MM-DD"):
            CanonicalRecord(
                date="01/01/2015",
                from_account="Alice",
                to_account="Bob",
                amount=1,
                amount_text="1",
            )

    def test_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            CanonicalRecord(
                date="2015-01-01",
                from_account="Alice",
                to_account="Bob",
                amount=-5,
                amount_text="-5",
            )

    def test_is_frozen(self):
        """Test that a validated record cannot be changed."""
        record = CanonicalRecord(
            date="2015-01-01",
            from_account="Alice",
            to_account="Bob",
            amount=1,
            amount_text="1",
        )
        with pytest.raises(ValidationError):
            record.amount = 2


class TestRawRecord:
    """Tests for untrusted adapter output."""

    def test_missing_values_become_empty_text(self):
        """Test that None is stored as an empty string."""
        raw = RawRecord(source=TransactionFormat.JSON, date=None, amount=None)
        assert raw.date == ""
        assert raw.amount == ""

    def test_non_text_values_are_stringified(self):
        """Test that numbers are kept as text."""
        raw = RawRecord(source=TransactionFormat.JSON, amount=7)
        assert raw.amount == "7"


class TestRenderedRows:
    """Tests for the query row formats."""

    def test_balance_line(self):
        """Test balance rendering to two decimals."""
        line = BalanceLine(account=AccountId.of("Alice"), balance=-10)
        assert line.render() == "Alice: -10.00"

    def test_negative_zero_renders_as_zero(self):
        """Test that -0.0 is not shown with a sign."""
        assert format_money(-0.0) == "0.00"

    def test_inbound_history_entry(self):
        """Test inbound arrow and quoting."""
        entry = HistoryEntry(
            direction=Direction.INBOUND,
            counterparty=AccountId.of("Alice"),
            amount=10,
            narrative="Lunch",
            date="2015-01-01",
        )
        assert entry.render() == "<-- Alice: 10.00 for 'Lunch' (2015-01-01)"

    def test_outbound_history_entry_without_date(self):
        """Test outbound arrow and the no-date sentinel."""
        entry = HistoryEntry(
            direction=Direction.OUTBOUND,
            counterparty=AccountId.of("Bob"),
            amount=0,
            narrative="Gift",
            date=NO_DATE,
        )
        assert entry.render() == "--> Bob: 0.00 for 'Gift' (No date listed)"

    def test_query_outcome_lines(self):
        """Test that a query outcome renders its rows in order."""
        outcome = QueryOutcome(
            success=True,
            query_description="Listing all account balances",
            balances=[
                BalanceLine(account=AccountId.of("Alice"), balance=-10),
                BalanceLine(account=AccountId.of("Bob"), balance=10),
            ],
        )
        assert outcome.lines == ["Alice: -10.00", "Bob: 10.00"]


class TestRepairIssue:
    """Tests for repair diagnostics."""

    def test_rejects_unknown_field(self):
        """Test that only date and amount can be repaired."""
        with pytest.raises(ValidationError):
            RepairIssue(
                field="narrative",
                issue_type="malformed_date",
                value="x",
                replacement="y",
                message="nope",
            )


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.IMPORT_STARTED,
            description="Parsing CSV.",
        )
        assert event.event_type == AuditEventType.IMPORT_STARTED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.EXPORT_COMPLETED,
            description="Exported 2 transactions as CSV",
            details={"format": "csv", "transaction_count": 2},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "export_completed"
        assert log_dict["details"]["format"] == "csv"

    def test_builder_record_repaired(self):
        """Test AuditEventBuilder.record_repaired."""
        correlation_id = uuid4()

        event = AuditEventBuilder.record_repaired(
            field="amount",
            issue_type="malformed_amount",
            value="-5",
            replacement="0",
            line_number=3,
            message="Invalid amount: -5 (line 3). Setting to 0.",
            correlation_id=correlation_id,
        )

        assert event.event_type == AuditEventType.RECORD_REPAIRED
        assert event.severity == AuditSeverity.ERROR
        assert event.entity_ref == "3"
        assert event.correlation_id == correlation_id
        assert event.details["replacement"] == "0"

    def test_builder_import_failed(self):
        """Test AuditEventBuilder.import_failed."""
        event = AuditEventBuilder.import_failed(
            path="missing.csv",
            error_kind=ErrorKind.IO_FAILURE.value,
            error_message="No such file",
            correlation_id=uuid4(),
        )
        assert event.error_code == "io_failure"
        assert event.entity_ref == "missing.csv"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
