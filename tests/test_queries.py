"""
Tests for balance and history queries.
"""

import pytest

from supportbank.formats import CsvFormatAdapter
from supportbank.ledger import Ledger
from supportbank.models.transaction import Direction
from supportbank.queries import (
    EmptyLedgerError,
    QueryExecutionError,
    QueryExecutor,
    UnknownAccountError,
)
from supportbank.validation import RecordRepairer


def ledger_from_csv(text):
    ledger = Ledger()
    repaired = RecordRepairer().repair_all(CsvFormatAdapter().parse(text))
    ledger.import_records(result.record for result in repaired)
    return ledger


LUNCH_CSV = (
    "Date,From,To,Narrative,Amount\n"
    "01/01/2015,Alice,Bob,Lunch,10.00\n"
)


class TestListAll:
    """Tests for the all-accounts balance listing."""

    def test_single_transfer(self):
        """Test the balances after one payment."""
        rows = QueryExecutor(ledger_from_csv(LUNCH_CSV)).list_all()
        assert [row.render() for row in rows] == ["Alice: -10.00", "Bob: 10.00"]

    def test_balances_are_not_rounded_when_stored(self):
        """Test that rounding only happens when rendering."""
        ledger = ledger_from_csv(
            "Date,From,To,Narrative,Amount\n"
            "2015-01-01,Alice,Bob,a,0.004\n"
            "2015-01-01,Alice,Bob,b,0.004\n"
        )
        row = QueryExecutor(ledger).list_all()[1]
        assert row.balance == pytest.approx(0.008)
        assert row.render() == "Bob: 0.01"

    def test_repaired_amount_contributes_nothing(self):
        """Test that a negative amount repaired to zero moves no money."""
        ledger = ledger_from_csv(LUNCH_CSV + "2015-01-02,Bob,Carol,Refund,-5\n")
        rows = QueryExecutor(ledger).list_all()
        assert [row.render() for row in rows] == [
            "Alice: -10.00",
            "Bob: 10.00",
            "Carol: 0.00",
        ]

    def test_empty_ledger(self):
        """Test that listing an empty ledger is an error."""
        with pytest.raises(EmptyLedgerError):
            QueryExecutor(Ledger()).list_all()


class TestListAccount:
    """Tests for a single account's history."""

    def test_inbound_entry(self):
        """Test the payee's view of a payment."""
        entries = QueryExecutor(ledger_from_csv(LUNCH_CSV)).list_account("Bob")
        assert [entry.render() for entry in entries] == [
            "<-- Alice: 10.00 for 'Lunch' (2015-01-01)"
        ]

    def test_outbound_entry(self):
        """Test the payer's view of a payment."""
        entries = QueryExecutor(ledger_from_csv(LUNCH_CSV)).list_account("Alice")
        assert entries[0].direction == Direction.OUTBOUND
        assert entries[0].render() == "--> Bob: 10.00 for 'Lunch' (2015-01-01)"

    def test_history_is_not_sorted_by_date(self):
        """Test that entries follow application order."""
        ledger = ledger_from_csv(
            "Date,From,To,Narrative,Amount\n"
            "2015-03-01,Alice,Bob,late,1\n"
            "2015-01-01,Bob,Alice,early,2\n"
        )
        entries = QueryExecutor(ledger).list_account("Alice")
        assert [entry.narrative for entry in entries] == ["late", "early"]

    def test_repaired_date_is_listed(self):
        """Test that a removed date shows the sentinel text."""
        ledger = ledger_from_csv(
            "Date,From,To,Narrative,Amount\n"
            "someday,Alice,Bob,Gift,1\n"
        )
        entry = QueryExecutor(ledger).list_account("Bob")[0]
        assert entry.render() == "<-- Alice: 1.00 for 'Gift' (No date listed)"

    def test_self_payment_listed_twice(self):
        """Test that a self-payment appears once per side."""
        ledger = ledger_from_csv(
            "Date,From,To,Narrative,Amount\n"
            "2015-01-01,Alice,Alice,Piggy bank,5\n"
        )
        entries = QueryExecutor(ledger).list_account("Alice")
        assert len(entries) == 2
        assert entries[0].counterparty.name == "Alice"

    def test_unknown_account(self):
        """Test that an unknown name is an error and creates nothing."""
        ledger = ledger_from_csv(LUNCH_CSV)
        with pytest.raises(UnknownAccountError) as excinfo:
            QueryExecutor(ledger).list_account("alice")

        assert excinfo.value.name == "alice"
        assert ledger.get_account("alice") is None
        assert len(ledger.accounts) == 2

    def test_errors_share_a_base(self):
        """Test that both query errors can be caught together."""
        assert issubclass(EmptyLedgerError, QueryExecutionError)
        assert issubclass(UnknownAccountError, QueryExecutionError)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
