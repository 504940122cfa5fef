"""
Tests for the Ledger.
"""

import pytest

from supportbank.ledger import Ledger
from supportbank.models.transaction import AccountId, CanonicalRecord


def record(payer, payee, amount, narrative="", date="2015-01-01"):
    return CanonicalRecord(
        date=date,
        from_account=payer,
        to_account=payee,
        amount=amount,
        amount_text=str(amount),
        narrative=narrative,
    )


def snapshot(ledger):
    """Account order, balances and histories, without transaction ids."""
    return [
        (
            account.name.name,
            account.balance,
            [(transaction.sequence, transaction.record) for transaction in account.history],
        )
        for account in ledger.accounts
    ]


class TestApply:
    """Tests for applying single records."""

    def test_balances_move_in_opposite_directions(self):
        """Test that the payer loses what the payee gains."""
        ledger = Ledger()
        ledger.apply(record("Alice", "Bob", 10))

        assert ledger.get_account("Alice").balance == -10
        assert ledger.get_account("Bob").balance == 10

    def test_sum_of_balances_is_zero(self):
        """Test that money is neither created nor destroyed."""
        ledger = Ledger()
        for payer, payee, amount in [
            ("Alice", "Bob", 10),
            ("Bob", "Carol", 4.5),
            ("Carol", "Alice", 2.25),
            ("Dan", "Bob", 0),
        ]:
            ledger.apply(record(payer, payee, amount))

        assert sum(account.balance for account in ledger.accounts) == pytest.approx(0)

    def test_accounts_in_first_seen_order(self):
        """Test that accounts keep the order they appeared in."""
        ledger = Ledger()
        ledger.apply(record("Zed", "Amy", 1))
        ledger.apply(record("Amy", "Moe", 1))

        assert [account.name.name for account in ledger.accounts] == ["Zed", "Amy", "Moe"]

    def test_history_in_application_order(self):
        """Test that each account keeps its transactions in order."""
        ledger = Ledger()
        first = ledger.apply(record("Alice", "Bob", 1, "first", date="2015-02-01"))
        second = ledger.apply(record("Bob", "Alice", 2, "second", date="2015-01-01"))
        ledger.apply(record("Carol", "Dan", 3))

        assert ledger.get_account("Alice").history == [first, second]
        assert ledger.get_account("Bob").history == [first, second]
        assert len(ledger.transactions) == 3

    def test_sequence_numbers(self):
        """Test that transactions are numbered in application order."""
        ledger = Ledger()
        ledger.apply(record("Alice", "Bob", 1))
        ledger.apply(record("Bob", "Alice", 1))

        assert [transaction.sequence for transaction in ledger.transactions] == [0, 1]

    def test_self_payment_keeps_balance(self):
        """Test that paying yourself changes nothing but the history."""
        ledger = Ledger()
        ledger.apply(record("Alice", "Bob", 5))
        transaction = ledger.apply(record("Alice", "Alice", 3))

        alice = ledger.get_account("Alice")
        assert alice.balance == -5
        assert alice.history[-2:] == [transaction, transaction]

    def test_names_are_exact(self):
        """Test that differently cased names are different accounts."""
        ledger = Ledger()
        ledger.apply(record("alice", "Alice", 1))

        assert len(ledger.accounts) == 2
        assert ledger.get_account("ALICE") is None

    def test_lookup_by_account_id(self):
        """Test that lookups accept AccountId as well as text."""
        ledger = Ledger()
        ledger.apply(record("Alice", "Bob", 1))
        assert ledger.get_account(AccountId.of("Bob")) is ledger.get_account("Bob")


class TestImportRecords:
    """Tests for bulk import and wiping."""

    def test_empty_ledger(self):
        """Test the state of a new ledger."""
        ledger = Ledger()
        assert ledger.is_empty
        assert ledger.accounts == []
        assert ledger.transactions == []

    def test_wipe_makes_reimport_idempotent(self):
        """Test that importing the same records twice gives one copy."""
        records = [
            record("Alice", "Bob", 10, "Lunch"),
            record("Bob", "Carol", 3, "Taxi", date="2015-01-02"),
            record("Carol", "Carol", 1, "Piggy bank"),
        ]
        ledger = Ledger()

        ledger.import_records(records)
        first = snapshot(ledger)
        ledger.import_records(records)

        assert snapshot(ledger) == first
        assert [name for name, _, _ in first] == ["Alice", "Bob", "Carol"]
        assert [balance for _, balance, _ in first] == [-10, 7, 3]
        assert [len(history) for _, _, history in first] == [1, 2, 3]
        assert [transaction.record for transaction in ledger.transactions] == records

    def test_wipe_forgets_old_accounts(self):
        """Test that accounts from a previous import are dropped."""
        ledger = Ledger()
        ledger.import_records([record("Old", "Gone", 1)])
        ledger.import_records([record("Alice", "Bob", 1)])

        assert ledger.get_account("Old") is None

    def test_append_mode_accumulates(self):
        """Test that append mode keeps and duplicates."""
        records = [record("Alice", "Bob", 10)]
        ledger = Ledger()

        ledger.import_records(records)
        ledger.import_records(records, wipe_existing=False)

        assert len(ledger.transactions) == 2
        assert ledger.get_account("Bob").balance == 20

    def test_import_returns_created_transactions(self):
        """Test that the created transactions come back in order."""
        ledger = Ledger()
        created = ledger.import_records(
            record(payer, "Bank", 1) for payer in ("A", "B", "C")
        )
        assert [transaction.from_account.name for transaction in created] == ["A", "B", "C"]

    def test_reset(self):
        """Test that reset empties the ledger."""
        ledger = Ledger()
        ledger.apply(record("Alice", "Bob", 1))
        ledger.reset()
        assert ledger.is_empty
        assert ledger.transactions == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
