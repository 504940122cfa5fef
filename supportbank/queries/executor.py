"""
Query Execution Engine

DESIGN DECISION: Queries are READ-ONLY views over the Ledger.
They never create accounts, never reorder history and never round
stored balances; formatting to two decimals happens when a row is
rendered.

Accounts are listed in the order they were first seen, not sorted.
History is listed in the order transactions were applied, not by date.
"""

from typing import Union

from supportbank.ledger import Ledger
from supportbank.models.transaction import (
    AccountId,
    BalanceLine,
    Direction,
    HistoryEntry,
    Transaction,
)


class QueryExecutionError(Exception):
    """Error during query execution."""
    pass


class EmptyLedgerError(QueryExecutionError):
    """The ledger has no accounts yet."""

    def __init__(self):
        super().__init__("The ledger is empty; import a file first")


class UnknownAccountError(QueryExecutionError):
    """The requested account was never seen."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown account: {name}")


class QueryExecutor:
    """
    Executes balance and history queries against a Ledger.

    GUARANTEES:
    - Only returns what is in the ledger
    - Signals an empty ledger instead of printing an empty table
    - Signals an unknown account instead of inventing one
    """

    def __init__(self, ledger: Ledger):
        self._ledger = ledger

    def list_all(self) -> list[BalanceLine]:
        """
        Balance of every account.

        Raises:
            EmptyLedgerError: If no account exists
        """
        if self._ledger.is_empty:
            raise EmptyLedgerError()

        return [
            BalanceLine(account=account.name, balance=account.balance)
            for account in self._ledger.accounts
        ]

    def list_account(self, name: Union[AccountId, str]) -> list[HistoryEntry]:
        """
        Directional history of one account.

        Raises:
            UnknownAccountError: If the account was never seen
        """
        account_id = AccountId.of(name)
        account = self._ledger.get_account(account_id)
        if account is None:
            raise UnknownAccountError(account_id.name)

        return [self._to_entry(account_id, transaction) for transaction in account.history]

    def _to_entry(self, account_id: AccountId, transaction: Transaction) -> HistoryEntry:
        """Describe a transaction from one side of it."""
        if transaction.from_account == account_id:
            direction = Direction.OUTBOUND
            counterparty = transaction.to_account
        else:
            direction = Direction.INBOUND
            counterparty = transaction.from_account

        return HistoryEntry(
            direction=direction,
            counterparty=counterparty,
            amount=transaction.amount,
            narrative=transaction.narrative,
            date=transaction.date,
        )
