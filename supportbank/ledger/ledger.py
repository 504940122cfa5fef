"""
Ledger

DESIGN DECISION: The Ledger is an ordinary object owned by whoever
runs the session. There is no module-level ledger; every caller gets
the one it was handed.

GUARANTEES:
- Accounts are created on first sight, in first-seen order
- Both sides of a transaction are updated together: the two new
  balances are computed first and assigned back to back, before any
  history is touched or any other record is looked at
- Transactions are appended to the payer's history, the payee's
  history and the global log, in that order
"""

from typing import Iterable, Optional, Union

from supportbank.models.transaction import (
    Account,
    AccountId,
    CanonicalRecord,
    Transaction,
)


class Ledger:
    """Account registry plus the flat, ordered transaction log."""

    def __init__(self):
        self._accounts: dict[AccountId, Account] = {}
        self._transactions: list[Transaction] = []

    @property
    def accounts(self) -> list[Account]:
        """All accounts, in the order they were first seen."""
        return list(self._accounts.values())

    @property
    def transactions(self) -> list[Transaction]:
        """All applied transactions, in application order."""
        return list(self._transactions)

    @property
    def is_empty(self) -> bool:
        return not self._accounts

    def get_account(self, name: Union[AccountId, str]) -> Optional[Account]:
        """Exact-name lookup. Returns None when the account was never seen."""
        return self._accounts.get(AccountId.of(name))

    def _resolve(self, name: AccountId) -> Account:
        account = self._accounts.get(name)
        if account is None:
            account = Account(name=name)
            self._accounts[name] = account
        return account

    def reset(self) -> None:
        """Drop every account and transaction."""
        self._accounts = {}
        self._transactions = []

    def apply(self, record: CanonicalRecord) -> Transaction:
        """
        Apply one canonical record.

        The record has already been repaired, so this never rejects.

        Returns:
            The Transaction that was created
        """
        payer = self._resolve(record.from_account)
        payee = self._resolve(record.to_account)

        transaction = Transaction(sequence=len(self._transactions), record=record)

        payer_balance = payer.balance - record.amount
        payee_balance = payee.balance + record.amount
        if payer is payee:
            # Paying yourself leaves the balance where it was.
            payer_balance = payee_balance = payer.balance
        payer.balance = payer_balance
        payee.balance = payee_balance

        # A self-payment lands in the same history twice, once per side.
        payer.history.append(transaction)
        payee.history.append(transaction)
        self._transactions.append(transaction)

        return transaction

    def import_records(
        self,
        records: Iterable[CanonicalRecord],
        wipe_existing: bool = True,
    ) -> list[Transaction]:
        """
        Apply records in input order.

        Args:
            records: Canonical records, already repaired
            wipe_existing: Reset the ledger first. When False the records
                           are appended; nothing is de-duplicated.

        Returns:
            The Transactions created, in order
        """
        records = list(records)
        if wipe_existing:
            self.reset()
        return [self.apply(record) for record in records]
