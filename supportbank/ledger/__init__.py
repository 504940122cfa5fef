"""Ledger package."""

from supportbank.ledger.ledger import Ledger

__all__ = ["Ledger"]
