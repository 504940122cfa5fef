"""Query execution package."""

from supportbank.queries.executor import (
    EmptyLedgerError,
    QueryExecutionError,
    QueryExecutor,
    UnknownAccountError,
)

__all__ = [
    "EmptyLedgerError",
    "QueryExecutionError",
    "QueryExecutor",
    "UnknownAccountError",
]
