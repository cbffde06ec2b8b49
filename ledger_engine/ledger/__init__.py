"""Mini README: Transaction ledger package for the ledger engine.

The ``engine`` module owns the live transaction set and computes balances
and category totals on demand. The ``book`` module layers category names and
deposit/withdrawal sign handling on top for callers that work with labelled
entries rather than pre-normalised amounts.
"""

from .book import BookEntry, TransactionBook, TransactionType
from .engine import (
    Balances,
    CategoryPartition,
    CategoryTotal,
    DuplicatePolicy,
    LedgerTransaction,
    TransactionLedger,
    ValuationKind,
    partition_totals,
)
from .errors import DuplicateTransactionError, LedgerError, TransactionNotFoundError

__all__ = [
    "Balances",
    "BookEntry",
    "CategoryPartition",
    "CategoryTotal",
    "DuplicatePolicy",
    "DuplicateTransactionError",
    "LedgerError",
    "LedgerTransaction",
    "TransactionBook",
    "TransactionLedger",
    "TransactionNotFoundError",
    "TransactionType",
    "ValuationKind",
    "partition_totals",
]
