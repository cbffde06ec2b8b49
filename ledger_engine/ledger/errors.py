"""Mini README: Error taxonomy raised by the transaction ledger.

Structure:
    * LedgerError - base class for every ledger-specific failure.
    * TransactionNotFoundError - update/remove/get referencing an unknown id.
    * DuplicateTransactionError - insert of a live id while duplicates are rejected.

Callers decide whether a not-found condition is a bug or a benign race; the
ledger only reports it.
"""

from __future__ import annotations

from typing import Hashable


class LedgerError(Exception):
    """Base class for ledger failures."""


class TransactionNotFoundError(LedgerError, KeyError):
    """Raised when an operation references an id with no live transaction."""

    def __init__(self, transaction_id: Hashable) -> None:
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id!r} not found")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])


class DuplicateTransactionError(LedgerError, ValueError):
    """Raised when inserting an id that is already live."""

    def __init__(self, transaction_id: Hashable) -> None:
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id!r} already exists")
