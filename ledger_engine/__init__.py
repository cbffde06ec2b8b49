"""Mini README: Core package initializer for the ledger engine.

This module exposes the transaction ledger and the logging helper so callers
can import the common entry points without knowing the module layout. The
HTTP interface is deliberately not imported here to keep FastAPI out of
library-only usage.
"""

from .ledger import TransactionBook, TransactionLedger, ValuationKind
from .logging_utils import get_logger

__all__ = ["TransactionBook", "TransactionLedger", "ValuationKind", "get_logger"]
