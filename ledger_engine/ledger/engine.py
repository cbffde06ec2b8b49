"""Mini README: In-memory transaction ledger with raw and cooked valuations.

Structure:
    * ValuationKind - enum selecting raw versus cooked amounts.
    * DuplicatePolicy - behaviour when an insert reuses a live identifier.
    * LedgerTransaction - immutable record stored by the ledger.
    * CategoryTotal / CategoryPartition - aggregate results for categories.
    * Balances - raw and cooked balance pair.
    * partition_totals - split category totals into income and expenses.
    * TransactionLedger - owns the live set and answers aggregate queries.

The ledger is a recomputable index rather than a system of record. Every
balance and category total is recomputed from the live set on demand so
edits and removals are reflected immediately. Category names and sign
conventions belong to the caller; the ledger trusts the values it is given.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from numbers import Number
from threading import RLock
from typing import Dict, Hashable, Iterable, List, Optional, Tuple

from ..logging_utils import get_logger
from .errors import DuplicateTransactionError, TransactionNotFoundError

LOGGER = get_logger(__name__)

_LEGACY_VALUATION_CODES = {1: "raw", 2: "cooked"}


class ValuationKind(str, Enum):
    """Select which amount an aggregation sums."""

    RAW = "raw"
    COOKED = "cooked"

    @classmethod
    def from_value(cls, value: object) -> "ValuationKind":
        """Coerce enum members, strings in any casing, or legacy codes 1/2."""

        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            value = _LEGACY_VALUATION_CODES.get(value, value)
        try:
            return cls(str(value).strip().lower())
        except ValueError as error:
            raise ValueError(f"Unsupported valuation kind: {value}") from error


class DuplicatePolicy(str, Enum):
    """How ``insert`` treats an identifier that is already live."""

    OVERWRITE = "overwrite"
    REJECT = "reject"


@dataclass(frozen=True, slots=True)
class LedgerTransaction:
    """A live transaction with its two parallel valuations."""

    transaction_id: Hashable
    category_id: int
    raw_amount: Number
    cooked_amount: Number

    def amount(self, valuation: ValuationKind) -> Number:
        """Return the amount matching ``valuation``."""

        if valuation is ValuationKind.RAW:
            return self.raw_amount
        return self.cooked_amount

    def as_dict(self) -> Dict[str, object]:
        """Export the record with plain values."""

        return {
            "transaction_id": self.transaction_id,
            "category_id": self.category_id,
            "raw_amount": self.raw_amount,
            "cooked_amount": self.cooked_amount,
        }


@dataclass(frozen=True, slots=True)
class CategoryTotal:
    """Summed raw and cooked amounts for one category index."""

    category_index: int
    raw_total: Number
    cooked_total: Number

    @property
    def is_income(self) -> bool:
        """Positive raw totals are income; zero and below are expenses."""

        return self.raw_total > 0

    def as_dict(self) -> Dict[str, object]:
        return {
            "category_index": self.category_index,
            "raw_total": self.raw_total,
            "cooked_total": self.cooked_total,
        }


@dataclass(frozen=True, slots=True)
class CategoryPartition:
    """Category totals grouped into income and expenses."""

    income: Tuple[CategoryTotal, ...]
    expenses: Tuple[CategoryTotal, ...]

    def as_dict(self) -> Dict[str, List[Dict[str, object]]]:
        return {
            "income": [total.as_dict() for total in self.income],
            "expenses": [total.as_dict() for total in self.expenses],
        }


@dataclass(frozen=True, slots=True)
class Balances:
    """Current raw and cooked balances."""

    raw: Number
    cooked: Number

    def as_dict(self) -> Dict[str, object]:
        return {"current_raw": self.raw, "current_cooked": self.cooked}


def partition_totals(totals: Iterable[CategoryTotal]) -> CategoryPartition:
    """Split totals by the sign of ``raw_total`` keeping category order."""

    income: List[CategoryTotal] = []
    expenses: List[CategoryTotal] = []
    for total in totals:
        if total.is_income:
            income.append(total)
        else:
            expenses.append(total)
    return CategoryPartition(income=tuple(income), expenses=tuple(expenses))


class TransactionLedger:
    """Maintain the live transaction set and compute balances on demand.

    Transactions are keyed by identifier for constant-time point mutation.
    A single re-entrant lock serialises every operation so readers never
    observe a partially applied insert, update, or removal.
    """

    def __init__(
        self,
        transactions: Optional[Iterable[LedgerTransaction]] = None,
        *,
        duplicate_policy: DuplicatePolicy = DuplicatePolicy.OVERWRITE,
    ) -> None:
        self._transactions: Dict[Hashable, LedgerTransaction] = {}
        self._lock = RLock()
        self.duplicate_policy = DuplicatePolicy(duplicate_policy)
        if transactions:
            self.populate(transactions)
        LOGGER.debug(
            "Transaction ledger initialised with %s transactions (duplicate policy=%s)",
            len(self._transactions),
            self.duplicate_policy.value,
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._transactions)

    def __contains__(self, transaction_id: object) -> bool:
        with self._lock:
            return transaction_id in self._transactions

    def insert(
        self,
        transaction_id: Hashable,
        category_id: int,
        raw_amount: Number,
        cooked_amount: Number,
    ) -> LedgerTransaction:
        """Add a transaction, overwriting or rejecting a live duplicate id."""

        record = LedgerTransaction(transaction_id, category_id, raw_amount, cooked_amount)
        with self._lock:
            if transaction_id in self._transactions:
                if self.duplicate_policy is DuplicatePolicy.REJECT:
                    LOGGER.warning("Rejected duplicate insert for transaction %s", transaction_id)
                    raise DuplicateTransactionError(transaction_id)
                LOGGER.warning("Insert overwrote live transaction %s", transaction_id)
            self._transactions[transaction_id] = record
        LOGGER.debug(
            "Inserted transaction %s category=%s raw=%s cooked=%s",
            transaction_id,
            category_id,
            raw_amount,
            cooked_amount,
        )
        return record

    def update(
        self,
        transaction_id: Hashable,
        category_id: int,
        raw_amount: Number,
        cooked_amount: Number,
    ) -> LedgerTransaction:
        """Replace the category and both amounts of a live transaction."""

        record = LedgerTransaction(transaction_id, category_id, raw_amount, cooked_amount)
        with self._lock:
            if transaction_id not in self._transactions:
                LOGGER.warning("Update requested for unknown transaction %s", transaction_id)
                raise TransactionNotFoundError(transaction_id)
            self._transactions[transaction_id] = record
        LOGGER.debug("Updated transaction %s", transaction_id)
        return record

    def remove(self, transaction_id: Hashable) -> LedgerTransaction:
        """Delete a live transaction and return the removed record."""

        with self._lock:
            try:
                removed = self._transactions.pop(transaction_id)
            except KeyError:
                LOGGER.warning("Removal requested for unknown transaction %s", transaction_id)
                raise TransactionNotFoundError(transaction_id) from None
        LOGGER.debug("Removed transaction %s", transaction_id)
        return removed

    def get(self, transaction_id: Hashable) -> LedgerTransaction:
        """Retrieve a live transaction, raising when missing."""

        with self._lock:
            if transaction_id not in self._transactions:
                raise TransactionNotFoundError(transaction_id)
            return self._transactions[transaction_id]

    def transactions(self) -> Tuple[LedgerTransaction, ...]:
        """Snapshot of live transactions in insertion order."""

        with self._lock:
            return tuple(self._transactions.values())

    def populate(
        self,
        transactions: Iterable[LedgerTransaction],
        *,
        replace: bool = False,
    ) -> int:
        """Insert many records as one batch, returning how many were applied.

        The batch is staged before it is committed, so a rejected duplicate
        leaves the live set exactly as it was. With ``replace`` the staged
        batch becomes the whole live set.
        """

        with self._lock:
            batch: Dict[Hashable, LedgerTransaction] = {}
            count = 0
            for transaction in transactions:
                transaction_id = transaction.transaction_id
                live = not replace and transaction_id in self._transactions
                if live or transaction_id in batch:
                    if self.duplicate_policy is DuplicatePolicy.REJECT:
                        LOGGER.warning("Rejected batch with duplicate transaction %s", transaction_id)
                        raise DuplicateTransactionError(transaction_id)
                    LOGGER.warning("Batch overwrote transaction %s", transaction_id)
                batch[transaction_id] = transaction
                count += 1
            if replace:
                self._transactions = batch
            else:
                self._transactions.update(batch)
        LOGGER.info("Populated ledger with %s transactions (replace=%s)", count, replace)
        return count

    def clear(self) -> None:
        """Drop every transaction so the ledger can be repopulated."""

        with self._lock:
            dropped = len(self._transactions)
            self._transactions.clear()
        LOGGER.info("Cleared %s transactions from ledger", dropped)

    def balance_for_valuation(self, valuation: object, initial_balance: Number = 0) -> Number:
        """Return ``initial_balance`` plus every live amount of ``valuation``."""

        kind = ValuationKind.from_value(valuation)
        with self._lock:
            return sum(
                (transaction.amount(kind) for transaction in self._transactions.values()),
                initial_balance,
            )

    def current_balances(self, initial_raw: Number = 0, initial_cooked: Number = 0) -> Balances:
        """Compute raw and cooked balances from their starting values in one pass."""

        with self._lock:
            return Balances(
                raw=self.balance_for_valuation(ValuationKind.RAW, initial_raw),
                cooked=self.balance_for_valuation(ValuationKind.COOKED, initial_cooked),
            )

    def category_totals(self, category_count: int) -> List[CategoryTotal]:
        """Sum raw and cooked amounts for every index in ``[0, category_count)``.

        Categories without transactions are reported with zero totals.
        Transactions whose category id falls outside the range are left out
        of the result.
        """

        if category_count < 0:
            raise ValueError("Category count must be zero or positive")

        accumulators: Dict[int, List[Number]] = {}
        skipped = 0
        with self._lock:
            for transaction in self._transactions.values():
                if not 0 <= transaction.category_id < category_count:
                    skipped += 1
                    continue
                totals = accumulators.setdefault(transaction.category_id, [0, 0])
                totals[0] += transaction.raw_amount
                totals[1] += transaction.cooked_amount
        if skipped:
            LOGGER.debug(
                "Excluded %s transactions outside category range [0, %s)",
                skipped,
                category_count,
            )

        results: List[CategoryTotal] = []
        for index in range(category_count):
            raw_total, cooked_total = accumulators.get(index, (0, 0))
            results.append(CategoryTotal(index, raw_total, cooked_total))
        return results

    def partitioned_totals(self, category_count: int) -> CategoryPartition:
        """Category totals grouped into income and expenses."""

        return partition_totals(self.category_totals(category_count))

    def summarise(
        self,
        category_count: int,
        initial_raw: Number = 0,
        initial_cooked: Number = 0,
    ) -> Dict[str, object]:
        """Aggregate balances and grouped totals for dashboards."""

        with self._lock:
            balances = self.current_balances(initial_raw, initial_cooked)
            partition = self.partitioned_totals(category_count)
            count = len(self._transactions)
        return {
            "transaction_count": count,
            "balances": balances.as_dict(),
            "category_totals": partition.as_dict(),
        }

