"""Mini README: Category-aware front end for the transaction ledger.

Structure:
    * TransactionType - deposit versus withdrawal entries.
    * BookEntry - labelled transaction as supplied by an application.
    * TransactionBook - maps category names to ledger indices, normalises
      amount signs, and groups category totals for presentation.

The ledger itself only understands integer category indices and signed
amounts. The book keeps the ordered category list, turns withdrawals into
negative amounts, and forwards every mutation to the wrapped
``TransactionLedger``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from numbers import Number
from typing import Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..logging_utils import get_logger
from .engine import Balances, LedgerTransaction, TransactionLedger

LOGGER = get_logger(__name__)


class TransactionType(str, Enum):
    """Enumerate the supported transaction directions."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"

    @classmethod
    def from_str(cls, value: str) -> "TransactionType":
        """Coerce arbitrary casing into a valid transaction type."""

        try:
            normalised = value.strip().lower()
            return cls(normalised)
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported transaction type: {value}") from error


@dataclass(slots=True)
class BookEntry:
    """Represent a labelled transaction before sign normalisation."""

    transaction_id: Hashable
    category: str
    transaction_type: TransactionType
    raw_amount: Number
    cooked_amount: Number

    @classmethod
    def from_mapping(cls, payload: Mapping[str, object]) -> "BookEntry":
        """Build an entry from snake_case or camelCase transaction log keys."""

        try:
            transaction_id = payload["id"] if "id" in payload else payload["transaction_id"]
            raw_amount = _first_present(payload, "rawAmount", "raw_amount")
            cooked_amount = _first_present(payload, "cookedAmount", "cooked_amount")
            transaction_type = payload["type"] if "type" in payload else payload["transaction_type"]
            category = payload["category"]
        except KeyError as error:
            raise ValueError(f"Transaction entry is missing field {error}") from error
        return cls(
            transaction_id=transaction_id,
            category=str(category),
            transaction_type=TransactionType.from_str(str(transaction_type)),
            raw_amount=_coerce_amount(raw_amount),
            cooked_amount=_coerce_amount(cooked_amount),
        )


def _first_present(payload: Mapping[str, object], *keys: str) -> object:
    for key in keys:
        if key in payload:
            return payload[key]
    raise KeyError(keys[0])


def _coerce_amount(value: object) -> Number:
    """Accept numbers as given and parse numeric strings as floats."""

    if isinstance(value, Number) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        return float(value)
    raise ValueError(f"Amounts must be numeric, got {value!r}")


class TransactionBook:
    """Forward labelled transactions into a ledger and present its totals."""

    def __init__(
        self,
        categories: Sequence[str] = (),
        ledger: Optional[TransactionLedger] = None,
    ) -> None:
        self.categories: List[str] = list(categories)
        self.ledger = ledger if ledger is not None else TransactionLedger()

    def category_id(self, category: str) -> int:
        """Return the position of ``category`` in the category list."""

        try:
            return self.categories.index(category)
        except ValueError as error:
            raise ValueError(f"Unknown category: {category}") from error

    @staticmethod
    def signed_amounts(entry: BookEntry) -> Tuple[Number, Number]:
        """Withdrawals become negative; deposits keep the amount given."""

        if entry.transaction_type is TransactionType.WITHDRAWAL:
            return -abs(entry.raw_amount), -abs(entry.cooked_amount)
        return entry.raw_amount, entry.cooked_amount

    def add(self, entry: BookEntry) -> LedgerTransaction:
        """Insert a labelled entry into the ledger."""

        raw, cooked = self.signed_amounts(entry)
        return self.ledger.insert(entry.transaction_id, self.category_id(entry.category), raw, cooked)

    def edit(self, entry: BookEntry) -> LedgerTransaction:
        """Replace the ledger record matching ``entry.transaction_id``."""

        raw, cooked = self.signed_amounts(entry)
        return self.ledger.update(entry.transaction_id, self.category_id(entry.category), raw, cooked)

    def remove(self, transaction_id: Hashable) -> LedgerTransaction:
        return self.ledger.remove(transaction_id)

    def _record_for(self, entry: BookEntry, categories: List[str]) -> LedgerTransaction:
        try:
            category_id = categories.index(entry.category)
        except ValueError as error:
            raise ValueError(f"Unknown category: {entry.category}") from error
        raw, cooked = self.signed_amounts(entry)
        return LedgerTransaction(entry.transaction_id, category_id, raw, cooked)

    def populate(
        self,
        entries: Iterable[BookEntry],
        categories: Optional[Sequence[str]] = None,
    ) -> int:
        """Reload the ledger from ``entries``, optionally replacing categories.

        Every entry is resolved before anything is replaced; a bad entry
        leaves both the category list and the ledger untouched.
        """

        new_categories = list(categories) if categories is not None else self.categories
        records = [self._record_for(entry, new_categories) for entry in entries]
        count = self.ledger.populate(records, replace=True)
        self.categories = list(new_categories)
        LOGGER.info(
            "Book populated with %s entries across %s categories",
            count,
            len(self.categories),
        )
        return count

    def current_balances(self, initial_raw: Number = 0, initial_cooked: Number = 0) -> Balances:
        return self.ledger.current_balances(initial_raw, initial_cooked)

    def category_totals(self) -> Dict[str, List[Dict[str, object]]]:
        """Return labelled category totals grouped into income and expenses."""

        partition = self.ledger.partitioned_totals(len(self.categories))

        def _labelled(totals: Iterable) -> List[Dict[str, object]]:
            return [
                {
                    "category": self.categories[total.category_index],
                    "id": total.category_index,
                    "raw_total": total.raw_total,
                    "cooked_total": total.cooked_total,
                }
                for total in totals
            ]

        return {"income": _labelled(partition.income), "expenses": _labelled(partition.expenses)}
