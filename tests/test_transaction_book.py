"""Mini README: Tests for the category-aware transaction book.

Ensures withdrawals are stored as negative amounts, category names map to
ledger indices, and grouped totals carry category labels.
"""

from __future__ import annotations

import pytest

from ledger_engine.ledger import BookEntry, TransactionBook, TransactionType, ValuationKind

CATEGORIES = ["Groceries", "Salary", "Transfers"]


def _entry(transaction_id, category, transaction_type, raw, cooked) -> BookEntry:
    return BookEntry(
        transaction_id=transaction_id,
        category=category,
        transaction_type=TransactionType.from_str(transaction_type),
        raw_amount=raw,
        cooked_amount=cooked,
    )


def test_withdrawals_are_stored_as_negative_amounts() -> None:
    book = TransactionBook(CATEGORIES)

    book.add(_entry(1, "Groceries", "Withdrawal", 40, 35))
    book.add(_entry(2, "Salary", "Deposit", 1500, 1500))

    record = book.ledger.get(1)
    assert (record.raw_amount, record.cooked_amount) == (-40, -35)
    assert record.category_id == 0
    assert book.ledger.balance_for_valuation(ValuationKind.RAW, 0) == 1460


def test_withdrawal_already_negative_stays_negative() -> None:
    entry = _entry(1, "Groceries", "withdrawal", -40, -35)

    assert TransactionBook.signed_amounts(entry) == (-40, -35)


def test_edit_and_remove_forward_to_the_ledger() -> None:
    book = TransactionBook(CATEGORIES)
    book.add(_entry(5, "Groceries", "Withdrawal", 40, 35))

    book.edit(_entry(5, "Groceries", "Withdrawal", 40, 30))
    balances = book.current_balances(100, 100)

    assert balances.cooked == 70
    assert balances.raw == 60
    book.remove(5)
    assert len(book.ledger) == 0


def test_unknown_category_and_type_are_rejected() -> None:
    book = TransactionBook(CATEGORIES)

    with pytest.raises(ValueError):
        book.add(_entry(1, "Holidays", "Deposit", 10, 10))
    with pytest.raises(ValueError):
        TransactionType.from_str("refund")


def test_category_totals_are_grouped_and_labelled() -> None:
    """Zero totals land in expenses; positive totals in income."""

    book = TransactionBook()
    book.populate(
        [
            _entry("a", "Groceries", "Withdrawal", 120, 100),
            _entry("b", "Salary", "Deposit", 300, 280),
        ],
        categories=CATEGORIES,
    )

    totals = book.category_totals()

    assert [item["category"] for item in totals["expenses"]] == ["Groceries", "Transfers"]
    assert [item["category"] for item in totals["income"]] == ["Salary"]
    assert totals["expenses"][1] == {
        "category": "Transfers",
        "id": 2,
        "raw_total": 0,
        "cooked_total": 0,
    }


def test_populate_replaces_previous_contents() -> None:
    book = TransactionBook(CATEGORIES)
    book.add(_entry(1, "Groceries", "Withdrawal", 10, 10))

    count = book.populate([_entry(2, "Salary", "Deposit", 50, 50)])

    assert count == 1
    assert 1 not in book.ledger
    assert book.current_balances().raw == 50


def test_entry_from_mapping_accepts_camel_case_log_rows() -> None:
    entry = BookEntry.from_mapping(
        {
            "id": 9,
            "category": "Groceries",
            "type": "Withdrawal",
            "rawAmount": "12.50",
            "cookedAmount": 10,
        }
    )

    assert entry.transaction_type is TransactionType.WITHDRAWAL
    assert entry.raw_amount == pytest.approx(12.5)
    assert entry.cooked_amount == 10

    with pytest.raises(ValueError):
        BookEntry.from_mapping({"id": 1, "category": "Salary"})


def test_failed_populate_keeps_previous_categories_and_entries() -> None:
    """An unknown category later in the batch leaves the book as it was."""

    book = TransactionBook(["Salary"])
    book.add(_entry(1, "Salary", "Deposit", 100, 100))

    with pytest.raises(ValueError):
        book.populate(
            [
                _entry(2, "Salary", "Deposit", 5, 5),
                _entry(3, "Rent", "Withdrawal", 7, 7),
            ],
            categories=["Salary", "Food"],
        )

    assert book.categories == ["Salary"]
    assert [record.transaction_id for record in book.ledger.transactions()] == [1]
    assert book.current_balances().raw == 100
