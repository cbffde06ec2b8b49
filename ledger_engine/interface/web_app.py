"""Mini README: FastAPI-powered HTTP interface for the transaction ledger.

Structure:
    * TransactionPayload / TransactionChange - request bodies for mutations.
    * create_application - application factory wiring routes to a ledger.

Each route forwards to a single ``TransactionLedger`` operation and returns
plain JSON values. Ledger errors are mapped onto HTTP status codes: unknown
ids become 404, rejected duplicates 409, malformed selectors 422.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..configuration import get_settings
from ..ledger import (
    DuplicateTransactionError,
    TransactionLedger,
    TransactionNotFoundError,
    ValuationKind,
)
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class TransactionChange(BaseModel):
    """Category and amounts applied by an insert or update."""

    category_id: int = Field(..., description="Index into the caller-owned category list.")
    raw_amount: float = Field(..., description="Signed actual amount.")
    cooked_amount: float = Field(..., description="Signed adjusted amount.")


class TransactionPayload(TransactionChange):
    """Request body for inserting a transaction."""

    transaction_id: str = Field(..., min_length=1)


def create_application(
    ledger: Optional[TransactionLedger] = None,
    categories: Optional[Sequence[str]] = None,
) -> FastAPI:
    """Create the FastAPI application bound to ``ledger``.

    When ``categories`` is supplied the category count defaults to its length
    and totals are labelled with the category names.
    """

    settings = get_settings()
    if ledger is None:
        ledger = TransactionLedger(duplicate_policy=settings.duplicate_policy)
    category_names: List[str] = list(categories or [])

    app = FastAPI(title="Ledger Engine", version="0.1.0")

    def _resolve_count(category_count: Optional[int]) -> int:
        if category_count is None:
            return len(category_names)
        if category_count < 0:
            raise HTTPException(status_code=422, detail="category_count must be zero or positive")
        return category_count

    def _label(entry: Dict[str, object]) -> Dict[str, object]:
        index = entry["category_index"]
        if isinstance(index, int) and index < len(category_names):
            entry["category"] = category_names[index]
        return entry

    @app.get("/transactions")
    async def list_transactions() -> JSONResponse:
        """Return every live transaction in insertion order."""

        records = [record.as_dict() for record in ledger.transactions()]
        LOGGER.debug("Returning %s transactions", len(records))
        return JSONResponse({"transactions": records})

    @app.post("/transactions")
    async def insert_transaction(payload: TransactionPayload) -> JSONResponse:
        """Insert a transaction carrying pre-signed amounts."""

        try:
            record = ledger.insert(
                payload.transaction_id,
                payload.category_id,
                payload.raw_amount,
                payload.cooked_amount,
            )
        except DuplicateTransactionError as error:
            raise HTTPException(status_code=409, detail=str(error)) from error
        LOGGER.info("Inserted transaction %s via API", payload.transaction_id)
        return JSONResponse(record.as_dict(), status_code=201)

    @app.put("/transactions/{transaction_id}")
    async def update_transaction(transaction_id: str, change: TransactionChange) -> JSONResponse:
        """Replace the category and amounts of a live transaction."""

        try:
            record = ledger.update(
                transaction_id,
                change.category_id,
                change.raw_amount,
                change.cooked_amount,
            )
        except TransactionNotFoundError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        LOGGER.info("Updated transaction %s via API", transaction_id)
        return JSONResponse(record.as_dict())

    @app.delete("/transactions/{transaction_id}")
    async def remove_transaction(transaction_id: str) -> JSONResponse:
        """Remove a live transaction."""

        try:
            record = ledger.remove(transaction_id)
        except TransactionNotFoundError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        LOGGER.info("Removed transaction %s via API", transaction_id)
        return JSONResponse(record.as_dict())

    @app.get("/balance")
    async def balance(valuation: str = "raw", initial_balance: float = 0.0) -> JSONResponse:
        """Return ``initial_balance`` plus the selected valuation of every transaction."""

        try:
            kind = ValuationKind.from_value(valuation)
        except ValueError as error:
            raise HTTPException(status_code=422, detail=str(error)) from error
        value = ledger.balance_for_valuation(kind, initial_balance)
        return JSONResponse({"valuation": kind.value, "balance": value})

    @app.get("/category-totals")
    async def category_totals(
        category_count: Optional[int] = None,
        grouped: bool = False,
    ) -> JSONResponse:
        """Return per-category totals, optionally split into income and expenses."""

        count = _resolve_count(category_count)
        if grouped:
            partition = ledger.partitioned_totals(count).as_dict()
            payload = {group: [_label(entry) for entry in entries] for group, entries in partition.items()}
            return JSONResponse(payload)
        totals = [_label(total.as_dict()) for total in ledger.category_totals(count)]
        return JSONResponse({"category_totals": totals})

    @app.get("/summary")
    async def summary(
        category_count: Optional[int] = None,
        initial_raw: float = 0.0,
        initial_cooked: float = 0.0,
    ) -> JSONResponse:
        """Aggregate balances and grouped totals for dashboards."""

        count = _resolve_count(category_count)
        metrics = ledger.summarise(count, initial_raw, initial_cooked)
        LOGGER.debug(
            "Summary -> transactions: %s raw: %.2f cooked: %.2f",
            metrics["transaction_count"],
            metrics["balances"]["current_raw"],
            metrics["balances"]["current_cooked"],
        )
        return JSONResponse(metrics)

    return app
