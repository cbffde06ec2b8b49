"""Mini README: Entry point CLI for the ledger engine.

This script exposes a Typer CLI with two commands: ``run`` starts the FastAPI
service through uvicorn, and ``summarise`` repopulates a ledger from a JSON
transaction log and prints balances plus grouped category totals. Settings
are read from ``LEDGER_ENGINE_`` environment variables when flags are omitted.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
import uvicorn

from ledger_engine.configuration import get_settings
from ledger_engine.ledger import BookEntry, TransactionBook, TransactionLedger
from ledger_engine.logging_utils import configure_root_logger, get_logger

LOGGER = get_logger(__name__)

cli = typer.Typer(help="Run and inspect the in-memory transaction ledger.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False,
        help="Use production server settings (disable auto-reload). Auto-reload also"
        " requires the development environment.",
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    typer.echo(f"Starting ledger engine on http://{effective_host}:{effective_port}")
    uvicorn.run(
        "ledger_engine.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production and settings.environment == "development",
    )


@cli.command()
def summarise(
    log_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON transaction log."),
    initial_raw: float = typer.Option(0.0, help="Opening raw balance."),
    initial_cooked: float = typer.Option(0.0, help="Opening cooked balance."),
) -> None:
    """Load a transaction log and print balances and category totals."""

    settings = get_settings()
    configure_root_logger(settings.log_level)

    try:
        payload = json.loads(log_path.read_text(encoding="utf-8"))
        categories = payload["categories"]
        entries = [BookEntry.from_mapping(item) for item in payload["transactions"]]
        book = TransactionBook(
            categories,
            ledger=TransactionLedger(duplicate_policy=settings.duplicate_policy),
        )
        book.populate(entries)
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as error:
        LOGGER.error("Could not load transaction log %s: %s", log_path, error)
        typer.echo(f"Invalid transaction log: {error}", err=True)
        raise typer.Exit(code=1) from error

    balances = book.current_balances(initial_raw, initial_cooked)
    typer.echo(f"Transactions: {len(book.ledger)}")
    typer.echo(f"Current raw balance: {balances.raw:.2f}")
    typer.echo(f"Current cooked balance: {balances.cooked:.2f}")
    for group, totals in book.category_totals().items():
        typer.echo(f"{group.capitalize()}:")
        for total in totals:
            typer.echo(
                f"  {total['category']}: raw {total['raw_total']:.2f}"
                f" cooked {total['cooked_total']:.2f}"
            )


if __name__ == "__main__":
    cli()
