"""Mini README: Entry point CLI for running and inspecting TrackEase.

This script exposes a Typer CLI that starts the FastAPI application with
configurable host, port and production flags, and offers offline helpers
that read the configured store directly: a printed summary report, a CSV
export and database schema initialisation. Settings come from environment
variables (``TRACKEASE_*``) or a ``.env`` file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import uvicorn

from trackease.configuration import get_settings
from trackease.export import CsvExporter, export_transactions_csv
from trackease.finance import build_report, format_currency
from trackease.logging_utils import configure_root_logger
from trackease.storage import StorageError, create_store

cli = typer.Typer(help="Run and inspect the TrackEase expense tracker.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # Browsers cannot navigate to the 0.0.0.0 sentinel, so point at localhost instead.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting TrackEase on {effective_host}:{effective_port} "
        f"(backend={settings.storage_backend}, auth={'on' if settings.auth_enabled else 'off'}).\n"
        f"Open your browser at http://{browser_host}:{effective_port}"
    )
    uvicorn.run(
        "trackease.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def summary(
    owner: Optional[str] = typer.Option(None, help="Restrict the report to one user id."),
) -> None:
    """Print totals and the monthly rollup from the configured store."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    store = create_store(settings)
    try:
        transactions = store.list_transactions(owner)
    except StorageError as error:
        typer.secho(f"Could not read transactions: {error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from error
    finally:
        store.close()

    report = build_report(transactions)
    symbol = settings.currency_symbol
    typer.echo(f"Transactions: {len(transactions)}")
    typer.echo(f"Income:       {format_currency(report.totals.income_cents, symbol)}")
    typer.echo(f"Expenses:     {format_currency(report.totals.expense_cents, symbol)}")
    typer.echo(f"Balance:      {format_currency(report.totals.balance_cents, symbol)}")
    typer.echo(f"Spent today:  {format_currency(report.today_expense_cents, symbol)}")
    if report.monthly:
        typer.echo("")
        typer.echo(f"{'Month':<8} {'Income':>14} {'Expenses':>14} {'Balance':>14}")
        for month in report.monthly:
            typer.echo(
                f"{month.month:<8} "
                f"{format_currency(month.income_cents, symbol):>14} "
                f"{format_currency(month.expense_cents, symbol):>14} "
                f"{format_currency(month.balance_cents, symbol):>14}"
            )


@cli.command()
def export(
    destination: Optional[Path] = typer.Argument(None, help="CSV file to write; prints to stdout when omitted."),
    owner: Optional[str] = typer.Option(None, help="Restrict the export to one user id."),
) -> None:
    """Export transactions as CSV, newest first."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    store = create_store(settings)
    try:
        transactions = store.list_transactions(owner)
    except StorageError as error:
        typer.secho(f"Could not read transactions: {error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from error
    finally:
        store.close()

    if destination is None:
        typer.echo(export_transactions_csv(transactions))
        return
    written = CsvExporter().export(transactions, destination)
    typer.echo(f"Wrote {len(transactions)} transactions to {written}")


@cli.command("init-db")
def init_db() -> None:
    """Create the users and transactions tables for the SQL backend."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    if settings.storage_backend not in {"sql", "postgres"}:
        typer.echo(f"Backend '{settings.storage_backend}' has no schema to create.")
        return
    store = create_store(settings)
    store.close()
    typer.echo("Database schema ready.")


if __name__ == "__main__":
    cli()
