# ruff: noqa: I001
"""CLI for the ``bank_import`` package.

Imports one or more Bank Australia CSV exports into a budget ledger. Ledger
connection settings may come from options or the environment (a local
``.env`` is loaded first, without overriding variables already set):

- ``--url`` / ``DATABASE_URL``: ledger server (SQLAlchemy database URL)
- ``--password`` / ``LEDGER_PASSWORD``: ledger credential
- ``--sync-id`` / ``LEDGER_SYNC_ID``: budget to import into

Every ``--account-mapping`` pair is validated before the ledger is contacted.
Business logic lives in :mod:`bank_import.api`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

from .api import BankImporter
from .errors import BankImportError
from .ledger import LedgerSession
from .logging_setup import configure_logging
from .models import parse_account_mapping

app = typer.Typer(
    add_completion=False,
    help="Import Bank Australia CSV exports into a budget ledger.",
)


@app.command()
def import_csv(
    url: Annotated[
        str,
        typer.Option("--url", "-u", envvar="DATABASE_URL", help="Ledger server URL."),
    ],
    sync_id: Annotated[
        str,
        typer.Option(
            "--sync-id", "-s", envvar="LEDGER_SYNC_ID", help="Ledger budget (sync) id."
        ),
    ],
    account_mappings: Annotated[
        list[str],
        typer.Option(
            "--account-mapping",
            "-m",
            help="Account mapping in the format: bank-account-id=ledger-account-id",
        ),
    ],
    files: Annotated[
        list[Path],
        typer.Option("--file", "-f", dir_okay=False, help="CSV export to import."),
    ],
    password: Annotated[
        str | None,
        typer.Option("--password", "-p", envvar="LEDGER_PASSWORD", help="Ledger password."),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(help="Log level (falls back to BANK_IMPORT_LOG_LEVEL, then INFO)."),
    ] = None,
) -> None:
    configure_logging(log_level)

    try:
        mapping = parse_account_mapping(account_mappings)
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    ledger = LedgerSession(url, password, sync_id)
    importer = BankImporter(mapping, ledger)
    try:
        failed = importer.import_files(files)
    except BankImportError as exc:
        typer.echo(f"Error: {exc}", err=True)
        if exc.row is not None:
            typer.echo(f"Offending row: {exc.row}", err=True)
        raise typer.Exit(1) from exc
    except SQLAlchemyError as exc:
        typer.echo(f"Error: ledger request failed: {exc}", err=True)
        raise typer.Exit(1) from exc
    finally:
        if ledger.is_open:
            ledger.close()

    if failed:
        typer.echo("Error: malformed input, not imported: " + ", ".join(failed), err=True)
        raise typer.Exit(1)


def run() -> None:
    """Console entry point: load ``.env`` before options read the environment."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    app()


if __name__ == "__main__":  # pragma: no cover - exercised via the console script
    run()
