"""Ingest utilities shared by the importer and the CLI.

Exposes :func:`load_rows`, which reads a Bank Australia CSV export into
:class:`~bank_import.models.BankRow` records. Any problem with the file itself
(unreadable, not UTF-8, malformed quoting, missing header columns) surfaces as
:class:`~bank_import.errors.FormatError`; individual rows are not validated.
"""

from __future__ import annotations

import csv
from os import PathLike
from pathlib import Path

from ..errors import FormatError
from ..models import BankRow
from .adapters.bank_australia_csv import to_rows

REQUIRED_COLUMNS: frozenset[str] = frozenset(
    {
        "Account number",
        "Transaction type",
        "Effective date",
        "Debit amount",
        "Credit amount",
        "Description",
        "Long description",
        "Merchant name",
        "Category list",
    }
)


def load_rows(csv_path: str | PathLike[str]) -> list[BankRow]:
    """Read a Bank Australia CSV export and return its rows in file order."""

    p = Path(csv_path)
    try:
        with p.open(encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f, strict=True)
            headers = set(reader.fieldnames or [])
            if not headers:
                raise FormatError(f"CSV appears to have no header row: {csv_path}")
            missing = sorted(REQUIRED_COLUMNS - headers)
            if missing:
                raise FormatError(
                    f"CSV header mismatch for {csv_path}. Missing columns: " + ", ".join(missing)
                )
            return list(to_rows(reader))
    except OSError as exc:
        raise FormatError(f"Unable to read {csv_path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise FormatError(f"{csv_path} is not UTF-8 text: {exc}") from exc
    except csv.Error as exc:
        raise FormatError(f"Failed to parse CSV {csv_path}: {exc}") from exc


__all__ = ["REQUIRED_COLUMNS", "load_rows"]
