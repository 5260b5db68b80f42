from __future__ import annotations

from datetime import date
from pathlib import Path

from sqlalchemy import select

from bank_import.api import BankImporter
from bank_import.ledger import LedgerSession
from db.client import session_scope
from db.models.ledger import LedgerCategory, LedgerPayee, LedgerTransaction
from tests.helpers.db import (
    ACCOUNT_MAPPING,
    BUDGET_ID,
    EVERYDAY_ID,
    SAVINGS_ID,
    bootstrap_seeded_ledger,
)

SAMPLE_CSV = Path(__file__).resolve().parents[1] / "data/bank_australia_sample.csv"


def _snapshot(db_url: str) -> dict[str, list[tuple]]:
    with session_scope(database_url=db_url) as s:
        payee_names = {p.id: p.name for p in s.scalars(select(LedgerPayee))}
        category_names = {c.id: c.name for c in s.scalars(select(LedgerCategory))}
        out: dict[str, list[tuple]] = {}
        for tx in s.scalars(
            select(LedgerTransaction).order_by(LedgerTransaction.date, LedgerTransaction.amount)
        ):
            out.setdefault(tx.account_id, []).append(
                (
                    tx.date,
                    tx.amount,
                    payee_names.get(tx.payee_id),
                    category_names.get(tx.category_id),
                    tx.imported_id,
                    tx.cleared,
                )
            )
        return out


def _run(db_url: str, paths: list[Path]) -> list[str]:
    ledger = LedgerSession(db_url, None, BUDGET_ID)
    try:
        return BankImporter(ACCOUNT_MAPPING, ledger).import_files(paths)
    finally:
        if ledger.is_open:
            ledger.close()


def test_e2e_import_sample_export_is_idempotent(tmp_path: Path):
    db_url = bootstrap_seeded_ledger(tmp_path / "ledger-e2e.db")

    assert _run(db_url, [SAMPLE_CSV]) == []
    first = _snapshot(db_url)

    assert first[EVERYDAY_ID] == [
        (date(2023, 1, 2), -4520, "My Supermarket", "Groceries", "1111111111", True),
        (date(2023, 1, 3), -10000, "Savings", None, None, True),
        (date(2023, 1, 3), -2000, "PERSON ONE", None, "123456789", True),
        (date(2023, 1, 4), 250000, "EMPLOYER PTY LTD", None, None, True),
        (date(2023, 1, 5), -15000, "Energy Co", None, "12345-987654321", True),
    ]
    # The transfer is booked once, from the sending side; interest lands on
    # the bank's payee in a freshly created income category.
    assert first[SAVINGS_ID] == [
        (date(2023, 1, 3), 10000, "Everyday", None, None, True),
        (date(2023, 1, 31), 123, "Bank Australia", "Interest", None, True),
    ]

    assert _run(db_url, [SAMPLE_CSV]) == []
    assert _snapshot(db_url) == first


def test_e2e_malformed_file_is_skipped_and_run_continues(tmp_path: Path):
    db_url = bootstrap_seeded_ledger(tmp_path / "ledger-e2e.db")
    broken = tmp_path / "broken.csv"
    broken.write_text("Account number,Transaction type\n12345678,VISA\n", encoding="utf-8")

    failed = _run(db_url, [broken, SAMPLE_CSV])

    assert failed == [str(broken)]
    snapshot = _snapshot(db_url)
    assert len(snapshot[EVERYDAY_ID]) == 5
    assert len(snapshot[SAVINGS_ID]) == 2
