"""Pytest configuration: a fresh SQLite ledger per test.

Every test that needs the ledger gets its own seeded database file under
``tmp_path``; cached engines are disposed afterwards so no connection outlives
its temporary directory.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from bank_import.categories import LedgerReconciler
from bank_import.classify import TransactionClassifier
from bank_import.ledger import LedgerSession
from db.client import dispose_engines
from tests.helpers.db import ACCOUNT_MAPPING, BUDGET_ID, bootstrap_seeded_ledger


@pytest.fixture(autouse=True)
def _dispose_engines() -> Iterator[None]:
    yield
    dispose_engines()


@pytest.fixture
def ledger_url(tmp_path: Path) -> str:
    return bootstrap_seeded_ledger(tmp_path / "ledger.db")


@pytest.fixture
def ledger(ledger_url: str) -> Iterator[LedgerSession]:
    session = LedgerSession(ledger_url, None, BUDGET_ID)
    session.open()
    yield session
    if session.is_open:
        session.close()


@pytest.fixture
def reconciler(ledger: LedgerSession) -> LedgerReconciler:
    return LedgerReconciler(ledger)


@pytest.fixture
def classifier(reconciler: LedgerReconciler) -> TransactionClassifier:
    return TransactionClassifier(ACCOUNT_MAPPING, reconciler)
