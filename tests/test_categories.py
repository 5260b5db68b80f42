from __future__ import annotations

import pytest

from bank_import.categories import INTEREST_CATEGORY, LedgerReconciler
from bank_import.errors import LedgerError
from bank_import.ledger import LedgerSession
from tests.helpers.db import BUDGET_ID, EVERYDAY_ID, ORPHAN_ID, SEED, bootstrap_seeded_ledger


def test_find_category_is_exact_match(reconciler: LedgerReconciler):
    assert reconciler.find_category("Groceries") is not None
    assert reconciler.find_category("groceries") is None


def test_existing_category_is_returned_without_creating(
    reconciler: LedgerReconciler, ledger: LedgerSession
):
    before = len(ledger.categories)
    assert reconciler.get_or_create_category("Food").name == "Food"
    assert len(ledger.categories) == before


def test_missing_category_lands_in_default_group(
    reconciler: LedgerReconciler, ledger: LedgerSession
):
    created = reconciler.get_or_create_category("Hardware")

    assert created.group_id == ledger.default_category_group_id
    assert created.is_income is False
    # Second lookup is served from the snapshot.
    assert reconciler.get_or_create_category("Hardware") == created
    assert [c.name for c in ledger.categories].count("Hardware") == 1


def test_interest_lands_in_income_group(reconciler: LedgerReconciler, ledger: LedgerSession):
    created = reconciler.get_or_create_category(INTEREST_CATEGORY)

    assert created.group_id == ledger.income_category_group_id
    assert created.is_income is True


def test_missing_income_group_is_an_error(tmp_path):
    seed = {**SEED, "category_groups": [SEED["category_groups"][0]]}
    url = bootstrap_seeded_ledger(tmp_path / "no-income.db", seed)
    session = LedgerSession(url, None, BUDGET_ID)
    session.open()
    try:
        with pytest.raises(LedgerError, match="No income category group"):
            LedgerReconciler(session).get_or_create_category(INTEREST_CATEGORY)
    finally:
        session.close()


def test_find_transfer_payee(reconciler: LedgerReconciler):
    payee = reconciler.find_transfer_payee(EVERYDAY_ID)
    assert payee is not None and payee.name == "Everyday"
    assert reconciler.find_transfer_payee(ORPHAN_ID) is None
