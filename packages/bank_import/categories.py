"""Category and payee reconciliation against the ledger snapshot.

The classifier never talks to the ledger directly; it goes through
:class:`LedgerReconciler`, which

- looks categories up by exact name in the session snapshot,
- creates missing categories on demand (``Interest`` lands in the income
  group, every other name in the default expense group) and relies on the
  snapshot append for idempotency within a run,
- finds the transfer payee bound to a ledger account. Transfer payees are
  created when an account is onboarded and are never created here.
"""

from __future__ import annotations

from .errors import LedgerError
from .ledger import LedgerSession
from .logging_setup import get_logger
from .models import Category, Payee

logger = get_logger("bank_import.categories")

INTEREST_CATEGORY = "Interest"


class LedgerReconciler:
    def __init__(self, ledger: LedgerSession) -> None:
        self._ledger = ledger

    def find_category(self, name: str) -> Category | None:
        return next((c for c in self._ledger.categories if c.name == name), None)

    def get_or_create_category(self, name: str) -> Category:
        """Return the category called ``name``, creating it when absent."""

        category = self.find_category(name)
        if category is not None:
            return category

        if name == INTEREST_CATEGORY:
            group_id = self._ledger.income_category_group_id
            if group_id is None:
                raise LedgerError("No income category group ID found, cannot create category")
        else:
            group_id = self._ledger.default_category_group_id
            if group_id is None:
                raise LedgerError("No default category group ID found, cannot create category")

        logger.info("Category not found: %s, creating...", name)
        return self._ledger.create_category(name, group_id)

    def find_transfer_payee(self, account_id: str) -> Payee | None:
        return next((p for p in self._ledger.payees if p.transfer_acct == account_id), None)


__all__ = ["INTEREST_CATEGORY", "LedgerReconciler"]
