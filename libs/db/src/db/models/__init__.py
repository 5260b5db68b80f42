"""Shared SQLAlchemy models registry for the ledger database.

Currently includes the budget ledger models used by ``bank_import``.
"""

from .ledger import (
    Base,
    LedgerAccount,
    LedgerBudget,
    LedgerCategory,
    LedgerCategoryGroup,
    LedgerPayee,
    LedgerTransaction,
)

__all__ = [
    "Base",
    "LedgerAccount",
    "LedgerBudget",
    "LedgerCategory",
    "LedgerCategoryGroup",
    "LedgerPayee",
    "LedgerTransaction",
]
