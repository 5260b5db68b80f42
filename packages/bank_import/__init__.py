"""Public interface for the ``bank_import`` package.

Re-exports the importer, classifier, ledger session and the public models and
errors as the stable import surface. No runtime logic lives here.
"""

from .api import BankImporter, group_by_account
from .categories import LedgerReconciler
from .classify import TransactionClassifier
from .dates import extract_date
from .errors import (
    AccountNotFoundError,
    BankImportError,
    FormatError,
    LedgerError,
    ParseError,
    TransferPayeeNotFoundError,
)
from .ingest import load_rows
from .ledger import LedgerSession
from .models import (
    BankRow,
    ImportResult,
    NormalizedTransaction,
    TransactionType,
    parse_account_mapping,
)

__all__ = [
    # API
    "BankImporter",
    "group_by_account",
    "LedgerReconciler",
    "LedgerSession",
    "TransactionClassifier",
    "extract_date",
    "load_rows",
    "parse_account_mapping",
    # Models
    "BankRow",
    "ImportResult",
    "NormalizedTransaction",
    "TransactionType",
    # Errors
    "AccountNotFoundError",
    "BankImportError",
    "FormatError",
    "LedgerError",
    "ParseError",
    "TransferPayeeNotFoundError",
]
