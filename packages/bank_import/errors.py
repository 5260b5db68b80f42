"""Error taxonomy for the bank import pipeline.

Every error raised while classifying a CSV row carries that row on ``row`` so
callers can report the raw bank fields and extend the pattern tables.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import BankRow


class BankImportError(Exception):
    """Base class for all import failures."""

    def __init__(self, message: str, *, row: BankRow | None = None) -> None:
        super().__init__(message)
        self.row = row


class FormatError(BankImportError):
    """Malformed input file or date string; aborts the current file."""


class AccountNotFoundError(BankImportError):
    """A bank account number (row account or transfer target) is not mapped."""

    def __init__(self, account_number: str, *, row: BankRow | None = None) -> None:
        super().__init__(
            f"Unable to find account with account number: {account_number}", row=row
        )
        self.account_number = account_number


class TransferPayeeNotFoundError(BankImportError):
    """The ledger has no transfer payee for a mapped destination account."""

    def __init__(self, account_id: str, *, row: BankRow | None = None) -> None:
        super().__init__(
            f"Unable to find transfer payee for account: {account_id}, "
            "this should have been created when the account was created",
            row=row,
        )
        self.account_id = account_id


class ParseError(BankImportError):
    """A narrative does not match any recognized shape for its transaction type."""


class LedgerError(BankImportError):
    """The ledger session was misused or is missing required records."""


__all__ = [
    "AccountNotFoundError",
    "BankImportError",
    "FormatError",
    "LedgerError",
    "ParseError",
    "TransferPayeeNotFoundError",
]
