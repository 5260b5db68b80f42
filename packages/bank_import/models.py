"""Data models for ``bank_import``.

- :class:`BankRow`: one raw record of a Bank Australia CSV export, fields kept
  as the exact strings the bank wrote.
- :class:`NormalizedTransaction`: the ledger-ready candidate produced by the
  classifier. Immutable; extended via :meth:`NormalizedTransaction.extend`.
- Snapshot DTOs (:class:`Account`, :class:`Payee`, :class:`Category`) detached
  from the ORM rows of the ledger database, plus :class:`ImportResult`.
- Account mapping helpers used by the CLI before any ledger traffic.
"""

from __future__ import annotations

import datetime as dt
import enum
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, model_validator

# ---------------------------------------------------------------------------
# Raw CSV rows
# ---------------------------------------------------------------------------


class TransactionType(enum.Enum):
    """The closed set of transaction-type tags in the export."""

    ALL = "ALL"
    ALL_WDLS = "ALL WDLS"
    ALL_DEPOSITS = "ALL DEPOSITS"
    BPAY = "BPAY"
    VISA = "VISA"


# CSV header -> BankRow attribute, in export column order.
CSV_COLUMNS: dict[str, str] = {
    "Account number": "account_number",
    "Transaction type": "transaction_type",
    "Effective date": "effective_date",
    "Create date": "create_date",
    "Reference no": "reference_no",
    "Debit amount": "debit_amount",
    "Credit amount": "credit_amount",
    "Balance after transfer": "balance_after",
    "Description": "description",
    "Long description": "long_description",
    "Cheque number": "cheque_number",
    "Merchant name": "merchant_name",
    "Category list": "category_list",
}


@dataclass(frozen=True, slots=True)
class BankRow:
    """A single CSV record with the bank's raw string values.

    ``transaction_type`` is kept as the raw tag; the classifier maps it onto
    :class:`TransactionType` and rejects unknown tags there, scoped to the row.
    """

    account_number: str
    transaction_type: str
    effective_date: str
    debit_amount: str
    credit_amount: str
    description: str
    long_description: str
    merchant_name: str = ""
    category_list: str = ""
    create_date: str = ""
    reference_no: str = ""
    balance_after: str = ""
    cheque_number: str = ""

    @classmethod
    def from_record(cls, record: Mapping[str, str | None]) -> Self:
        values = {
            attr: (record.get(header) or "") for header, attr in CSV_COLUMNS.items()
        }
        return cls(**values)


# ---------------------------------------------------------------------------
# Normalized transaction candidate
# ---------------------------------------------------------------------------


class NormalizedTransaction(BaseModel):
    """A transaction ready to be handed to the ledger.

    ``payee`` (a resolved payee id) is only set for transfers between ledger
    accounts; every other branch sets the free-text ``payee_name``. The two are
    mutually exclusive.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    account: str
    date: dt.date
    amount: int
    notes: str
    cleared: bool = True
    imported_payee: str | None = None
    payee_name: str | None = None
    payee: str | None = None
    category: str | None = None
    imported_id: str | None = None

    @model_validator(mode="after")
    def _single_payee(self) -> Self:
        if self.payee is not None and self.payee_name is not None:
            raise ValueError("payee and payee_name are mutually exclusive")
        return self

    def extend(self, **changes: Any) -> NormalizedTransaction:
        """Return a validated copy with ``changes`` applied."""

        return type(self).model_validate({**self.model_dump(), **changes})


# ---------------------------------------------------------------------------
# Ledger snapshot DTOs
# ---------------------------------------------------------------------------


class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)


class Account(_Snapshot):
    id: str
    name: str
    type: str = "checking"
    offbudget: bool = False
    closed: bool = False


class Payee(_Snapshot):
    id: str
    name: str
    category_id: str | None = None
    transfer_acct: str | None = None


class Category(_Snapshot):
    id: str
    name: str
    group_id: str
    is_income: bool = False


@dataclass(slots=True)
class ImportResult:
    """Outcome of importing one batch into one account."""

    added: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Account mapping
# ---------------------------------------------------------------------------

_BANK_ACCOUNT_RE = re.compile(r"\d{8}")
_LEDGER_ACCOUNT_RE = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


def is_bank_account_number(value: str | None) -> bool:
    """True for Bank Australia account numbers (exactly eight digits)."""

    return bool(value) and _BANK_ACCOUNT_RE.fullmatch(value) is not None


def is_ledger_account_id(value: str | None) -> bool:
    """True for canonical UUID-shaped ledger account ids."""

    return bool(value) and _LEDGER_ACCOUNT_RE.fullmatch(value) is not None


def parse_account_mapping(pairs: Iterable[str]) -> dict[str, str]:
    """Parse ``bank-account-number=ledger-account-id`` pairs.

    Raises ``ValueError`` naming the first malformed pair.
    """

    mapping: dict[str, str] = {}
    for pair in pairs:
        bank_id, sep, ledger_id = pair.partition("=")
        if not sep or not is_bank_account_number(bank_id) or not is_ledger_account_id(ledger_id):
            raise ValueError(f"Invalid account mapping or invalid account format: {pair}")
        mapping[bank_id] = ledger_id
    return mapping


__all__ = [
    "Account",
    "BankRow",
    "CSV_COLUMNS",
    "Category",
    "ImportResult",
    "NormalizedTransaction",
    "Payee",
    "TransactionType",
    "is_bank_account_number",
    "is_ledger_account_id",
    "parse_account_mapping",
]
