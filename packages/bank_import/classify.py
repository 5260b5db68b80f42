"""Row classification: Bank Australia CSV rows to ledger transactions.

Each row's ``Transaction type`` selects one strategy. Every strategy starts
from the same base transaction (mapped account, date, signed amount in cents,
archival notes, ``cleared=True``) and layers payee, category, transfer and
reference-id details recovered from the free-text ``Long description``.

A strategy returns ``None`` to suppress a row on purpose (the receiving side
of a transfer between our own accounts, which is booked from the sending
side). Narratives that do not match their expected shape raise
:class:`~bank_import.errors.ParseError`: a transaction silently dropped is
worse than a loud failure asking for a new pattern. Two exceptions are soft:

- unknown ``ALL`` narratives are imported uncleared for manual review;
- card purchases through PayPal/Square whose store name can't be recovered
  keep the aggregator as payee and are imported uncleared.

A card reference number that can't be found is only a warning, since it is a
dedup aid rather than required data.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import TypeAlias

from .categories import INTEREST_CATEGORY, LedgerReconciler
from .dates import extract_date
from .errors import (
    AccountNotFoundError,
    BankImportError,
    ParseError,
    TransferPayeeNotFoundError,
)
from .logging_setup import get_logger
from .models import BankRow, NormalizedTransaction, TransactionType
from .normalizers import amount_to_integer, title_case

logger = get_logger("bank_import.classify")

# Payee used for interest and fees charged or paid by the bank itself.
BANK_PAYEE_NAME = "Bank Australia"

INTEREST_LABELS: frozenset[str] = frozenset(
    {"Interest Credit", "Credit Card Interest", "Cash Advance Fee"}
)

# Keep noisy merchant categories out of the ledger's taxonomy.
CATEGORY_OVERRIDES: dict[str, str] = {
    "Liquor Store, Restricted": "Groceries",
}

# Merchant names that identify the payment processor rather than the store.
PAYMENT_AGGREGATORS: frozenset[str] = frozenset({"PayPal", "Square"})

# ---- ALL ---------------------------------------------------------------------
# Transfer to SAV 12345678
_TRANSFER_TO_RE = re.compile(r"Transfer to [\w ]+? (\d+)")
# Ext TFR - NET# 1234567890 to 5665665 Some Company Name Here ABC - SOME COMPANY NAME HERE
_EXT_TRANSFER_RE = re.compile(r"Ext TFR - NET# (\d+) to \d+ ([A-Za-z\s]+) (?:[A-Z]+) - .*")
# Net tfr to SAV 5555555. Rec No.: 1234567890, Some transaction description
_NET_TRANSFER_TO_RE = re.compile(r"Net tfr to \w+ (\d+)\. Rec No\.: (\d+), .*")

# ---- ALL WDLS ----------------------------------------------------------------
# Osko Payment To PERSON ONE person.one@example.com Ref#123456789
# Osko Payment To Legitimate Business Account 123456 BANK - LOCATION Ref#123456789
# Osko Payment To Z PERSON +61-400000000 Ref#123456789
_OSKO_TO_RE = re.compile(
    r"Osko Payment To ([\w\s]+) (?:[\w@.]+|Account [\w\s-]+|[+\d-]+) Ref#(\d+)"
)
# Direct Debit COMPANY NAME - 123456789
_DIRECT_DEBIT_RE = re.compile(r"Direct Debit ([\w\s]+) - .*")

# ---- ALL DEPOSITS ------------------------------------------------------------
_OSKO_FROM_RE = re.compile(r"Osko Payment From ([\w\s]+)")
_DIRECT_CREDIT_RE = re.compile(r"Direct Credit (.+) - .*")

# ---- BPAY --------------------------------------------------------------------
# Internet BPay to Company Name - Biller Code 32456 - Receipt No 123456789
_BPAY_RE = re.compile(r"Internet BPay to ([\w\s]+) - Biller Code (\d+) - Receipt No (\d+)")

# ---- VISA --------------------------------------------------------------------
# VISA-CLOUDFLARE HTTPSWWW.CLOUUSFRGN AMT-11.1111111#123455(Ref.0123456789) -> Cloudflare
# VISA Refund-Store Name NL#234567(Ref.0123456789) -> Store Name
_VISA_PAYEE_RE = re.compile(r"VISA(?: Refund)?-(.*?)( HTTP| WWW|#)")
# VISA-PAYPAL *STORE NAME 9999999 AU#123456(Ref.0123456781) -> Store Name
# VISA-SQ *LOCAL BREWERY Sydney AU#0123456(Ref.0123456789) Android Pay -> Local Brewery
# The store name runs from the "*" up to a digit (merchant id) or a
# capitalized word (location).
_AGGREGATOR_PAYEE_RE = re.compile(r"\*(\w*[A-Z. ]*)(?=\d|[A-Z][a-z])")
_REFERENCE_RE = re.compile(r"Ref\.(\d+)")

Strategy: TypeAlias = Callable[[BankRow, NormalizedTransaction], NormalizedTransaction | None]


class TransactionClassifier:
    """Turn :class:`BankRow` records into :class:`NormalizedTransaction`."""

    def __init__(self, account_mapping: Mapping[str, str], reconciler: LedgerReconciler) -> None:
        self._account_mapping = account_mapping
        self._reconciler = reconciler
        self._strategies: dict[TransactionType, Strategy] = {
            TransactionType.ALL: self._classify_all,
            TransactionType.ALL_WDLS: self._classify_withdrawal,
            TransactionType.ALL_DEPOSITS: self._classify_deposit,
            TransactionType.BPAY: self._classify_bpay,
            TransactionType.VISA: self._classify_visa,
        }
        assert set(self._strategies) == set(TransactionType)

    def classify(self, row: BankRow) -> NormalizedTransaction | None:
        """Classify one row; ``None`` means the row is intentionally skipped.

        Errors carry ``row`` and are logged before propagating.
        """

        try:
            return self._classify(row)
        except BankImportError as exc:
            if exc.row is None:
                exc.row = row
            logger.error("There was an exception parsing the following transaction: %s", row)
            raise

    def _classify(self, row: BankRow) -> NormalizedTransaction | None:
        try:
            debit = amount_to_integer(row.debit_amount)
            credit = amount_to_integer(row.credit_amount)
        except ValueError as exc:
            raise ParseError(str(exc)) from exc

        # Balance-only / informational rows.
        if debit == 0 and credit == 0:
            return None

        try:
            tx_type = TransactionType(row.transaction_type)
        except ValueError as exc:
            raise ParseError(f"Unknown transaction type: {row.transaction_type}") from exc

        base = NormalizedTransaction(
            account=self._ledger_account(row.account_number),
            date=extract_date(row.effective_date),
            amount=credit - debit,
            # Raw dump for archival purposes.
            notes="|".join([row.long_description, row.merchant_name, row.category_list]),
            imported_payee=row.long_description,
            cleared=True,
        )
        return self._strategies[tx_type](row, base)

    # ---- shared lookups ------------------------------------------------------

    def _ledger_account(self, account_number: str) -> str:
        account_id = self._account_mapping.get(account_number)
        if not account_id:
            raise AccountNotFoundError(account_number)
        return account_id

    def _transfer_payee_id(self, account_number: str) -> str:
        account_id = self._ledger_account(account_number)
        payee = self._reconciler.find_transfer_payee(account_id)
        if payee is None:
            raise TransferPayeeNotFoundError(account_id)
        return payee.id

    # ---- strategies ----------------------------------------------------------

    def _classify_all(
        self, row: BankRow, tx: NormalizedTransaction
    ) -> NormalizedTransaction | None:
        narrative = row.long_description

        # Only transfers *to* our own accounts are booked; the receiving side
        # would otherwise duplicate them.
        if narrative.startswith("Transfer to "):
            m = _TRANSFER_TO_RE.match(narrative)
            if not m:
                raise ParseError(
                    f"Unable to extract bank account number from transfer: {narrative}"
                )
            # No reference number exists for these; the ledger dedups re-runs.
            return tx.extend(payee=self._transfer_payee_id(m.group(1)))

        if narrative.startswith(("Received from", "Transfer from")):
            return None

        if narrative in INTEREST_LABELS:
            category = self._reconciler.get_or_create_category(INTEREST_CATEGORY)
            return tx.extend(payee_name=BANK_PAYEE_NAME, category=category.id)

        if row.description == "Internet Ext Transfer":
            m = _EXT_TRANSFER_RE.search(narrative)
            if not m:
                raise ParseError(
                    f"Unable to extract reference and payee details from transfer: {narrative}"
                )
            return tx.extend(payee_name=m.group(2).strip(), imported_id=m.group(1))

        if narrative.startswith("Net tfr to"):
            m = _NET_TRANSFER_TO_RE.search(narrative)
            if not m:
                raise ParseError(
                    f"Unable to extract reference and payee details from transfer: {narrative}"
                )
            return tx.extend(payee=self._transfer_payee_id(m.group(1)), imported_id=m.group(2))

        if narrative.startswith("Net tfr received from"):
            return None

        # Too heterogeneous to enumerate: import it, flagged for review.
        return tx.extend(cleared=False)

    def _classify_withdrawal(
        self, row: BankRow, tx: NormalizedTransaction
    ) -> NormalizedTransaction | None:
        narrative = row.long_description

        if narrative.startswith("Osko Payment To"):
            m = _OSKO_TO_RE.search(narrative)
            if not m:
                raise ParseError(
                    "Unable to extract payee name and reference number from Osko payment: "
                    f"{narrative}"
                )
            return tx.extend(payee_name=m.group(1).strip(), imported_id=m.group(2))

        if narrative.startswith("Direct Debit"):
            m = _DIRECT_DEBIT_RE.search(narrative)
            if not m:
                raise ParseError(f"Unable to extract payee name from direct debit: {narrative}")
            return tx.extend(payee_name=m.group(1).strip())

        raise ParseError(
            f"Unhandled all wdls transaction type: {row.description} | {narrative}"
        )

    def _classify_deposit(
        self, row: BankRow, tx: NormalizedTransaction
    ) -> NormalizedTransaction | None:
        narrative = row.long_description

        if narrative.startswith("Osko Payment From"):
            m = _OSKO_FROM_RE.search(narrative)
            if not m:
                raise ParseError(f"Unable to extract payee name from Osko payment: {narrative}")
            return tx.extend(payee_name=m.group(1).strip())

        if narrative.startswith("Direct Credit"):
            m = _DIRECT_CREDIT_RE.search(narrative)
            if not m:
                raise ParseError(f"Unable to extract payee name from direct credit: {narrative}")
            return tx.extend(payee_name=m.group(1).strip())

        if narrative.startswith("SWIFT"):
            # SWIFT|SWIFT PAYMENT|SWIFTPMT: nothing better than the short description.
            return tx.extend(payee_name=row.description)

        raise ParseError(
            f"Unhandled all deposits transaction type: {row.description} | {narrative}"
        )

    def _classify_bpay(
        self, row: BankRow, tx: NormalizedTransaction
    ) -> NormalizedTransaction | None:
        narrative = row.long_description
        m = _BPAY_RE.search(narrative)
        if not m:
            raise ParseError(
                f"Unable to extract payee name and reference number from BPay payment: {narrative}"
            )
        payee_name, biller_code, receipt_number = m.groups()
        return tx.extend(
            payee_name=payee_name.strip(), imported_id=f"{biller_code}-{receipt_number}"
        )

    def _classify_visa(
        self, row: BankRow, tx: NormalizedTransaction
    ) -> NormalizedTransaction | None:
        narrative = row.long_description
        merchant = row.merchant_name
        cleared = tx.cleared

        category_name = (
            CATEGORY_OVERRIDES.get(row.category_list) or row.category_list.split(",")[-1].strip()
        )

        if merchant and merchant not in PAYMENT_AGGREGATORS:
            # "My Supermarket (Sydney)" -> "My Supermarket"
            payee_name = merchant.split("(")[0].strip()
        elif merchant:
            # PayPal/Square sometimes register the underlying store with VISA
            # and sometimes only themselves; dig the store out of the narrative.
            m = _AGGREGATOR_PAYEE_RE.search(narrative)
            payee_name = title_case(m.group(1)).strip() if m else ""
            if not payee_name:
                logger.warning(
                    "Unable to extract store name from %s payment, flagging for review: %s",
                    merchant,
                    narrative,
                )
                payee_name = merchant
                cleared = False
        else:
            # Category can't be inferred either; set up a ledger rule for these.
            m = _VISA_PAYEE_RE.search(narrative)
            if not m:
                raise ParseError(f"Unable to extract payee name from VISA payment: {narrative}")
            payee_name = title_case(m.group(1)).strip()

        category_id = None
        if category_name:
            category_id = self._reconciler.get_or_create_category(category_name).id

        imported_id = None
        ref = _REFERENCE_RE.search(narrative)
        if ref:
            imported_id = ref.group(1)
        else:
            logger.warning("Unable to extract reference number from VISA payment: %s", narrative)

        return tx.extend(
            payee_name=payee_name,
            category=category_id,
            imported_id=imported_id,
            cleared=cleared,
        )


__all__ = [
    "BANK_PAYEE_NAME",
    "CATEGORY_OVERRIDES",
    "INTEREST_LABELS",
    "PAYMENT_AGGREGATORS",
    "TransactionClassifier",
]
