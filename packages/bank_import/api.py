"""Import orchestration for Bank Australia CSV exports.

:class:`BankImporter` ties the pieces together for a run:

1. open the ledger session on first use (the snapshot then lives for the
   whole run, across files);
2. read a CSV file into rows and classify them one at a time, in file order;
3. group the resulting transactions by ledger account, keeping file order
   within each account, and submit one batch per account;
4. ask the ledger to sync.

Files are processed strictly one after another. A
:class:`~bank_import.errors.FormatError` abandons only the file it came from;
every other error aborts the run.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from os import PathLike

from .categories import LedgerReconciler
from .classify import TransactionClassifier
from .errors import FormatError
from .ingest import load_rows
from .ledger import LedgerSession
from .logging_setup import get_logger
from .models import ImportResult, NormalizedTransaction

logger = get_logger("bank_import.api")


def group_by_account(
    transactions: Iterable[NormalizedTransaction],
) -> dict[str, list[NormalizedTransaction]]:
    """Group transactions by ``account``; both group and item order follow input order."""

    grouped: dict[str, list[NormalizedTransaction]] = {}
    for tx in transactions:
        grouped.setdefault(tx.account, []).append(tx)
    return grouped


class BankImporter:
    def __init__(self, account_mapping: Mapping[str, str], ledger: LedgerSession) -> None:
        self._ledger = ledger
        self._classifier = TransactionClassifier(account_mapping, LedgerReconciler(ledger))

    def import_file(self, path: str | PathLike[str]) -> dict[str, ImportResult]:
        """Import one CSV export and return the ledger's result per account id."""

        if not self._ledger.is_open:
            self._ledger.open()

        rows = load_rows(path)
        logger.info("Read %d rows from %s", len(rows), path)

        transactions: list[NormalizedTransaction] = []
        skipped = 0
        for row in rows:
            tx = self._classifier.classify(row)
            if tx is None:
                skipped += 1
                continue
            transactions.append(tx)
        if skipped:
            logger.debug("Skipped %d rows from %s", skipped, path)

        results: dict[str, ImportResult] = {}
        for account_id, batch in group_by_account(transactions).items():
            results[account_id] = self._ledger.import_transactions(account_id, batch)

        self._ledger.sync()
        return results

    def import_files(self, paths: Sequence[str | PathLike[str]]) -> list[str]:
        """Import ``paths`` in order and return the files rejected as malformed."""

        failed: list[str] = []
        for path in paths:
            try:
                self.import_file(path)
            except FormatError as exc:
                logger.error("Skipping %s: %s", path, exc)
                failed.append(str(path))
        return failed


__all__ = ["BankImporter", "group_by_account"]
