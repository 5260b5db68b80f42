# ruff: noqa: I001
"""Ledger session: the importer's view of the budget ledger.

A :class:`LedgerSession` is opened once per run against a ledger database
(``server_url`` is a SQLAlchemy URL, ``sync_id`` names the budget) and keeps a
snapshot of the budget's accounts, payees and categories for the classifier.
The snapshot is only ever appended to by this process (new categories, payees
created while importing) and is refreshed wholesale on :meth:`sync`.

Import semantics follow the ledger's contract rather than the bank's:

- a transaction whose ``imported_id`` already exists in the target account is
  an update, never a second row;
- a transaction without ``imported_id`` matches an existing row with the same
  date, amount and payee;
- ``payee_name`` resolves to an existing payee case-insensitively, otherwise a
  payee is created;
- a transfer payee books the opposite leg in the payee's account and links
  both legs through ``transfer_id``.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.engine import URL, make_url
from sqlalchemy.orm import Session

from db.client import get_session
from db.models.ledger import (
    LedgerAccount,
    LedgerBudget,
    LedgerCategory,
    LedgerCategoryGroup,
    LedgerPayee,
    LedgerTransaction,
)

from .errors import LedgerError
from .logging_setup import get_logger
from .models import Account, Category, ImportResult, NormalizedTransaction, Payee

logger = get_logger("bank_import.ledger")


def _resolve_url(server_url: str, password: str | None) -> URL:
    url = make_url(server_url)
    # SQLite has no credentials; other backends take the password from the
    # URL unless one was given explicitly.
    if password and url.password is None and url.get_backend_name() != "sqlite":
        url = url.set(password=password)
    return url


class LedgerSession:
    """A single session against one budget of the ledger database."""

    def __init__(self, server_url: str, password: str | None, sync_id: str) -> None:
        self._url = _resolve_url(server_url, password)
        self._sync_id = sync_id
        self._session: Session | None = None

        self._accounts: list[Account] = []
        self._payees: list[Payee] = []
        self._categories: list[Category] = []
        self._default_category_group_id: str | None = None
        self._income_category_group_id: str | None = None

    # ---- snapshot accessors -------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._session is not None

    @property
    def sync_id(self) -> str:
        return self._sync_id

    @property
    def accounts(self) -> list[Account]:
        return self._accounts

    @property
    def payees(self) -> list[Payee]:
        return self._payees

    @property
    def categories(self) -> list[Category]:
        return self._categories

    @property
    def default_category_group_id(self) -> str | None:
        return self._default_category_group_id

    @property
    def income_category_group_id(self) -> str | None:
        return self._income_category_group_id

    # ---- lifecycle ----------------------------------------------------------

    def open(self) -> None:
        """Connect, verify the budget exists and load the taxonomy snapshot."""

        if self._session is not None:
            return
        session = get_session(database_url=self._url)
        if session.get(LedgerBudget, self._sync_id) is None:
            session.close()
            raise LedgerError(f"Budget {self._sync_id} not found on the ledger server")
        self._session = session
        self._load_snapshot()
        logger.info(
            "Opened budget %s: %d accounts, %d payees, %d categories",
            self._sync_id,
            len(self._accounts),
            len(self._payees),
            len(self._categories),
        )

    def sync(self) -> None:
        """Flush pending work to the ledger and refresh the snapshot."""

        session = self._require_session()
        session.commit()
        self._load_snapshot()

    def close(self) -> None:
        session = self._require_session()
        session.close()
        self._session = None

    def _require_session(self) -> Session:
        if self._session is None:
            raise LedgerError("Ledger session not open, call open() first")
        return self._session

    def _load_snapshot(self) -> None:
        session = self._require_session()
        budget = self._sync_id

        self._accounts = [
            Account.model_validate(row)
            for row in session.scalars(
                select(LedgerAccount)
                .where(LedgerAccount.budget_id == budget)
                .order_by(LedgerAccount.name)
            )
        ]
        self._payees = [
            Payee.model_validate(row)
            for row in session.scalars(
                select(LedgerPayee)
                .where(LedgerPayee.budget_id == budget)
                .order_by(LedgerPayee.name)
            )
        ]
        self._categories = [
            Category.model_validate(row)
            for row in session.scalars(
                select(LedgerCategory)
                .where(LedgerCategory.budget_id == budget)
                .order_by(
                    LedgerCategory.sort_order.is_(None),
                    LedgerCategory.sort_order,
                    LedgerCategory.name,
                )
            )
        ]

        groups = list(
            session.scalars(
                select(LedgerCategoryGroup)
                .where(LedgerCategoryGroup.budget_id == budget)
                .order_by(
                    LedgerCategoryGroup.sort_order.is_(None),
                    LedgerCategoryGroup.sort_order,
                    LedgerCategoryGroup.name,
                )
            )
        )
        self._default_category_group_id = next((g.id for g in groups if not g.is_income), None)
        self._income_category_group_id = next((g.id for g in groups if g.is_income), None)

    # ---- taxonomy / onboarding ---------------------------------------------

    def create_category(self, name: str, group_id: str) -> Category:
        """Create ``name`` under ``group_id`` and append it to the snapshot."""

        session = self._require_session()
        group = session.get(LedgerCategoryGroup, group_id)
        if group is None or group.budget_id != self._sync_id:
            raise LedgerError(f"Category group {group_id} not found, cannot create category")

        row = LedgerCategory(
            budget_id=self._sync_id,
            name=name,
            group_id=group.id,
            is_income=group.is_income,
        )
        session.add(row)
        session.commit()

        category = Category.model_validate(row)
        self._categories.append(category)
        return category

    def create_account(
        self, name: str, *, type: str = "checking", offbudget: bool = False
    ) -> Account:
        """Onboard an account together with the transfer payee standing for it."""

        session = self._require_session()
        row = LedgerAccount(budget_id=self._sync_id, name=name, type=type, offbudget=offbudget)
        session.add(row)
        session.flush()
        payee = LedgerPayee(budget_id=self._sync_id, name=name, transfer_acct=row.id)
        session.add(payee)
        session.commit()

        account = Account.model_validate(row)
        self._accounts.append(account)
        self._payees.append(Payee.model_validate(payee))
        return account

    # ---- import -------------------------------------------------------------

    def import_transactions(
        self, account: str, transactions: Sequence[NormalizedTransaction]
    ) -> ImportResult:
        """Import ``transactions`` into ``account`` (an account id or name)."""

        session = self._require_session()
        account_obj = next(
            (a for a in self._accounts if a.id == account or a.name == account), None
        )
        if account_obj is None:
            raise LedgerError(f"Account {account} not found")

        logger.info("Importing %d transactions into %s...", len(transactions), account_obj.name)

        result = ImportResult()
        seen: set[str] = set()
        try:
            for idx, tx in enumerate(transactions):
                self._import_one(session, account_obj.id, idx, tx, result, seen)
            session.commit()
        except Exception:
            session.rollback()
            raise

        logger.info(
            "Added %d transactions, updated %d, errors: %d",
            len(result.added),
            len(result.updated),
            len(result.errors),
        )
        return result

    def _import_one(
        self,
        session: Session,
        account_id: str,
        idx: int,
        tx: NormalizedTransaction,
        result: ImportResult,
        seen: set[str],
    ) -> None:
        payee: LedgerPayee | None = None
        if tx.payee is not None:
            payee = session.get(LedgerPayee, tx.payee)
            if payee is None or payee.budget_id != self._sync_id:
                result.errors.append(
                    {"index": idx, "message": f"Payee {tx.payee} not found", "transaction": tx}
                )
                return
        elif tx.payee_name:
            payee = self._payee_for_name(session, tx.payee_name)

        if tx.category is not None:
            category = session.get(LedgerCategory, tx.category)
            if category is None or category.budget_id != self._sync_id:
                result.errors.append(
                    {
                        "index": idx,
                        "message": f"Category {tx.category} not found",
                        "transaction": tx,
                    }
                )
                return

        payee_id = payee.id if payee is not None else None
        existing = self._find_existing(session, account_id, tx, payee_id, seen)
        if existing is not None:
            seen.add(existing.id)
            if self._apply_update(existing, tx):
                result.updated.append(existing.id)
            return

        row = LedgerTransaction(
            account_id=account_id,
            date=tx.date,
            amount=tx.amount,
            payee_id=payee_id,
            imported_payee=tx.imported_payee,
            category_id=tx.category,
            notes=tx.notes,
            imported_id=tx.imported_id,
            cleared=tx.cleared,
        )
        session.add(row)
        session.flush()
        seen.add(row.id)
        result.added.append(row.id)

        if payee is not None and payee.transfer_acct and payee.transfer_acct != account_id:
            self._book_transfer_leg(session, row, payee.transfer_acct)

    def _payee_for_name(self, session: Session, name: str) -> LedgerPayee:
        payee = session.scalars(
            select(LedgerPayee)
            .where(
                LedgerPayee.budget_id == self._sync_id,
                LedgerPayee.transfer_acct.is_(None),
                func.lower(LedgerPayee.name) == name.lower(),
            )
            .limit(1)
        ).first()
        if payee is None:
            payee = LedgerPayee(budget_id=self._sync_id, name=name)
            session.add(payee)
            session.flush()
            self._payees.append(Payee.model_validate(payee))
        return payee

    @staticmethod
    def _find_existing(
        session: Session,
        account_id: str,
        tx: NormalizedTransaction,
        payee_id: str | None,
        seen: set[str],
    ) -> LedgerTransaction | None:
        if tx.imported_id is not None:
            return session.scalars(
                select(LedgerTransaction).where(
                    LedgerTransaction.account_id == account_id,
                    LedgerTransaction.imported_id == tx.imported_id,
                )
            ).first()

        stmt = select(LedgerTransaction).where(
            LedgerTransaction.account_id == account_id,
            LedgerTransaction.date == tx.date,
            LedgerTransaction.amount == tx.amount,
            (
                LedgerTransaction.payee_id.is_(None)
                if payee_id is None
                else LedgerTransaction.payee_id == payee_id
            ),
        )
        if seen:
            # Identical rows within one batch are distinct transactions.
            stmt = stmt.where(LedgerTransaction.id.not_in(seen))
        return session.scalars(stmt.order_by(LedgerTransaction.created_at).limit(1)).first()

    @staticmethod
    def _apply_update(row: LedgerTransaction, tx: NormalizedTransaction) -> bool:
        changed = False
        if row.notes != tx.notes:
            row.notes = tx.notes
            changed = True
        if row.imported_payee != tx.imported_payee:
            row.imported_payee = tx.imported_payee
            changed = True
        # Never overwrite a category chosen in the ledger.
        if row.category_id is None and tx.category is not None:
            row.category_id = tx.category
            changed = True
        return changed

    def _book_transfer_leg(
        self, session: Session, row: LedgerTransaction, target_account_id: str
    ) -> None:
        source_payee = session.scalars(
            select(LedgerPayee).where(LedgerPayee.transfer_acct == row.account_id)
        ).first()
        leg = LedgerTransaction(
            account_id=target_account_id,
            date=row.date,
            amount=-row.amount,
            payee_id=source_payee.id if source_payee is not None else None,
            notes=row.notes,
            cleared=row.cleared,
            transfer_id=row.id,
        )
        session.add(leg)
        session.flush()
        row.transfer_id = leg.id


__all__ = ["LedgerSession"]
