from __future__ import annotations

import uuid
from datetime import UTC, date, datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


# ---------------------------
# Budgets (one per sync id)
# ---------------------------


class LedgerBudget(Base):
    __tablename__ = "ledger_budgets"

    # The budget id doubles as the sync identifier handed to the importer.
    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )


# ---------------------------
# Accounts
# ---------------------------


class LedgerAccount(Base):
    __tablename__ = "ledger_accounts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    budget_id: Mapped[str] = mapped_column(
        String, ForeignKey("ledger_budgets.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False, server_default=text("'checking'"))
    offbudget: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    closed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint(
            "type in ('checking','savings','credit','investment','mortgage','debt','other')",
            name="ck_ledger_accounts_type",
        ),
    )


# ---------------------------
# Taxonomy: groups and categories
# ---------------------------


class LedgerCategoryGroup(Base):
    __tablename__ = "ledger_category_groups"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    budget_id: Mapped[str] = mapped_column(
        String, ForeignKey("ledger_budgets.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    is_income: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sort_order: Mapped[int | None] = mapped_column(BigInteger, nullable=True)


class LedgerCategory(Base):
    __tablename__ = "ledger_categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    budget_id: Mapped[str] = mapped_column(
        String, ForeignKey("ledger_budgets.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    group_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("ledger_category_groups.id"), nullable=False
    )
    # Mirrors the owning group's flag so snapshots don't need a join.
    is_income: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sort_order: Mapped[int | None] = mapped_column(BigInteger, nullable=True)


# ---------------------------
# Payees
# ---------------------------


class LedgerPayee(Base):
    __tablename__ = "ledger_payees"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    budget_id: Mapped[str] = mapped_column(
        String, ForeignKey("ledger_budgets.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    category_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("ledger_categories.id"), nullable=True
    )
    # Set only for transfer payees: the account this payee stands for.
    transfer_acct: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("ledger_accounts.id"), nullable=True, unique=True
    )


# ---------------------------
# Transactions
# ---------------------------


class LedgerTransaction(Base):
    __tablename__ = "ledger_transactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    account_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("ledger_accounts.id"), nullable=False, index=True
    )
    date: Mapped[date] = mapped_column(Date, nullable=False)
    # Minor currency units (cents); credits positive, debits negative.
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    payee_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("ledger_payees.id"), nullable=True
    )
    imported_payee: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("ledger_categories.id"), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    imported_id: Mapped[str | None] = mapped_column(String, nullable=True)
    # Id of the opposite leg when this row is half of a transfer.
    transfer_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    cleared: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    __table_args__ = (
        Index(
            "uniq_ledger_tx_account_imported_id",
            "account_id",
            "imported_id",
            unique=True,
            postgresql_where=text("imported_id IS NOT NULL"),
            sqlite_where=text("imported_id IS NOT NULL"),
        ),
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
