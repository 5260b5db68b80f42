# ruff: noqa: I001
"""Ledger core tables: budgets, accounts, taxonomy, payees, transactions.

Revision ID: 0001_ledger_core
Revises: None
Create Date: 2026-09-21
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_ledger_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "ledger_budgets",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "ledger_accounts",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("budget_id", sa.String(), sa.ForeignKey("ledger_budgets.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False, server_default=sa.text("'checking'")),
        sa.Column("offbudget", sa.Boolean(), nullable=False),
        sa.Column("closed", sa.Boolean(), nullable=False),
        sa.CheckConstraint(
            "type in ('checking','savings','credit','investment','mortgage','debt','other')",
            name="ck_ledger_accounts_type",
        ),
    )
    op.create_index("ix_ledger_accounts_budget_id", "ledger_accounts", ["budget_id"])

    op.create_table(
        "ledger_category_groups",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("budget_id", sa.String(), sa.ForeignKey("ledger_budgets.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("is_income", sa.Boolean(), nullable=False),
        sa.Column("sort_order", sa.BigInteger(), nullable=True),
    )
    op.create_index(
        "ix_ledger_category_groups_budget_id", "ledger_category_groups", ["budget_id"]
    )

    op.create_table(
        "ledger_categories",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("budget_id", sa.String(), sa.ForeignKey("ledger_budgets.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column(
            "group_id",
            sa.String(36),
            sa.ForeignKey("ledger_category_groups.id"),
            nullable=False,
        ),
        sa.Column("is_income", sa.Boolean(), nullable=False),
        sa.Column("sort_order", sa.BigInteger(), nullable=True),
    )
    op.create_index("ix_ledger_categories_budget_id", "ledger_categories", ["budget_id"])

    op.create_table(
        "ledger_payees",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("budget_id", sa.String(), sa.ForeignKey("ledger_budgets.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column(
            "category_id", sa.String(36), sa.ForeignKey("ledger_categories.id"), nullable=True
        ),
        sa.Column(
            "transfer_acct",
            sa.String(36),
            sa.ForeignKey("ledger_accounts.id"),
            nullable=True,
            unique=True,
        ),
    )
    op.create_index("ix_ledger_payees_budget_id", "ledger_payees", ["budget_id"])

    op.create_table(
        "ledger_transactions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "account_id", sa.String(36), sa.ForeignKey("ledger_accounts.id"), nullable=False
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("payee_id", sa.String(36), sa.ForeignKey("ledger_payees.id"), nullable=True),
        sa.Column("imported_payee", sa.Text(), nullable=True),
        sa.Column(
            "category_id", sa.String(36), sa.ForeignKey("ledger_categories.id"), nullable=True
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("imported_id", sa.String(), nullable=True),
        sa.Column("transfer_id", sa.String(36), nullable=True),
        sa.Column("cleared", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_ledger_transactions_account_id", "ledger_transactions", ["account_id"])
    # Natural dedup key for repeated imports; rows without a bank reference are
    # matched on date/amount/payee by the importer instead.
    op.create_index(
        "uniq_ledger_tx_account_imported_id",
        "ledger_transactions",
        ["account_id", "imported_id"],
        unique=True,
        postgresql_where=sa.text("imported_id IS NOT NULL"),
        sqlite_where=sa.text("imported_id IS NOT NULL"),
    )


def downgrade() -> None:
    op.drop_index("uniq_ledger_tx_account_imported_id", table_name="ledger_transactions")
    op.drop_index("ix_ledger_transactions_account_id", table_name="ledger_transactions")
    op.drop_table("ledger_transactions")
    op.drop_index("ix_ledger_payees_budget_id", table_name="ledger_payees")
    op.drop_table("ledger_payees")
    op.drop_index("ix_ledger_categories_budget_id", table_name="ledger_categories")
    op.drop_table("ledger_categories")
    op.drop_index("ix_ledger_category_groups_budget_id", table_name="ledger_category_groups")
    op.drop_table("ledger_category_groups")
    op.drop_index("ix_ledger_accounts_budget_id", table_name="ledger_accounts")
    op.drop_table("ledger_accounts")
    op.drop_table("ledger_budgets")
