from __future__ import annotations

# Seeder for a budget ledger: budget row, category groups/categories and
# accounts (each with the transfer payee that stands for it).
#
# Usage (example):
#   python -m bank_import.ingest.seed_ledger \
#     --database-url sqlite:///ledger.db --file ledger-seed.json
#
# Seed JSON shape:
#   {
#     "budget": {"id": "my-budget", "name": "Household"},
#     "category_groups": [
#       {"name": "Usual Expenses", "is_income": false, "categories": ["Groceries"]},
#       {"name": "Income", "is_income": true, "categories": ["Salary"]}
#     ],
#     "accounts": [{"id": "<uuid>", "name": "Everyday", "type": "checking"}]
#   }
import argparse
import json
from pathlib import Path
from typing import Any

from db.client import session_scope
from db.models.ledger import (
    LedgerAccount,
    LedgerBudget,
    LedgerCategory,
    LedgerCategoryGroup,
    LedgerPayee,
)


def _load_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict) or "budget" not in data:
        raise ValueError("Seed JSON must be an object with a 'budget' entry")
    return data


def seed_budget(*, database_url: str | None, data: dict[str, Any]) -> str:
    """Insert the budget described by ``data`` and return its id."""

    budget = data["budget"]
    budget_id = str(budget["id"])
    with session_scope(database_url=database_url) as session:
        session.add(LedgerBudget(id=budget_id, name=str(budget.get("name") or budget_id)))
        session.flush()

        for group_index, group in enumerate(data.get("category_groups") or []):
            is_income = bool(group.get("is_income", False))
            group_row = LedgerCategoryGroup(
                budget_id=budget_id,
                name=str(group["name"]),
                is_income=is_income,
                sort_order=group_index,
            )
            session.add(group_row)
            session.flush()
            for cat_index, name in enumerate(group.get("categories") or []):
                session.add(
                    LedgerCategory(
                        budget_id=budget_id,
                        name=str(name),
                        group_id=group_row.id,
                        is_income=is_income,
                        sort_order=group_index * 100 + cat_index,
                    )
                )
        session.flush()

        for account in data.get("accounts") or []:
            account_row = LedgerAccount(
                budget_id=budget_id,
                name=str(account["name"]),
                type=str(account.get("type") or "checking"),
                offbudget=bool(account.get("offbudget", False)),
            )
            if account.get("id"):
                account_row.id = str(account["id"])
            session.add(account_row)
            session.flush()
            session.add(
                LedgerPayee(budget_id=budget_id, name=account_row.name, transfer_acct=account_row.id)
            )
        session.flush()
    return budget_id


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Seed a budget ledger from JSON")
    ap.add_argument(
        "--database-url",
        required=False,
        default=None,
        help="SQLAlchemy database URL; falls back to $DATABASE_URL when not set",
    )
    ap.add_argument("--file", type=Path, required=True)
    args = ap.parse_args(argv)

    seed_budget(database_url=args.database_url or None, data=_load_json(args.file))
    return 0


if __name__ == "__main__":  # pragma: no cover - manual utility
    raise SystemExit(main())
