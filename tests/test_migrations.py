from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from bank_import.ingest.seed_ledger import seed_budget
from bank_import.ledger import LedgerSession
from tests.helpers.db import BUDGET_ID, SEED

_ALEMBIC_DIR = Path(__file__).resolve().parents[1] / "libs/db/alembic"

LEDGER_TABLES = {
    "ledger_budgets",
    "ledger_accounts",
    "ledger_category_groups",
    "ledger_categories",
    "ledger_payees",
    "ledger_transactions",
}


def _config(db_url: str) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(_ALEMBIC_DIR))
    cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg


def test_upgrade_creates_schema_usable_by_the_ledger(tmp_path: Path):
    db_url = f"sqlite+pysqlite:///{tmp_path / 'migrated.db'}"

    command.upgrade(_config(db_url), "head")

    engine = create_engine(db_url)
    try:
        insp = inspect(engine)
        assert LEDGER_TABLES <= set(insp.get_table_names())
        tx_indexes = {ix["name"] for ix in insp.get_indexes("ledger_transactions")}
        assert "uniq_ledger_tx_account_imported_id" in tx_indexes
    finally:
        engine.dispose()

    seed_budget(database_url=db_url, data=SEED)
    session = LedgerSession(db_url, None, BUDGET_ID)
    session.open()
    try:
        assert {a.name for a in session.accounts} == {"Everyday", "Savings"}
    finally:
        session.close()


def test_downgrade_drops_schema(tmp_path: Path):
    db_url = f"sqlite+pysqlite:///{tmp_path / 'migrated.db'}"
    cfg = _config(db_url)

    command.upgrade(cfg, "head")
    command.downgrade(cfg, "base")

    engine = create_engine(db_url)
    try:
        assert not LEDGER_TABLES & set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
