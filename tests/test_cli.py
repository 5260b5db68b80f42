from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

import bank_import.cli as cli
from tests.helpers.db import BUDGET_ID, EVERYDAY_BANK, EVERYDAY_ID, SAVINGS_BANK, SAVINGS_ID

SAMPLE_CSV = Path(__file__).resolve().parent / "data/bank_australia_sample.csv"

runner = CliRunner()


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    # configure_logging detaches the package logger from the root handlers,
    # which would hide records from caplog in later tests.
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)
    for var in ("DATABASE_URL", "LEDGER_SYNC_ID", "LEDGER_PASSWORD"):
        monkeypatch.delenv(var, raising=False)


def _args(url: str, *files: Path, sync_id: str = BUDGET_ID) -> list[str]:
    args = [
        "--url",
        url,
        "--sync-id",
        sync_id,
        "-m",
        f"{EVERYDAY_BANK}={EVERYDAY_ID}",
        "-m",
        f"{SAVINGS_BANK}={SAVINGS_ID}",
    ]
    for f in files:
        args += ["--file", str(f)]
    return args


def test_import_succeeds(ledger_url: str):
    result = runner.invoke(cli.app, _args(ledger_url, SAMPLE_CSV))
    assert result.exit_code == 0, result.output


def test_settings_can_come_from_environment(ledger_url: str, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DATABASE_URL", ledger_url)
    monkeypatch.setenv("LEDGER_SYNC_ID", BUDGET_ID)

    mappings = ["-m", f"{EVERYDAY_BANK}={EVERYDAY_ID}", "-m", f"{SAVINGS_BANK}={SAVINGS_ID}"]
    result = runner.invoke(cli.app, [*mappings, "-f", str(SAMPLE_CSV)])
    assert result.exit_code == 0, result.output


def test_invalid_mapping_exits_before_contacting_ledger(monkeypatch: pytest.MonkeyPatch):
    def _no_ledger(*args, **kwargs):
        raise AssertionError("ledger must not be contacted")

    monkeypatch.setattr(cli, "LedgerSession", _no_ledger)

    result = runner.invoke(
        cli.app,
        ["--url", "sqlite://", "--sync-id", "x", "-m", "1234=abc", "-f", str(SAMPLE_CSV)],
    )

    assert result.exit_code == 1
    assert "Invalid account mapping or invalid account format: 1234=abc" in result.output


def test_unparseable_row_reports_offending_row(ledger_url: str, tmp_path: Path):
    bad = tmp_path / "bad.csv"
    header = SAMPLE_CSV.read_text(encoding="utf-8").splitlines()[0]
    bad.write_text(
        header
        + '\n12345678,VISA,"3:15am Mon 2 January, 2023",,1,9.99,,,CARD,CARD PURCHASE 12345,,,\n',
        encoding="utf-8",
    )

    result = runner.invoke(cli.app, _args(ledger_url, bad))

    assert result.exit_code == 1
    assert "Unable to extract payee name from VISA payment" in result.output
    assert "Offending row: BankRow(" in result.output


def test_unknown_budget_fails(ledger_url: str):
    result = runner.invoke(cli.app, _args(ledger_url, SAMPLE_CSV, sync_id="no-such-budget"))
    assert result.exit_code == 1
    assert "Budget no-such-budget not found" in result.output


def test_malformed_file_fails_run_after_importing_the_rest(ledger_url: str, tmp_path: Path):
    broken = tmp_path / "broken.csv"
    broken.write_text("Account number\n12345678\n", encoding="utf-8")

    result = runner.invoke(cli.app, _args(ledger_url, broken, SAMPLE_CSV))

    assert result.exit_code == 1
    assert f"malformed input, not imported: {broken}" in result.output
