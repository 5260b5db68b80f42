from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from bank_import.models import (
    BankRow,
    NormalizedTransaction,
    is_bank_account_number,
    is_ledger_account_id,
    parse_account_mapping,
)
from bank_import.normalizers import amount_to_integer, title_case

LEDGER_ID = "0f8d6a52-4c7e-4a4b-9a51-6f0c2b1d9e3a"


# ---- Account mapping ---------------------------------------------------------


def test_parse_account_mapping_accepts_valid_pairs():
    assert parse_account_mapping([f"12345678={LEDGER_ID}"]) == {"12345678": LEDGER_ID}
    assert parse_account_mapping([]) == {}


@pytest.mark.parametrize(
    "pair",
    [
        f"1234567={LEDGER_ID}",
        f"123456789={LEDGER_ID}",
        f"1234567a={LEDGER_ID}",
        "12345678=not-a-uuid",
        f"12345678{LEDGER_ID}",
        f"12345678={LEDGER_ID}=extra",
        f"={LEDGER_ID}",
    ],
)
def test_parse_account_mapping_rejects_malformed_pairs(pair: str):
    with pytest.raises(ValueError, match="Invalid account mapping or invalid account format"):
        parse_account_mapping([f"87654321={LEDGER_ID}", pair])


def test_account_id_predicates():
    assert is_bank_account_number("00000000")
    assert not is_bank_account_number(None)
    assert not is_bank_account_number("")
    assert is_ledger_account_id(LEDGER_ID.upper())
    assert not is_ledger_account_id(LEDGER_ID + "0")


# ---- Rows and transactions ---------------------------------------------------


def test_bank_row_from_record_maps_headers_and_blanks():
    row = BankRow.from_record(
        {
            "Account number": "12345678",
            "Transaction type": "VISA",
            "Effective date": "12:00am Sat 31 December, 2022",
            "Debit amount": "4.50",
            "Credit amount": None,
            "Description": "VISA-CAFE",
            "Long description": "VISA-CAFE#1(Ref.1)",
            "Merchant name": "Cafe",
            "Category list": "Food",
        }
    )

    assert row.account_number == "12345678"
    assert row.credit_amount == ""
    assert row.reference_no == ""
    assert row.category_list == "Food"


def _tx(**overrides) -> NormalizedTransaction:
    values = {"account": LEDGER_ID, "date": date(2023, 1, 1), "amount": -100, "notes": "n"}
    values.update(overrides)
    return NormalizedTransaction(**values)


def test_transaction_rejects_both_payee_forms():
    with pytest.raises(ValidationError, match="mutually exclusive"):
        _tx(payee="p1", payee_name="Shop")


def test_extend_returns_validated_copy():
    base = _tx(payee_name="Shop")

    extended = base.extend(imported_id="42", cleared=False)

    assert base.imported_id is None and base.cleared is True
    assert extended.imported_id == "42" and extended.cleared is False
    assert extended.payee_name == "Shop"
    with pytest.raises(ValidationError):
        base.extend(payee="p1")


def test_transaction_is_frozen():
    tx = _tx()
    with pytest.raises(ValidationError):
        tx.amount = 5  # type: ignore[misc]


# ---- Normalizers -------------------------------------------------------------


@pytest.mark.parametrize(
    ("raw", "cents"),
    [
        ("12.34", 1234),
        ("1,234.5", 123450),
        ("$7", 700),
        ("-0.01", -1),
        ("0.005", 1),
        ("", 0),
        (None, 0),
        ("0.00", 0),
    ],
)
def test_amount_to_integer(raw: str | None, cents: int):
    assert amount_to_integer(raw) == cents


@pytest.mark.parametrize("raw", ["abc", "1.2.3", "NaN", "Infinity"])
def test_amount_to_integer_rejects_garbage(raw: str):
    with pytest.raises(ValueError, match="invalid amount"):
        amount_to_integer(raw)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("WOOLWORTHS METRO", "Woolworths Metro"),
        ("cafe   on the corner", "Cafe   On The Corner"),
        ("HTTPSWWW.CLOUD", "Httpswww.cloud"),
        ("", ""),
    ],
)
def test_title_case(text: str, expected: str):
    assert title_case(text) == expected
