from __future__ import annotations

from datetime import date

import pytest

from bank_import.dates import extract_date
from bank_import.errors import FormatError


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("12:00am Sat 31 December, 2022", date(2022, 12, 31)),
        ("1:59pm Tue 3 January, 2023", date(2023, 1, 3)),
        # 14:00 UTC is already midnight the next day at UTC+10.
        ("2:00pm Sat 31 December, 2022", date(2023, 1, 1)),
        ("11:59pm Mon 28 February, 2022", date(2022, 3, 1)),
    ],
)
def test_extract_date_shifts_to_local_calendar_day(value: str, expected: date):
    assert extract_date(value) == expected


def test_extract_date_tolerates_surrounding_whitespace():
    assert extract_date("  9:15am Wed 4 January, 2023 ") == date(2023, 1, 4)


@pytest.mark.parametrize(
    "value",
    ["", "2023-01-04", "9:15 Wed 4 January, 2023", "9:15am Wed 4 Jan 2023"],
)
def test_extract_date_rejects_other_shapes(value: str):
    with pytest.raises(FormatError, match="invalid bank timestamp"):
        extract_date(value)
