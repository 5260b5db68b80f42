"""Date normalization for Bank Australia timestamps."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from .errors import FormatError

# e.g. "12:00am Sat 31 December, 2022"
_BANK_TIMESTAMP_FORMAT = "%I:%M%p %a %d %B, %Y"

# The export is treated as UTC and shifted to AEST. Daylight saving is
# deliberately ignored.
_LOCAL_OFFSET = timedelta(hours=10)


def extract_date(value: str) -> date:
    """Parse a bank timestamp and return the calendar date at UTC+10.

    Raises :class:`~bank_import.errors.FormatError` when ``value`` does not
    look like ``h:mma www d MMMM, yyyy``.
    """

    try:
        parsed = datetime.strptime(value.strip(), _BANK_TIMESTAMP_FORMAT)
    except (AttributeError, ValueError) as exc:
        raise FormatError(f"invalid bank timestamp: {value!r}") from exc
    return (parsed + _LOCAL_OFFSET).date()


__all__ = ["extract_date"]
