"""Amount and text normalizers shared by the classifier."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_TITLE_WORD_RE = re.compile(r"\w\S*")


def _to_decimal(raw: str | None) -> Decimal:
    s = (raw or "").strip()
    if not s:
        # Blank debit/credit cells mean "nothing on this side".
        return Decimal(0)
    negative = False
    if s.startswith("-"):
        negative = True
        s = s[1:].lstrip()
    if s.startswith("$"):
        s = s[1:].lstrip()
    # Strip thousands separators; keep decimal point.
    s = s.replace(",", "")
    try:
        d = Decimal(s)
    except InvalidOperation as exc:
        raise ValueError(f"invalid amount: {raw!r}") from exc
    if not d.is_finite():
        raise ValueError(f"invalid amount: {raw!r}")
    return -d if negative else d


def amount_to_integer(raw: str | None) -> int:
    """Convert a decimal amount string to integer minor units (cents).

    Rounds half-up to the cent. Raises ``ValueError`` on unparseable input.
    """

    cents = _to_decimal(raw).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return int(cents * 100)


def title_case(text: str) -> str:
    """Upper-case the first character of each word and lower-case the rest.

    A word is a word character followed by any run of non-space characters, so
    ``"HTTPSWWW.CLOUD"`` becomes ``"Httpswww.cloud"``.
    """

    return _TITLE_WORD_RE.sub(lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), text)


__all__ = ["amount_to_integer", "title_case"]
