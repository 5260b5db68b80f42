"""Adapter for mapping a Bank Australia CSV export to :class:`BankRow` records.

CSV header (exact keys, as exported by the Bank Australia app):
Account number, Transaction type, Effective date, Create date, Reference no,
Debit amount, Credit amount, Balance after transfer, Description,
Long description, Cheque number, Merchant name, Category list

Example rows::

    "123456789","VISA","12:00am Sat 31 December, 2022","12:00am Sat 31 December, 2022","","10.00","0.0","-1234.12","PURCHASE","VISA-MY SUPERMARKET 12345 SYDNEY AU#000000(Ref.1111111111) Android Pay","0","My Supermarket (Sydney)","Supermarket, Groceries"
    "123456789","VISA","12:00am Sat 31 December, 2022","12:00am Sat 31 December, 2022","","10.00","0.0","-1234.12","PURCHASE","VISA-CLOUDFLARE HTTPSWWW.CLOUUSFRGN AMT-11.1111111#123455(Ref.0123456789)","0","",""

Values are passed through untouched (no trimming, no validation); missing
cells become empty strings.
"""  # noqa: E501

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from ...models import BankRow


def to_rows(records: Iterable[Mapping[str, str | None]]) -> Iterator[BankRow]:
    """Convert ``csv.DictReader`` records to :class:`BankRow` in input order."""

    for record in records:
        yield BankRow.from_record(record)


__all__ = ["to_rows"]
