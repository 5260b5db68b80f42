"""Input adapters: bank CSV exports and ledger seed files."""

from .utils import REQUIRED_COLUMNS, load_rows

__all__ = ["REQUIRED_COLUMNS", "load_rows"]
