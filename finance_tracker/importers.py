"""Batch importers for transaction spreadsheets."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

import pandas as pd

from .models import Transaction
from .validation import FieldError, parse_transaction

logger = logging.getLogger(__name__)

# Accepted header spellings, normalised to the field names the validator reads.
COLUMN_ALIASES = {
    "titulo": "title",
    "título": "title",
    "description": "title",
    "valor": "amount",
    "data": "date",
    "categoria": "category",
    "tipo": "type",
    "fixed": "is_fixed",
    "isfixed": "is_fixed",
    "fixo": "is_fixed",
    "paid": "is_paid",
    "ispaid": "is_paid",
    "pago": "is_paid",
}


@dataclass(slots=True)
class RowFailure:
    """A spreadsheet row that did not pass validation."""

    row: int
    errors: tuple[FieldError, ...]


@dataclass(slots=True)
class ParsedSheet:
    transactions: list[Transaction] = field(default_factory=list)
    failures: list[RowFailure] = field(default_factory=list)


@dataclass(slots=True)
class ImportReport:
    """Outcome of a batch import: the saved records and the rejected rows."""

    source: str
    imported: list[Transaction] = field(default_factory=list)
    failures: list[RowFailure] = field(default_factory=list)


class TransactionFileImporter:
    """Load transactions from a CSV or Excel file.

    Every row goes through :func:`~finance_tracker.validation.parse_transaction`.
    Invalid rows are collected as :class:`RowFailure` instead of aborting the
    import. Ids in the file are ignored: imported rows are always new records.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> ParsedSheet:
        result = ParsedSheet()
        dataframe = self._read()
        for row_number, raw in self._iter_rows(dataframe):
            raw.pop("id", None)
            parsed = parse_transaction(raw)
            if parsed.ok:
                result.transactions.append(parsed.value)
            else:
                result.failures.append(RowFailure(row=row_number, errors=parsed.errors))
        logger.info(
            "Parsed %s: %d valid rows, %d rejected",
            self.path.name,
            len(result.transactions),
            len(result.failures),
        )
        return result

    def _read(self) -> pd.DataFrame:
        """Read the file into a :class:`~pandas.DataFrame` of strings."""

        if self.path.suffix.lower() in {".xlsx", ".xls"}:
            dataframe = pd.read_excel(self.path, dtype=str)
        else:
            dataframe = pd.read_csv(self.path, dtype=str, keep_default_na=False)
        dataframe.columns = [_normalise_column(column) for column in dataframe.columns]
        return dataframe

    @staticmethod
    def _iter_rows(dataframe: pd.DataFrame) -> Iterator[tuple[int, dict[str, object]]]:
        # Row numbers are 1-based and skip the header, matching spreadsheet UIs.
        for position, (_, row) in enumerate(dataframe.iterrows(), start=2):
            yield position, row.fillna("").to_dict()


def _normalise_column(column: object) -> str:
    key = str(column).strip().lower().replace(" ", "_")
    return COLUMN_ALIASES.get(key.replace("_", ""), COLUMN_ALIASES.get(key, key))
