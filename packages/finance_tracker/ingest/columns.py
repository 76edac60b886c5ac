"""Header → semantic column resolution.

Bank exports name the same column many ways (``Transaction Date``,
``trans_date``, ``Memo``, ``Value``...). Resolution is fuzzy: a header matches
an alias when, case-insensitively, it equals the alias, contains it, or is
contained in it. Headers are scanned left to right and the first match wins;
there is no ranking between exact and partial matches.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

NOT_FOUND = -1

DATE_ALIASES: tuple[str, ...] = ("date", "transaction_date", "trans_date")
DESCRIPTION_ALIASES: tuple[str, ...] = ("description", "memo", "details", "reference")
AMOUNT_ALIASES: tuple[str, ...] = ("amount", "value", "transaction_amount")
TYPE_ALIASES: tuple[str, ...] = ("type", "transaction_type", "debit_credit")


def find_column_index(headers: Sequence[str], aliases: Sequence[str]) -> int:
    """Return the index of the first header matching any alias, else ``-1``.

    Blank headers never match (an empty string is contained in every alias).
    """

    names = [a.strip().lower() for a in aliases if a and a.strip()]
    for idx, raw in enumerate(headers):
        h = raw.strip().lower()
        if not h:
            continue
        if any(h == n or n in h or h in n for n in names):
            return idx
    return NOT_FOUND


@dataclass(frozen=True, slots=True)
class ColumnMap:
    """Resolved column indices; ``-1`` marks a column that was not found."""

    date: int
    description: int
    amount: int
    type: int = NOT_FOUND

    @property
    def required_width(self) -> int:
        """Minimum number of fields a row needs to reach every required column."""

        return max(self.date, self.description, self.amount) + 1

    def missing_required(self) -> list[str]:
        missing: list[str] = []
        if self.date == NOT_FOUND:
            missing.append("date")
        if self.description == NOT_FOUND:
            missing.append("description")
        if self.amount == NOT_FOUND:
            missing.append("amount")
        return missing


_MISSING_MESSAGES = {
    "date": "Date column not found. Expected columns: " + ", ".join(DATE_ALIASES),
    "description": (
        "Description column not found. Expected columns: " + ", ".join(DESCRIPTION_ALIASES)
    ),
    "amount": "Amount column not found. Expected columns: " + ", ".join(AMOUNT_ALIASES),
}


def missing_column_message(column: str) -> str:
    return _MISSING_MESSAGES[column]


def resolve_columns(
    headers: Sequence[str],
    *,
    date_column: str = "date",
    description_column: str = "description",
    amount_column: str = "amount",
    type_column: str = "type",
) -> ColumnMap:
    """Resolve the four semantic columns; configured names are tried with the
    built-in aliases."""

    return ColumnMap(
        date=find_column_index(headers, (date_column, *DATE_ALIASES)),
        description=find_column_index(headers, (description_column, *DESCRIPTION_ALIASES)),
        amount=find_column_index(headers, (amount_column, *AMOUNT_ALIASES)),
        type=find_column_index(headers, (type_column, *TYPE_ALIASES)),
    )


__all__ = [
    "AMOUNT_ALIASES",
    "ColumnMap",
    "DATE_ALIASES",
    "DESCRIPTION_ALIASES",
    "NOT_FOUND",
    "TYPE_ALIASES",
    "find_column_index",
    "missing_column_message",
    "resolve_columns",
]
