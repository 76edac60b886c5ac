"""Field normalizers for uploaded CSV rows: date, amount and type.

Each normalizer takes the raw cell text and either returns a typed value or
raises ``ValueError`` whose message is the user-facing row error (the batch
assembler prefixes it with ``"Row N: "``).

Dates
-----
ISO text is parsed directly. Otherwise characters other than digits and the
``/``, ``-``, ``.`` separators are dropped and the explicit patterns are tried
in order: ``YYYY-MM-DD``, ``MM/DD/YYYY``, ``MM-DD-YYYY``, ``DD-MM-YYYY``. The
last two share a shape; month-first wins whenever it forms a real calendar
date. Impossible calendar dates (month 13, day 40) are rejected, never rolled
over.

Amounts
-------
``$``, thousands separators and parentheses are removed. Parentheses or a
minus sign anywhere mark the value negative. The magnitude is returned
separately from the sign because stored amounts are always non-negative.
Magnitudes are rounded half-up to cents and must stay below ``MAX_AMOUNT``.
"""

from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from typing import NamedTuple

from .models import MAX_AMOUNT, TransactionType, to_money

# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

_DATE_NOISE_RE = re.compile(r"[^\d/\-.]")

# (pattern, group order) evaluated top to bottom.
_DATE_PATTERNS: tuple[tuple[re.Pattern[str], tuple[str, str, str]], ...] = (
    (re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$"), ("year", "month", "day")),
    (re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$"), ("month", "day", "year")),
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$"), ("month", "day", "year")),
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$"), ("day", "month", "year")),
)


def _from_iso(s: str) -> datetime | None:
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    # Stored dates are naive calendar timestamps.
    return dt.replace(tzinfo=None)


def parse_date(raw: str | None) -> datetime:
    """Parse a CSV date cell into a naive ``datetime``.

    Raises ``ValueError("Date is required")`` for blank input and
    ``ValueError("Invalid date format: <raw>")`` when nothing matches.
    """

    s = (raw or "").strip()
    if not s:
        raise ValueError("Date is required")

    parsed = _from_iso(s)
    if parsed is not None:
        return parsed

    cleaned = _DATE_NOISE_RE.sub("", s)
    parsed = _from_iso(cleaned) if cleaned else None
    if parsed is not None:
        return parsed

    for pattern, order in _DATE_PATTERNS:
        m = pattern.match(cleaned)
        if not m:
            continue
        parts = dict(zip(order, (int(g) for g in m.groups()), strict=True))
        try:
            return datetime(parts["year"], parts["month"], parts["day"])
        except ValueError:
            continue

    raise ValueError(f"Invalid date format: {s}")


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------


class ParsedAmount(NamedTuple):
    """Absolute value of a CSV amount plus the sign it was written with."""

    magnitude: Decimal
    negative: bool

    @property
    def positive(self) -> bool:
        return not self.negative and self.magnitude > 0


_AMOUNT_STRIP_RE = re.compile(r"[$,()\-]")


def parse_amount(raw: str | None) -> ParsedAmount:
    """Parse a CSV amount cell such as ``"$1,234.56"``, ``"(4.85)"`` or ``"-20"``.

    Raises ``ValueError("Amount is required")`` for blank input and
    ``ValueError("Invalid amount: <raw>")`` when the remainder is not a finite
    number or does not fit the stored amount range.
    """

    s = (raw or "").strip()
    if not s:
        raise ValueError("Amount is required")

    negative = "(" in s or "-" in s
    cleaned = _AMOUNT_STRIP_RE.sub("", s).strip()
    try:
        magnitude = abs(to_money(cleaned))
    except ValueError as exc:
        raise ValueError(f"Invalid amount: {s}") from exc
    if magnitude >= MAX_AMOUNT:
        raise ValueError(f"Invalid amount: {s}")
    return ParsedAmount(magnitude=magnitude, negative=negative)


# ---------------------------------------------------------------------------
# Type
# ---------------------------------------------------------------------------

INCOME_TYPE_MARKERS: tuple[str, ...] = ("income", "deposit", "credit")
INCOME_DESCRIPTION_MARKERS: tuple[str, ...] = ("salary", "deposit", "refund")


def infer_type(
    type_value: str | None,
    *,
    amount: ParsedAmount,
    description: str,
) -> TransactionType:
    """Classify a row as income or expense.

    A non-blank type cell decides on its own. Without one, only a positive
    amount whose description mentions salary, a deposit or a refund counts as
    income.
    """

    t = (type_value or "").strip().lower()
    if t:
        if any(marker in t for marker in INCOME_TYPE_MARKERS):
            return TransactionType.INCOME
        return TransactionType.EXPENSE

    desc = description.lower()
    if amount.positive and any(marker in desc for marker in INCOME_DESCRIPTION_MARKERS):
        return TransactionType.INCOME
    return TransactionType.EXPENSE


__all__ = [
    "INCOME_DESCRIPTION_MARKERS",
    "INCOME_TYPE_MARKERS",
    "ParsedAmount",
    "infer_type",
    "parse_amount",
    "parse_date",
]
