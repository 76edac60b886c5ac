"""Ingest utilities shared by the service API and CLI commands.

- ``read_csv_file``: load an upload from disk as text
- ``validate_csv_format``: cheap pre-flight check before a full parse
- ``generate_sample_csv``: a small example file users can start from
"""

from __future__ import annotations

from datetime import date, timedelta
from os import PathLike
from pathlib import Path

from .csv_lines import iter_lines

MAX_UPLOAD_BYTES = 10 * 1024 * 1024

_REQUIRED_HEADER_TOKENS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("date", ("date",)),
    ("description", ("description", "memo")),
    ("amount", ("amount",)),
)


def read_csv_file(csv_path: str | PathLike[str], *, max_bytes: int = MAX_UPLOAD_BYTES) -> str:
    """Read an uploaded CSV as UTF-8 text (a leading BOM is dropped).

    Raises ``ValueError`` for files larger than ``max_bytes``; ``OSError``
    subclasses (missing file, permissions) propagate unchanged.
    """

    p = Path(csv_path)
    size = p.stat().st_size
    if size > max_bytes:
        raise ValueError(f"CSV file too large: {size} bytes (limit {max_bytes})")
    return p.read_text(encoding="utf-8-sig")


def validate_csv_format(csv_text: str) -> tuple[bool, list[str]]:
    """Return ``(is_valid, errors)`` for a quick structural check.

    Checks, in order: non-empty, at least a header and one data row, a header
    that contains a known delimiter, and header text mentioning the required
    columns (``memo`` is accepted for description).
    """

    errors: list[str] = []
    if not csv_text or not csv_text.strip():
        return False, ["CSV file is empty"]

    lines = list(iter_lines(csv_text))
    if len(lines) < 2:
        return False, ["CSV file must contain at least a header and one data row"]

    header = lines[0]
    if not any(d in header for d in (",", ";", "\t")):
        errors.append("File does not appear to be in CSV format")

    header_lower = header.lower()
    missing = [
        name
        for name, tokens in _REQUIRED_HEADER_TOKENS
        if not any(t in header_lower for t in tokens)
    ]
    if missing:
        errors.append(f"Missing required columns: {', '.join(missing)}")

    return not errors, errors


def generate_sample_csv(today: date | None = None) -> str:
    """Return a five-row sample CSV with dates relative to ``today``."""

    t = today or date.today()
    # Same day last month, clamped to the last valid day.
    prev_month_end = t.replace(day=1) - timedelta(days=1)
    last_month = prev_month_end.replace(day=min(t.day, prev_month_end.day))
    rows = [
        ("date", "description", "amount", "type"),
        (t.isoformat(), "Starbucks Coffee", "4.85", "expense"),
        (last_month.isoformat(), "Salary Deposit", "3200.00", "income"),
        ((t - timedelta(days=2)).isoformat(), "Amazon Purchase", "47.99", "expense"),
        ((t - timedelta(days=3)).isoformat(), "Shell Gas Station", "38.42", "expense"),
        ((t - timedelta(days=7)).isoformat(), "Netflix Subscription", "15.99", "expense"),
    ]
    return "\n".join(",".join(r) for r in rows)


__all__ = [
    "MAX_UPLOAD_BYTES",
    "generate_sample_csv",
    "read_csv_file",
    "validate_csv_format",
]
