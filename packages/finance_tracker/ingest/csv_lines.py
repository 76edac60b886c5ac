"""Line-oriented CSV tokenizer used by the upload pipeline.

This is deliberately not RFC 4180: rows never span lines, a ``"`` simply
toggles "quoted" mode and is itself dropped wherever it appears, and an
unterminated quote runs to the end of the line. That keeps malformed exports
importable row by row instead of failing the whole file; a stray quote may
merge fields of that one row, which then fails normalization on its own.

Fields are whitespace-trimmed. Lines that are blank after trimming are skipped.
"""

from __future__ import annotations

import io
from collections.abc import Iterator

DEFAULT_DELIMITER = ","
DELIMITER_CANDIDATES: tuple[str, ...] = (",", ";", "\t", "|")


def split_line(line: str, delimiter: str = DEFAULT_DELIMITER) -> list[str]:
    """Split a single CSV line into trimmed fields."""

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(ch)

    fields.append("".join(current).strip())
    return fields


def iter_lines(text: str) -> Iterator[str]:
    """Yield non-blank lines of ``text`` without their line endings."""

    for line in io.StringIO(text):
        if line.strip():
            yield line.rstrip("\r\n")


def iter_rows(text: str, delimiter: str = DEFAULT_DELIMITER) -> Iterator[list[str]]:
    """Lazily tokenize ``text`` into rows of string fields (single pass)."""

    if len(delimiter) != 1:
        raise ValueError(f"delimiter must be a single character, got {delimiter!r}")
    for line in iter_lines(text):
        yield split_line(line, delimiter)


def _count_unquoted(line: str, ch: str) -> int:
    count = 0
    in_quotes = False
    for c in line:
        if c == '"':
            in_quotes = not in_quotes
        elif c == ch and not in_quotes:
            count += 1
    return count


def detect_delimiter(text: str, candidates: tuple[str, ...] = DELIMITER_CANDIDATES) -> str:
    """Guess the delimiter from the first non-blank line.

    Picks the candidate with the most unquoted occurrences; ties go to the
    earlier candidate. Falls back to ``","`` for empty input or when no
    candidate occurs.
    """

    first = next(iter_lines(text), None)
    if first is None:
        return DEFAULT_DELIMITER
    best, best_count = DEFAULT_DELIMITER, 0
    for cand in candidates:
        n = _count_unquoted(first, cand)
        if n > best_count:
            best, best_count = cand, n
    return best


__all__ = [
    "DEFAULT_DELIMITER",
    "DELIMITER_CANDIDATES",
    "detect_delimiter",
    "iter_lines",
    "iter_rows",
    "split_line",
]
