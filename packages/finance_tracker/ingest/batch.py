"""CSV text → parsed transactions, with per-row error isolation.

Contract
--------
``parse_csv(text, options)`` returns a :class:`~finance_tracker.models.CSVParseResult`:

- ``transactions``: rows that passed every normalizer, in input order
- ``errors``: top-level problems (empty file, missing columns) followed by one
  ``"Row N: <reason>"`` entry per rejected row
- ``total_rows``: data rows scanned (blank lines excluded)
- ``valid_rows``: ``len(transactions)``

A bad row never aborts the batch. Row numbers count non-blank lines starting
at 1, so with a header the first data row is ``Row 2``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..categorization import auto_categorize
from ..logging_setup import get_logger
from ..models import CSVParseResult, ParsedTransaction
from ..normalizers import infer_type, parse_amount, parse_date
from .columns import NOT_FOUND, ColumnMap, missing_column_message, resolve_columns
from .csv_lines import DEFAULT_DELIMITER, detect_delimiter, iter_rows

logger = get_logger("finance_tracker.ingest.batch")


@dataclass(frozen=True, slots=True)
class CSVParseOptions:
    """Parser options.

    ``delimiter=None`` sniffs the delimiter from the first line. Without a
    header, columns are assumed to be in ``date, description, amount, type``
    order.
    """

    delimiter: str | None = DEFAULT_DELIMITER
    has_header: bool = True
    date_column: str = "date"
    description_column: str = "description"
    amount_column: str = "amount"
    type_column: str = "type"

    def __post_init__(self) -> None:
        if self.delimiter is not None and len(self.delimiter) != 1:
            raise ValueError(
                f"CSVParseOptions.delimiter must be a single character, got {self.delimiter!r}"
            )


def _cell(values: Sequence[str], idx: int) -> str | None:
    if idx == NOT_FOUND or idx >= len(values):
        return None
    return values[idx]


def parse_row(values: Sequence[str], columns: ColumnMap) -> ParsedTransaction:
    """Normalize one data row; raises ``ValueError`` with the row-level reason."""

    date = parse_date(_cell(values, columns.date))

    description = (_cell(values, columns.description) or "").strip()
    if not description:
        raise ValueError("Description is required")

    amount = parse_amount(_cell(values, columns.amount))
    type_ = infer_type(_cell(values, columns.type), amount=amount, description=description)

    return ParsedTransaction(
        date=date,
        description=description,
        amount=amount.magnitude,
        type=type_,
        category_id=auto_categorize(description, type_),
    )


def parse_csv(text: str, options: CSVParseOptions | None = None) -> CSVParseResult:
    """Parse uploaded CSV text into transactions plus a list of errors."""

    opts = options or CSVParseOptions()
    delimiter = opts.delimiter if opts.delimiter is not None else detect_delimiter(text)
    result = CSVParseResult()

    rows = iter_rows(text, delimiter)
    if opts.has_header:
        header = next(rows, None)
        if header is None:
            result.errors.append("CSV file is empty")
            logger.warning("CSV upload rejected: file is empty")
            return result
        first_row_number = 2
    else:
        header = [opts.date_column, opts.description_column, opts.amount_column, opts.type_column]
        first_row_number = 1

    columns = resolve_columns(
        header,
        date_column=opts.date_column,
        description_column=opts.description_column,
        amount_column=opts.amount_column,
        type_column=opts.type_column,
    )
    for missing in columns.missing_required():
        message = missing_column_message(missing)
        result.errors.append(message)
        logger.warning("CSV structure problem: %s (header=%r)", message, header)

    width = columns.required_width
    for row_number, values in enumerate(rows, start=first_row_number):
        result.total_rows += 1
        if len(values) < width:
            result.errors.append(f"Row {row_number}: Insufficient columns")
            logger.debug("Row %d rejected: %d fields, need %d", row_number, len(values), width)
            continue
        try:
            tx = parse_row(values, columns)
        except ValueError as e:
            result.errors.append(f"Row {row_number}: {e}")
            logger.debug("Row %d rejected: %s", row_number, e)
            continue
        result.transactions.append(tx)

    if result.total_rows == 0 and not opts.has_header:
        result.errors.append("CSV file is empty")

    result.valid_rows = len(result.transactions)
    logger.info(
        "Parsed CSV: %d of %d rows valid, %d errors",
        result.valid_rows,
        result.total_rows,
        len(result.errors),
    )
    return result


__all__ = ["CSVParseOptions", "parse_csv", "parse_row"]
