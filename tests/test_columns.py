from __future__ import annotations

from finance_tracker.ingest.columns import (
    DATE_ALIASES,
    NOT_FOUND,
    ColumnMap,
    find_column_index,
    resolve_columns,
)


def test_alias_headers_resolve():
    cols = resolve_columns(["Transaction Date", "Memo", "Value"])
    assert cols == ColumnMap(date=0, description=1, amount=2, type=NOT_FOUND)
    assert cols.missing_required() == []
    assert cols.required_width == 3


def test_first_matching_header_wins():
    # "Posted Date" comes first and contains "date".
    assert find_column_index(["Posted Date", "Date"], DATE_ALIASES) == 0


def test_blank_headers_never_match():
    assert find_column_index(["", "  ", "date"], DATE_ALIASES) == 2


def test_header_contained_in_alias_matches():
    # "trans" is a substring of "trans_date".
    assert find_column_index(["trans"], DATE_ALIASES) == 0


def test_missing_columns_reported_in_order():
    cols = resolve_columns(["foo", "bar"])
    assert cols.missing_required() == ["date", "description", "amount"]


def test_configured_column_name_is_tried():
    cols = resolve_columns(
        ["Posted", "Payee", "Sum"],
        date_column="posted",
        description_column="payee",
        amount_column="sum",
    )
    assert (cols.date, cols.description, cols.amount) == (0, 1, 2)
