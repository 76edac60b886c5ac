from __future__ import annotations

import textwrap
from datetime import date, datetime
from decimal import Decimal

import pytest

from finance_tracker.categorization import FOOD_AND_DINING_ID, INCOME_ID, SHOPPING_ID
from finance_tracker.ingest import (
    CSVParseOptions,
    generate_sample_csv,
    parse_csv,
    read_csv_file,
    validate_csv_format,
)
from finance_tracker.models import TransactionType


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n").rstrip()


SAMPLE = _dedent(
    """
    date,description,amount,type
    2024-01-15,Starbucks Coffee,4.85,expense
    2024-01-15,Salary Deposit,3200.00,income
    2024-01-16,Amazon Purchase,47.99,expense
    """
)


def test_three_row_sample_parses_and_categorizes():
    result = parse_csv(SAMPLE)

    assert result.errors == []
    assert result.total_rows == 3
    assert result.valid_rows == 3
    assert [t.category_id for t in result.transactions] == [
        FOOD_AND_DINING_ID,
        INCOME_ID,
        SHOPPING_ID,
    ]
    first = result.transactions[0]
    assert first.date == datetime(2024, 1, 15)
    assert first.description == "Starbucks Coffee"
    assert first.amount == Decimal("4.85")
    assert first.type == TransactionType.EXPENSE


def test_bad_row_is_isolated():
    text = SAMPLE + "\n2024-13-40,Bad Date,10.00,expense\n2024-01-17,Pizza Place,$12.50,expense"
    result = parse_csv(text)

    assert result.total_rows == 5
    assert result.valid_rows == 4
    assert result.errors == ["Row 5: Invalid date format: 2024-13-40"]


def test_one_bad_amount_rejects_one_row():
    text = SAMPLE + "\n2024-01-18,Mystery,abc,expense"
    result = parse_csv(text)
    assert result.valid_rows == 3
    assert result.errors == ["Row 5: Invalid amount: abc"]


@pytest.mark.parametrize("huge", ["12345678901234567890123456789", "1e30", "100000000.00"])
def test_oversized_amount_rejects_one_row(huge: str):
    text = SAMPLE + f"\n2024-01-18,Huge,{huge},expense"
    result = parse_csv(text)
    assert result.total_rows == 4
    assert result.valid_rows == 3
    assert result.errors == [f"Row 5: Invalid amount: {huge}"]


def test_alias_header_without_type_column():
    text = _dedent(
        """
        Transaction Date,Memo,Value
        01/15/2024,ACME Salary,2500.00
        01/16/2024,Shell gas,(40.10)
        """
    )
    result = parse_csv(text)

    assert result.errors == []
    assert [t.type for t in result.transactions] == [
        TransactionType.INCOME,
        TransactionType.EXPENSE,
    ]
    assert result.transactions[1].amount == Decimal("40.10")


def test_row_numbers_skip_blank_lines_and_count_header():
    text = "date,description,amount\n\n2024-01-15,,1.00\n\n2024-01-16,Lunch\n"
    result = parse_csv(text)
    assert result.errors == [
        "Row 2: Description is required",
        "Row 3: Insufficient columns",
    ]
    assert result.total_rows == 2
    assert result.valid_rows == 0


def test_empty_file():
    for text in ("", "\n\n  \n"):
        result = parse_csv(text)
        assert result.errors == ["CSV file is empty"]
        assert result.total_rows == 0
        assert result.transactions == []


def test_missing_amount_column_produces_no_transactions():
    text = "date,description\n2024-01-15,Coffee\n"
    result = parse_csv(text)
    assert result.transactions == []
    assert result.errors[0].startswith("Amount column not found")
    assert result.errors[1] == "Row 2: Amount is required"


def test_quoted_field_with_delimiter_and_semicolon_sniffing():
    text = 'date;description;amount\n2024-01-15;"Dinner; friends";30,00'
    # Comma in "30,00" is a thousands separator after stripping, giving 3000.
    result = parse_csv(text, CSVParseOptions(delimiter=None))
    assert result.errors == []
    assert result.transactions[0].description == "Dinner; friends"
    assert result.transactions[0].amount == Decimal("3000")


def test_headerless_file_uses_positional_columns():
    text = "2024-01-15,Coffee,3.50,expense\n2024-01-16,Paycheck deposit,100,income"
    result = parse_csv(text, CSVParseOptions(has_header=False))
    assert result.valid_rows == 2
    assert result.transactions[1].type == TransactionType.INCOME


def test_options_reject_long_delimiter():
    with pytest.raises(ValueError):
        CSVParseOptions(delimiter="::")


def test_validate_csv_format():
    assert validate_csv_format(SAMPLE) == (True, [])
    assert validate_csv_format("") == (False, ["CSV file is empty"])
    ok, errors = validate_csv_format("date,description,amount")
    assert not ok and "at least a header and one data row" in errors[0]
    ok, errors = validate_csv_format("date,notes\n2024-01-15,x")
    assert not ok
    assert errors == ["Missing required columns: description, amount"]


def test_generate_sample_csv_is_importable():
    sample = generate_sample_csv(date(2024, 3, 31))
    assert sample.splitlines()[0] == "date,description,amount,type"
    # Same day last month is clamped to February's last day.
    assert "2024-02-29,Salary Deposit" in sample

    result = parse_csv(sample)
    assert result.errors == []
    assert result.valid_rows == 5


def test_read_csv_file_strips_bom_and_enforces_limit(tmp_path):
    p = tmp_path / "bom.csv"
    p.write_bytes("\ufeff".encode() + SAMPLE.encode())
    assert read_csv_file(p).startswith("date,")

    with pytest.raises(ValueError, match="too large"):
        read_csv_file(p, max_bytes=10)
