from __future__ import annotations

import pytest

from finance_tracker.ingest.csv_lines import detect_delimiter, iter_lines, iter_rows, split_line


def test_split_line_trims_and_keeps_quoted_delimiters():
    assert split_line('2024-01-15, "Coffee, large" ,4.85') == [
        "2024-01-15",
        "Coffee, large",
        "4.85",
    ]


def test_split_line_unterminated_quote_runs_to_end_of_line():
    assert split_line('a,"b,c') == ["a", "b,c"]


def test_split_line_trailing_delimiter_yields_empty_field():
    assert split_line("a,b,") == ["a", "b", ""]


def test_split_line_custom_delimiter():
    assert split_line("2024-01-15;Lunch;12.00", ";") == ["2024-01-15", "Lunch", "12.00"]


def test_iter_lines_skips_blank_lines_and_crlf():
    text = "h1,h2\r\n\r\n  \nx,y\r\n"
    assert list(iter_lines(text)) == ["h1,h2", "x,y"]


def test_iter_rows_rejects_multi_char_delimiter():
    with pytest.raises(ValueError):
        list(iter_rows("a,b", ",,"))


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("date;description;amount\n", ";"),
        ("date\tdescription\tamount\n", "\t"),
        ("date|description|amount", "|"),
        ('"a;b",c,d', ","),
        ("", ","),
        ("single", ","),
    ],
)
def test_detect_delimiter(text: str, expected: str):
    assert detect_delimiter(text) == expected


def test_split_line_drops_quotes_inside_a_field():
    assert split_line('a,say "hi" twice,"c"') == ["a", "say hi twice", "c"]
