"""CSV ingestion: tokenizer, column resolution and batch assembly."""

from .batch import CSVParseOptions, parse_csv, parse_row
from .columns import ColumnMap, find_column_index, resolve_columns
from .csv_lines import detect_delimiter, iter_rows, split_line
from .utils import generate_sample_csv, read_csv_file, validate_csv_format

__all__ = [
    "CSVParseOptions",
    "ColumnMap",
    "detect_delimiter",
    "find_column_index",
    "generate_sample_csv",
    "iter_rows",
    "parse_csv",
    "parse_row",
    "read_csv_file",
    "resolve_columns",
    "split_line",
    "validate_csv_format",
]
