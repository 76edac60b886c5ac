"""Public interface for the ``finance_tracker`` package.

This module exposes the package's API functions and public models/types as the
stable import surface. There is no runtime logic here, only symbol re-exports.
"""

from .api import (
    UploadError,
    get_budget_usage,
    get_goal_progress,
    get_report,
    get_spending_by_category,
    get_summary,
    import_csv,
    seed_default_data,
)
from .config import Settings, load_settings
from .ingest import CSVParseOptions, generate_sample_csv, parse_csv, validate_csv_format
from .models import (
    Budget,
    Category,
    CategorySpending,
    CSVParseResult,
    ParsedTransaction,
    Report,
    SavingsGoal,
    Summary,
    Transaction,
    TransactionType,
    UploadResult,
    User,
)
from .storage import MemoryStorage, create_storage

__all__ = [
    # API
    "UploadError",
    "get_budget_usage",
    "get_goal_progress",
    "get_report",
    "get_spending_by_category",
    "get_summary",
    "import_csv",
    "seed_default_data",
    # Ingest
    "CSVParseOptions",
    "generate_sample_csv",
    "parse_csv",
    "validate_csv_format",
    # Config / storage
    "MemoryStorage",
    "Settings",
    "create_storage",
    "load_settings",
    # Models / types
    "Budget",
    "CSVParseResult",
    "Category",
    "CategorySpending",
    "ParsedTransaction",
    "Report",
    "SavingsGoal",
    "Summary",
    "Transaction",
    "TransactionType",
    "UploadResult",
    "User",
]
