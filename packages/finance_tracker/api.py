"""Public API for the ``finance_tracker`` package.

These functions are the surface the CLI (and any other frontend) calls. Each
takes the storage collaborator explicitly; nothing here picks a store or
reads the environment.
"""

from __future__ import annotations

from datetime import datetime

from .analytics import (
    DEFAULT_TIME_RANGE,
    budget_usage,
    build_report,
    compute_summary,
    goal_progress,
    spending_by_category,
)
from .ingest.batch import CSVParseOptions, parse_csv
from .logging_setup import get_logger
from .models import (
    BudgetUsage,
    CategorySpending,
    GoalProgress,
    Report,
    Summary,
    UploadResult,
)
from .storage.base import Storage

logger = get_logger("finance_tracker.api")


class UploadError(RuntimeError):
    """Raised when parsed transactions could not be persisted."""


def import_csv(
    storage: Storage,
    csv_text: str,
    *,
    user_id: str,
    options: CSVParseOptions | None = None,
) -> UploadResult:
    """Parse an uploaded CSV and persist every valid row for ``user_id``.

    Input
    -----
    storage:
        Store that receives the batch through one ``create_many`` call.
    csv_text:
        Full file contents.
    user_id:
        Owner of the new transactions.
    options:
        Delimiter, header and column-name overrides.

    Output
    ------
    :class:`~finance_tracker.models.UploadResult` with the persisted
    transactions and every row-level or structural error. Row errors never
    abort the upload; when no row is valid nothing is written.

    Raises
    ------
    UploadError
        The store rejected the batch. The original exception is chained.
    """

    parsed = parse_csv(csv_text, options)
    result = UploadResult(
        errors=list(parsed.errors),
        total_rows=parsed.total_rows,
        valid_rows=parsed.valid_rows,
    )
    if not parsed.transactions:
        logger.info("Upload for %s produced no valid rows", user_id)
        return result

    try:
        payloads = [tx.to_create(user_id) for tx in parsed.transactions]
        result.transactions = storage.transactions.create_many(payloads)
    except Exception as e:
        logger.exception(
            "Failed to persist %d transactions for %s", len(parsed.transactions), user_id
        )
        raise UploadError(f"Failed to save transactions: {e}") from e

    logger.info(
        "Imported %d transactions for %s (%d rows rejected)",
        len(result.transactions),
        user_id,
        result.total_rows - result.valid_rows,
    )
    return result


def get_summary(storage: Storage, user_id: str, *, now: datetime | None = None) -> Summary:
    """Dashboard totals for one user."""

    return compute_summary(
        storage.transactions.list_by_user(user_id),
        storage.budgets.list_by_user(user_id),
        storage.goals.list_by_user(user_id),
        now=now,
    )


def get_spending_by_category(storage: Storage, user_id: str) -> list[CategorySpending]:
    return spending_by_category(
        storage.transactions.list_by_user(user_id),
        storage.categories.list_by_user(user_id),
    )


def get_report(
    storage: Storage,
    user_id: str,
    *,
    time_range: str = DEFAULT_TIME_RANGE,
    now: datetime | None = None,
) -> Report:
    """Reports view; ``time_range`` is one of ``1month``, ``3months``,
    ``6months`` or ``1year`` (``ValueError`` otherwise)."""

    return build_report(
        storage.transactions.list_by_user(user_id),
        storage.categories.list_by_user(user_id),
        time_range=time_range,
        now=now,
    )


def get_budget_usage(storage: Storage, user_id: str) -> list[BudgetUsage]:
    return budget_usage(storage.budgets.list_by_user(user_id))


def get_goal_progress(storage: Storage, user_id: str) -> list[GoalProgress]:
    return goal_progress(storage.goals.list_by_user(user_id))


def seed_default_data(storage: Storage) -> None:
    """Ensure the default user and its five categories exist."""

    storage.initialize_default_data()


__all__ = [
    "UploadError",
    "get_budget_usage",
    "get_goal_progress",
    "get_report",
    "get_spending_by_category",
    "get_summary",
    "import_csv",
    "seed_default_data",
]
