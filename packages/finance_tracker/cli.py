# ruff: noqa: I001
"""CLI for the ``finance_tracker`` package.

Command handlers (``cmd_*``) are plain functions returning a process exit
code; the Typer commands below only translate options and raise
``typer.Exit`` with that code. Environment variables are loaded from a local
``.env`` (``python-dotenv``, never overriding the shell) in the root callback.
Business logic lives in ``finance_tracker.api``.

Without ``DATABASE_URL`` every invocation gets a fresh in-memory store, so
``summary`` and friends only show data when a database is configured.
"""

from __future__ import annotations

import json
import sys
from decimal import Decimal
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from typer.models import ArgumentInfo

from .config import Settings, load_settings
from .logging_setup import configure_logging


# ---- Small module-level helpers used by CLI commands -------------------------


def _settings(
    *,
    database_url: str | None = None,
    user_id: str | None = None,
    delimiter: str | None = None,
) -> Settings:
    return load_settings(database_url=database_url, user_id=user_id, csv_delimiter=delimiter)


def _money(value: Decimal) -> str:
    return f"{value:,.2f}"


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def _report_payload(report: Any) -> dict[str, Any]:
    return {
        "timeRange": report.time_range,
        "windowStart": report.window_start.isoformat(),
        "monthlyTrends": [
            {
                "month": t.key,
                "label": t.label,
                "income": f"{t.income:.2f}",
                "expenses": f"{t.expenses:.2f}",
                "net": f"{t.net:.2f}",
            }
            for t in report.monthly_trends
        ],
        "categoryBreakdown": [c.as_dict() for c in report.category_breakdown],
        "weeklySpending": [
            {"weekStart": w.week_start.isoformat(), "amount": f"{w.amount:.2f}"}
            for w in report.weekly_spending
        ],
        "growthRate": f"{report.growth_rate}",
        "averageMonthlySpending": f"{report.average_monthly_spending:.2f}",
    }


# ---- Command handlers --------------------------------------------------------


def cmd_import_csv(
    csv_path: str,
    *,
    database_url: str | None = None,
    user_id: str | None = None,
    delimiter: str | None = None,
    has_header: bool = True,
    as_json: bool = False,
) -> int:
    """Import a bank CSV for a user.

    Prints ``imported N of M rows`` followed by one line per rejected row, or
    the upload result as JSON. Returns 0 when the file was processed (even if
    some rows were rejected) and 1 when it could not be read or saved.
    """

    from .api import UploadError, import_csv
    from .ingest.batch import CSVParseOptions
    from .ingest.utils import read_csv_file
    from .storage import create_storage

    try:
        settings = _settings(database_url=database_url, user_id=user_id, delimiter=delimiter)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        text = read_csv_file(csv_path)
    except FileNotFoundError:
        print(f"Error: File not found: {csv_path}", file=sys.stderr)
        return 1
    except PermissionError:
        print(f"Error: Permission denied: {csv_path}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError, ValueError) as e:
        print(f"Error: Failed to read '{csv_path}': {e}", file=sys.stderr)
        return 1

    options = CSVParseOptions(delimiter=settings.csv_delimiter, has_header=has_header)
    storage = create_storage(settings)
    try:
        result = import_csv(storage, text, user_id=settings.user_id, options=options)
    except UploadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if as_json:
        _print_json(result.as_dict())
        return 0

    print(f"Imported {len(result.transactions)} of {result.total_rows} rows")
    for err in result.errors:
        print(f"  {err}")
    return 0


def cmd_validate_csv(csv_path: str) -> int:
    """Run the quick structural check; exit code 1 when the file looks invalid."""

    from .ingest.utils import read_csv_file, validate_csv_format

    try:
        text = read_csv_file(csv_path)
    except FileNotFoundError:
        print(f"Error: File not found: {csv_path}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError, ValueError) as e:
        print(f"Error: Failed to read '{csv_path}': {e}", file=sys.stderr)
        return 1

    ok, errors = validate_csv_format(text)
    if ok:
        print("CSV format looks valid")
        return 0
    for err in errors:
        print(f"Error: {err}", file=sys.stderr)
    return 1


def cmd_sample_csv(output: str | None = None) -> int:
    from .ingest.utils import generate_sample_csv

    sample = generate_sample_csv()
    if output is None:
        print(sample)
        return 0
    try:
        Path(output).write_text(sample + "\n", encoding="utf-8")
    except OSError as e:
        print(f"Error: Failed to write '{output}': {e}", file=sys.stderr)
        return 1
    print(f"Wrote sample CSV to {output}")
    return 0


def cmd_summary(
    *,
    database_url: str | None = None,
    user_id: str | None = None,
    as_json: bool = False,
) -> int:
    from .api import get_budget_usage, get_goal_progress, get_summary
    from .storage import create_storage

    settings = _settings(database_url=database_url, user_id=user_id)
    storage = create_storage(settings)
    try:
        summary = get_summary(storage, settings.user_id)
        budgets = get_budget_usage(storage, settings.user_id)
        goals = get_goal_progress(storage, settings.user_id)
    except Exception as e:
        print(f"Error: failed to load summary: {e}", file=sys.stderr)
        return 1

    if as_json:
        _print_json(summary.as_dict())
        return 0

    print(f"Total balance:     {_money(summary.total_balance)}")
    print(f"  income:          {_money(summary.total_income)}")
    print(f"  expenses:        {_money(summary.total_expenses)}")
    print(f"Monthly spending:  {_money(summary.monthly_spending)}")
    print(f"Savings progress:  {summary.savings_progress}%")
    print(f"Budget remaining:  {_money(summary.budget_remaining)}")
    for b in budgets:
        print(
            f"  budget {b.name}: {_money(b.spent)} / {_money(b.amount)}"
            f" ({b.percentage}%, {b.status})"
        )
    for g in goals:
        done = " done" if g.completed else ""
        print(
            f"  goal {g.name}: {_money(g.current_amount)} / {_money(g.target_amount)}"
            f" ({g.percentage}%){done}"
        )
    return 0


def cmd_spending_by_category(
    *,
    database_url: str | None = None,
    user_id: str | None = None,
    as_json: bool = False,
) -> int:
    from .api import get_spending_by_category
    from .storage import create_storage

    settings = _settings(database_url=database_url, user_id=user_id)
    try:
        rows = get_spending_by_category(create_storage(settings), settings.user_id)
    except Exception as e:
        print(f"Error: failed to load spending: {e}", file=sys.stderr)
        return 1

    if as_json:
        _print_json([r.as_dict() for r in rows])
        return 0
    if not rows:
        print("No expenses recorded")
        return 0
    for r in rows:
        print(f"{r.name}\t{_money(r.amount)}")
    return 0


def cmd_report(
    *,
    time_range: str = "6months",
    database_url: str | None = None,
    user_id: str | None = None,
    as_json: bool = False,
) -> int:
    from .api import get_report
    from .storage import create_storage

    settings = _settings(database_url=database_url, user_id=user_id)
    try:
        report = get_report(create_storage(settings), settings.user_id, time_range=time_range)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: failed to build report: {e}", file=sys.stderr)
        return 1

    if as_json:
        _print_json(_report_payload(report))
        return 0

    print(f"Report since {report.window_start:%Y-%m-%d} ({report.time_range})")
    print("Monthly trends:")
    for t in report.monthly_trends:
        print(f"  {t.label}\tincome {_money(t.income)}\texpenses {_money(t.expenses)}")
    print("Spending by category:")
    for c in report.category_breakdown:
        print(f"  {c.name}\t{_money(c.amount)}")
    print(f"Growth rate: {report.growth_rate}%")
    print(f"Average monthly spending: {_money(report.average_monthly_spending)}")
    return 0


def cmd_init_db(*, database_url: str | None = None) -> int:
    """Create tables from the ORM metadata and seed the default data."""

    from .storage.sql import SqlStorage

    settings = _settings(database_url=database_url)
    if not settings.uses_database:
        print("Error: DATABASE_URL is not set; nothing to initialize.", file=sys.stderr)
        return 1
    storage = SqlStorage(settings.database_url)
    try:
        storage.create_schema()
        storage.initialize_default_data()
    except Exception as e:
        print(f"Error: database initialization failed: {e}", file=sys.stderr)
        return 1
    print("Database initialized")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Import bank CSV exports, auto-categorize them and report on spending. "
        "Loads DATABASE_URL and FINANCE_TRACKER_* settings from a local .env."
    ),
)

# Module-level argument object to satisfy ruff B008 (no calls in parameter
# defaults).
CSV_PATH_ARGUMENT: ArgumentInfo = typer.Argument(
    ...,
    help="Path to a CSV file",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
)

DatabaseUrlOpt = Annotated[
    str | None, typer.Option("--database-url", help="Override DATABASE_URL.")
]
UserIdOpt = Annotated[
    str | None, typer.Option("--user-id", help="Override FINANCE_TRACKER_USER_ID.")
]
JsonOpt = Annotated[bool, typer.Option("--json", help="Emit JSON instead of text.")]


@app.command("import-csv")
def import_csv_cmd(
    csv_path: Annotated[Path, CSV_PATH_ARGUMENT],
    *,
    database_url: DatabaseUrlOpt = None,
    user_id: UserIdOpt = None,
    delimiter: Annotated[
        str | None,
        typer.Option(help="Field delimiter; 'auto' sniffs it from the header line."),
    ] = None,
    header: Annotated[bool, typer.Option(help="Treat the first line as a header.")] = True,
    as_json: JsonOpt = False,
) -> None:
    """Parse, categorize and store the transactions in a CSV file."""

    raise typer.Exit(
        cmd_import_csv(
            str(csv_path),
            database_url=database_url,
            user_id=user_id,
            delimiter=delimiter,
            has_header=header,
            as_json=as_json,
        )
    )


@app.command("validate-csv")
def validate_csv_cmd(csv_path: Annotated[Path, CSV_PATH_ARGUMENT]) -> None:
    """Check that a file looks like an importable CSV."""

    raise typer.Exit(cmd_validate_csv(str(csv_path)))


@app.command("sample-csv")
def sample_csv_cmd(
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Write to a file instead of stdout.")
    ] = None,
) -> None:
    """Print a small example CSV."""

    raise typer.Exit(cmd_sample_csv(output))


@app.command("summary")
def summary_cmd(
    *,
    database_url: DatabaseUrlOpt = None,
    user_id: UserIdOpt = None,
    as_json: JsonOpt = False,
) -> None:
    """Dashboard totals: balance, this month's spending, savings and budgets."""

    raise typer.Exit(cmd_summary(database_url=database_url, user_id=user_id, as_json=as_json))


@app.command("spending-by-category")
def spending_by_category_cmd(
    *,
    database_url: DatabaseUrlOpt = None,
    user_id: UserIdOpt = None,
    as_json: JsonOpt = False,
) -> None:
    """Expense totals per category."""

    raise typer.Exit(
        cmd_spending_by_category(database_url=database_url, user_id=user_id, as_json=as_json)
    )


@app.command("report")
def report_cmd(
    *,
    time_range: Annotated[
        str,
        typer.Option("--range", help="One of 1month, 3months, 6months, 1year."),
    ] = "6months",
    database_url: DatabaseUrlOpt = None,
    user_id: UserIdOpt = None,
    as_json: JsonOpt = False,
) -> None:
    """Monthly trends, category breakdown and growth for a time window."""

    raise typer.Exit(
        cmd_report(
            time_range=time_range,
            database_url=database_url,
            user_id=user_id,
            as_json=as_json,
        )
    )


@app.command("init-db")
def init_db_cmd(*, database_url: DatabaseUrlOpt = None) -> None:
    """Create the tables and seed the default user and categories."""

    raise typer.Exit(cmd_init_db(database_url=database_url))


@app.callback()
def _root(
    *,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Override FINANCE_TRACKER_LOG_LEVEL."),
    ] = None,
    echo_sql: Annotated[
        bool, typer.Option("--echo-sql", help="Log SQL statements sent to the database.")
    ] = False,
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level, echo_sql=echo_sql)


if __name__ == "__main__":  # pragma: no cover
    app()
