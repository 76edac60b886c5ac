"""Aggregations over one user's stored transactions, budgets and goals.

Every function here is pure: it takes already-fetched entities and returns
fresh result objects. Nothing is cached and nothing raises on empty input;
missing data yields zero-valued results.

Dates are compared as naive calendar timestamps. An aware ``now`` is converted
to local naive time first.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from .models import (
    Budget,
    BudgetUsage,
    Category,
    CategorySpending,
    GoalProgress,
    MonthlyTrend,
    Report,
    SavingsGoal,
    Summary,
    Transaction,
    TransactionType,
    WeeklySpending,
)

ZERO = Decimal("0.00")
UNCATEGORIZED_NAME = "Uncategorized"
UNCATEGORIZED_COLOR = "#6B7280"

# Report windows: number of calendar months, current month included.
TIME_RANGES: dict[str, int] = {
    "1month": 1,
    "3months": 3,
    "6months": 6,
    "1year": 12,
}
DEFAULT_TIME_RANGE = "6months"

BUDGET_WARNING_PCT = Decimal("80")
BUDGET_OVER_PCT = Decimal("100")


def _now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now()
    if now.tzinfo is not None:
        return now.astimezone().replace(tzinfo=None)
    return now


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def _pct(part: Decimal, whole: Decimal, places: str = "0.1") -> Decimal:
    if whole <= 0:
        return Decimal(places) * 0
    return (part / whole * 100).quantize(Decimal(places), rounding=ROUND_HALF_UP)


def _expenses(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [tx for tx in transactions if tx.type == TransactionType.EXPENSE]


def total_by_type(transactions: Iterable[Transaction], type_: TransactionType) -> Decimal:
    return _sum(tx.amount for tx in transactions if tx.type == type_)


def month_start(now: datetime, months_back: int = 0) -> datetime:
    """First day (midnight) of the month ``months_back`` months before ``now``."""

    index = now.year * 12 + (now.month - 1) - months_back
    return datetime(index // 12, index % 12 + 1, 1)


def window_start(time_range: str = DEFAULT_TIME_RANGE, *, now: datetime | None = None) -> datetime:
    """Start of a report window such as ``"3months"``.

    Raises ``ValueError`` for an unknown range name.
    """

    try:
        months = TIME_RANGES[time_range]
    except KeyError:
        raise ValueError(
            f"unknown time range {time_range!r}; expected one of {', '.join(TIME_RANGES)}"
        ) from None
    return month_start(_now(now), months - 1)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


def compute_summary(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget] = (),
    goals: Sequence[SavingsGoal] = (),
    *,
    now: datetime | None = None,
) -> Summary:
    """Balance, current-month spending, savings progress and budget headroom.

    ``budget_remaining`` uses each budget's stored ``spent`` value as is.
    """

    current = _now(now)
    income = total_by_type(transactions, TransactionType.INCOME)
    expenses = total_by_type(transactions, TransactionType.EXPENSE)

    start = month_start(current)
    monthly = _sum(tx.amount for tx in _expenses(transactions) if start <= tx.date <= current)

    target = _sum(g.target_amount for g in goals)
    saved = _sum(g.current_amount for g in goals)
    progress = int(_pct(saved, target, "1")) if target > 0 else 0

    remaining = _sum(b.amount for b in budgets) - _sum(b.spent for b in budgets)

    return Summary(
        total_income=income,
        total_expenses=expenses,
        total_balance=income - expenses,
        monthly_spending=monthly,
        savings_progress=progress,
        budget_remaining=remaining,
    )


def spending_by_category(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
) -> list[CategorySpending]:
    """Expense totals per category, in category order, omitting zero totals."""

    totals: dict[str, Decimal] = {}
    for tx in _expenses(transactions):
        if tx.category_id is not None:
            totals[tx.category_id] = totals.get(tx.category_id, ZERO) + tx.amount

    out: list[CategorySpending] = []
    for cat in categories:
        amount = totals.get(cat.id, ZERO)
        if amount > 0:
            out.append(CategorySpending(id=cat.id, name=cat.name, amount=amount, color=cat.color))
    return out


def budget_usage(budgets: Iterable[Budget]) -> list[BudgetUsage]:
    """Per-budget usage: ``warning`` from 80% of the limit, ``over`` from 100%."""

    out: list[BudgetUsage] = []
    for b in budgets:
        pct = _pct(b.spent, b.amount)
        if pct >= BUDGET_OVER_PCT:
            status = "over"
        elif pct >= BUDGET_WARNING_PCT:
            status = "warning"
        else:
            status = "ok"
        out.append(
            BudgetUsage(
                id=b.id,
                name=b.name,
                amount=b.amount,
                spent=b.spent,
                remaining=b.amount - b.spent,
                percentage=pct,
                status=status,
            )
        )
    return out


def goal_progress(goals: Iterable[SavingsGoal]) -> list[GoalProgress]:
    out: list[GoalProgress] = []
    for g in goals:
        pct = _pct(g.current_amount, g.target_amount)
        out.append(
            GoalProgress(
                id=g.id,
                name=g.name,
                target_amount=g.target_amount,
                current_amount=g.current_amount,
                percentage=pct,
                completed=pct >= 100,
            )
        )
    return out


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


def transactions_since(transactions: Iterable[Transaction], start: datetime) -> list[Transaction]:
    return [tx for tx in transactions if tx.date >= start]


def monthly_trends(transactions: Iterable[Transaction]) -> list[MonthlyTrend]:
    """Income and expense totals per calendar month, oldest first."""

    buckets: dict[tuple[int, int], list[Decimal]] = {}
    for tx in transactions:
        key = (tx.date.year, tx.date.month)
        income_expense = buckets.setdefault(key, [ZERO, ZERO])
        if tx.type == TransactionType.INCOME:
            income_expense[0] += tx.amount
        else:
            income_expense[1] += tx.amount

    return [
        MonthlyTrend(year=y, month=m, income=inc, expenses=exp)
        for (y, m), (inc, exp) in sorted(buckets.items())
    ]


def category_breakdown(
    transactions: Iterable[Transaction],
    categories: Sequence[Category],
    *,
    since: datetime | None = None,
) -> list[CategorySpending]:
    """Expense totals per category, largest first.

    Expenses without a category, or whose category is unknown, are grouped
    under "Uncategorized" so the totals add up to all expenses in the window.
    """

    by_id = {c.id: c for c in categories}
    selected = transactions if since is None else transactions_since(transactions, since)

    totals: dict[str | None, Decimal] = {}
    for tx in _expenses(selected):
        key = tx.category_id if tx.category_id in by_id else None
        totals[key] = totals.get(key, ZERO) + tx.amount

    out: list[CategorySpending] = []
    for key, amount in totals.items():
        cat = by_id.get(key) if key is not None else None
        if cat is None:
            out.append(
                CategorySpending(
                    id=None, name=UNCATEGORIZED_NAME, amount=amount, color=UNCATEGORIZED_COLOR
                )
            )
        else:
            out.append(CategorySpending(id=cat.id, name=cat.name, amount=amount, color=cat.color))
    out.sort(key=lambda c: c.amount, reverse=True)
    return out


def _week_start(d: date) -> date:
    # Weeks start on Sunday.
    return d - timedelta(days=(d.weekday() + 1) % 7)


def weekly_spending(transactions: Iterable[Transaction]) -> list[WeeklySpending]:
    totals: dict[date, Decimal] = {}
    for tx in _expenses(transactions):
        wk = _week_start(tx.date.date())
        totals[wk] = totals.get(wk, ZERO) + tx.amount
    return [WeeklySpending(week_start=wk, amount=amt) for wk, amt in sorted(totals.items())]


def growth_rate(trends: Sequence[MonthlyTrend]) -> Decimal:
    """Percent change of net income between the last two months.

    0 when fewer than two months exist or the earlier month's net is zero.
    """

    if len(trends) < 2:
        return Decimal("0.0")
    latest, previous = trends[-1].net, trends[-2].net
    if previous == 0:
        return Decimal("0.0")
    return ((latest - previous) / abs(previous) * 100).quantize(
        Decimal("0.1"), rounding=ROUND_HALF_UP
    )


def average_monthly_spending(trends: Sequence[MonthlyTrend]) -> Decimal:
    if not trends:
        return ZERO
    total = _sum(t.expenses for t in trends)
    return (total / len(trends)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def build_report(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    *,
    time_range: str = DEFAULT_TIME_RANGE,
    now: datetime | None = None,
) -> Report:
    """Trends, breakdown and weekly spending for the selected window."""

    start = window_start(time_range, now=now)
    windowed = transactions_since(transactions, start)
    trends = monthly_trends(windowed)
    return Report(
        time_range=time_range,
        window_start=start,
        monthly_trends=trends,
        category_breakdown=category_breakdown(windowed, categories),
        weekly_spending=weekly_spending(windowed),
        growth_rate=growth_rate(trends),
        average_monthly_spending=average_monthly_spending(trends),
    )


__all__ = [
    "DEFAULT_TIME_RANGE",
    "TIME_RANGES",
    "UNCATEGORIZED_COLOR",
    "UNCATEGORIZED_NAME",
    "average_monthly_spending",
    "budget_usage",
    "build_report",
    "category_breakdown",
    "compute_summary",
    "goal_progress",
    "growth_rate",
    "month_start",
    "monthly_trends",
    "spending_by_category",
    "total_by_type",
    "transactions_since",
    "weekly_spending",
    "window_start",
]
