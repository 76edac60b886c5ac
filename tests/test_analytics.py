from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from finance_tracker.analytics import (
    UNCATEGORIZED_COLOR,
    UNCATEGORIZED_NAME,
    average_monthly_spending,
    budget_usage,
    build_report,
    category_breakdown,
    compute_summary,
    goal_progress,
    growth_rate,
    month_start,
    monthly_trends,
    spending_by_category,
    weekly_spending,
    window_start,
)
from finance_tracker.models import (
    Budget,
    BudgetPeriod,
    Category,
    MonthlyTrend,
    SavingsGoal,
    Transaction,
    TransactionType,
)

NOW = datetime(2024, 6, 20, 12, 0)
CREATED = datetime(2024, 1, 1, tzinfo=UTC)

CATEGORIES = [
    Category("cat-1", "Food & Dining", "utensils", "#3B82F6", "u1"),
    Category("cat-4", "Shopping", "shopping-cart", "#EF4444", "u1"),
    Category("cat-5", "Income", "plus-circle", "#22C55E", "u1"),
]

_seq = iter(range(1_000_000))


def _tx(
    amount: str,
    when: datetime,
    type_: TransactionType = TransactionType.EXPENSE,
    category_id: str | None = "cat-1",
) -> Transaction:
    return Transaction(
        id=f"tx-{next(_seq)}",
        description="t",
        amount=Decimal(amount),
        date=when,
        type=type_,
        category_id=category_id,
        user_id="u1",
        created_at=CREATED,
    )


def _budget(amount: str, spent: str) -> Budget:
    return Budget(
        id=f"b-{next(_seq)}",
        name="Food",
        amount=Decimal(amount),
        spent=Decimal(spent),
        category_id="cat-1",
        period=BudgetPeriod.MONTHLY,
        start_date=datetime(2024, 6, 1),
        end_date=datetime(2024, 6, 30),
        user_id="u1",
        created_at=CREATED,
    )


def _goal(target: str, current: str) -> SavingsGoal:
    return SavingsGoal(
        id=f"g-{next(_seq)}",
        name="Trip",
        target_amount=Decimal(target),
        current_amount=Decimal(current),
        target_date=None,
        user_id="u1",
        created_at=CREATED,
    )


def test_empty_summary_is_all_zero():
    s = compute_summary([], [], [], now=NOW)
    assert s.total_income == s.total_expenses == s.total_balance == Decimal("0")
    assert s.monthly_spending == Decimal("0")
    assert s.savings_progress == 0
    assert s.budget_remaining == Decimal("0")
    assert s.as_dict() == {
        "totalBalance": "0.00",
        "monthlySpending": "0.00",
        "savingsProgress": 0,
        "budgetRemaining": "0.00",
    }


def test_summary_totals_and_balance_identity():
    txs = [
        _tx("4.85", datetime(2024, 1, 15)),
        _tx("3200.00", datetime(2024, 1, 15), TransactionType.INCOME, "cat-5"),
        _tx("47.99", datetime(2024, 1, 16), category_id="cat-4"),
    ]
    s = compute_summary(txs, now=NOW)
    assert s.total_income == Decimal("3200.00")
    assert s.total_expenses == Decimal("52.84")
    assert s.total_balance == Decimal("3147.16")
    assert s.total_balance == s.total_income - s.total_expenses


def test_monthly_spending_window_is_current_month_up_to_now():
    txs = [
        _tx("10.00", datetime(2024, 6, 1)),  # first instant of the month counts
        _tx("5.00", datetime(2024, 6, 20, 11, 59)),
        _tx("7.00", datetime(2024, 6, 25)),  # future-dated
        _tx("3.00", datetime(2024, 5, 31, 23, 59)),
        _tx("100.00", datetime(2024, 6, 5), TransactionType.INCOME, "cat-5"),
    ]
    assert compute_summary(txs, now=NOW).monthly_spending == Decimal("15.00")


def test_aware_now_is_accepted():
    txs = [_tx("1.00", datetime(2024, 6, 1))]
    s = compute_summary(txs, now=datetime(2024, 6, 20, tzinfo=UTC))
    assert s.monthly_spending == Decimal("1.00")


def test_savings_progress_rounds_half_up_and_budget_remaining():
    goals = [_goal("200.00", "1.00")]  # 0.5%
    assert compute_summary([], [], goals, now=NOW).savings_progress == 1

    goals = [_goal("1000.00", "250.00"), _goal("1000.00", "0")]
    budgets = [_budget("500.00", "120.00"), _budget("100.00", "150.00")]
    s = compute_summary([], budgets, goals, now=NOW)
    assert s.savings_progress == 13  # 12.5 rounds up
    assert s.budget_remaining == Decimal("330.00")


def test_spending_by_category_keeps_category_order_and_skips_zero():
    txs = [
        _tx("10.00", NOW, category_id="cat-4"),
        _tx("2.50", NOW, category_id="cat-1"),
        _tx("2.50", NOW, category_id="cat-1"),
        _tx("99.00", NOW, TransactionType.INCOME, "cat-5"),
        _tx("1.00", NOW, category_id=None),
    ]
    rows = spending_by_category(txs, CATEGORIES)
    assert [(r.id, r.amount) for r in rows] == [
        ("cat-1", Decimal("5.00")),
        ("cat-4", Decimal("10.00")),
    ]
    assert rows[0].as_dict() == {
        "id": "cat-1",
        "name": "Food & Dining",
        "amount": "5.00",
        "color": "#3B82F6",
    }


def test_category_breakdown_sums_to_total_expenses():
    txs = [
        _tx("10.00", datetime(2024, 6, 1), category_id="cat-4"),
        _tx("20.00", datetime(2024, 6, 2), category_id="cat-1"),
        _tx("3.00", datetime(2024, 6, 3), category_id=None),
        _tx("4.00", datetime(2024, 6, 3), category_id="deleted-cat"),
        _tx("500.00", datetime(2024, 6, 3), TransactionType.INCOME, "cat-5"),
    ]
    rows = category_breakdown(txs, CATEGORIES)

    assert [r.name for r in rows] == ["Food & Dining", "Shopping", UNCATEGORIZED_NAME]
    assert rows[-1].amount == Decimal("7.00")
    assert rows[-1].color == UNCATEGORIZED_COLOR
    assert rows[-1].id is None
    assert sum(r.amount for r in rows) == compute_summary(txs, now=NOW).total_expenses


def test_category_breakdown_since_filter():
    txs = [_tx("10.00", datetime(2024, 1, 1)), _tx("5.00", datetime(2024, 6, 1))]
    rows = category_breakdown(txs, CATEGORIES, since=datetime(2024, 6, 1))
    assert [r.amount for r in rows] == [Decimal("5.00")]


@pytest.mark.parametrize(
    ("time_range", "expected"),
    [
        ("1month", datetime(2024, 6, 1)),
        ("3months", datetime(2024, 4, 1)),
        ("6months", datetime(2024, 1, 1)),
        ("1year", datetime(2023, 7, 1)),
    ],
)
def test_window_start(time_range: str, expected: datetime):
    assert window_start(time_range, now=NOW) == expected


def test_window_start_unknown_range():
    with pytest.raises(ValueError, match="unknown time range"):
        window_start("2weeks", now=NOW)


def test_month_start_crosses_year_boundary():
    assert month_start(datetime(2024, 2, 10), 3) == datetime(2023, 11, 1)


def test_monthly_trends_are_chronological():
    txs = [
        _tx("10.00", datetime(2024, 2, 3)),
        _tx("300.00", datetime(2023, 12, 1), TransactionType.INCOME, "cat-5"),
        _tx("5.00", datetime(2023, 12, 9)),
        _tx("1.00", datetime(2024, 1, 31)),
    ]
    trends = monthly_trends(txs)
    assert [t.key for t in trends] == ["2023-12", "2024-01", "2024-02"]
    assert trends[0].label == "Dec 2023"
    assert trends[0].income == Decimal("300.00")
    assert trends[0].net == Decimal("295.00")


def test_weekly_spending_weeks_start_on_sunday():
    txs = [
        _tx("1.00", datetime(2024, 6, 16)),  # Sunday
        _tx("2.00", datetime(2024, 6, 22)),  # Saturday, same week
        _tx("4.00", datetime(2024, 6, 23)),  # next Sunday
        _tx("8.00", datetime(2024, 6, 18), TransactionType.INCOME, "cat-5"),
    ]
    weeks = weekly_spending(txs)
    assert [(w.week_start, w.amount) for w in weeks] == [
        (date(2024, 6, 16), Decimal("3.00")),
        (date(2024, 6, 23), Decimal("4.00")),
    ]


def _trend(month: int, income: str, expenses: str) -> MonthlyTrend:
    return MonthlyTrend(year=2024, month=month, income=Decimal(income), expenses=Decimal(expenses))


def test_growth_rate():
    assert growth_rate([]) == Decimal("0")
    assert growth_rate([_trend(1, "100", "50")]) == Decimal("0")
    # net 50 -> 75
    assert growth_rate([_trend(1, "100", "50"), _trend(2, "100", "25")]) == Decimal("50.0")
    # net -50 -> -25 is an improvement
    assert growth_rate([_trend(1, "0", "50"), _trend(2, "0", "25")]) == Decimal("50.0")
    # previous net zero
    assert growth_rate([_trend(1, "50", "50"), _trend(2, "100", "0")]) == Decimal("0")


def test_average_monthly_spending():
    assert average_monthly_spending([]) == Decimal("0")
    trends = [_trend(1, "0", "10.00"), _trend(2, "0", "20.01"), _trend(3, "0", "0")]
    assert average_monthly_spending(trends) == Decimal("10.00")


def test_budget_usage_statuses():
    rows = budget_usage(
        [_budget("100.00", "50.00"), _budget("100.00", "80.00"), _budget("100.00", "120.00")]
    )
    assert [r.status for r in rows] == ["ok", "warning", "over"]
    assert rows[2].remaining == Decimal("-20.00")
    assert rows[1].percentage == Decimal("80.0")
    assert budget_usage([_budget("0", "0")])[0].status == "ok"


def test_goal_progress():
    rows = goal_progress([_goal("300.00", "100.00"), _goal("50.00", "60.00")])
    assert rows[0].percentage == Decimal("33.3")
    assert not rows[0].completed
    assert rows[1].completed


def test_build_report_filters_to_window():
    txs = [
        _tx("50.00", datetime(2023, 12, 31), category_id="cat-4"),
        _tx("20.00", datetime(2024, 5, 10)),
        _tx("1000.00", datetime(2024, 5, 1), TransactionType.INCOME, "cat-5"),
        _tx("30.00", datetime(2024, 6, 10), category_id="cat-4"),
        _tx("1000.00", datetime(2024, 6, 1), TransactionType.INCOME, "cat-5"),
    ]
    report = build_report(txs, CATEGORIES, time_range="3months", now=NOW)

    assert report.window_start == datetime(2024, 4, 1)
    assert [t.key for t in report.monthly_trends] == ["2024-05", "2024-06"]
    assert sum(c.amount for c in report.category_breakdown) == Decimal("50.00")
    assert report.average_monthly_spending == Decimal("25.00")
    # net 980 -> 970
    assert report.growth_rate == Decimal("-1.0")


def test_build_report_on_empty_data():
    report = build_report([], [], now=NOW)
    assert report.time_range == "6months"
    assert report.monthly_trends == []
    assert report.category_breakdown == []
    assert report.weekly_spending == []
    assert report.growth_rate == 0
    assert report.average_monthly_spending == 0
