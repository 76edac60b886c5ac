"""Data models for ``finance_tracker``.

Three kinds of types live here:

- Stored entities (:class:`Transaction`, :class:`Category`, :class:`Budget`,
  :class:`SavingsGoal`, :class:`User`) as frozen dataclasses. Both storage
  implementations return these, never ORM rows.
- Pydantic input models (``*Create`` / ``*Update``) that validate data before
  it reaches a store. Update models carry partial patches; only fields the
  caller actually set are applied.
- Pipeline and analytics results (:class:`ParsedTransaction`,
  :class:`CSVParseResult`, :class:`UploadResult`, :class:`Summary`, ...).

Monetary values are :class:`~decimal.Decimal` quantized to two places. The
direction of a transaction is carried only by ``type``; ``amount`` is a
non-negative magnitude.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import StrEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

_CENTS = Decimal("0.01")

# Amount columns are NUMERIC(10, 2).
MAX_AMOUNT = Decimal("100000000")


def to_money(value: Any) -> Decimal:
    """Return ``value`` as a Decimal rounded half-up to cents."""

    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"invalid monetary value: {value!r}") from exc
    if not d.is_finite():
        raise ValueError(f"invalid monetary value: {value!r}")
    try:
        return d.quantize(_CENTS, rounding=ROUND_HALF_UP)
    except ArithmeticError as exc:
        raise ValueError(f"invalid monetary value: {value!r}") from exc


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, datetime | date):
        return value.isoformat()
    return value


def _camel_dict(obj: Any) -> dict[str, Any]:
    return {_camel(k): _jsonable(v) for k, v in asdict(obj).items()}


class TransactionType(StrEnum):
    INCOME = "income"
    EXPENSE = "expense"


class BudgetPeriod(StrEnum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


# ---------------------------------------------------------------------------
# Stored entities
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class User:
    id: str
    username: str
    email: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class Category:
    id: str
    name: str
    icon: str
    color: str
    user_id: str

    def as_dict(self) -> dict[str, Any]:
        return _camel_dict(self)


@dataclass(frozen=True, slots=True)
class Transaction:
    """A persisted income or expense.

    ``category_id`` of ``None`` means uncategorized. ``created_at`` is set by
    the store on insert and never patched.
    """

    id: str
    description: str
    amount: Decimal
    date: datetime
    type: TransactionType
    category_id: str | None
    user_id: str
    created_at: datetime

    def as_dict(self) -> dict[str, Any]:
        return _camel_dict(self)


@dataclass(frozen=True, slots=True)
class Budget:
    """A spending limit.

    ``spent`` is tracked independently of transactions: it is set through
    updates and is not recomputed from transactions in the budget's category.
    """

    id: str
    name: str
    amount: Decimal
    spent: Decimal
    category_id: str | None
    period: BudgetPeriod
    start_date: datetime
    end_date: datetime
    user_id: str
    created_at: datetime

    def as_dict(self) -> dict[str, Any]:
        return _camel_dict(self)


@dataclass(frozen=True, slots=True)
class SavingsGoal:
    id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal
    target_date: datetime | None
    user_id: str
    created_at: datetime

    def as_dict(self) -> dict[str, Any]:
        return _camel_dict(self)


# ---------------------------------------------------------------------------
# Input validation (create/update payloads)
# ---------------------------------------------------------------------------


class _Input(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    # Fields that may be omitted from a patch but never explicitly nulled.
    _required_when_set: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_null_for_required(self):
        for name in self._required_when_set:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller set explicitly."""

        return self.model_dump(exclude_unset=True)


def _non_empty(v: str | None, what: str) -> str | None:
    if v is not None and not v.strip():
        raise ValueError(f"{what} must be non-empty")
    return v


def _as_datetime(v: Any) -> Any:
    # Stored dates are naive: plain dates become midnight, offsets are dropped.
    if isinstance(v, str):
        try:
            v = datetime.fromisoformat(v.strip())
        except ValueError:
            return v
    if isinstance(v, datetime):
        return v.replace(tzinfo=None)
    if isinstance(v, date):
        return datetime(v.year, v.month, v.day)
    return v


def _non_negative_money(v: Any, what: str) -> Decimal | None:
    if v is None:
        return None
    d = to_money(v)
    if d < 0:
        raise ValueError(f"{what} must be >= 0")
    if d >= MAX_AMOUNT:
        raise ValueError(f"{what} must be below {MAX_AMOUNT}")
    return d


class UserCreate(_Input):
    username: str
    email: str

    @field_validator("username", "email")
    @classmethod
    def _filled(cls, v: str) -> str:
        return _non_empty(v, "username/email") or v


class CategoryCreate(_Input):
    name: str
    icon: str
    color: str
    user_id: str

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _non_empty(v, "name") or v


class CategoryUpdate(_Input):
    _required_when_set: ClassVar[tuple[str, ...]] = ("name", "icon", "color")

    name: str | None = None
    icon: str | None = None
    color: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        return _non_empty(v, "name")


class TransactionCreate(_Input):
    description: str
    amount: Decimal
    date: datetime
    type: TransactionType
    category_id: str | None = None
    user_id: str

    @field_validator("description")
    @classmethod
    def _description(cls, v: str) -> str:
        return _non_empty(v, "description") or v

    @field_validator("amount", mode="before")
    @classmethod
    def _amount(cls, v: Any) -> Decimal | None:
        return _non_negative_money(v, "amount")

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> Any:
        return _as_datetime(v)


class TransactionUpdate(_Input):
    _required_when_set: ClassVar[tuple[str, ...]] = ("description", "amount", "date", "type")

    description: str | None = None
    amount: Decimal | None = None
    date: datetime | None = None
    type: TransactionType | None = None
    category_id: str | None = None

    @field_validator("description")
    @classmethod
    def _description(cls, v: str | None) -> str | None:
        return _non_empty(v, "description")

    @field_validator("amount", mode="before")
    @classmethod
    def _amount(cls, v: Any) -> Decimal | None:
        return _non_negative_money(v, "amount")

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> Any:
        return _as_datetime(v)


class BudgetCreate(_Input):
    name: str
    amount: Decimal
    spent: Decimal = Decimal("0.00")
    category_id: str | None = None
    period: BudgetPeriod
    start_date: datetime
    end_date: datetime
    user_id: str

    @field_validator("amount", "spent", mode="before")
    @classmethod
    def _money(cls, v: Any) -> Decimal | None:
        return _non_negative_money(v, "budget amount")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _dates(cls, v: Any) -> Any:
        return _as_datetime(v)

    @model_validator(mode="after")
    def _ordered_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")
        return self


class BudgetUpdate(_Input):
    _required_when_set: ClassVar[tuple[str, ...]] = (
        "name",
        "amount",
        "spent",
        "period",
        "start_date",
        "end_date",
    )

    name: str | None = None
    amount: Decimal | None = None
    spent: Decimal | None = None
    category_id: str | None = None
    period: BudgetPeriod | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("amount", "spent", mode="before")
    @classmethod
    def _money(cls, v: Any) -> Decimal | None:
        return _non_negative_money(v, "budget amount")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _dates(cls, v: Any) -> Any:
        return _as_datetime(v)


class SavingsGoalCreate(_Input):
    name: str
    target_amount: Decimal
    current_amount: Decimal = Decimal("0.00")
    target_date: datetime | None = None
    user_id: str

    @field_validator("target_amount", "current_amount", mode="before")
    @classmethod
    def _money(cls, v: Any) -> Decimal | None:
        return _non_negative_money(v, "goal amount")

    @field_validator("target_date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> Any:
        return _as_datetime(v)


class SavingsGoalUpdate(_Input):
    _required_when_set: ClassVar[tuple[str, ...]] = ("name", "target_amount", "current_amount")

    name: str | None = None
    target_amount: Decimal | None = None
    current_amount: Decimal | None = None
    target_date: datetime | None = None

    @field_validator("target_amount", "current_amount", mode="before")
    @classmethod
    def _money(cls, v: Any) -> Decimal | None:
        return _non_negative_money(v, "goal amount")

    @field_validator("target_date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> Any:
        return _as_datetime(v)


# ---------------------------------------------------------------------------
# CSV pipeline results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParsedTransaction:
    """A validated CSV row, ready to be persisted for a user."""

    date: datetime
    description: str
    amount: Decimal
    type: TransactionType
    category_id: str | None

    def to_create(self, user_id: str) -> TransactionCreate:
        return TransactionCreate(
            description=self.description,
            amount=self.amount,
            date=self.date,
            type=self.type,
            category_id=self.category_id,
            user_id=user_id,
        )


@dataclass(slots=True)
class CSVParseResult:
    transactions: list[ParsedTransaction] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    total_rows: int = 0
    valid_rows: int = 0


@dataclass(slots=True)
class UploadResult:
    """Outcome of an upload: persisted transactions plus every rejected row."""

    transactions: list[Transaction] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    total_rows: int = 0
    valid_rows: int = 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "transactions": [tx.as_dict() for tx in self.transactions],
            "errors": list(self.errors),
            "totalRows": self.total_rows,
            "validRows": self.valid_rows,
        }


# ---------------------------------------------------------------------------
# Analytics results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Summary:
    total_income: Decimal
    total_expenses: Decimal
    total_balance: Decimal
    monthly_spending: Decimal
    savings_progress: int
    budget_remaining: Decimal

    def as_dict(self) -> dict[str, Any]:
        return {
            "totalBalance": _jsonable(self.total_balance),
            "monthlySpending": _jsonable(self.monthly_spending),
            "savingsProgress": self.savings_progress,
            "budgetRemaining": _jsonable(self.budget_remaining),
        }


@dataclass(frozen=True, slots=True)
class CategorySpending:
    id: str | None
    name: str
    amount: Decimal
    color: str

    def as_dict(self) -> dict[str, Any]:
        return _camel_dict(self)


@dataclass(frozen=True, slots=True)
class MonthlyTrend:
    year: int
    month: int
    income: Decimal
    expenses: Decimal

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def label(self) -> str:
        return date(self.year, self.month, 1).strftime("%b %Y")

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


@dataclass(frozen=True, slots=True)
class WeeklySpending:
    week_start: date
    amount: Decimal


@dataclass(frozen=True, slots=True)
class BudgetUsage:
    id: str
    name: str
    amount: Decimal
    spent: Decimal
    remaining: Decimal
    percentage: Decimal
    status: str


@dataclass(frozen=True, slots=True)
class GoalProgress:
    id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal
    percentage: Decimal
    completed: bool


@dataclass(frozen=True, slots=True)
class Report:
    """Reports-page view over a time window."""

    time_range: str
    window_start: datetime
    monthly_trends: list[MonthlyTrend]
    category_breakdown: list[CategorySpending]
    weekly_spending: list[WeeklySpending]
    growth_rate: Decimal
    average_monthly_spending: Decimal


__all__ = [
    "Budget",
    "BudgetCreate",
    "BudgetPeriod",
    "BudgetUpdate",
    "BudgetUsage",
    "CSVParseResult",
    "Category",
    "CategoryCreate",
    "CategorySpending",
    "CategoryUpdate",
    "GoalProgress",
    "MAX_AMOUNT",
    "MonthlyTrend",
    "ParsedTransaction",
    "Report",
    "SavingsGoal",
    "SavingsGoalCreate",
    "SavingsGoalUpdate",
    "Summary",
    "Transaction",
    "TransactionCreate",
    "TransactionType",
    "TransactionUpdate",
    "UploadResult",
    "User",
    "UserCreate",
    "WeeklySpending",
    "to_money",
]
