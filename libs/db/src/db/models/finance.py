from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# ft_users
# ---------------------------


class FtUser(Base):
    __tablename__ = "ft_users"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    username: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


# ---------------------------
# ft_categories
# ---------------------------


class FtCategory(Base):
    __tablename__ = "ft_categories"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    icon: Mapped[str] = mapped_column(String, nullable=False)
    # Hex colour such as "#10B981".
    color: Mapped[str] = mapped_column(String, nullable=False)
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("ft_users.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (Index("ix_ft_categories_user_id", "user_id"),)


# ---------------------------
# ft_transactions
# ---------------------------


class FtTransaction(Base):
    __tablename__ = "ft_transactions"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # Non-negative magnitude; direction lives in `type`.
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    # Calendar timestamp as read from the statement, stored without a zone.
    date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    category_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("ft_categories.id", ondelete="SET NULL"), nullable=True
    )
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("ft_users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("type in ('income','expense')", name="ck_ft_tx_type"),
        CheckConstraint("amount >= 0", name="ck_ft_tx_amount_non_negative"),
        Index("ix_ft_transactions_user_date", "user_id", "date"),
    )


# ---------------------------
# ft_budgets
# ---------------------------


class FtBudget(Base):
    __tablename__ = "ft_budgets"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    # Maintained through updates, not derived from transactions.
    spent: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, server_default="0")
    category_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("ft_categories.id", ondelete="SET NULL"), nullable=True
    )
    period: Mapped[str] = mapped_column(String, nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("ft_users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("period in ('monthly','yearly')", name="ck_ft_budget_period"),
        CheckConstraint("amount >= 0 AND spent >= 0", name="ck_ft_budget_amounts"),
        Index("ix_ft_budgets_user_id", "user_id"),
    )


# ---------------------------
# ft_savings_goals
# ---------------------------


class FtSavingsGoal(Base):
    __tablename__ = "ft_savings_goals"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    target_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    current_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, server_default="0"
    )
    target_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("ft_users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint(
            "target_amount >= 0 AND current_amount >= 0", name="ck_ft_goal_amounts"
        ),
        Index("ix_ft_savings_goals_user_id", "user_id"),
    )


__all__ = [
    "Base",
    "FtBudget",
    "FtCategory",
    "FtSavingsGoal",
    "FtTransaction",
    "FtUser",
]
