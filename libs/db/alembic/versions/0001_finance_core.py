# ruff: noqa: I001
"""Finance tracker tables, default user and seed categories.

Revision ID: 0001_finance_core
Revises: None
Create Date: 2026-10-18
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_finance_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

DEFAULT_USER_ID = "default-user"

# Mirrors finance_tracker.categorization.DEFAULT_CATEGORIES
SEED_CATEGORIES = (
    ("cat-1", "Food & Dining", "utensils", "#3B82F6"),
    ("cat-2", "Transportation", "car", "#10B981"),
    ("cat-3", "Entertainment", "gamepad", "#F59E0B"),
    ("cat-4", "Shopping", "shopping-cart", "#EF4444"),
    ("cat-5", "Income", "plus-circle", "#22C55E"),
)


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    op.create_table(
        "ft_users",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("username", sa.String(), nullable=False, unique=True),
        sa.Column("email", sa.String(), nullable=False, unique=True),
        _created_at(),
    )

    op.create_table(
        "ft_categories",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("icon", sa.String(), nullable=False),
        sa.Column("color", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["ft_users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_ft_categories_user_id", "ft_categories", ["user_id"])

    op.create_table(
        "ft_transactions",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("date", sa.DateTime(timezone=False), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("category_id", sa.String(), nullable=True),
        sa.Column("user_id", sa.String(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["category_id"], ["ft_categories.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["user_id"], ["ft_users.id"], ondelete="CASCADE"),
        sa.CheckConstraint("type in ('income','expense')", name="ck_ft_tx_type"),
        sa.CheckConstraint("amount >= 0", name="ck_ft_tx_amount_non_negative"),
    )
    op.create_index("ix_ft_transactions_user_date", "ft_transactions", ["user_id", "date"])

    op.create_table(
        "ft_budgets",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("spent", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("category_id", sa.String(), nullable=True),
        sa.Column("period", sa.String(), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=False), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=False), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["category_id"], ["ft_categories.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["user_id"], ["ft_users.id"], ondelete="CASCADE"),
        sa.CheckConstraint("period in ('monthly','yearly')", name="ck_ft_budget_period"),
        sa.CheckConstraint("amount >= 0 AND spent >= 0", name="ck_ft_budget_amounts"),
    )
    op.create_index("ix_ft_budgets_user_id", "ft_budgets", ["user_id"])

    op.create_table(
        "ft_savings_goals",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("target_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("current_amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("target_date", sa.DateTime(timezone=False), nullable=True),
        sa.Column("user_id", sa.String(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["user_id"], ["ft_users.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "target_amount >= 0 AND current_amount >= 0", name="ck_ft_goal_amounts"
        ),
    )
    op.create_index("ix_ft_savings_goals_user_id", "ft_savings_goals", ["user_id"])

    op.bulk_insert(
        sa.table(
            "ft_users",
            sa.column("id", sa.String()),
            sa.column("username", sa.String()),
            sa.column("email", sa.String()),
        ),
        [{"id": DEFAULT_USER_ID, "username": "demo", "email": "demo@example.com"}],
    )
    op.bulk_insert(
        sa.table(
            "ft_categories",
            sa.column("id", sa.String()),
            sa.column("name", sa.Text()),
            sa.column("icon", sa.String()),
            sa.column("color", sa.String()),
            sa.column("user_id", sa.String()),
        ),
        [
            {"id": cid, "name": name, "icon": icon, "color": color, "user_id": DEFAULT_USER_ID}
            for cid, name, icon, color in SEED_CATEGORIES
        ],
    )


def downgrade() -> None:
    op.drop_index("ix_ft_savings_goals_user_id", table_name="ft_savings_goals")
    op.drop_table("ft_savings_goals")
    op.drop_index("ix_ft_budgets_user_id", table_name="ft_budgets")
    op.drop_table("ft_budgets")
    op.drop_index("ix_ft_transactions_user_date", table_name="ft_transactions")
    op.drop_table("ft_transactions")
    op.drop_index("ix_ft_categories_user_id", table_name="ft_categories")
    op.drop_table("ft_categories")
    op.drop_table("ft_users")
