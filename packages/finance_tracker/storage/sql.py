"""SQLAlchemy-backed store over the ``db`` library's finance tables.

Every repository call opens its own ``session_scope``; ``create_many`` writes
the whole batch inside a single transaction, so a failure leaves nothing
behind. Rows are converted to the frozen dataclasses in
:mod:`finance_tracker.models` before the session closes.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import fields
from typing import Any

from db.client import get_engine, session_scope
from db.models.finance import (
    Base,
    FtBudget,
    FtCategory,
    FtSavingsGoal,
    FtTransaction,
    FtUser,
)
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..categorization import DEFAULT_CATEGORIES
from ..config import DEFAULT_USER_ID
from ..logging_setup import get_logger
from ..models import (
    Budget,
    BudgetCreate,
    BudgetPeriod,
    BudgetUpdate,
    Category,
    CategoryCreate,
    CategoryUpdate,
    SavingsGoal,
    SavingsGoalCreate,
    SavingsGoalUpdate,
    Transaction,
    TransactionCreate,
    TransactionType,
    TransactionUpdate,
    User,
    UserCreate,
)
from .base import check_patched, coerce, new_id, utcnow

logger = get_logger("finance_tracker.storage.sql")

# Columns stored as plain strings that map back to enums.
_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "type": TransactionType,
    "period": BudgetPeriod,
}


def _to_entity[E](entity_cls: type[E], row: Any) -> E:
    values: dict[str, Any] = {}
    for f in fields(entity_cls):  # type: ignore[arg-type]
        v = getattr(row, f.name)
        conv = _CONVERTERS.get(f.name)
        values[f.name] = conv(v) if conv is not None and v is not None else v
    return entity_cls(**values)


def _plain(values: dict[str, Any]) -> dict[str, Any]:
    # Enum members are stored by value.
    return {
        k: (v.value if isinstance(v, TransactionType | BudgetPeriod) else v)
        for k, v in values.items()
    }


class SqlRepository[E, C: BaseModel, U: BaseModel]:
    def __init__(
        self,
        database_url: str,
        orm_cls: type[Base],
        entity_cls: type[E],
        create_model: type[C],
        update_model: type[U],
        *,
        order_by: Sequence[Any] = (),
    ) -> None:
        self._url = database_url
        self._orm_cls = orm_cls
        self._entity_cls = entity_cls
        self._create_model = create_model
        self._update_model = update_model
        self._order_by = tuple(order_by)
        names = {f.name for f in fields(entity_cls)}  # type: ignore[arg-type]
        self._has_created_at = "created_at" in names

    def _new_row(self, payload: C) -> Any:
        values = _plain(payload.model_dump())
        values["id"] = new_id()
        if self._has_created_at:
            values["created_at"] = utcnow()
        return self._orm_cls(**values)

    def list_by_user(self, user_id: str) -> list[E]:
        orm = self._orm_cls
        stmt = select(orm).where(orm.user_id == user_id)  # type: ignore[attr-defined]
        if self._order_by:
            stmt = stmt.order_by(*self._order_by)
        with session_scope(database_url=self._url) as s:
            return [_to_entity(self._entity_cls, r) for r in s.scalars(stmt)]

    def get(self, id: str) -> E | None:
        with session_scope(database_url=self._url) as s:
            row = s.get(self._orm_cls, id)
            return _to_entity(self._entity_cls, row) if row is not None else None

    def create(self, data: C | Mapping[str, Any]) -> E:
        payload = coerce(self._create_model, data)
        with session_scope(database_url=self._url) as s:
            row = self._new_row(payload)
            s.add(row)
            s.flush()
            return _to_entity(self._entity_cls, row)

    def create_many(self, items: Sequence[C | Mapping[str, Any]]) -> list[E]:
        payloads = [coerce(self._create_model, item) for item in items]
        if not payloads:
            return []
        with session_scope(database_url=self._url) as s:
            rows = [self._new_row(p) for p in payloads]
            s.add_all(rows)
            s.flush()
            logger.debug("Inserted %d %s rows", len(rows), self._orm_cls.__tablename__)
            return [_to_entity(self._entity_cls, r) for r in rows]

    def update(self, id: str, patch: U | Mapping[str, Any]) -> E | None:
        changes = _plain(coerce(self._update_model, patch).changes())  # type: ignore[attr-defined]
        with session_scope(database_url=self._url) as s:
            row = s.get(self._orm_cls, id)
            if row is None:
                return None
            for k, v in changes.items():
                setattr(row, k, v)
            s.flush()
            entity = _to_entity(self._entity_cls, row)
            check_patched(entity)
            return entity

    def delete(self, id: str) -> bool:
        with session_scope(database_url=self._url) as s:
            row = s.get(self._orm_cls, id)
            if row is None:
                return False
            s.delete(row)
            return True


class SqlUserRepository:
    def __init__(self, database_url: str) -> None:
        self._url = database_url

    def _one(self, s: Session, stmt: Any) -> User | None:
        row = s.scalars(stmt).first()
        return _to_entity(User, row) if row is not None else None

    def get(self, id: str) -> User | None:
        with session_scope(database_url=self._url) as s:
            row = s.get(FtUser, id)
            return _to_entity(User, row) if row is not None else None

    def get_by_username(self, username: str) -> User | None:
        with session_scope(database_url=self._url) as s:
            return self._one(s, select(FtUser).where(FtUser.username == username))

    def get_by_email(self, email: str) -> User | None:
        with session_scope(database_url=self._url) as s:
            return self._one(s, select(FtUser).where(FtUser.email == email))

    def create(self, data: UserCreate | Mapping[str, Any]) -> User:
        payload = coerce(UserCreate, data)
        try:
            with session_scope(database_url=self._url) as s:
                row = FtUser(id=new_id(), created_at=utcnow(), **payload.model_dump())
                s.add(row)
                s.flush()
                return _to_entity(User, row)
        except IntegrityError as e:
            raise ValueError(
                f"username or email already registered: {payload.username!r}/{payload.email!r}"
            ) from e


class SqlStorage:
    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self.users = SqlUserRepository(database_url)
        self.categories: SqlRepository[Category, CategoryCreate, CategoryUpdate] = SqlRepository(
            database_url,
            FtCategory,
            Category,
            CategoryCreate,
            CategoryUpdate,
            order_by=(FtCategory.id,),
        )
        self.transactions: SqlRepository[Transaction, TransactionCreate, TransactionUpdate] = (
            SqlRepository(
                database_url,
                FtTransaction,
                Transaction,
                TransactionCreate,
                TransactionUpdate,
                order_by=(FtTransaction.date.desc(), FtTransaction.created_at.desc()),
            )
        )
        self.budgets: SqlRepository[Budget, BudgetCreate, BudgetUpdate] = SqlRepository(
            database_url,
            FtBudget,
            Budget,
            BudgetCreate,
            BudgetUpdate,
            order_by=(FtBudget.created_at,),
        )
        self.goals: SqlRepository[SavingsGoal, SavingsGoalCreate, SavingsGoalUpdate] = (
            SqlRepository(
                database_url,
                FtSavingsGoal,
                SavingsGoal,
                SavingsGoalCreate,
                SavingsGoalUpdate,
                order_by=(FtSavingsGoal.created_at,),
            )
        )

    def create_schema(self) -> None:
        """Create any missing tables directly from the ORM metadata.

        Meant for local databases and tests; shared databases are migrated
        with Alembic.
        """

        Base.metadata.create_all(get_engine(database_url=self.database_url))

    def initialize_default_data(self) -> None:
        with session_scope(database_url=self.database_url) as s:
            if s.get(FtUser, DEFAULT_USER_ID) is None:
                s.add(
                    FtUser(
                        id=DEFAULT_USER_ID,
                        username="demo",
                        email="demo@example.com",
                        created_at=utcnow(),
                    )
                )
                # Categories reference the user row.
                s.flush()
            added = 0
            for cat in DEFAULT_CATEGORIES:
                if s.get(FtCategory, cat.id) is None:
                    s.add(
                        FtCategory(
                            id=cat.id,
                            name=cat.name,
                            icon=cat.icon,
                            color=cat.color,
                            user_id=DEFAULT_USER_ID,
                        )
                    )
                    added += 1
        logger.info("Default data ensured (%d categories added)", added)


__all__ = ["SqlRepository", "SqlStorage", "SqlUserRepository"]
