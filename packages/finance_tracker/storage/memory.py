"""Dict-backed store used when no database is configured.

State lives for the lifetime of the process. Entities are immutable, so an
update replaces the stored object with a patched copy.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import fields, replace
from typing import Any

from pydantic import BaseModel

from ..categorization import DEFAULT_CATEGORIES
from ..config import DEFAULT_USER_ID
from ..logging_setup import get_logger
from ..models import (
    Budget,
    BudgetCreate,
    BudgetUpdate,
    Category,
    CategoryCreate,
    CategoryUpdate,
    SavingsGoal,
    SavingsGoalCreate,
    SavingsGoalUpdate,
    Transaction,
    TransactionCreate,
    TransactionUpdate,
    User,
    UserCreate,
)
from .base import check_patched, coerce, new_id, utcnow

logger = get_logger("finance_tracker.storage.memory")


def _build[E](entity_cls: type[E], values: dict[str, Any]) -> E:
    names = {f.name for f in fields(entity_cls)}  # type: ignore[arg-type]
    row = dict(values, id=new_id())
    if "created_at" in names:
        row["created_at"] = utcnow()
    return entity_cls(**row)


class InMemoryRepository[E, C: BaseModel, U: BaseModel]:
    def __init__(
        self,
        entity_cls: type[E],
        create_model: type[C],
        update_model: type[U],
        *,
        sort_key: Callable[[E], Any] | None = None,
        newest_first: bool = False,
    ) -> None:
        self._entity_cls = entity_cls
        self._create_model = create_model
        self._update_model = update_model
        self._sort_key = sort_key
        self._newest_first = newest_first
        self._rows: dict[str, E] = {}

    def list_by_user(self, user_id: str) -> list[E]:
        out = [e for e in self._rows.values() if e.user_id == user_id]  # type: ignore[attr-defined]
        if self._sort_key is not None:
            out.sort(key=self._sort_key, reverse=self._newest_first)
        return out

    def get(self, id: str) -> E | None:
        return self._rows.get(id)

    def create(self, data: C | Mapping[str, Any]) -> E:
        return self._insert(_build(self._entity_cls, coerce(self._create_model, data).model_dump()))

    def create_many(self, items: Sequence[C | Mapping[str, Any]]) -> list[E]:
        # Validate the whole batch before inserting anything.
        validated = [coerce(self._create_model, item) for item in items]
        return [self._insert(_build(self._entity_cls, v.model_dump())) for v in validated]

    def update(self, id: str, patch: U | Mapping[str, Any]) -> E | None:
        current = self._rows.get(id)
        if current is None:
            return None
        changes = coerce(self._update_model, patch).changes()  # type: ignore[attr-defined]
        updated = replace(current, **changes)  # type: ignore[type-var]
        check_patched(updated)
        self._rows[id] = updated
        return updated

    def delete(self, id: str) -> bool:
        return self._rows.pop(id, None) is not None

    def _insert(self, entity: E) -> E:
        self._rows[entity.id] = entity  # type: ignore[attr-defined]
        return entity


class InMemoryUserRepository:
    def __init__(self) -> None:
        self._rows: dict[str, User] = {}

    def get(self, id: str) -> User | None:
        return self._rows.get(id)

    def get_by_username(self, username: str) -> User | None:
        return next((u for u in self._rows.values() if u.username == username), None)

    def get_by_email(self, email: str) -> User | None:
        return next((u for u in self._rows.values() if u.email == email), None)

    def create(self, data: UserCreate | Mapping[str, Any]) -> User:
        payload = coerce(UserCreate, data)
        if self.get_by_username(payload.username) is not None:
            raise ValueError(f"username already taken: {payload.username!r}")
        if self.get_by_email(payload.email) is not None:
            raise ValueError(f"email already registered: {payload.email!r}")
        return self._insert(_build(User, payload.model_dump()))

    def _insert(self, user: User) -> User:
        self._rows[user.id] = user
        return user


class MemoryStorage:
    def __init__(self) -> None:
        self.users = InMemoryUserRepository()
        self.categories: InMemoryRepository[Category, CategoryCreate, CategoryUpdate] = (
            InMemoryRepository(Category, CategoryCreate, CategoryUpdate)
        )
        self.transactions: InMemoryRepository[
            Transaction, TransactionCreate, TransactionUpdate
        ] = InMemoryRepository(
            Transaction,
            TransactionCreate,
            TransactionUpdate,
            sort_key=lambda tx: tx.date,
            newest_first=True,
        )
        self.budgets: InMemoryRepository[Budget, BudgetCreate, BudgetUpdate] = (
            InMemoryRepository(Budget, BudgetCreate, BudgetUpdate)
        )
        self.goals: InMemoryRepository[SavingsGoal, SavingsGoalCreate, SavingsGoalUpdate] = (
            InMemoryRepository(SavingsGoal, SavingsGoalCreate, SavingsGoalUpdate)
        )

    def initialize_default_data(self) -> None:
        if self.users.get(DEFAULT_USER_ID) is None:
            self.users._insert(
                User(
                    id=DEFAULT_USER_ID,
                    username="demo",
                    email="demo@example.com",
                    created_at=utcnow(),
                )
            )
        for cat in DEFAULT_CATEGORIES:
            if self.categories.get(cat.id) is None:
                self.categories._insert(
                    Category(
                        id=cat.id,
                        name=cat.name,
                        icon=cat.icon,
                        color=cat.color,
                        user_id=DEFAULT_USER_ID,
                    )
                )
        logger.debug("In-memory store seeded with default user and categories")


__all__ = ["InMemoryRepository", "InMemoryUserRepository", "MemoryStorage"]
