"""Storage protocols shared by the in-memory and SQL stores.

Each entity kind gets a repository with the same six operations. Inputs are
pydantic create/update models (plain mappings are validated into them);
outputs are the frozen dataclasses from :mod:`finance_tracker.models`.

Not-found is a return value, never an exception: ``get`` and ``update``
return ``None`` and ``delete`` returns ``False``.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any, Protocol

from pydantic import BaseModel

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


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


def coerce[M: BaseModel](model: type[M], data: M | Mapping[str, Any]) -> M:
    """Validate a mapping into ``model``; model instances pass through."""

    if isinstance(data, model):
        return data
    return model.model_validate(data)


def check_patched(entity: Any) -> None:
    """Cross-field checks that a partial patch can break after merging."""

    if isinstance(entity, Budget) and entity.end_date < entity.start_date:
        raise ValueError("end_date must not precede start_date")


class Repository[E, C, U](Protocol):
    def list_by_user(self, user_id: str) -> list[E]: ...

    def get(self, id: str) -> E | None: ...

    def create(self, data: C | Mapping[str, Any]) -> E: ...

    def create_many(self, items: Sequence[C | Mapping[str, Any]]) -> list[E]: ...

    def update(self, id: str, patch: U | Mapping[str, Any]) -> E | None: ...

    def delete(self, id: str) -> bool: ...


class UserRepository(Protocol):
    def get(self, id: str) -> User | None: ...

    def get_by_username(self, username: str) -> User | None: ...

    def get_by_email(self, email: str) -> User | None: ...

    def create(self, data: UserCreate | Mapping[str, Any]) -> User: ...


type CategoryRepository = Repository[Category, CategoryCreate, CategoryUpdate]
type TransactionRepository = Repository[Transaction, TransactionCreate, TransactionUpdate]
type BudgetRepository = Repository[Budget, BudgetCreate, BudgetUpdate]
type SavingsGoalRepository = Repository[SavingsGoal, SavingsGoalCreate, SavingsGoalUpdate]


class Storage(Protocol):
    """The persistence collaborator handed to the service API and CLI."""

    users: UserRepository
    categories: CategoryRepository
    transactions: TransactionRepository
    budgets: BudgetRepository
    goals: SavingsGoalRepository

    def initialize_default_data(self) -> None:
        """Ensure the default user and seed categories exist (idempotent)."""
        ...


__all__ = [
    "BudgetRepository",
    "CategoryRepository",
    "Repository",
    "SavingsGoalRepository",
    "Storage",
    "TransactionRepository",
    "UserRepository",
    "check_patched",
    "coerce",
    "new_id",
    "utcnow",
]
