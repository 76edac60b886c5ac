"""Keyword-based auto-categorization and the default category set.

The rule table is plain data: an ordered tuple of :class:`CategoryRule`. The
first rule whose keywords occur (as substrings) in the lower-cased
description wins; later rules are never consulted, so order encodes priority.
Income always maps to the Income category and unmatched expenses fall back to
Shopping, which makes :func:`auto_categorize` total.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .models import CategoryCreate, TransactionType

# ---------------------------------------------------------------------------
# Default categories (fixed ids shared with the seed data and migration 0001)
# ---------------------------------------------------------------------------

FOOD_AND_DINING_ID = "cat-1"
TRANSPORTATION_ID = "cat-2"
ENTERTAINMENT_ID = "cat-3"
SHOPPING_ID = "cat-4"
INCOME_ID = "cat-5"


@dataclass(frozen=True, slots=True)
class DefaultCategory:
    id: str
    name: str
    icon: str
    color: str

    def to_create(self, user_id: str) -> CategoryCreate:
        return CategoryCreate(name=self.name, icon=self.icon, color=self.color, user_id=user_id)


DEFAULT_CATEGORIES: tuple[DefaultCategory, ...] = (
    DefaultCategory(FOOD_AND_DINING_ID, "Food & Dining", "utensils", "#3B82F6"),
    DefaultCategory(TRANSPORTATION_ID, "Transportation", "car", "#10B981"),
    DefaultCategory(ENTERTAINMENT_ID, "Entertainment", "gamepad", "#F59E0B"),
    DefaultCategory(SHOPPING_ID, "Shopping", "shopping-cart", "#EF4444"),
    DefaultCategory(INCOME_ID, "Income", "plus-circle", "#22C55E"),
)

# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CategoryRule:
    category_id: str
    keywords: tuple[str, ...]

    def matches(self, text: str) -> bool:
        """``text`` must already be lower-cased."""

        return any(k in text for k in self.keywords)


DEFAULT_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        FOOD_AND_DINING_ID,
        ("restaurant", "food", "dining", "starbucks", "coffee", "pizza", "burger", "meal"),
    ),
    CategoryRule(
        TRANSPORTATION_ID,
        ("gas", "fuel", "uber", "lyft", "transport", "taxi", "bus", "train", "parking"),
    ),
    CategoryRule(
        ENTERTAINMENT_ID,
        ("movie", "entertainment", "netflix", "spotify", "game", "concert", "theater"),
    ),
    CategoryRule(
        SHOPPING_ID,
        ("amazon", "shopping", "store", "mall", "purchase", "buy", "retail"),
    ),
)


def auto_categorize(
    description: str,
    type_: TransactionType,
    *,
    rules: Sequence[CategoryRule] = DEFAULT_RULES,
    income_category_id: str = INCOME_ID,
    default_category_id: str = SHOPPING_ID,
) -> str:
    """Return the category id for a transaction description.

    >>> auto_categorize("Starbucks Coffee", TransactionType.EXPENSE)
    'cat-1'
    >>> auto_categorize("Starbucks Coffee", TransactionType.INCOME)
    'cat-5'
    """

    if type_ == TransactionType.INCOME:
        return income_category_id

    text = description.casefold()
    for rule in rules:
        if rule.matches(text):
            return rule.category_id
    return default_category_id


__all__ = [
    "DEFAULT_CATEGORIES",
    "DEFAULT_RULES",
    "CategoryRule",
    "DefaultCategory",
    "ENTERTAINMENT_ID",
    "FOOD_AND_DINING_ID",
    "INCOME_ID",
    "SHOPPING_ID",
    "TRANSPORTATION_ID",
    "auto_categorize",
]
