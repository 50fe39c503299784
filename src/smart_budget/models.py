"""Core data models for Smart Budget."""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    """Item priority tiers, highest first."""

    NEED = "need"
    GOOD = "good"
    NICE = "nice"

    @property
    def tier(self) -> int:
        """Allocation rank (need=1, good=2, nice=3)."""
        return TIER_RANK[self]

    @property
    def label(self) -> str:
        """Human readable section title."""
        return CATEGORY_LABELS[self]


TIER_RANK = {Category.NEED: 1, Category.GOOD: 2, Category.NICE: 3}

CATEGORY_LABELS = {
    Category.NEED: "Need to Have",
    Category.GOOD: "Good to Have",
    Category.NICE: "Nice to Have",
}


def new_item_id() -> str:
    return str(uuid4())


class ShoppingItem(BaseModel):
    """A shopping list item."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(default_factory=new_item_id)
    name: str = Field(min_length=1)
    price: float = Field(gt=0, allow_inf_nan=False)
    category: Category = Category.NEED
    purchased: bool = False
    order: int = 0
    manual_order: int | None = Field(default=None, ge=0)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class BudgetSettings(BaseModel):
    """The monthly budget singleton."""

    monthly_budget: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    updated_at: datetime = Field(default_factory=datetime.now)


class BudgetRecommendation(BaseModel):
    """Partition of unpurchased items against the remaining budget."""

    affordable_items: list[ShoppingItem] = Field(default_factory=list)
    unaffordable_items: list[ShoppingItem] = Field(default_factory=list)
    suggested_total: float = 0.0

    @property
    def affordable_ids(self) -> set[str]:
        return {item.id for item in self.affordable_items}


class BudgetSummary(BaseModel):
    """Budget vs. spending snapshot."""

    monthly_budget: float
    spent: float
    remaining: float
    percent_used: float

    @property
    def over_budget(self) -> bool:
        """Whether purchases exceed the budget."""
        return self.remaining < 0
