"""Tests for data models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from smart_budget.models import (
    BudgetRecommendation,
    BudgetSettings,
    BudgetSummary,
    Category,
    ShoppingItem,
)


class TestCategory:
    """Tests for Category tiers."""

    def test_tier_ranks(self):
        """Need outranks good, good outranks nice."""
        assert Category.NEED.tier == 1
        assert Category.GOOD.tier == 2
        assert Category.NICE.tier == 3

    def test_labels(self):
        assert Category.NEED.label == "Need to Have"
        assert Category.NICE.label == "Nice to Have"

    def test_from_value(self):
        assert Category("good") is Category.GOOD


class TestShoppingItem:
    """Tests for ShoppingItem model."""

    def test_create_minimal(self):
        """Create item with only required fields."""
        item = ShoppingItem(name="Milk", price=3.5)
        assert item.category == Category.NEED
        assert item.purchased is False
        assert item.manual_order is None
        assert item.order == 0
        assert isinstance(item.id, str) and item.id
        assert isinstance(item.created_at, datetime)

    def test_unique_ids(self):
        assert ShoppingItem(name="A", price=1).id != ShoppingItem(name="A", price=1).id

    def test_json_dump(self):
        item = ShoppingItem(name="Bread", price=2.25, category=Category.GOOD)
        data = item.model_dump(mode="json")
        assert data["category"] == "good"
        assert isinstance(data["created_at"], str)


class TestBudgetModels:
    """Tests for budget models."""

    def test_settings_default(self):
        assert BudgetSettings().monthly_budget == 0.0

    def test_summary_over_budget(self):
        summary = BudgetSummary(monthly_budget=10, spent=12, remaining=-2, percent_used=120)
        assert summary.over_budget is True

    def test_recommendation_affordable_ids(self):
        a = ShoppingItem(name="A", price=1)
        rec = BudgetRecommendation(affordable_items=[a], suggested_total=1)
        assert rec.affordable_ids == {a.id}


class TestFieldRules:
    """Item and budget rules are enforced by the models themselves."""

    @pytest.mark.parametrize(
        "fields",
        [
            {"name": "", "price": 1.0},
            {"name": "   ", "price": 1.0},
            {"name": "Milk", "price": 0},
            {"name": "Milk", "price": -2.5},
            {"name": "Milk", "price": float("nan")},
            {"name": "Milk", "price": float("inf")},
            {"name": "Milk", "price": 1.0, "manual_order": -1},
            {"name": "Milk", "price": 1.0, "category": "urgent"},
        ],
    )
    def test_invalid_item_rejected(self, fields):
        with pytest.raises(ValidationError):
            ShoppingItem(**fields)

    def test_name_is_stripped(self):
        assert ShoppingItem(name="  Eggs ", price=2).name == "Eggs"

    @pytest.mark.parametrize("amount", [-1, float("nan"), float("inf")])
    def test_invalid_budget_rejected(self, amount):
        with pytest.raises(ValidationError):
            BudgetSettings(monthly_budget=amount)
