"""Tests for budget recommendations."""

import pytest

from smart_budget.models import Category
from smart_budget.recommendations import (
    calculate_budget_recommendations,
    is_item_affordable,
    remaining_budget,
    summarize_budget,
)


def names(items):
    return [item.name for item in items]


@pytest.fixture
def mixed_items(make_item):
    return [
        make_item("Lamp", 40.0, Category.NICE),
        make_item("Rice", 12.0, Category.NEED),
        make_item("Shoes", 60.0, Category.GOOD),
        make_item("Milk", 3.0, Category.NEED),
        make_item("Candle", 5.0, Category.NICE),
        make_item("Pan", 25.0, Category.GOOD),
    ]


class TestGreedyAllocation:
    """Tests for the first-fit greedy walk."""

    def test_documented_scenario(self, make_item):
        """Need items first, a skipped item does not block cheaper later ones."""
        a = make_item("A", 10.0, Category.NEED)
        b = make_item("B", 30.0, Category.NEED)
        c = make_item("C", 5.0, Category.GOOD)

        rec = calculate_budget_recommendations([a, b, c], 20.0)

        assert names(rec.affordable_items) == ["A", "C"]
        assert names(rec.unaffordable_items) == ["B"]
        assert rec.suggested_total == 15.0

    def test_visit_order_is_tier_then_price(self, mixed_items):
        rec = calculate_budget_recommendations(mixed_items, 1000.0)
        assert names(rec.affordable_items) == ["Milk", "Rice", "Pan", "Shoes", "Candle", "Lamp"]

    def test_no_backtracking(self, make_item):
        """Greedy takes the cheap item even when skipping it would fit more value."""
        items = [
            make_item("Small", 6.0, Category.NEED),
            make_item("Big", 10.0, Category.NEED),
        ]
        rec = calculate_budget_recommendations(items, 10.0)
        assert names(rec.affordable_items) == ["Small"]
        assert names(rec.unaffordable_items) == ["Big"]
        assert rec.suggested_total == 6.0

    def test_exact_fit_is_affordable(self, make_item):
        rec = calculate_budget_recommendations([make_item("A", 20.0)], 20.0)
        assert names(rec.affordable_items) == ["A"]

    def test_purchased_items_ignored(self, make_item):
        items = [make_item("Bought", 5.0, purchased=True), make_item("Todo", 5.0)]
        rec = calculate_budget_recommendations(items, 100.0)
        assert names(rec.affordable_items) == ["Todo"]
        assert rec.unaffordable_items == []

    def test_ties_keep_input_order(self, make_item):
        first = make_item("First", 4.0)
        second = make_item("Second", 4.0)
        rec = calculate_budget_recommendations([second, first], 4.0)
        assert names(rec.affordable_items) == ["Second"]
        assert names(rec.unaffordable_items) == ["First"]

    def test_empty_input(self):
        rec = calculate_budget_recommendations([], 50.0)
        assert rec.affordable_items == []
        assert rec.unaffordable_items == []
        assert rec.suggested_total == 0.0


class TestBudgetEdges:
    """Tests for zero, negative and ample budgets."""

    @pytest.mark.parametrize("budget", [0.0, -25.0])
    def test_no_budget_means_nothing_affordable(self, mixed_items, budget):
        rec = calculate_budget_recommendations(mixed_items, budget)
        assert rec.affordable_items == []
        assert len(rec.unaffordable_items) == len(mixed_items)
        assert rec.suggested_total == 0

    def test_free_item_not_affordable_without_budget(self, make_item):
        """A zero price can only come from an unvalidated copy; it still needs budget."""
        free = make_item("Sample", 1.0).model_copy(update={"price": 0.0})
        rec = calculate_budget_recommendations([free], 0.0)
        assert rec.affordable_items == []
        assert names(rec.unaffordable_items) == ["Sample"]

    def test_ample_budget_means_everything_affordable(self, mixed_items):
        total = sum(item.price for item in mixed_items)
        rec = calculate_budget_recommendations(mixed_items, total)
        assert len(rec.affordable_items) == len(mixed_items)
        assert rec.suggested_total == total


class TestRecommendationProperties:
    """Conservation, bound and determinism over a range of budgets."""

    @pytest.mark.parametrize("budget", [-5.0, 0.0, 3.0, 15.0, 42.0, 77.5, 144.0, 500.0])
    def test_conservation_and_bound(self, mixed_items, budget):
        rec = calculate_budget_recommendations(mixed_items, budget)

        assert len(rec.affordable_items) + len(rec.unaffordable_items) == len(mixed_items)
        assert sum(item.price for item in rec.affordable_items) == rec.suggested_total
        if budget >= 0:
            assert rec.suggested_total <= budget
        else:
            assert rec.affordable_items == [] and rec.suggested_total == 0

    def test_deterministic(self, mixed_items):
        first = calculate_budget_recommendations(mixed_items, 50.0)
        second = calculate_budget_recommendations(mixed_items, 50.0)
        assert first == second


class TestBudgetHelpers:
    """Tests for remaining budget and summary helpers."""

    def test_remaining_budget_subtracts_purchases(self, make_item):
        items = [make_item("A", 30.0, purchased=True), make_item("B", 10.0)]
        assert remaining_budget(100.0, items) == 70.0

    def test_remaining_budget_can_go_negative(self, make_item):
        items = [make_item("A", 130.0, purchased=True)]
        assert remaining_budget(100.0, items) == -30.0

    def test_summary(self, make_item):
        items = [make_item("A", 25.0, purchased=True), make_item("B", 10.0)]
        summary = summarize_budget(100.0, items)
        assert summary.spent == 25.0
        assert summary.remaining == 75.0
        assert summary.percent_used == 25.0
        assert summary.over_budget is False

    def test_summary_with_zero_budget(self, make_item):
        summary = summarize_budget(0.0, [make_item("A", 5.0, purchased=True)])
        assert summary.percent_used == 0.0
        assert summary.over_budget is True

    def test_is_item_affordable(self, make_item):
        a = make_item("A", 5.0)
        b = make_item("B", 50.0)
        rec = calculate_budget_recommendations([a, b], 10.0)
        assert is_item_affordable(a, rec) is True
        assert is_item_affordable(b, rec) is False
