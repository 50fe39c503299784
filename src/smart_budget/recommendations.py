"""Budget recommendations for the shopping list."""

from collections.abc import Iterable

from .models import BudgetRecommendation, BudgetSummary, ShoppingItem


def calculate_budget_recommendations(
    items: Iterable[ShoppingItem], remaining_budget: float
) -> BudgetRecommendation:
    """Work out which unpurchased items fit within the remaining budget.

    Items are visited once, by tier (need, good, nice) and then cheapest
    first; ties keep their input order. Each item is taken if it still fits
    on top of what has been taken so far, otherwise it is deferred and never
    revisited. This is first-fit greedy, not an optimal packing.

    Args:
        items: Candidate items; purchased ones are ignored
        remaining_budget: Budget minus what has already been spent (may be negative)

    Returns:
        BudgetRecommendation with affordable items in visit order
    """
    candidates = sorted(
        (item for item in items if not item.purchased),
        key=lambda item: (item.category.tier, item.price),
    )

    affordable: list[ShoppingItem] = []
    unaffordable: list[ShoppingItem] = []
    running_total = 0.0

    # Nothing is affordable without budget left, whatever the item costs.
    if remaining_budget <= 0:
        return BudgetRecommendation(unaffordable_items=candidates, suggested_total=0.0)

    for item in candidates:
        if running_total + item.price <= remaining_budget:
            affordable.append(item)
            running_total += item.price
        else:
            unaffordable.append(item)

    return BudgetRecommendation(
        affordable_items=affordable,
        unaffordable_items=unaffordable,
        suggested_total=running_total,
    )


def is_item_affordable(item: ShoppingItem, recommendation: BudgetRecommendation) -> bool:
    """Check whether an item landed on the affordable side."""
    return item.id in recommendation.affordable_ids


def total_spent(items: Iterable[ShoppingItem]) -> float:
    """Sum of purchased item prices."""
    return sum((item.price for item in items if item.purchased), 0.0)


def remaining_budget(monthly_budget: float, items: Iterable[ShoppingItem]) -> float:
    """Monthly budget minus purchases; negative when overspent."""
    return monthly_budget - total_spent(items)


def summarize_budget(monthly_budget: float, items: Iterable[ShoppingItem]) -> BudgetSummary:
    """Build the budget/spent/remaining snapshot shown in the budget header."""
    spent = total_spent(items)
    percent_used = (spent / monthly_budget) * 100 if monthly_budget > 0 else 0.0
    return BudgetSummary(
        monthly_budget=monthly_budget,
        spent=spent,
        remaining=monthly_budget - spent,
        percent_used=percent_used,
    )
