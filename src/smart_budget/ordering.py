"""Display ordering of items within a category.

Items with an explicit manual rank come first, in rank order. Everything
else follows cheapest first, ties broken by insertion order.
"""

import logging
from collections.abc import Iterable

from .models import Category, ShoppingItem

logger = logging.getLogger(__name__)


def sort_key(item: ShoppingItem) -> tuple:
    """Sort key implementing manual-first, then price-ascending order."""
    if item.manual_order is not None:
        return (0, item.manual_order, item.order, item.id)
    return (1, item.price, item.order, item.id)


def sort_category(items: Iterable[ShoppingItem]) -> list[ShoppingItem]:
    """Return items in display order. Does not filter by category."""
    return sorted(items, key=sort_key)


def group_by_category(
    items: Iterable[ShoppingItem], include_purchased: bool = True
) -> dict[Category, list[ShoppingItem]]:
    """Group items into every category (tier order), each sorted for display."""
    grouped: dict[Category, list[ShoppingItem]] = {category: [] for category in Category}
    for item in items:
        if item.purchased and not include_purchased:
            continue
        grouped[item.category].append(item)
    return {category: sort_category(members) for category, members in grouped.items()}


def reorder(
    items: Iterable[ShoppingItem], moved_id: str, target_id: str
) -> dict[str, int] | None:
    """Compute new manual ranks after dragging one item onto another.

    The moved item takes the position the target currently holds in the
    category's display order, and every item in that category gets a
    contiguous rank starting at 0.

    Args:
        items: Items to consider, any categories
        moved_id: ID of the dragged item
        target_id: ID of the item whose position it takes

    Returns:
        Mapping of item ID to new manual_order for the whole category, or
        None when the request is rejected (unknown IDs, same item, or
        items in different categories).
    """
    by_id = {item.id: item for item in items}
    moved = by_id.get(moved_id)
    target = by_id.get(target_id)

    if moved is None or target is None:
        logger.info("Rejected reorder: unknown item %s or %s", moved_id, target_id)
        return None
    if moved_id == target_id:
        return None
    if moved.category != target.category:
        logger.info(
            "Rejected cross-category reorder: %s (%s) onto %s (%s)",
            moved_id,
            moved.category.value,
            target_id,
            target.category.value,
        )
        return None

    sequence = sort_category(i for i in by_id.values() if i.category == moved.category)
    old_index = next(i for i, item in enumerate(sequence) if item.id == moved_id)
    new_index = next(i for i, item in enumerate(sequence) if item.id == target_id)

    sequence.insert(new_index, sequence.pop(old_index))
    return {item.id: index for index, item in enumerate(sequence)}
