"""Shopping list operations used by the CLI and other front ends.

Every mutation goes to the store, is recorded for undo, and, when it can
change spending, is announced on the budgetUpdate channel. Views are always
rebuilt from a fresh read.
"""

from . import ordering
from .events import BudgetEvents
from .exceptions import ItemNotFoundError
from .item_store import ItemStore
from .models import Category, ShoppingItem
from .recommendations import (
    calculate_budget_recommendations,
    remaining_budget,
    summarize_budget,
)
from .undo import UndoAction, UndoCoordinator, UndoKind


def _dump(items: list[ShoppingItem]) -> list[dict]:
    return [item.model_dump(mode="json") for item in items]


class ShoppingListManager:
    """Manages shopping list operations."""

    def __init__(
        self,
        store: ItemStore,
        events: BudgetEvents | None = None,
        undo: UndoCoordinator | None = None,
        default_budget: float = 0.0,
    ):
        """Initialize list manager.

        Args:
            store: ItemStore the list lives in
            events: Channel for budgetUpdate notifications
            undo: Coordinator that remembers the last mutation
            default_budget: Monthly budget assumed until one is saved
        """
        self.store = store
        self.events = events or BudgetEvents()
        self.undo_coordinator = undo or UndoCoordinator(store)
        self.default_budget = default_budget

    async def _require_item(self, item_id: str) -> ShoppingItem:
        item = await self.store.get(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    async def add_item(
        self, name: str, price: float, category: Category | str = Category.NEED
    ) -> dict:
        """Add an item to the shopping list.

        Returns:
            Dict with success status and item data

        Raises:
            ValidationError: If name is empty or price is not positive
        """
        item_id = await self.store.add(name=name, price=price, category=category)
        item = await self._require_item(item_id)

        self.undo_coordinator.record(
            UndoAction(UndoKind.ADD, f"add {item.name}", created_ids=[item_id])
        )
        await self.events.publish()

        return {
            "success": True,
            "message": f"Added {item.name} to shopping list",
            "data": {"item": item.model_dump(mode="json")},
        }

    async def get_item(self, item_id: str) -> dict:
        """Get a single item.

        Raises:
            ItemNotFoundError: If item not found
        """
        item = await self._require_item(item_id)
        return {"success": True, "data": {"item": item.model_dump(mode="json")}}

    async def edit_item(
        self,
        item_id: str,
        name: str | None = None,
        price: float | None = None,
        category: Category | str | None = None,
    ) -> dict:
        """Edit an item's name, price or category.

        A changed price drops the item's manual position.

        Raises:
            ItemNotFoundError: If item not found
            ValidationError: If a new value is invalid
        """
        before = await self._require_item(item_id)

        fields: dict = {}
        if name is not None:
            fields["name"] = name
        if price is not None:
            fields["price"] = price
        if category is not None:
            fields["category"] = category

        if fields:
            await self.store.update(item_id, **fields)
            self.undo_coordinator.record(
                UndoAction(UndoKind.EDIT, f"edit {before.name}", before=[before])
            )
            if "price" in fields or "category" in fields:
                await self.events.publish()

        item = await self._require_item(item_id)
        return {
            "success": True,
            "message": f"Updated {item.name}",
            "data": {"item": item.model_dump(mode="json")},
        }

    async def set_purchased(self, item_id: str, purchased: bool = True) -> dict:
        """Mark an item as purchased or not purchased.

        Raises:
            ItemNotFoundError: If item not found
        """
        before = await self._require_item(item_id)
        await self.store.update(item_id, purchased=purchased)

        verb = "purchased" if purchased else "not purchased"
        self.undo_coordinator.record(
            UndoAction(UndoKind.PURCHASE, f"mark {before.name} {verb}", before=[before])
        )
        await self.events.publish()

        item = await self._require_item(item_id)
        return {
            "success": True,
            "message": f"Marked {item.name} as {verb}",
            "data": {"item": item.model_dump(mode="json")},
        }

    async def remove_item(self, item_id: str) -> dict:
        """Remove an item. Removing an unknown ID succeeds and changes nothing."""
        before = await self.store.get(item_id)
        await self.store.delete(item_id)

        if before is None:
            return {"success": True, "message": f"No item with ID '{item_id}'", "data": {}}

        self.undo_coordinator.record(
            UndoAction(UndoKind.DELETE, f"delete {before.name}", before=[before])
        )
        await self.events.publish()

        return {
            "success": True,
            "message": f"Removed {before.name} from shopping list",
            "data": {"item": before.model_dump(mode="json")},
        }

    async def reorder_items(self, moved_id: str, target_id: str) -> dict:
        """Move one item to the position held by another in the same category.

        Returns:
            Dict with the category's new order, or success False when the
            item is dropped onto itself or onto another category

        Raises:
            ItemNotFoundError: If either ID does not exist
        """
        items = await self.store.list_items()
        known = {item.id for item in items}
        for item_id in (moved_id, target_id):
            if item_id not in known:
                raise ItemNotFoundError(item_id)

        if moved_id == target_id:
            return {
                "success": False,
                "message": "An item cannot be moved onto itself",
                "data": {},
            }

        assignments = ordering.reorder(items, moved_id, target_id)
        if assignments is None:
            return {
                "success": False,
                "message": "Items can only be reordered within the same category",
                "data": {},
            }

        before = [item for item in items if item.id in assignments]
        await self.store.apply_manual_order(assignments)
        self.undo_coordinator.record(
            UndoAction(UndoKind.REORDER, f"reorder {before[0].category.label}", before=before)
        )

        category = before[0].category
        refreshed = ordering.sort_category(await self.store.list_by_category(category))
        return {
            "success": True,
            "message": f"Reordered {category.label}",
            "data": {"category": category.value, "items": _dump(refreshed)},
        }

    async def clear_items(self) -> dict:
        """Remove every item from the list."""
        before = await self.store.list_items()
        await self.store.clear_items()

        if before:
            self.undo_coordinator.record(
                UndoAction(UndoKind.CLEAR, f"clear {len(before)} item(s)", before=before)
            )
            await self.events.publish()

        return {
            "success": True,
            "message": f"Cleared {len(before)} item(s)",
            "data": {"removed": len(before)},
        }

    async def undo(self) -> dict:
        """Undo the last mutation if it is still within the undo window.

        Returns:
            Dict with success False and message "Nothing to undo" when no
            action is pending; when the compensating call fails, success
            False with an ``error_code`` of ITEM_NOT_FOUND or STORAGE_FAILURE
        """
        pending = self.undo_coordinator.pending
        if pending is None:
            return {"success": False, "message": "Nothing to undo", "data": {}}

        if not await self.undo_coordinator.undo():
            error = self.undo_coordinator.last_error
            error_code = (
                "ITEM_NOT_FOUND" if isinstance(error, ItemNotFoundError) else "STORAGE_FAILURE"
            )
            return {
                "success": False,
                "message": f"Could not undo {pending.description}: {error}",
                "error_code": error_code,
                "data": {},
            }

        await self.events.publish()
        return {"success": True, "message": f"Undid {pending.description}", "data": {}}

    async def set_budget(self, amount: float) -> dict:
        """Set the monthly budget.

        Raises:
            ValidationError: If amount is negative
        """
        await self.store.set_budget(amount)
        await self.events.publish()

        summary = await self._budget_summary()
        return {
            "success": True,
            "message": f"Budget set: ${summary.monthly_budget:.2f}/month",
            "data": {"budget_status": summary.model_dump(mode="json")},
        }

    async def _monthly_budget(self) -> float:
        settings = await self.store.get_budget()
        return settings.monthly_budget if settings else self.default_budget

    async def _budget_summary(self):
        return summarize_budget(await self._monthly_budget(), await self.store.list_items())

    async def get_budget_status(self) -> dict:
        """Budget, spent and remaining amounts."""
        summary = await self._budget_summary()
        return {"success": True, "data": {"budget_status": summary.model_dump(mode="json")}}

    async def get_recommendation(self) -> dict:
        """Split unpurchased items into affordable and deferred."""
        items = await self.store.list_items()
        remaining = remaining_budget(await self._monthly_budget(), items)
        recommendation = calculate_budget_recommendations(items, remaining)

        return {
            "success": True,
            "data": {
                "budget_recommendation": {
                    "remaining_budget": remaining,
                    "affordable_items": _dump(recommendation.affordable_items),
                    "unaffordable_items": _dump(recommendation.unaffordable_items),
                    "suggested_total": recommendation.suggested_total,
                }
            },
        }

    async def get_list(self, include_purchased: bool = False) -> dict:
        """Get the list grouped by category in display order.

        Each item carries an ``affordable`` flag from the current
        recommendation. Purchased items are listed separately.
        """
        items = await self.store.list_items()
        monthly_budget = await self._monthly_budget()
        recommendation = calculate_budget_recommendations(
            items, remaining_budget(monthly_budget, items)
        )
        affordable_ids = recommendation.affordable_ids

        grouped = ordering.group_by_category(items, include_purchased=include_purchased)
        categories = {}
        for category, members in grouped.items():
            rows = _dump(members)
            for row in rows:
                row["affordable"] = row["id"] in affordable_ids
            categories[category.value] = rows

        return {
            "success": True,
            "data": {
                "list": {
                    "categories": categories,
                    "total_items": sum(len(rows) for rows in categories.values()),
                    "affordable_count": len(recommendation.affordable_items),
                    "unaffordable_count": len(recommendation.unaffordable_items),
                    "suggested_total": recommendation.suggested_total,
                    "budget": summarize_budget(monthly_budget, items).model_dump(mode="json"),
                }
            },
        }
