"""Shared test fixtures for Smart Budget."""

import itertools

import pytest

from smart_budget.events import BudgetEvents
from smart_budget.item_store import ItemStore
from smart_budget.list_manager import ShoppingListManager
from smart_budget.models import Category, ShoppingItem
from smart_budget.undo import UndoCoordinator


@pytest.fixture
def temp_data_dir(tmp_path):
    """Create a temporary data directory."""
    data_dir = tmp_path / "test_data"
    data_dir.mkdir()
    return data_dir


@pytest.fixture
async def item_store(temp_data_dir):
    """Create an ItemStore with a temporary database."""
    return await ItemStore.open(temp_data_dir / "test.db")


@pytest.fixture
def budget_events():
    return BudgetEvents()


@pytest.fixture
async def undo_coordinator(item_store):
    """Create an UndoCoordinator with a short window."""
    coordinator = UndoCoordinator(item_store, window=0.2)
    yield coordinator
    coordinator.close()


@pytest.fixture
async def list_manager(item_store, budget_events, undo_coordinator):
    """Create a ShoppingListManager with temporary storage."""
    return ShoppingListManager(item_store, events=budget_events, undo=undo_coordinator)


@pytest.fixture
def make_item():
    """Factory for in-memory items; insertion order follows creation order."""
    counter = itertools.count()

    def _make(
        name: str,
        price: float,
        category: Category = Category.NEED,
        purchased: bool = False,
        manual_order: int | None = None,
        order: int | None = None,
    ) -> ShoppingItem:
        return ShoppingItem(
            id=f"item-{name.lower()}",
            name=name,
            price=price,
            category=category,
            purchased=purchased,
            manual_order=manual_order,
            order=next(counter) if order is None else order,
        )

    return _make
