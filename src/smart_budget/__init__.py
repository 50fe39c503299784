"""Smart Budget - Prioritized shopping list with a monthly budget."""

from .config import ConfigManager
from .events import BUDGET_UPDATE, BudgetEvents
from .exceptions import ItemNotFoundError, StorageFailure, ValidationError
from .item_store import ItemStore
from .list_manager import ShoppingListManager
from .models import (
    BudgetRecommendation,
    BudgetSettings,
    BudgetSummary,
    Category,
    ShoppingItem,
)
from .ordering import group_by_category, reorder, sort_category
from .recommendations import (
    calculate_budget_recommendations,
    is_item_affordable,
    remaining_budget,
    summarize_budget,
)
from .undo import UndoAction, UndoCoordinator, UndoKind, UndoState

__version__ = "0.1.0"

__all__ = [
    "BUDGET_UPDATE",
    "BudgetEvents",
    "BudgetRecommendation",
    "BudgetSettings",
    "BudgetSummary",
    "calculate_budget_recommendations",
    "Category",
    "ConfigManager",
    "group_by_category",
    "is_item_affordable",
    "ItemNotFoundError",
    "ItemStore",
    "remaining_budget",
    "reorder",
    "ShoppingItem",
    "ShoppingListManager",
    "sort_category",
    "StorageFailure",
    "summarize_budget",
    "UndoAction",
    "UndoCoordinator",
    "UndoKind",
    "UndoState",
    "ValidationError",
]
