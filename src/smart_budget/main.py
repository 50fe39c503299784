"""CLI entry point for Smart Budget."""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated

import typer

from .config import ConfigManager
from .events import BudgetEvents
from .exceptions import ItemNotFoundError, StorageFailure, ValidationError
from .item_store import ItemStore
from .list_manager import ShoppingListManager
from .log import configure_logging
from .models import Category
from .output_formatter import OutputFormatter
from .undo import UndoCoordinator

app = typer.Typer(
    name="smart-budget",
    help="Shopping list with priority tiers and a monthly budget",
    no_args_is_help=True,
)

# Global state for formatter and config (set by callback)
formatter: OutputFormatter = OutputFormatter()
config: ConfigManager | None = None
db_path: Path | None = None


def get_config() -> ConfigManager:
    """Get or create ConfigManager instance."""
    global config
    if config is None:
        config = ConfigManager()
    return config


async def build_manager(path: Path, cfg: ConfigManager) -> ShoppingListManager:
    """Wire store, events and undo together into a manager."""
    store = await ItemStore.open(path)
    undo = UndoCoordinator(store, window=cfg.undo.window_seconds)
    return ShoppingListManager(
        store,
        events=BudgetEvents(),
        undo=undo,
        default_budget=cfg.budget.default_monthly,
    )


def run(operation: Callable[[ShoppingListManager], Awaitable[dict]]) -> dict:
    """Run one manager operation on a fresh event loop.

    The undo coordinator lives only as long as this call, so whatever the
    operation records is dropped when it returns. Undo is therefore not a
    CLI command; it is available to callers that keep a
    ``ShoppingListManager`` alive on their own loop.
    """
    cfg = get_config()
    path = db_path or cfg.data.db_path

    async def _main() -> dict:
        manager = await build_manager(path, cfg)
        try:
            return await operation(manager)
        finally:
            manager.undo_coordinator.close()

    return asyncio.run(_main())


def execute(operation: Callable[[ShoppingListManager], Awaitable[dict]]) -> None:
    """Run an operation and print its result, mapping errors to exit code 1."""
    try:
        result = run(operation)
    except ValidationError as e:
        formatter.error(str(e), error_code="VALIDATION_ERROR")
        raise typer.Exit(code=1)
    except ItemNotFoundError as e:
        formatter.error(str(e), error_code="ITEM_NOT_FOUND")
        raise typer.Exit(code=1)
    except StorageFailure as e:
        formatter.error(str(e), error_code="STORAGE_FAILURE")
        raise typer.Exit(code=1)

    if not result.get("success", True):
        formatter.error(
            result.get("message", "Operation failed"),
            error_code=result.get("error_code", "REJECTED"),
        )
        raise typer.Exit(code=1)

    formatter.output(result, result.get("message", ""))


@app.callback()
def main(
    json_output: Annotated[
        bool, typer.Option("--json", help="Output as JSON for programmatic use")
    ] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Smart Budget CLI - prioritized shopping within a monthly budget."""
    global formatter, config, db_path

    formatter = OutputFormatter(json_mode=json_output)
    config = ConfigManager()
    configure_logging("DEBUG" if verbose else None, fallback=config.logging.level)

    # CLI --data-dir overrides config, which overrides default
    db_path = data_dir / config.data.db_name if data_dir else config.data.db_path


@app.command()
def add(
    item: Annotated[str, typer.Argument(help="Item name to add")],
    price: Annotated[float, typer.Option("--price", "-p", help="Item price")],
    category: Annotated[
        Category, typer.Option("--category", "-c", help="Priority tier")
    ] = Category.NEED,
) -> None:
    """Add an item to the shopping list."""
    execute(lambda m: m.add_item(name=item, price=price, category=category))


@app.command(name="list")
def list_items(
    include_purchased: Annotated[
        bool, typer.Option("--all", "-a", help="Include purchased items")
    ] = False,
) -> None:
    """View the shopping list by priority tier."""
    execute(lambda m: m.get_list(include_purchased=include_purchased))


@app.command()
def show(
    item_id: Annotated[str, typer.Argument(help="Item ID")],
) -> None:
    """Show a single item."""
    execute(lambda m: m.get_item(item_id))


@app.command()
def edit(
    item_id: Annotated[str, typer.Argument(help="Item ID to edit")],
    name: Annotated[str | None, typer.Option("--name", "-n", help="New name")] = None,
    price: Annotated[float | None, typer.Option("--price", "-p", help="New price")] = None,
    category: Annotated[
        Category | None, typer.Option("--category", "-c", help="New priority tier")
    ] = None,
) -> None:
    """Edit an item. Changing the price drops its manual position."""
    execute(lambda m: m.edit_item(item_id, name=name, price=price, category=category))


@app.command()
def bought(
    item_id: Annotated[str, typer.Argument(help="Item ID to mark as purchased")],
) -> None:
    """Mark an item as purchased."""
    execute(lambda m: m.set_purchased(item_id, True))


@app.command()
def unbought(
    item_id: Annotated[str, typer.Argument(help="Item ID to mark as not purchased")],
) -> None:
    """Mark an item as not purchased."""
    execute(lambda m: m.set_purchased(item_id, False))


@app.command()
def remove(
    item_id: Annotated[str, typer.Argument(help="Item ID to remove")],
) -> None:
    """Remove an item from the shopping list."""
    execute(lambda m: m.remove_item(item_id))


@app.command()
def move(
    item_id: Annotated[str, typer.Argument(help="Item ID to move")],
    target_id: Annotated[str, typer.Argument(help="Item ID whose position it takes")],
) -> None:
    """Move an item to another item's position within the same tier."""
    execute(lambda m: m.reorder_items(item_id, target_id))


@app.command()
def clear(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Remove every item from the list."""
    if not yes and not formatter.json_mode:
        typer.confirm("Remove all items?", abort=True)
    execute(lambda m: m.clear_items())


@app.command()
def recommend() -> None:
    """Show which items fit within the remaining budget."""
    execute(lambda m: m.get_recommendation())


budget_app = typer.Typer(help="Budget commands")
app.add_typer(budget_app, name="budget")


@budget_app.command("set")
def budget_set(
    amount: Annotated[float, typer.Argument(help="Monthly budget")],
) -> None:
    """Set the monthly budget."""
    execute(lambda m: m.set_budget(amount))


@budget_app.command("status")
def budget_status() -> None:
    """View budget, spent and remaining amounts."""
    execute(lambda m: m.get_budget_status())


if __name__ == "__main__":
    app()
