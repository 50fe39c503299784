"""SQLite-backed persistence for shopping items and budget settings.

Every operation opens its own short-lived aiosqlite connection and commits
atomically, so a single call is atomic at the record granularity. Reads
always return fresh model instances. Field rules live on the pydantic
models; this module turns their errors into ``ValidationError``.
"""

import logging
from contextlib import asynccontextmanager, contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite
import pydantic
from pydantic import NonNegativeInt, TypeAdapter

from .exceptions import StorageFailure, ValidationError
from .models import BudgetSettings, Category, ShoppingItem

logger = logging.getLogger(__name__)

BUDGET_SETTINGS_ID = "budget"

# Fields callers may change through update(); identity and timestamps are owned here.
MUTABLE_FIELDS = frozenset({"name", "price", "category", "purchased", "order", "manual_order"})

_manual_ranks = TypeAdapter(dict[str, NonNegativeInt])


@contextmanager
def _validated():
    """Re-raise pydantic validation errors as ValidationError."""
    try:
        yield
    except pydantic.ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'value'}: {err['msg']}"
            for err in e.errors()
        )
        raise ValidationError(details) from e


def _as_category(category: Any) -> Category:
    try:
        return Category(category)
    except ValueError:
        raise ValidationError(f"Unknown category: {category!r}") from None


class ItemStore:
    """Manages SQLite persistence for the shopping list.

    Build one with ``await ItemStore.open(path)`` at startup and hand it to
    whatever needs it.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: Path | None = None):
        """Initialize item store.

        Args:
            db_path: Path to the SQLite database file. Defaults to ./data/smart_budget.db
        """
        if db_path is None:
            db_path = Path.cwd() / "data" / "smart_budget.db"
        self.db_path = Path(db_path)
        self._ensure_directories()

    @classmethod
    async def open(cls, db_path: Path | None = None) -> "ItemStore":
        """Create a store and make sure its schema exists."""
        store = cls(db_path)
        await store.initialize()
        return store

    def _ensure_directories(self) -> None:
        """Create the database directory if it doesn't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @asynccontextmanager
    async def _get_connection(self, operation: str):
        """Get a database connection that commits on success."""
        try:
            conn = await aiosqlite.connect(self.db_path)
        except (aiosqlite.Error, OSError) as e:
            raise StorageFailure(operation, e) from e
        conn.row_factory = aiosqlite.Row
        try:
            yield conn
            await conn.commit()
        except (aiosqlite.Error, OSError) as e:
            await conn.rollback()
            raise StorageFailure(operation, e) from e
        except BaseException:
            await conn.rollback()
            raise
        finally:
            await conn.close()

    async def initialize(self) -> None:
        """Initialize database schema if not exists."""
        async with self._get_connection("initialize") as conn:
            await conn.executescript("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                );

                CREATE TABLE IF NOT EXISTS items (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    price REAL NOT NULL,
                    category TEXT NOT NULL,
                    purchased INTEGER NOT NULL DEFAULT 0,
                    item_order INTEGER NOT NULL DEFAULT 0,
                    manual_order INTEGER,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_items_category ON items(category);
                CREATE INDEX IF NOT EXISTS idx_items_purchased ON items(purchased);

                CREATE TABLE IF NOT EXISTS settings (
                    id TEXT PRIMARY KEY,
                    monthly_budget REAL NOT NULL,
                    updated_at TEXT NOT NULL
                );

                INSERT OR IGNORE INTO schema_version (version) VALUES (1);
            """)

    # --- Row conversion ---

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> ShoppingItem:
        return ShoppingItem(
            id=row["id"],
            name=row["name"],
            price=row["price"],
            category=Category(row["category"]),
            purchased=bool(row["purchased"]),
            order=row["item_order"],
            manual_order=row["manual_order"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _item_params(item: ShoppingItem) -> tuple:
        return (
            item.id,
            item.name,
            item.price,
            item.category.value,
            int(item.purchased),
            item.order,
            item.manual_order,
            item.created_at.isoformat(),
            item.updated_at.isoformat(),
        )

    async def _fetch_item(self, conn: aiosqlite.Connection, item_id: str) -> ShoppingItem | None:
        async with conn.execute("SELECT * FROM items WHERE id = ?", (item_id,)) as cursor:
            row = await cursor.fetchone()
        return self._row_to_item(row) if row else None

    async def _next_order(self, conn: aiosqlite.Connection, category: Category) -> int:
        async with conn.execute(
            "SELECT COALESCE(MAX(item_order), -1) + 1 FROM items WHERE category = ?",
            (category.value,),
        ) as cursor:
            row = await cursor.fetchone()
        return row[0]

    async def _write_item(self, conn: aiosqlite.Connection, item: ShoppingItem) -> None:
        await conn.execute(
            """
            INSERT OR REPLACE INTO items
            (id, name, price, category, purchased, item_order, manual_order,
             created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            self._item_params(item),
        )

    # --- Item operations ---

    async def add(
        self,
        name: str,
        price: float,
        category: Category | str = Category.NEED,
        purchased: bool = False,
        manual_order: int | None = None,
    ) -> str:
        """Add a new item.

        Args:
            name: Item name, must not be blank
            price: Price, must be greater than 0
            category: Priority tier
            purchased: Initial purchased flag
            manual_order: Optional explicit rank within the category

        Returns:
            The new item's ID

        Raises:
            ValidationError: If name is empty or price is not positive
        """
        now = datetime.now()
        with _validated():
            item = ShoppingItem(
                name=name,
                price=price,
                category=category,
                purchased=purchased,
                manual_order=manual_order,
                created_at=now,
                updated_at=now,
            )

        async with self._get_connection("add") as conn:
            item.order = await self._next_order(conn, item.category)
            await self._write_item(conn, item)

        logger.debug("Added item %s (%s, %.2f)", item.id, item.name, item.price)
        return item.id

    async def get(self, item_id: str) -> ShoppingItem | None:
        """Get an item by ID, or None if it does not exist."""
        async with self._get_connection("get") as conn:
            return await self._fetch_item(conn, item_id)

    async def list_items(self) -> list[ShoppingItem]:
        """Get all items. Callers apply their own ordering."""
        async with self._get_connection("list") as conn:
            async with conn.execute("SELECT * FROM items") as cursor:
                rows = await cursor.fetchall()
        return [self._row_to_item(row) for row in rows]

    async def list_by_category(self, category: Category | str) -> list[ShoppingItem]:
        """Get all items in one category."""
        clean_category = _as_category(category)
        async with self._get_connection("list_by_category") as conn:
            async with conn.execute(
                "SELECT * FROM items WHERE category = ?", (clean_category.value,)
            ) as cursor:
                rows = await cursor.fetchall()
        return [self._row_to_item(row) for row in rows]

    async def list_by_purchased(self, purchased: bool) -> list[ShoppingItem]:
        """Get all items with the given purchased flag."""
        async with self._get_connection("list_by_purchased") as conn:
            async with conn.execute(
                "SELECT * FROM items WHERE purchased = ?", (int(purchased),)
            ) as cursor:
                rows = await cursor.fetchall()
        return [self._row_to_item(row) for row in rows]

    async def update(self, item_id: str, **fields: Any) -> None:
        """Merge fields into an existing item.

        A missing item is silently ignored, whatever the fields. Changing
        the price to a different value clears manual_order. Moving an item
        to another category clears manual_order and appends it to that
        category.

        Raises:
            ValidationError: On unknown fields or invalid values
        """
        unknown = set(fields) - MUTABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        async with self._get_connection("update") as conn:
            existing = await self._fetch_item(conn, item_id)
            if existing is None:
                logger.debug("Ignoring update of missing item %s", item_id)
                return

            with _validated():
                item = ShoppingItem.model_validate({**existing.model_dump(), **fields})

            if item.price != existing.price:
                item.manual_order = None
            if item.category != existing.category:
                item.manual_order = None
                if "order" not in fields:
                    item.order = await self._next_order(conn, item.category)

            item.updated_at = datetime.now()
            await self._write_item(conn, item)

        logger.debug("Updated item %s: %s", item_id, sorted(fields))

    async def apply_manual_order(self, assignments: dict[str, int]) -> None:
        """Write several manual_order values in one transaction.

        Missing IDs are skipped.
        """
        with _validated():
            assignments = _manual_ranks.validate_python(assignments)

        now = datetime.now().isoformat()
        async with self._get_connection("apply_manual_order") as conn:
            await conn.executemany(
                "UPDATE items SET manual_order = ?, updated_at = ? WHERE id = ?",
                [(rank, now, item_id) for item_id, rank in assignments.items()],
            )

        logger.debug("Applied manual order to %d item(s)", len(assignments))

    async def put(self, item: ShoppingItem) -> None:
        """Write a full item snapshot exactly as given (insert or replace).

        Raises:
            ValidationError: If the snapshot breaks an item rule
        """
        with _validated():
            item = ShoppingItem.model_validate(item.model_dump())
        async with self._get_connection("put") as conn:
            await self._write_item(conn, item)

    async def delete(self, item_id: str) -> None:
        """Delete an item. Deleting a missing item is a no-op."""
        async with self._get_connection("delete") as conn:
            await conn.execute("DELETE FROM items WHERE id = ?", (item_id,))

        logger.debug("Deleted item %s", item_id)

    async def clear_items(self) -> None:
        """Delete every item."""
        async with self._get_connection("clear_items") as conn:
            await conn.execute("DELETE FROM items")

    # --- Budget settings ---

    async def get_budget(self) -> BudgetSettings | None:
        """Get the budget settings, or None if never set."""
        async with self._get_connection("get_budget") as conn:
            async with conn.execute(
                "SELECT * FROM settings WHERE id = ?", (BUDGET_SETTINGS_ID,)
            ) as cursor:
                row = await cursor.fetchone()

        if row is None:
            return None
        return BudgetSettings(
            monthly_budget=row["monthly_budget"],
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    async def set_budget(self, amount: float) -> None:
        """Set the monthly budget.

        Raises:
            ValidationError: If amount is negative
        """
        with _validated():
            settings = BudgetSettings(monthly_budget=amount)
        async with self._get_connection("set_budget") as conn:
            await conn.execute(
                "INSERT OR REPLACE INTO settings (id, monthly_budget, updated_at) VALUES (?, ?, ?)",
                (BUDGET_SETTINGS_ID, settings.monthly_budget, settings.updated_at.isoformat()),
            )

        logger.debug("Monthly budget set to %.2f", settings.monthly_budget)
