"""Single-slot, time-limited undo of the last list mutation."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from .exceptions import ItemNotFoundError, StorageFailure
from .item_store import ItemStore
from .models import ShoppingItem

logger = logging.getLogger(__name__)

DEFAULT_UNDO_WINDOW = 5.0


class UndoKind(str, Enum):
    """Kinds of mutation that can be undone."""

    ADD = "add"
    DELETE = "delete"
    PURCHASE = "purchase"
    EDIT = "edit"
    REORDER = "reorder"
    CLEAR = "clear"


class UndoState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"


@dataclass
class UndoAction:
    """How to reverse one mutation.

    ``before`` holds the affected items as they were before the mutation;
    ``created_ids`` lists items the mutation brought into existence.
    """

    kind: UndoKind
    description: str
    before: list[ShoppingItem] = field(default_factory=list)
    created_ids: list[str] = field(default_factory=list)


async def compensate(store: ItemStore, action: UndoAction) -> None:
    """Apply the inverse of an action to the store.

    Raises:
        ItemNotFoundError: If an item that should be restored in place is gone
        StorageFailure: If the store fails
    """
    for item_id in action.created_ids:
        await store.delete(item_id)

    if action.kind in (UndoKind.DELETE, UndoKind.CLEAR):
        for snapshot in action.before:
            await store.put(snapshot)
        return

    for snapshot in action.before:
        if await store.get(snapshot.id) is None:
            raise ItemNotFoundError(snapshot.id)
    for snapshot in action.before:
        await store.put(snapshot)


class UndoCoordinator:
    """Remembers the last mutation for a short window so it can be reversed.

    Recording a new action replaces the pending one. The window is measured
    on the running event loop's clock.
    """

    def __init__(
        self,
        store: ItemStore,
        window: float = DEFAULT_UNDO_WINDOW,
        on_error: Callable[[Exception], None] | None = None,
    ):
        """Initialize undo coordinator.

        Args:
            store: Store the compensating calls are issued against
            window: Seconds an action stays undoable
            on_error: Called with the exception when a compensating call fails
        """
        self.store = store
        self.window = window
        self.on_error = on_error
        self.last_error: Exception | None = None
        self._pending: UndoAction | None = None
        self._expires_at: float | None = None
        self._timer: asyncio.TimerHandle | None = None

    @property
    def state(self) -> UndoState:
        return UndoState.PENDING if self._pending is not None else UndoState.IDLE

    @property
    def pending(self) -> UndoAction | None:
        return self._pending

    @property
    def expires_at(self) -> float | None:
        """Loop time at which the pending action expires."""
        return self._expires_at

    def record(self, action: UndoAction) -> None:
        """Make an action the pending one and restart the timer.

        Must be called while an event loop is running.
        """
        loop = asyncio.get_running_loop()
        self._cancel_timer()
        self._pending = action
        self._expires_at = loop.time() + self.window
        self._timer = loop.call_later(self.window, self._expire, action)
        logger.debug("Undo armed for %s: %s", action.kind.value, action.description)

    async def undo(self) -> bool:
        """Reverse the pending action.

        Returns:
            True if an action was undone, False if nothing was pending or
            the compensating call failed (the action is dropped either way;
            a failure is kept in ``last_error``)
        """
        self.last_error = None
        action = self._pending
        if action is None:
            return False
        self._reset()

        try:
            await compensate(self.store, action)
        except (ItemNotFoundError, StorageFailure) as e:
            logger.warning("Could not undo %s: %s", action.description, e)
            self.last_error = e
            if self.on_error is not None:
                self.on_error(e)
            return False

        logger.debug("Undid %s", action.description)
        return True

    def dismiss(self) -> None:
        """Forget the pending action without touching the store."""
        self._reset()

    def close(self) -> None:
        """Cancel any timer; call on shutdown."""
        self._reset()

    def _expire(self, action: UndoAction) -> None:
        if self._pending is action:
            logger.debug("Undo window expired for %s", action.description)
            self._pending = None
            self._expires_at = None
            self._timer = None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _reset(self) -> None:
        self._cancel_timer()
        self._pending = None
        self._expires_at = None
