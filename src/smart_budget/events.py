"""Change notifications between list and budget views.

Event names:
  budgetUpdate -> no payload; spending-related state changed, re-read the store.

Subscribers are callables taking no arguments. Coroutine functions are
awaited. One instance is created by whoever wires the application together.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

BUDGET_UPDATE = "budgetUpdate"

Listener = Callable[[], None] | Callable[[], Awaitable[None]]


class BudgetEvents:
    """Subscription channel for the budgetUpdate signal."""

    def __init__(self):
        self._subscribers: list[Listener] = []

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Listener) -> None:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            pass

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def publish(self) -> None:
        """Notify every listener. A failing listener does not stop the others."""
        logger.debug("Publishing %s to %d listener(s)", BUDGET_UPDATE, len(self._subscribers))
        for callback in list(self._subscribers):
            try:
                result = callback()
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Error delivering %s to %r", BUDGET_UPDATE, callback)
