"""
Store change notification.

Stores notify a small, fixed set of subscribers (the scene renderer, UI
panels) synchronously after each mutation. A subscriber receives the store
and the kind of change so it can decide what to recompute.
"""

import logging
from enum import StrEnum
from typing import Any, Callable, List

logger = logging.getLogger(__name__)


class StoreEvent(StrEnum):
    """What part of a store changed."""
    GRAPH = "graph"
    SELECTION = "selection"
    HOVER = "hover"
    FILTER = "filter"
    SEARCH = "search"
    ANNOTATION = "annotation"
    APPEARANCE = "appearance"


Subscriber = Callable[[Any, StoreEvent], None]


class Observable:
    """
    Minimal subscription mechanism shared by the stores.

    Subscribers run in registration order on the mutating thread. A
    subscriber that raises propagates to the caller of the mutation.
    """

    def __init__(self):
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback.

        Returns:
            A function that removes the subscription when called.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _notify(self, event: StoreEvent) -> None:
        logger.debug(f"{type(self).__name__} changed: {event}")
        for callback in list(self._subscribers):
            callback(self, event)
