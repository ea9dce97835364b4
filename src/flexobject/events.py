"""
flexobject.events  ──  per-instance property-change notification

Every FlexObject owns one ChangeNotifier. There is no global registry:
subscribing to one instance never delivers changes from another.

    car = Car()
    car.subscribe(lambda name: print("changed:", name))
    car["colour"] = "red"          # -> changed: colour
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator, List

logger = logging.getLogger(__name__)

PropertyChangedHandler = Callable[[str], object]


class ChangeNotifier:
    """Ordered list of handlers, each called with the changed property name.

    Not thread-safe: callers sharing an instance across threads must guard
    ``subscribe``/``unsubscribe``/``notify`` themselves.
    """

    def __init__(self) -> None:
        self._handlers: List[PropertyChangedHandler] = []

    def subscribe(self, handler: PropertyChangedHandler) -> PropertyChangedHandler:
        """Register ``handler``; returns it so this can be used as a decorator."""
        if not callable(handler):
            raise TypeError(f"handler must be callable, got {type(handler).__name__}")
        self._handlers.append(handler)
        return handler

    def unsubscribe(self, handler: PropertyChangedHandler) -> None:
        """Remove the most recent registration of ``handler`` (no error if absent)."""
        for i in range(len(self._handlers) - 1, -1, -1):
            if self._handlers[i] == handler:
                del self._handlers[i]
                return

    def notify(self, name: str) -> None:
        """Call every current handler synchronously, in subscription order."""
        if not self._handlers:
            return
        logger.debug("notify %r -> %d handler(s)", name, len(self._handlers))
        # snapshot: a handler may unsubscribe itself
        for handler in list(self._handlers):
            handler(name)

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[PropertyChangedHandler]:
        return iter(list(self._handlers))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(handlers={len(self._handlers)})"
