"""In-process registry backing the store's live streams."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Hashable
from typing import Any, DefaultDict

logger = logging.getLogger(__name__)


class SubscriptionRegistry:
    """Map keys to listeners and fan published snapshots out to them."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[Hashable, list[Callable[[Any], None]]] = defaultdict(list)

    def subscribe(self, key: Hashable, callback: Callable[[Any], None]) -> Callable[[], None]:
        """Register ``callback`` for ``key`` and return a function removing it."""

        self._listeners[key].append(callback)

        def unsubscribe() -> None:
            listeners = self._listeners.get(key)
            if not listeners:
                return
            try:
                listeners.remove(callback)
            except ValueError:
                return
            if not listeners:
                self._listeners.pop(key, None)

        return unsubscribe

    def has_listeners(self, key: Hashable) -> bool:
        return bool(self._listeners.get(key))

    def publish(self, key: Hashable, snapshot: Any) -> None:
        for callback in list(self._listeners.get(key, ())):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Subscription listener for %r failed", key)


__all__ = ["SubscriptionRegistry"]
