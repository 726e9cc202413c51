"""Reference-counted tracker for in-flight background operations."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

logger = logging.getLogger(__name__)


class ActivityTracker:
    """Count operations in progress and report busy/idle transitions.

    Each application owns its own instance so independent trackers never
    share state.
    """

    def __init__(self, on_change: Callable[[bool], None] | None = None) -> None:
        self._count = 0
        self._on_change = on_change

    @property
    def count(self) -> int:
        return self._count

    @property
    def busy(self) -> bool:
        return self._count > 0

    def begin(self) -> int:
        """Register the start of an operation and return the new count."""

        self._count += 1
        if self._count == 1:
            self._notify(True)
        return self._count

    def end(self) -> int:
        """Register the end of an operation; the count never drops below zero."""

        if self._count == 0:
            logger.warning("Activity ended without a matching begin")
            return 0
        self._count -= 1
        if self._count == 0:
            self._notify(False)
        return self._count

    @asynccontextmanager
    async def track(self) -> AsyncIterator["ActivityTracker"]:
        """Bracket the enclosed block between :meth:`begin` and :meth:`end`."""

        self.begin()
        try:
            yield self
        finally:
            self.end()

    def _notify(self, busy: bool) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change(busy)
        except Exception:
            logger.exception("Activity listener failed")


__all__ = ["ActivityTracker"]
