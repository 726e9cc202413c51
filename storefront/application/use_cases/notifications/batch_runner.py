"""Run many independent async operations under a fixed concurrency ceiling."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar, Union

import anyio

from storefront.domain.exceptions import InvalidArgument

T = TypeVar("T")
R = TypeVar("R")

ProgressCallback = Callable[[str], None]
Handler = Callable[[T, int], Union[Awaitable[R], R]]

logger = logging.getLogger(__name__)


def progress_message(done: int, total: int) -> str:
    """Return the human readable progress text for ``done`` of ``total`` items."""

    return f"Enviando {done}/{total}…"


def report_progress(on_progress: ProgressCallback | None, text: str) -> None:
    """Invoke ``on_progress`` with ``text``; listener errors are only logged."""

    if on_progress is None:
        return
    try:
        on_progress(text)
    except Exception:
        logger.exception("Progress listener failed for %r", text)


async def run_with_concurrency(
    items: Sequence[T],
    handler: Handler,
    concurrency: int,
    on_progress: ProgressCallback | None = None,
) -> list[R | Exception]:
    """Apply ``handler`` to every item with at most ``concurrency`` in flight.

    The returned list has one slot per item, in input order, holding either
    the handler's result or the exception it raised. A failing item never
    stops its siblings and nothing is retried.
    """

    if concurrency < 1:
        raise InvalidArgument(f"concurrency must be >= 1, got {concurrency}")

    items = list(items)
    total = len(items)
    if total == 0:
        return []

    results: list[R | Exception] = [None] * total  # type: ignore[list-item]
    cursor = 0
    done = 0

    async def worker() -> None:
        nonlocal cursor, done
        while cursor < total:
            index = cursor
            cursor += 1
            results[index] = await _settle(handler, items[index], index)
            done += 1
            report_progress(on_progress, progress_message(done, total))

    async with anyio.create_task_group() as task_group:
        for _ in range(min(concurrency, total)):
            task_group.start_soon(worker)

    return results


async def _settle(handler: Handler, item: T, index: int) -> R | Exception:
    try:
        outcome = handler(item, index)
        if inspect.isawaitable(outcome):
            outcome = await outcome
    except Exception as exc:
        logger.debug("Batch item %s failed: %s", index, exc)
        return exc
    return outcome


__all__ = [
    "ProgressCallback",
    "progress_message",
    "report_progress",
    "run_with_concurrency",
]
