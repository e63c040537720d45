"""Bounded concurrent execution of async tasks with input-ordered results."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence, TypeVar

from .types import TaskResult

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)

# Tasks still running after the pool gave up on a failure.
_detached: set[asyncio.Task] = set()


async def run_pool(
    items: Sequence[T],
    task: Callable[[T, int], Awaitable[R]],
    max_concurrency: int | None = None,
) -> list[R]:
    """Like ``asyncio.gather`` with at most ``max_concurrency`` tasks in flight.

    The first failing task makes the pool stop admitting items and re-raise
    that failure. Tasks already started are not cancelled.
    """
    if not items:
        return []

    if not max_concurrency:
        return list(await asyncio.gather(*(task(item, i) for i, item in enumerate(items))))

    slots = asyncio.Semaphore(max_concurrency)
    results: list[TaskResult[R]] = []
    done: asyncio.Future[None] = asyncio.get_running_loop().create_future()

    async def admitted(item: T, index: int) -> None:
        try:
            value = await task(item, index)
        except Exception as exc:
            if not done.done():
                done.set_exception(exc)
            return
        finally:
            slots.release()

        results.append(TaskResult(index, value))
        if len(results) == len(items) and not done.done():
            done.set_result(None)

    for index, item in enumerate(items):
        await slots.acquire()
        if done.done():
            slots.release()
            break

        logger.debug("Admitting item %d", index)
        running = asyncio.create_task(admitted(item, index))
        _detached.add(running)
        running.add_done_callback(_detached.discard)

    await done
    return [result.value for result in sorted(results, key=lambda r: r.index)]
