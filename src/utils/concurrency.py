"""Bounded-concurrency gather used by the embedding providers.

``throttled_gather`` is ``asyncio.gather`` with each awaitable wrapped in a
semaphore acquire/release, so a batch of N texts never opens more than the
configured number of simultaneous embedding requests.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

_T = TypeVar("_T")


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore,
    return_exceptions: bool = False,
) -> list[_T | BaseException]:
    """Run awaitables concurrently, at most ``semaphore`` slots at a time.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    semaphore:
        Semaphore bounding how many awaitables run at once.
    return_exceptions:
        If ``False`` (the default) the first exception propagates and the
        remaining awaitables are cancelled -- the whole batch fails.  If
        ``True``, exceptions are returned in place of results.

    Returns
    -------
    list
        Results in the same order as the input awaitables.
    """

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    tasks = [asyncio.ensure_future(_wrapped(c)) for c in coros]
    try:
        return await asyncio.gather(*tasks, return_exceptions=return_exceptions)
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        raise
