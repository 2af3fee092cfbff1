"""Bounded fan-out helper for collaborator calls.

Chunks of one document are independent, so their embeddings can be requested
concurrently.  :func:`throttled_gather` wraps each awaitable in a semaphore
acquire/release so at most ``limit`` calls are in flight against a provider
at any moment.  Results keep the order of the input awaitables.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

_T = TypeVar("_T")

_DEFAULT_LIMIT = 4


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore | None = None,
    return_exceptions: bool = False,
) -> list[_T | BaseException]:
    """Run awaitables concurrently with semaphore throttling.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    semaphore:
        Semaphore bounding concurrency.  A fresh semaphore with
        ``_DEFAULT_LIMIT`` slots is created per call when omitted, so
        unrelated pipeline runs never share a throttle.
    return_exceptions:
        If ``True``, exceptions are returned in the results list rather
        than being raised.  Mirrors ``asyncio.gather`` semantics.

    Returns
    -------
    list
        Results in the same order as the input awaitables.
    """
    if semaphore is None:
        semaphore = asyncio.Semaphore(_DEFAULT_LIMIT)

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    tasks = [_wrapped(c) for c in coros]
    return await asyncio.gather(*tasks, return_exceptions=return_exceptions)


def first_exception(results: list[object]) -> BaseException | None:
    """Return the first exception in a ``return_exceptions=True`` result list."""
    for result in results:
        if isinstance(result, BaseException):
            return result
    return None
