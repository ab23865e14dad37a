"""Thin concurrency helpers over asyncio."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Coroutine
from typing import Any, TypeVar

__all__ = ["Timeout", "sleep", "spawn", "timeout"]

T = TypeVar("T")


class Timeout(TimeoutError):
    """An operation did not complete within its allotted time."""


async def sleep(duration: float) -> None:
    """Suspend the current task for ``duration`` seconds."""
    await asyncio.sleep(duration)


def spawn(coro: Coroutine[Any, Any, T]) -> asyncio.Task[T]:
    """Schedule a coroutine on the running event loop and return its task."""
    return asyncio.create_task(coro)


async def timeout(duration: float, awaitable: Awaitable[T]) -> T:
    """Await ``awaitable`` for at most ``duration`` seconds.

    Raises :class:`Timeout` if it does not finish in time.
    """
    try:
        return await asyncio.wait_for(awaitable, duration)
    except asyncio.TimeoutError as exc:
        raise Timeout() from exc