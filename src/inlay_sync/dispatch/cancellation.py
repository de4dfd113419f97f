"""Cooperative cancellation tokens."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from inlay_sync.errors import RequestCancelled

T = TypeVar("T")


class CancellationToken:
    """One-shot cancellation flag observed at every suspension point.

    `cancel()` flips the flag exactly once; later calls do nothing.
    """

    __slots__ = ("_cancelled", "_event")

    def __init__(self) -> None:
        self._cancelled = False
        self._event = asyncio.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> bool:
        """Signal cancellation. Returns False if already cancelled."""
        if self._cancelled:
            return False
        self._cancelled = True
        self._event.set()
        return True

    async def wait(self) -> None:
        await self._event.wait()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled})"


async def until_cancelled(
    awaitable: Awaitable[T],
    token: CancellationToken,
    *,
    document_id: str = "",
) -> T:
    """Await `awaitable` unless `token` fires first.

    Raises `RequestCancelled` when the token wins the race; the pending
    awaitable is cancelled in that case.
    """

    if token.is_cancelled:
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        raise RequestCancelled(document_id)

    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        waiter.cancel()

    if not task.done():
        task.cancel()
        raise RequestCancelled(document_id)
    return task.result()
