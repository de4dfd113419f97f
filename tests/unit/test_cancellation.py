import asyncio

import pytest

from inlay_sync.dispatch.cancellation import CancellationToken, until_cancelled
from inlay_sync.errors import RequestCancelled


def test_cancel_is_one_shot() -> None:
    token = CancellationToken()
    assert not token.is_cancelled

    assert token.cancel() is True
    assert token.cancel() is False
    assert token.is_cancelled


def test_wait_returns_once_cancelled() -> None:
    async def _run() -> None:
        token = CancellationToken()
        asyncio.get_running_loop().call_soon(token.cancel)
        await asyncio.wait_for(token.wait(), timeout=1.0)

    asyncio.run(_run())


def test_until_cancelled_returns_result() -> None:
    async def _run() -> int:
        token = CancellationToken()

        async def _value() -> int:
            return 42

        return await until_cancelled(_value(), token)

    assert asyncio.run(_run()) == 42


def test_until_cancelled_aborts_pending_awaitable() -> None:
    async def _run() -> asyncio.Future:
        loop = asyncio.get_running_loop()
        token = CancellationToken()
        never = loop.create_future()
        loop.call_soon(token.cancel)
        with pytest.raises(RequestCancelled):
            await until_cancelled(never, token, document_id="file:///main.rs")
        return never

    assert asyncio.run(_run()).cancelled()


def test_until_cancelled_rejects_already_cancelled_token() -> None:
    async def _run() -> None:
        token = CancellationToken()
        token.cancel()

        async def _value() -> int:
            return 1

        with pytest.raises(RequestCancelled):
            await until_cancelled(_value(), token)

    asyncio.run(_run())
