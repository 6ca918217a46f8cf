"""Tests for TokenChannel."""

import asyncio

import pytest

from ragchat.errors import ModelUnavailableError
from ragchat.services.streaming import TokenChannel


async def _collect(channel):
    return [token async for token in channel]


class TestTokenChannel:
    """Tests for TokenChannel."""

    class TestComplete:
        """SUT: TokenChannel.on_token/on_complete"""

        async def test_tokens_then_complete(self):
            channel = TokenChannel()
            for token in ("a", "b", "c"):
                channel.on_token(token)
            channel.on_complete()

            assert await _collect(channel) == ["a", "b", "c"]
            assert channel.completed is True
            assert channel.done is True

        async def test_signals_after_complete_ignored(self):
            """Only the first terminal signal counts."""
            channel = TokenChannel()
            channel.on_complete()
            channel.on_token("late")
            channel.on_error(ModelUnavailableError("late"))

            assert await _collect(channel) == []
            assert channel.error is None

    class TestError:
        """SUT: TokenChannel.on_error"""

        async def test_error_after_tokens(self):
            """Tokens already sent are delivered before the error is raised."""
            channel = TokenChannel()
            channel.on_token("Par")
            channel.on_error(ModelUnavailableError("lost connection"))

            received = []
            with pytest.raises(ModelUnavailableError):
                async for token in channel:
                    received.append(token)
            assert received == ["Par"]
            assert channel.completed is False

    class TestConsumeOnce:
        """SUT: TokenChannel.__aiter__"""

        async def test_second_iteration_rejected(self):
            channel = TokenChannel()
            channel.on_complete()
            await _collect(channel)
            with pytest.raises(RuntimeError):
                channel.__aiter__()

    class TestCancel:
        """SUT: TokenChannel.cancel"""

        async def test_cancels_producer(self):
            channel = TokenChannel()
            started = asyncio.Event()

            async def producer():
                channel.on_token("x")
                started.set()
                await asyncio.sleep(3600)
                channel.on_complete()

            task = asyncio.create_task(producer())
            channel.bind_producer(task)
            await started.wait()

            await channel.cancel()
            assert task.cancelled()
            assert channel.done is True
            assert channel.completed is False

        async def test_without_producer(self):
            channel = TokenChannel()
            await channel.cancel()
            assert channel.done is True

        async def test_caller_cancellation_propagates(self):
            """Cancelling the task that awaits cancel() is not absorbed."""
            channel = TokenChannel()
            started = asyncio.Event()
            cleaning_up = asyncio.Event()

            async def producer():
                try:
                    started.set()
                    await asyncio.sleep(3600)
                except asyncio.CancelledError:
                    cleaning_up.set()
                    await asyncio.sleep(3600)
                    raise

            task = asyncio.create_task(producer())
            channel.bind_producer(task)
            await started.wait()

            closer = asyncio.create_task(channel.cancel())
            await cleaning_up.wait()
            closer.cancel()

            with pytest.raises(asyncio.CancelledError):
                await closer
            assert task.done()
            assert channel.done is True
