"""Single-consumer channel carrying a streamed model reply."""

import asyncio
from typing import AsyncIterator, Optional

from ..utils.logger import get_app_logger


_TOKEN = "token"
_ERROR = "error"
_COMPLETE = "complete"


class TokenChannel:
    """
    Live output channel between a producer task and one consumer.

    The producer calls ``on_token`` zero or more times, then exactly one of
    ``on_error`` or ``on_complete``. Signals after the terminal one are
    ignored. The consumer iterates the channel to receive tokens; a terminal
    error is re-raised to it after the tokens that preceded it.
    """

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self._consumed = False
        self._producer: Optional[asyncio.Task] = None
        self.error: Optional[BaseException] = None
        self.completed = False
        self.logger = get_app_logger()

    def bind_producer(self, task: asyncio.Task) -> None:
        self._producer = task

    @property
    def done(self) -> bool:
        """True once a terminal signal has been sent."""
        return self._closed

    def on_token(self, token: str) -> None:
        if self._closed:
            self.logger.debug("Dropping token sent after channel closed")
            return
        self._queue.put_nowait((_TOKEN, token))

    def on_error(self, error: BaseException) -> None:
        if self._closed:
            return
        self._closed = True
        self.error = error
        self._queue.put_nowait((_ERROR, error))

    def on_complete(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.completed = True
        self._queue.put_nowait((_COMPLETE, None))

    async def cancel(self) -> None:
        """
        Abort the producer; whatever it accumulated is discarded.

        The producer's own cancellation is absorbed. If the task awaiting
        this call is itself cancelled meanwhile, that cancellation propagates.
        """
        self._closed = True
        if self._producer is not None and not self._producer.done():
            self._producer.cancel()
            try:
                await self._producer
            except asyncio.CancelledError:
                current = asyncio.current_task()
                if current is not None and current.cancelling():
                    raise

    def __aiter__(self) -> AsyncIterator[str]:
        if self._consumed:
            raise RuntimeError("TokenChannel can only be consumed once")
        self._consumed = True
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[str]:
        while True:
            kind, payload = await self._queue.get()
            if kind == _TOKEN:
                yield payload
            elif kind == _ERROR:
                raise payload
            else:
                return
