from __future__ import annotations

import asyncio


class ChannelClosed(Exception):
    """The subscriber behind a channel is gone."""


class QueueChannel:
    """
    Channel feeding an asyncio.Queue owned by one stream.

    `send` may be called from any thread: items are handed to the owning loop with
    call_soon_threadsafe, which keeps them in publish order.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, data: str) -> None:
        if self._closed:
            raise ChannelClosed("stream already closed")
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, data)
        except RuntimeError as e:
            # loop is closed
            self._closed = True
            raise ChannelClosed(str(e)) from e

    async def get(self) -> str:
        return await self._queue.get()

    def close(self) -> None:
        self._closed = True
