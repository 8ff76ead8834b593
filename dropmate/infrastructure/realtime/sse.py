from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from typing import Protocol

from dropmate.infrastructure.realtime.channels import QueueChannel

logger = logging.getLogger(__name__)


class DisconnectProbe(Protocol):
    async def is_disconnected(self) -> bool:
        ...


def format_retry(retry_ms: int) -> str:
    return f"retry: {retry_ms}\n\n"


def format_event(data: str, event: str = "update") -> str:
    lines = "".join(f"data: {line}\n" for line in data.splitlines() or [""])
    return f"event: {event}\n{lines}\n"


KEEPALIVE = ": keep-alive\n\n"


async def event_stream(
    *,
    client: DisconnectProbe,
    channel: QueueChannel,
    snapshot: str,
    on_close: Callable[[], None],
    retry_ms: int = 1500,
    keepalive_seconds: float = 15.0,
) -> AsyncIterator[str]:
    """
    Server-sent event body for one subscriber.

    Emits the reconnect hint and the snapshot first, then every event pushed onto the
    channel. `on_close` runs exactly once when the stream ends for any reason.
    """
    try:
        yield format_retry(retry_ms)
        yield format_event(snapshot)
        while True:
            try:
                data = await asyncio.wait_for(channel.get(), timeout=keepalive_seconds)
            except asyncio.TimeoutError:
                if await client.is_disconnected():
                    break
                yield KEEPALIVE
                continue
            yield format_event(data)
    finally:
        channel.close()
        on_close()
        logger.debug("event stream closed")
