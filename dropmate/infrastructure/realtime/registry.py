"""In-memory subscription registry for live status streams.

Single-process only. A channel is anything with a ``send(data: str)`` method; the
registry never knows about HTTP, so tests can subscribe a channel that just records
what it receives.
"""
from __future__ import annotations

import logging
import threading
from collections import defaultdict
from enum import Enum
from typing import Protocol

from dropmate.core.entities.event import StatusEvent

logger = logging.getLogger(__name__)


class Scope(str, Enum):
    REQUEST = "request"
    LOCKER = "locker"


class Channel(Protocol):
    def send(self, data: str) -> None:
        """Queue one serialized event for the subscriber. May raise if the subscriber is gone."""
        ...


class SubscriptionRegistry:
    def __init__(self) -> None:
        self._subs: dict[Scope, dict[str, set[Channel]]] = {
            Scope.REQUEST: defaultdict(set),
            Scope.LOCKER: defaultdict(set),
        }
        self._lock = threading.Lock()

    def subscribe(self, scope: Scope, key: str, channel: Channel) -> None:
        with self._lock:
            self._subs[scope][key].add(channel)
        logger.debug("subscribed %s channel to %s", scope.value, key)

    def unsubscribe(self, scope: Scope, key: str, channel: Channel) -> None:
        with self._lock:
            channels = self._subs[scope].get(key)
            if not channels:
                return
            channels.discard(channel)
            if not channels:
                del self._subs[scope][key]
        logger.debug("unsubscribed %s channel from %s", scope.value, key)

    def subscriber_count(self, scope: Scope, key: str | None = None) -> int:
        with self._lock:
            if key is not None:
                return len(self._subs[scope].get(key, ()))
            return sum(len(chs) for chs in self._subs[scope].values())

    def publish(self, scope: Scope, key: str, event: StatusEvent) -> int:
        """
        Best-effort delivery to every channel subscribed to `key` right now.

        Returns the number of channels written to. A channel whose write fails is dropped
        instead of raising to the caller.
        """
        with self._lock:
            channels = list(self._subs[scope].get(key, ()))
        if not channels:
            return 0

        data = event.to_json()
        delivered = 0
        for channel in channels:
            try:
                channel.send(data)
            except Exception:
                logger.warning("dropping dead %s channel for %s", scope.value, key, exc_info=True)
                self.unsubscribe(scope, key, channel)
                continue
            delivered += 1
        return delivered

    # Publisher interface used by the use cases
    def publish_request(self, event: StatusEvent) -> None:
        self.publish(Scope.REQUEST, event.payload["request_id"], event)

    def publish_locker(self, event: StatusEvent) -> None:
        self.publish(Scope.LOCKER, event.payload["locker_id"], event)
