from __future__ import annotations

from typing import Protocol

from dropmate.core.entities.event import StatusEvent


class StatusPublisher(Protocol):
    """
    Outbound side of the live status streams.
    Implementations must not raise when nobody is listening.
    """

    def publish_request(self, event: StatusEvent) -> None:
        raise NotImplementedError

    def publish_locker(self, event: StatusEvent) -> None:
        raise NotImplementedError
