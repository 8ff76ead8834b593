from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from sqlalchemy.orm import Session, sessionmaker

from dropmate.infrastructure.config import Settings
from dropmate.infrastructure.database import build_engine, build_session_factory
from dropmate.infrastructure.messaging.factory import build_messaging_gateway
from dropmate.infrastructure.messaging.gateway import MessagingGateway
from dropmate.infrastructure.realtime.registry import SubscriptionRegistry
from dropmate.services.notifications import OwnerNotifier


@dataclass
class Relay:
    """
    Everything a handler needs besides its DB session, owned by one application instance.

    `lock` serializes every store mutation together with its publish: handlers run in a
    thread pool, and the pending check on a request must not interleave with another decision.
    """
    settings: Settings
    session_factory: sessionmaker
    registry: SubscriptionRegistry
    notifier: OwnerNotifier
    gateway: MessagingGateway
    lock: threading.RLock = field(default_factory=threading.RLock)

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self.session_factory()
        try:
            yield db
        finally:
            # All sessions share one pooled connection, and checkin rolls it back
            with self.lock:
                db.close()


def build_relay(settings: Settings, *, gateway: MessagingGateway | None = None) -> Relay:
    gateway = gateway or build_messaging_gateway(settings)
    return Relay(
        settings=settings,
        session_factory=build_session_factory(build_engine(settings.database_url)),
        registry=SubscriptionRegistry(),
        notifier=OwnerNotifier(
            gateway=gateway,
            owner_user_id=settings.owner_user_id,
            base_url=settings.public_base_url,
        ),
        gateway=gateway,
    )
