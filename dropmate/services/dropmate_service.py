from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from dropmate.core.entities.access_request import AccessRequest
from dropmate.core.entities.event import StatusEvent
from dropmate.core.entities.locker import Locker
from dropmate.core.use_cases.decide_request import DecideRequestUseCase, Decision
from dropmate.core.use_cases.get_locker_status import GetLockerStatusUseCase
from dropmate.core.use_cases.get_request_status import GetRequestStatusUseCase
from dropmate.core.use_cases.request_access import RequestAccessUseCase
from dropmate.core.use_cases.set_door_open import SetDoorOpenUseCase
from dropmate.core.use_cases.set_locker_disabled import SetLockerDisabledUseCase
from dropmate.core.use_cases.unlock_locker import UnlockLockerUseCase, UnlockResult
from dropmate.infrastructure.realtime.registry import Channel, Scope
from dropmate.infrastructure.repositories.access_request_repository_impl import AccessRequestRepositoryImpl
from dropmate.infrastructure.repositories.locker_repository_impl import LockerRepositoryImpl
from dropmate.services import owner_messages
from dropmate.services.relay import Relay

logger = logging.getLogger(__name__)


def _confirm(relay: Relay, text: str, reply_token: str | None) -> None:
    """Answer a LINE command with a reply, anything else with a push."""
    if reply_token:
        relay.notifier.reply_text(reply_token, text)
    else:
        relay.notifier.push_text(text)


# -----------------------------
# Visitor side
# -----------------------------
def request_access_service(locker_id: str, db: Session, relay: Relay) -> AccessRequest:
    """
    Raises LockerDisabled when the QR of the locker is closed. The owner notification is
    left to the caller (see notify_new_request_service) so it can run after the response.
    """
    use_case = RequestAccessUseCase(
        locker_repo=LockerRepositoryImpl(db),
        request_repo=AccessRequestRepositoryImpl(db),
    )
    with relay.lock:
        request = use_case.execute(locker_id=locker_id)

    logger.info("request %s created for locker %s", request.request_id, locker_id)
    return request


def notify_new_request_service(request: AccessRequest, relay: Relay) -> None:
    relay.notifier.notify_new_request(request)


def get_request_status_service(request_id: str, db: Session, relay: Relay) -> AccessRequest:
    use_case = GetRequestStatusUseCase(request_repo=AccessRequestRepositoryImpl(db))
    with relay.lock:
        return use_case.execute(request_id=request_id)


def get_locker_status_service(locker_id: str, db: Session, relay: Relay) -> Locker:
    use_case = GetLockerStatusUseCase(locker_repo=LockerRepositoryImpl(db))
    with relay.lock:
        return use_case.execute(locker_id=locker_id)


# -----------------------------
# Owner side
# -----------------------------
def decide_request_service(request_id: str, decision: Decision, db: Session, relay: Relay) -> AccessRequest:
    """
    Raises RequestNotFound / AlreadyDecided. On success the subscribers of the request have
    been told and the owner gets a confirmation push.
    """
    use_case = DecideRequestUseCase(request_repo=AccessRequestRepositoryImpl(db), publisher=relay.registry)
    with relay.lock:
        request = use_case.execute(request_id=request_id, decision=decision)

    logger.info("request %s %s", request.request_id, request.status.value)
    if decision is Decision.APPROVE:
        relay.notifier.push_text(owner_messages.approved_text(request))
    else:
        relay.notifier.push_text(owner_messages.denied_text(request))
    return request


def set_locker_disabled_service(
    locker_id: str,
    disabled: bool,
    db: Session,
    relay: Relay,
    *,
    reply_token: str | None = None,
) -> Locker:
    use_case = SetLockerDisabledUseCase(locker_repo=LockerRepositoryImpl(db), publisher=relay.registry)
    with relay.lock:
        locker = use_case.execute(locker_id=locker_id, disabled=disabled)

    logger.info("locker %s QR %s", locker_id, "disabled" if disabled else "enabled")
    text = owner_messages.qr_disabled_text(locker_id) if disabled else owner_messages.qr_enabled_text(locker_id)
    _confirm(relay, text, reply_token)
    return locker


def set_door_service(locker_id: str, is_open: bool, db: Session, relay: Relay) -> Locker:
    use_case = SetDoorOpenUseCase(locker_repo=LockerRepositoryImpl(db), publisher=relay.registry)
    with relay.lock:
        locker = use_case.execute(locker_id=locker_id, is_open=is_open)

    logger.info("locker %s door %s", locker_id, "open" if is_open else "closed")
    return locker


def unlock_service(locker_id: str, db: Session, relay: Relay, *, reply_token: str | None = None) -> UnlockResult:
    use_case = UnlockLockerUseCase(
        locker_repo=LockerRepositoryImpl(db),
        request_repo=AccessRequestRepositoryImpl(db),
        publisher=relay.registry,
    )
    with relay.lock:
        result = use_case.execute(locker_id=locker_id)

    logger.info("locker %s unlocked by owner (request %s)", locker_id, result.request.request_id)
    _confirm(relay, owner_messages.unlocked_text(result.request), reply_token)
    return result


def locker_status_reply_service(locker_id: str, db: Session, relay: Relay, *, reply_token: str | None) -> Locker:
    locker = get_locker_status_service(locker_id, db, relay)
    _confirm(relay, owner_messages.locker_status_text(locker), reply_token)
    return locker


# -----------------------------
# Streams
# -----------------------------
def open_request_stream_service(request_id: str, channel: Channel, db: Session, relay: Relay) -> str:
    """
    Subscribe `channel` to a request and return the snapshot to send first.

    Reading the snapshot and subscribing happen under the same lock as every publish, so no
    update can fall between the two.
    """
    use_case = GetRequestStatusUseCase(request_repo=AccessRequestRepositoryImpl(db))
    with relay.lock:
        request = use_case.execute(request_id=request_id)
        relay.registry.subscribe(Scope.REQUEST, request_id, channel)
    logger.info("request stream opened for %s", request_id)
    return StatusEvent.for_request(request).to_json()


def open_locker_stream_service(locker_id: str, channel: Channel, db: Session, relay: Relay) -> str:
    use_case = GetLockerStatusUseCase(locker_repo=LockerRepositoryImpl(db))
    with relay.lock:
        locker = use_case.execute(locker_id=locker_id)
        relay.registry.subscribe(Scope.LOCKER, locker_id, channel)
    logger.info("locker stream opened for %s", locker_id)
    return StatusEvent.for_locker(locker).to_json()


def close_stream_service(scope: Scope, key: str, channel: Channel, relay: Relay) -> None:
    relay.registry.unsubscribe(scope, key, channel)
    logger.info("%s stream closed for %s", scope.value, key)


def health_service(db: Session, relay: Relay) -> dict[str, Any]:
    with relay.lock:
        requests_count = AccessRequestRepositoryImpl(db).count()
    return {
        "status": "ok",
        "requests": requests_count,
        "request_streams": relay.registry.subscriber_count(Scope.REQUEST),
        "locker_streams": relay.registry.subscriber_count(Scope.LOCKER),
    }
