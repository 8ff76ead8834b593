from __future__ import annotations

from dataclasses import dataclass

from dropmate.core.entities.access_request import AccessRequest, AccessRequestStatus
from dropmate.core.entities.event import StatusEvent
from dropmate.core.entities.locker import Locker
from dropmate.core.repositories.access_request_repository import AccessRequestRepository
from dropmate.core.repositories.locker_repository import LockerRepository
from dropmate.core.use_cases.publisher import StatusPublisher
from dropmate.core.use_cases.request_access import new_request_id


@dataclass(frozen=True, slots=True)
class UnlockResult:
    locker: Locker
    request: AccessRequest


class UnlockLockerUseCase:
    """
    Owner-initiated unlock.

    Records an already-approved request for the audit trail (it is never pending, and the
    disabled flag does not apply) and opens the door.
    """

    def __init__(
        self,
        *,
        locker_repo: LockerRepository,
        request_repo: AccessRequestRepository,
        publisher: StatusPublisher,
    ) -> None:
        self._locker_repo = locker_repo
        self._request_repo = request_repo
        self._publisher = publisher

    def execute(self, *, locker_id: str) -> UnlockResult:
        locker = self._locker_repo.get_or_create(locker_id)

        request = AccessRequest(
            request_id=new_request_id(),
            locker_id=locker_id,
            status=AccessRequestStatus.APPROVED,
        )
        self._request_repo.upsert(request)

        locker.set_door(True)
        self._locker_repo.upsert(locker)

        self._publisher.publish_locker(StatusEvent.for_locker(locker))
        self._publisher.publish_request(StatusEvent.for_request(request))
        return UnlockResult(locker=locker, request=request)
