from __future__ import annotations

from uuid import uuid4

from dropmate.core.entities.access_request import AccessRequest, AccessRequestStatus
from dropmate.core.repositories.access_request_repository import AccessRequestRepository
from dropmate.core.repositories.locker_repository import LockerRepository


class LockerDisabled(Exception):
    """Raise to map to the rejection view (HTTP 200)."""

    def __init__(self, locker_id: str) -> None:
        super().__init__(f"Locker {locker_id!r} is not accepting requests")
        self.locker_id = locker_id


def new_request_id() -> str:
    # No collision check: ten hex chars are plenty for a handful of lockers
    return uuid4().hex[:10]


class RequestAccessUseCase:
    """
    Visitor scanned the QR code of a locker: open a pending request unless the owner has disabled the QR.
    """

    def __init__(self, *, locker_repo: LockerRepository, request_repo: AccessRequestRepository) -> None:
        self._locker_repo = locker_repo
        self._request_repo = request_repo

    def execute(self, *, locker_id: str) -> AccessRequest:
        locker = self._locker_repo.get_or_create(locker_id)
        if locker.disabled:
            raise LockerDisabled(locker_id)

        request = AccessRequest(
            request_id=new_request_id(),
            locker_id=locker_id,
            status=AccessRequestStatus.PENDING,
        )
        self._request_repo.upsert(request)
        return request
