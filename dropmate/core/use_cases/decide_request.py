from __future__ import annotations

from enum import Enum

from dropmate.core.entities.access_request import AccessRequest, AccessRequestStatus
from dropmate.core.entities.event import StatusEvent
from dropmate.core.repositories.access_request_repository import AccessRequestRepository
from dropmate.core.use_cases.get_request_status import GetRequestStatusUseCase
from dropmate.core.use_cases.publisher import StatusPublisher


class AlreadyDecided(Exception):
    """Raise to map to the warning view (HTTP 200). Not an error for the caller."""

    def __init__(self, request: AccessRequest) -> None:
        super().__init__(f"Request {request.request_id!r} is already {request.status.value!r}")
        self.request = request

    @property
    def status(self) -> AccessRequestStatus:
        return self.request.status


class Decision(str, Enum):
    APPROVE = "approve"
    DENY = "deny"


class DecideRequestUseCase:
    """
    Owner approves or denies a pending request.

    Not atomic on its own: callers serialize `execute` calls for the same request.
    """

    def __init__(self, *, request_repo: AccessRequestRepository, publisher: StatusPublisher) -> None:
        self._request_repo = request_repo
        self._publisher = publisher

    def execute(self, *, request_id: str, decision: Decision) -> AccessRequest:
        request = GetRequestStatusUseCase(request_repo=self._request_repo).execute(request_id=request_id)

        if request.status is not AccessRequestStatus.PENDING:
            raise AlreadyDecided(request)

        if decision is Decision.APPROVE:
            request.approve()
        else:
            request.deny()

        self._request_repo.upsert(request)
        self._publisher.publish_request(StatusEvent.for_request(request))
        return request
