from __future__ import annotations

from dropmate.core.entities.access_request import AccessRequest
from dropmate.core.repositories.access_request_repository import AccessRequestRepository


class RequestNotFound(Exception):
    """Raise to map to HTTP 404."""


class GetRequestStatusUseCase:
    def __init__(self, *, request_repo: AccessRequestRepository) -> None:
        self._request_repo = request_repo

    def execute(self, *, request_id: str) -> AccessRequest:
        request = self._request_repo.get(request_id) if request_id else None
        if request is None:
            raise RequestNotFound("Request not found")
        return request
