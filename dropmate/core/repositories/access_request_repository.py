from __future__ import annotations

from abc import ABC, abstractmethod

from dropmate.core.entities.access_request import AccessRequest


class AccessRequestRepository(ABC):
    @abstractmethod
    def get(self, request_id: str) -> AccessRequest | None:
        raise NotImplementedError

    @abstractmethod
    def upsert(self, request: AccessRequest) -> None:
        raise NotImplementedError

    @abstractmethod
    def count(self) -> int:
        raise NotImplementedError
