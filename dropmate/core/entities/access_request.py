from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class AccessRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"
    CLOSED = "closed"

    @property
    def is_terminal(self) -> bool:
        return self is not AccessRequestStatus.PENDING


@dataclass(slots=True)
class AccessRequest:
    """
    A visitor's ask to open a locker. Leaves `pending` at most once.
    """
    request_id: str
    locker_id: str
    status: AccessRequestStatus = AccessRequestStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def _decide(self, status: AccessRequestStatus) -> None:
        if self.status is not AccessRequestStatus.PENDING:
            raise ValueError(f"Request {self.request_id!r} is already {self.status.value!r}")
        self.status = status

    def approve(self) -> None:
        self._decide(AccessRequestStatus.APPROVED)

    def deny(self) -> None:
        self._decide(AccessRequestStatus.DENIED)

    def to_payload(self) -> dict[str, Any]:
        return {
            "request_id": self.request_id,
            "locker_id": self.locker_id,
            "status": self.status.value,
            "createdAt": int(self.created_at.timestamp() * 1000),
        }
