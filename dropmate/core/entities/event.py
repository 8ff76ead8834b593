from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from dropmate.core.entities.access_request import AccessRequest
from dropmate.core.entities.locker import Locker


class EventType(str, Enum):
    RequestUpdate = "request_update"
    LockerUpdate = "locker_update"


@dataclass(frozen=True, slots=True)
class StatusEvent:
    type: EventType
    payload: dict[str, Any]

    @classmethod
    def for_request(cls, request: AccessRequest) -> "StatusEvent":
        return cls(type=EventType.RequestUpdate, payload=request.to_payload())

    @classmethod
    def for_locker(cls, locker: Locker) -> "StatusEvent":
        return cls(type=EventType.LockerUpdate, payload=locker.to_payload())

    def to_json(self) -> str:
        return json.dumps({"type": self.type.value, "payload": self.payload}, ensure_ascii=False)
