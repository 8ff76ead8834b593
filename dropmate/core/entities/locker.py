from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class Locker:
    locker_id: str
    disabled: bool = False
    door_open: bool = False

    def disable(self) -> None:
        self.disabled = True

    def enable(self) -> None:
        self.disabled = False

    def set_door(self, is_open: bool) -> None:
        self.door_open = is_open

    def to_payload(self) -> dict[str, Any]:
        """
        Browser-facing shape of the locker state (`doorOpen` is what the page scripts read).
        """
        return {
            "locker_id": self.locker_id,
            "disabled": self.disabled,
            "doorOpen": self.door_open,
        }
