from __future__ import annotations

from abc import ABC, abstractmethod

from dropmate.core.entities.locker import Locker


class LockerRepository(ABC):
    @abstractmethod
    def get(self, locker_id: str) -> Locker | None:
        raise NotImplementedError

    @abstractmethod
    def upsert(self, locker: Locker) -> None:
        raise NotImplementedError

    def get_or_create(self, locker_id: str) -> Locker:
        """Lockers exist from their first reference; a new one starts enabled with the door closed."""
        locker = self.get(locker_id)
        if locker is None:
            locker = Locker(locker_id=locker_id)
            self.upsert(locker)
        return locker
