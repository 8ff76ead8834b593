from __future__ import annotations

from dropmate.core.entities.event import StatusEvent
from dropmate.core.entities.locker import Locker
from dropmate.core.repositories.locker_repository import LockerRepository
from dropmate.core.use_cases.publisher import StatusPublisher


class SetDoorOpenUseCase:
    def __init__(self, *, locker_repo: LockerRepository, publisher: StatusPublisher) -> None:
        self._locker_repo = locker_repo
        self._publisher = publisher

    def execute(self, *, locker_id: str, is_open: bool) -> Locker:
        locker = self._locker_repo.get_or_create(locker_id)
        locker.set_door(is_open)

        self._locker_repo.upsert(locker)
        self._publisher.publish_locker(StatusEvent.for_locker(locker))
        return locker
