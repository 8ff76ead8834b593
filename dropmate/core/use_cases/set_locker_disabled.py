from __future__ import annotations

from dropmate.core.entities.event import StatusEvent
from dropmate.core.entities.locker import Locker
from dropmate.core.repositories.locker_repository import LockerRepository
from dropmate.core.use_cases.publisher import StatusPublisher


class SetLockerDisabledUseCase:
    """Open or close the QR gate of a locker. Always succeeds."""

    def __init__(self, *, locker_repo: LockerRepository, publisher: StatusPublisher) -> None:
        self._locker_repo = locker_repo
        self._publisher = publisher

    def execute(self, *, locker_id: str, disabled: bool) -> Locker:
        locker = self._locker_repo.get_or_create(locker_id)
        if disabled:
            locker.disable()
        else:
            locker.enable()

        self._locker_repo.upsert(locker)
        self._publisher.publish_locker(StatusEvent.for_locker(locker))
        return locker
