from __future__ import annotations

from dropmate.core.entities.locker import Locker
from dropmate.core.repositories.locker_repository import LockerRepository


class GetLockerStatusUseCase:
    def __init__(self, *, locker_repo: LockerRepository) -> None:
        self._locker_repo = locker_repo

    def execute(self, *, locker_id: str) -> Locker:
        return self._locker_repo.get_or_create(locker_id)
