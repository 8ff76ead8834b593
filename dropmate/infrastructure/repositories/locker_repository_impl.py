from __future__ import annotations

from sqlalchemy.orm import Session

from dropmate.core.entities.locker import Locker
from dropmate.core.repositories.locker_repository import LockerRepository
from dropmate.infrastructure.models.models import LockerModel


class LockerRepositoryImpl(LockerRepository):
    """
    Simple SQLAlchemy implementation for Locker.

    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def get(self, locker_id: str) -> Locker | None:
        row = self._db.get(LockerModel, locker_id)
        if row is None:
            return None

        return Locker(
            locker_id=row.locker_id,
            disabled=row.disabled,
            door_open=row.door_open,
        )

    def upsert(self, locker: Locker) -> None:
        row = self._db.get(LockerModel, locker.locker_id)
        if row is None:
            row = LockerModel(locker_id=locker.locker_id)

        row.disabled = locker.disabled
        row.door_open = locker.door_open

        self._db.add(row)
        self._db.commit()
