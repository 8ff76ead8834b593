from __future__ import annotations

from datetime import timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from dropmate.core.entities.access_request import AccessRequest, AccessRequestStatus
from dropmate.core.repositories.access_request_repository import AccessRequestRepository
from dropmate.infrastructure.models.models import AccessRequestModel


class AccessRequestRepositoryImpl(AccessRequestRepository):
    def __init__(self, db: Session):
        self.db = db

    def get(self, request_id: str) -> AccessRequest | None:
        row = self.db.get(AccessRequestModel, request_id)
        if row is None:
            return None

        created_at = row.created_at
        # SQLite drops the tzinfo on the way back
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        return AccessRequest(
            request_id=row.request_id,
            locker_id=row.locker_id,
            status=AccessRequestStatus(row.status) if not isinstance(row.status, AccessRequestStatus) else row.status,
            created_at=created_at,
        )

    def upsert(self, request: AccessRequest) -> None:
        row = self.db.get(AccessRequestModel, request.request_id)
        if row is None:
            row = AccessRequestModel(request_id=request.request_id)

        row.locker_id = request.locker_id
        row.status = request.status
        row.created_at = request.created_at

        self.db.add(row)
        self.db.commit()

    def count(self) -> int:
        return self.db.scalar(select(func.count()).select_from(AccessRequestModel)) or 0
