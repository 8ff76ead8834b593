from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dropmate.core.entities.access_request import AccessRequestStatus
from dropmate.infrastructure.database import Base


class LockerModel(Base):
    __tablename__ = "lockers"

    locker_id: Mapped[str] = mapped_column(String, primary_key=True)
    disabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    door_open: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    requests_rel = relationship("AccessRequestModel", back_populates="locker")


class AccessRequestModel(Base):
    __tablename__ = "access_requests"

    request_id: Mapped[str] = mapped_column(String, primary_key=True)
    locker_id: Mapped[str] = mapped_column(ForeignKey("lockers.locker_id"), nullable=False, index=True)
    status: Mapped[AccessRequestStatus] = mapped_column(
        Enum(AccessRequestStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    locker = relationship("LockerModel", back_populates="requests_rel")
