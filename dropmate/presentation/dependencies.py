from __future__ import annotations

from collections.abc import Iterator

from fastapi import Request
from sqlalchemy.orm import Session

from dropmate.services.relay import Relay


def get_relay(request: Request) -> Relay:
    return request.app.state.relay


def get_db(request: Request) -> Iterator[Session]:
    with get_relay(request).session() as db:
        yield db
