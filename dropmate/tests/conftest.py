from __future__ import annotations

import json
import re
from typing import Any

import pytest
from fastapi import FastAPI
from sqlalchemy.orm import Session
from starlette.testclient import TestClient

from dropmate.infrastructure.config import Settings
from dropmate.infrastructure.messaging.dry_run import DryRunMessagingClient
from dropmate.main import create_app
from dropmate.services.relay import Relay

OWNER_ID = "U-owner"


class RecordingChannel:
    """Stands in for a live SSE connection: keeps every event it is sent, decoded."""

    def __init__(self) -> None:
        self.received: list[dict[str, Any]] = []

    def send(self, data: str) -> None:
        self.received.append(json.loads(data))

    @property
    def statuses(self) -> list[str]:
        return [e["payload"].get("status") for e in self.received]


class BrokenChannel:
    def __init__(self) -> None:
        self.attempts = 0

    def send(self, data: str) -> None:
        self.attempts += 1
        raise ConnectionResetError("client went away")


def request_id_from(text: str) -> str:
    match = re.search(r"request_id: (\w+)", text)
    assert match, f"no request_id in {text!r}"
    return match.group(1)


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        base_url="https://locker.example/",
        line_channel_access_token="test-token",
        owner_user_id=OWNER_ID,
        default_locker_id="LOCKER001",
        database_url="sqlite+pysqlite:///:memory:",
    )


@pytest.fixture()
def gateway() -> DryRunMessagingClient:
    return DryRunMessagingClient()


@pytest.fixture()
def app(settings: Settings, gateway: DryRunMessagingClient) -> FastAPI:
    return create_app(settings, gateway=gateway)


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def relay(app: FastAPI) -> Relay:
    return app.state.relay


@pytest.fixture()
def db(relay: Relay) -> Session:
    with relay.session() as session:
        yield session
