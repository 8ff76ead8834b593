from __future__ import annotations

from typing import Any

import pytest
import requests
from starlette.testclient import TestClient

from conftest import OWNER_ID, request_id_from
from dropmate.infrastructure.messaging.dry_run import DryRunMessagingClient
from dropmate.main import create_app
from dropmate.services import owner_messages
from dropmate.services.dropmate_service import get_locker_status_service
from dropmate.services.relay import Relay


def _text_event(text: str, *, user: str = OWNER_ID, token: str = "rt-1") -> dict[str, Any]:
    return {
        "type": "message",
        "replyToken": token,
        "source": {"type": "user", "userId": user},
        "message": {"type": "text", "id": "m1", "text": text},
    }


def _postback_event(data: str, *, user: str = OWNER_ID, token: str = "rt-pb") -> dict[str, Any]:
    return {
        "type": "postback",
        "replyToken": token,
        "source": {"type": "user", "userId": user},
        "postback": {"data": data},
    }


def _post(client: TestClient, *events: dict[str, Any]) -> None:
    r = client.post("/webhook", json={"destination": "Ubot", "events": list(events)})
    assert r.status_code == 200


def _locker(relay: Relay, locker_id: str):
    with relay.session() as db:
        return get_locker_status_service(locker_id, db, relay)


def test_owner_unlock_opens_door_and_records_approved_request(
    client: TestClient, gateway: DryRunMessagingClient, relay: Relay
) -> None:
    _post(client, _text_event("ปลดล็อก L2"))

    reply = gateway.replies()[-1]
    assert reply.target == "rt-1"
    assert reply.texts[0].startswith("🔓 ปลดล็อกตู้ L2")
    assert _locker(relay, "L2").door_open is True

    request_id = request_id_from(reply.texts[0])
    page = client.get("/status", params={"request_id": request_id})
    assert "อนุมัติแล้ว" in page.text


def test_non_owner_is_refused_and_nothing_changes(
    client: TestClient, gateway: DryRunMessagingClient, relay: Relay
) -> None:
    _post(client, _text_event("ปิด L1", user="U-stranger", token="rt-x"))

    reply = gateway.replies()[-1]
    assert (reply.target, reply.texts) == ("rt-x", [owner_messages.REFUSAL_TEXT])
    assert _locker(relay, "L1").disabled is False
    assert "ส่งคำขอแล้ว" in client.get("/scan", params={"locker_id": "L1"}).text


def test_status_command_uses_default_locker(client: TestClient, gateway: DryRunMessagingClient) -> None:
    _post(client, _text_event("สถานะ"))

    assert gateway.replies()[-1].texts == ["ℹ️ ตู้ LOCKER001\n• QR: เปิดรับคำขอ\n• ตู้: ประตูปิด"]


@pytest.mark.parametrize("text", ["statusx", "hello", "", "ปิดตู้"])
def test_unrecognized_text_gets_help(client: TestClient, gateway: DryRunMessagingClient, text: str) -> None:
    _post(client, _text_event(text))

    assert gateway.replies()[-1].texts == [owner_messages.help_text("LOCKER001")]


def test_disable_and_enable_by_text(client: TestClient, gateway: DryRunMessagingClient) -> None:
    _post(client, _text_event("DISABLE L1"))
    assert gateway.replies()[-1].texts == [owner_messages.qr_disabled_text("L1")]
    assert "ปิดรับคำขอชั่วคราว" in client.get("/scan", params={"locker_id": "L1"}).text

    _post(client, _text_event("เปิด L1"))
    assert gateway.replies()[-1].texts == [owner_messages.qr_enabled_text("L1")]
    assert "ส่งคำขอแล้ว" in client.get("/scan", params={"locker_id": "L1"}).text


def test_rich_menu_postbacks(client: TestClient, gateway: DryRunMessagingClient, relay: Relay) -> None:
    _post(client, _postback_event("action=unlock&locker_id=L5"))
    assert _locker(relay, "L5").door_open is True

    _post(client, _postback_event("action=disable"))
    assert _locker(relay, "LOCKER001").disabled is True
    assert gateway.replies()[-1].texts == [owner_messages.qr_disabled_text("LOCKER001")]

    _post(client, _postback_event("action=status&locker_id=L5"))
    assert "• ตู้: ประตูเปิด" in gateway.replies()[-1].texts[0]


@pytest.mark.parametrize("data", ["action=explode", "", "locker_id=L1"])
def test_unknown_postback_is_reported(client: TestClient, gateway: DryRunMessagingClient, data: str) -> None:
    _post(client, _postback_event(data))

    assert gateway.replies()[-1].texts == [owner_messages.BAD_POSTBACK_TEXT]


def test_events_in_a_batch_run_in_order(client: TestClient, gateway: DryRunMessagingClient, relay: Relay) -> None:
    _post(
        client,
        _text_event("ปิด L9", token="a"),
        _text_event("สถานะ L9", token="b"),
        _text_event("เปิด L9", token="c"),
    )

    assert [r.target for r in gateway.replies()] == ["a", "b", "c"]
    assert "• QR: ปิด QR" in gateway.replies()[1].texts[0]
    assert _locker(relay, "L9").disabled is False


@pytest.mark.parametrize(
    "event",
    [
        {"type": "message", "replyToken": "t", "source": {"userId": OWNER_ID}, "message": {"type": "sticker"}},
        {"type": "follow", "replyToken": "t", "source": {"userId": OWNER_ID}},
        {"type": "unfollow", "source": {"userId": "U-stranger"}},
    ],
)
def test_other_event_types_are_ignored(client: TestClient, gateway: DryRunMessagingClient, event: dict) -> None:
    _post(client, event)
    assert gateway.sent == []


def test_body_that_is_not_json_is_acknowledged(client: TestClient, gateway: DryRunMessagingClient) -> None:
    r = client.post("/webhook", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 200
    assert gateway.sent == []


@pytest.mark.parametrize("body", [{"events": "nope"}, {"events": [{"no_type": True}]}, [1, 2, 3]])
def test_malformed_batch_is_acknowledged(client: TestClient, gateway: DryRunMessagingClient, body: Any) -> None:
    r = client.post("/webhook", json=body)
    assert r.status_code == 200
    assert gateway.sent == []


def test_empty_batch_is_acknowledged(client: TestClient) -> None:
    assert client.post("/webhook", json={"destination": "Ubot", "events": []}).status_code == 200


class _UnreachableLine:
    def push_message(self, *, to, messages):
        raise requests.ConnectionError("LINE is down")

    def reply_message(self, *, reply_token, messages):
        raise requests.ConnectionError("LINE is down")


def test_command_still_applies_when_reply_fails(settings) -> None:
    app = create_app(settings, gateway=_UnreachableLine())
    client = TestClient(app)

    r = client.post("/webhook", json={"events": [_text_event("ปิด L1")]})

    assert r.status_code == 200
    assert _locker(app.state.relay, "L1").disabled is True
