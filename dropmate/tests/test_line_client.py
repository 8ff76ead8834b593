from __future__ import annotations

from typing import Any

import pytest

from dropmate.infrastructure.config import Settings
from dropmate.infrastructure.messaging.dry_run import DryRunMessagingClient
from dropmate.infrastructure.messaging.factory import build_messaging_gateway
from dropmate.infrastructure.messaging.gateway import text_message
from dropmate.infrastructure.messaging.line import LineApiError, LineMessagingClient


class _FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("no json")
        return self._body


class _FakeSession:
    def __init__(self, *responses: _FakeResponse) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[str, str, dict]] = []

    def _next(self) -> _FakeResponse:
        return self.responses.pop(0) if self.responses else _FakeResponse(200, {})

    def post(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append(("POST", url, kwargs))
        return self._next()

    def request(self, method: str, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append((method, url, kwargs))
        return self._next()


def _client(session: _FakeSession) -> LineMessagingClient:
    return LineMessagingClient(
        access_token="tok",
        api_base_url="https://line.test/v2/bot/",
        data_api_base_url="https://data.line.test/v2/bot",
        session=session,
    )


def test_push_posts_messages_with_bearer_token() -> None:
    session = _FakeSession(_FakeResponse(200, {}))

    result = _client(session).push_message(to="U1", messages=text_message("hi"))

    assert result.ok
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", "https://line.test/v2/bot/message/push")
    assert kwargs["json"] == {"to": "U1", "messages": [{"type": "text", "text": "hi"}]}
    assert kwargs["headers"]["Authorization"] == "Bearer tok"
    assert kwargs["timeout"] == 10


def test_reply_uses_reply_token() -> None:
    session = _FakeSession()

    _client(session).reply_message(reply_token="rt", messages=[text_message("a"), text_message("b")])

    _, url, kwargs = session.calls[0]
    assert url == "https://line.test/v2/bot/message/reply"
    assert kwargs["json"]["replyToken"] == "rt"
    assert [m["text"] for m in kwargs["json"]["messages"]] == ["a", "b"]


def test_error_status_is_returned_not_raised() -> None:
    session = _FakeSession(_FakeResponse(400, {"message": "Invalid reply token"}))

    result = _client(session).reply_message(reply_token="old", messages=text_message("x"))

    assert not result.ok
    assert result.status_code == 400
    assert result.response_json == {"message": "Invalid reply token"}


def test_non_json_body_is_kept_as_text() -> None:
    session = _FakeSession(_FakeResponse(502, None, text="Bad Gateway"))

    result = _client(session).push_message(to="U1", messages=text_message("x"))

    assert result.response_json == {"raw_text": "Bad Gateway"}


@pytest.mark.parametrize("send", ["push", "reply"])
def test_empty_target_is_refused(send: str) -> None:
    client = _client(_FakeSession())
    with pytest.raises(LineApiError):
        if send == "push":
            client.push_message(to="", messages=text_message("x"))
        else:
            client.reply_message(reply_token="", messages=text_message("x"))


def test_rich_menu_calls() -> None:
    session = _FakeSession(
        _FakeResponse(200, {"richMenuId": "rm-1"}),
        _FakeResponse(200, {}),
        _FakeResponse(200, {}),
        _FakeResponse(200, {"richmenus": [{"richMenuId": "rm-1"}]}),
        _FakeResponse(200, {}),
    )
    client = _client(session)

    assert client.create_rich_menu({"name": "m"}) == "rm-1"
    client.upload_rich_menu_image("rm-1", b"\x89PNG", "image/png")
    client.set_default_rich_menu("rm-1")
    assert client.list_rich_menus() == [{"richMenuId": "rm-1"}]
    client.delete_rich_menu("rm-1")

    assert [(m, u) for m, u, _ in session.calls] == [
        ("POST", "https://line.test/v2/bot/richmenu"),
        ("POST", "https://data.line.test/v2/bot/richmenu/rm-1/content"),
        ("POST", "https://line.test/v2/bot/user/all/richmenu/rm-1"),
        ("GET", "https://line.test/v2/bot/richmenu/list"),
        ("DELETE", "https://line.test/v2/bot/richmenu/rm-1"),
    ]
    upload_headers = session.calls[1][2]["headers"]
    assert upload_headers["Content-Type"] == "image/png"
    assert upload_headers["Content-Length"] == "4"


def test_rich_menu_failure_raises() -> None:
    session = _FakeSession(_FakeResponse(401, {"message": "Authentication failed"}, text="Authentication failed"))

    with pytest.raises(LineApiError) as exc_info:
        _client(session).create_rich_menu({"name": "m"})

    assert exc_info.value.status_code == 401
    assert exc_info.value.body == "Authentication failed"


def test_factory_picks_dry_run(settings: Settings) -> None:
    assert isinstance(build_messaging_gateway(settings.model_copy(update={"line_dry_run": True})), DryRunMessagingClient)
    assert isinstance(build_messaging_gateway(settings), LineMessagingClient)
