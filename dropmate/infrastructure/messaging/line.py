"""
LINE Messaging API client.

Supports:
- push / reply messages
- rich menu management (used by the rich menu tool)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from dropmate.infrastructure.messaging.gateway import LineSendResult, Messages, as_message_list


class LineApiError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class LineMessagingClient:
    def __init__(
        self,
        *,
        access_token: str,
        api_base_url: str = "https://api.line.me/v2/bot",
        data_api_base_url: str = "https://api-data.line.me/v2/bot",
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ) -> None:
        self._access_token = access_token
        self._api_base_url = api_base_url.rstrip("/")
        self._data_api_base_url = data_api_base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    def _headers(self, content_type: str | None = "application/json") -> Dict[str, str]:
        headers = {"Authorization": f"Bearer {self._access_token}"}
        if content_type:
            headers["Content-Type"] = content_type
        return headers

    @staticmethod
    def _result(resp: requests.Response) -> LineSendResult:
        try:
            data = resp.json()
        except ValueError:
            data = {"raw_text": resp.text}

        return LineSendResult(
            ok=200 <= resp.status_code < 300,
            status_code=resp.status_code,
            response_json=data if isinstance(data, dict) else {"data": data},
        )

    # ---------------------------------------------------------
    # MESSAGES
    # ---------------------------------------------------------
    def push_message(self, *, to: str, messages: Messages) -> LineSendResult:
        if not to:
            raise LineApiError("Push target cannot be empty")

        resp = self._session.post(
            f"{self._api_base_url}/message/push",
            json={"to": to, "messages": as_message_list(messages)},
            headers=self._headers(),
            timeout=self._timeout,
        )
        return self._result(resp)

    def reply_message(self, *, reply_token: str, messages: Messages) -> LineSendResult:
        if not reply_token:
            raise LineApiError("Reply token cannot be empty")

        resp = self._session.post(
            f"{self._api_base_url}/message/reply",
            json={"replyToken": reply_token, "messages": as_message_list(messages)},
            headers=self._headers(),
            timeout=self._timeout,
        )
        return self._result(resp)

    # ---------------------------------------------------------
    # RICH MENU (errors raise, the tool stops on the first failure)
    # ---------------------------------------------------------
    def _checked(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        resp = self._session.request(method, url, timeout=self._timeout, **kwargs)
        if not 200 <= resp.status_code < 300:
            raise LineApiError(
                f"{method} {url} -> {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )
        return resp

    def create_rich_menu(self, body: Dict[str, Any]) -> str:
        resp = self._checked("POST", f"{self._api_base_url}/richmenu", json=body, headers=self._headers())
        return resp.json()["richMenuId"]

    def upload_rich_menu_image(self, rich_menu_id: str, content: bytes, content_type: str) -> None:
        headers = self._headers(content_type)
        headers["Content-Length"] = str(len(content))
        self._checked(
            "POST",
            f"{self._data_api_base_url}/richmenu/{rich_menu_id}/content",
            data=content,
            headers=headers,
        )

    def set_default_rich_menu(self, rich_menu_id: str) -> None:
        self._checked("POST", f"{self._api_base_url}/user/all/richmenu/{rich_menu_id}", headers=self._headers(None))

    def list_rich_menus(self) -> List[Dict[str, Any]]:
        resp = self._checked("GET", f"{self._api_base_url}/richmenu/list", headers=self._headers(None))
        return resp.json().get("richmenus") or []

    def delete_rich_menu(self, rich_menu_id: str) -> None:
        self._checked("DELETE", f"{self._api_base_url}/richmenu/{rich_menu_id}", headers=self._headers(None))
