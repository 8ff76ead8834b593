from __future__ import annotations

import logging
from typing import Callable

import requests

from dropmate.core.entities.access_request import AccessRequest
from dropmate.infrastructure.messaging.gateway import LineSendResult, Messages, MessagingGateway, text_message
from dropmate.infrastructure.messaging.line import LineApiError
from dropmate.services.owner_messages import new_request_message

logger = logging.getLogger(__name__)


class OwnerNotifier:
    """
    Sends messages to the single owner.

    Delivery problems are logged and reported as False; they never propagate to the
    request that triggered them and are never retried.
    """

    def __init__(self, *, gateway: MessagingGateway, owner_user_id: str, base_url: str) -> None:
        self._gateway = gateway
        self._owner_user_id = owner_user_id
        self._base_url = base_url.rstrip("/")

    @property
    def owner_user_id(self) -> str:
        return self._owner_user_id

    def _deliver(self, kind: str, send: Callable[[], LineSendResult]) -> bool:
        try:
            result = send()
        except (requests.RequestException, LineApiError):
            logger.exception("LINE %s failed", kind)
            return False

        if not result.ok:
            logger.error("LINE %s error: %s %s", kind, result.status_code, result.response_json)
            return False
        return True

    def push(self, messages: Messages) -> bool:
        return self._deliver("push", lambda: self._gateway.push_message(to=self._owner_user_id, messages=messages))

    def push_text(self, text: str) -> bool:
        return self.push(text_message(text))

    def reply_text(self, reply_token: str | None, text: str) -> bool:
        if not reply_token:
            logger.info("no reply token, dropping reply: %s", text)
            return False
        return self._deliver(
            "reply",
            lambda: self._gateway.reply_message(reply_token=reply_token, messages=text_message(text)),
        )

    def notify_new_request(self, request: AccessRequest) -> bool:
        logger.info("notifying owner about request %s for %s", request.request_id, request.locker_id)
        return self.push(new_request_message(request, self._base_url))
