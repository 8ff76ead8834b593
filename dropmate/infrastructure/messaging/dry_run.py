"""
Dry-run messaging gateway.

Never calls LINE. Every push/reply is appended to `sent` so local runs and tests can
see what the owner would have received.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from dropmate.infrastructure.messaging.gateway import LineSendResult, Message, Messages, as_message_list

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SentMessage:
    kind: str  # "push" | "reply"
    target: str
    messages: List[Message]

    @property
    def texts(self) -> List[str]:
        return [m.get("text", "") for m in self.messages]


@dataclass
class DryRunMessagingClient:
    sent: List[SentMessage] = field(default_factory=list)

    def _record(self, kind: str, target: str, messages: Messages) -> LineSendResult:
        record = SentMessage(kind=kind, target=target, messages=as_message_list(messages))
        self.sent.append(record)
        logger.info("DRY_RUN %s to=%s texts=%s", kind, target, record.texts)
        return LineSendResult(ok=True, status_code=200, response_json={})

    def push_message(self, *, to: str, messages: Messages) -> LineSendResult:
        return self._record("push", to, messages)

    def reply_message(self, *, reply_token: str, messages: Messages) -> LineSendResult:
        return self._record("reply", reply_token, messages)

    # test helpers
    def pushes(self) -> List[SentMessage]:
        return [m for m in self.sent if m.kind == "push"]

    def replies(self) -> List[SentMessage]:
        return [m for m in self.sent if m.kind == "reply"]

    def last(self) -> Optional[SentMessage]:
        return self.sent[-1] if self.sent else None

    def reset(self) -> None:
        self.sent.clear()

