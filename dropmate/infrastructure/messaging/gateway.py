"""
Outbound messaging abstraction.

Defines the gateway interface the services talk to and the result object every
send returns. Implementations: LineMessagingClient (real) and DryRunMessagingClient
(records instead of sending).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Protocol, Sequence, Union

Message = Dict[str, Any]
Messages = Union[Message, Sequence[Message]]


@dataclass(frozen=True)
class LineSendResult:
    ok: bool
    status_code: int
    response_json: Dict[str, Any]


class MessagingGateway(Protocol):
    def push_message(self, *, to: str, messages: Messages) -> LineSendResult:
        """
        Push one or more messages to a user.
        A non-2xx answer comes back as ok=False; transport errors may raise.
        """
        ...

    def reply_message(self, *, reply_token: str, messages: Messages) -> LineSendResult:
        ...


def as_message_list(messages: Messages) -> list[Message]:
    if isinstance(messages, dict):
        return [messages]
    return list(messages)


def text_message(text: str, **extra: Any) -> Message:
    msg: Message = {"type": "text", "text": text}
    msg.update(extra)
    return msg
