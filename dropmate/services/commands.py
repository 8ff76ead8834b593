"""
Owner commands arriving from LINE.

Free text: ``<verb> [LOCKER_ID]``, verb in English or Thai, matched as a whole token.
Postback (rich menu): ``action=<verb>&locker_id=<id>``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from urllib.parse import parse_qs


class BadCommand(Exception):
    """Unrecognized verb or action. HTTP 400, or the help reply on LINE."""


class CommandVerb(str, Enum):
    STATUS = "status"
    DISABLE = "disable"
    ENABLE = "enable"
    UNLOCK = "unlock"


_TEXT_VERBS: dict[str, CommandVerb] = {
    "status": CommandVerb.STATUS,
    "สถานะ": CommandVerb.STATUS,
    "disable": CommandVerb.DISABLE,
    "ปิด": CommandVerb.DISABLE,
    "enable": CommandVerb.ENABLE,
    "เปิด": CommandVerb.ENABLE,
    "unlock": CommandVerb.UNLOCK,
    "ปลดล็อก": CommandVerb.UNLOCK,
}


@dataclass(frozen=True, slots=True)
class OwnerCommand:
    verb: CommandVerb
    locker_id: str


def parse_text_command(text: str | None, *, default_locker_id: str) -> OwnerCommand:
    parts = (text or "").split()
    if not parts:
        raise BadCommand("empty command")

    verb = _TEXT_VERBS.get(parts[0].lower())
    if verb is None:
        raise BadCommand(f"unknown command {parts[0]!r}")

    locker_id = parts[1] if len(parts) >= 2 else default_locker_id
    return OwnerCommand(verb=verb, locker_id=locker_id)


def parse_postback(data: str | None, *, default_locker_id: str) -> OwnerCommand:
    params = parse_qs(data or "", keep_blank_values=True)
    action = (params.get("action", [""])[0] or "").strip().lower()
    locker_id = (params.get("locker_id", [""])[0] or "").strip() or default_locker_id

    try:
        verb = CommandVerb(action)
    except ValueError:
        raise BadCommand(f"unknown postback action {action!r}") from None

    return OwnerCommand(verb=verb, locker_id=locker_id)
