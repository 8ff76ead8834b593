"""
Inbound LINE webhook processing.

Responsibilities:
- validate the event batch
- refuse everyone but the owner
- turn text messages and rich-menu postbacks into owner commands
Never deals with HTTP responses; the router always answers 200.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from dropmate.schemas.models import LineEvent, LineWebhookBody
from dropmate.services import owner_messages
from dropmate.services.commands import BadCommand, CommandVerb, OwnerCommand, parse_postback, parse_text_command
from dropmate.services.dropmate_service import (
    locker_status_reply_service,
    set_locker_disabled_service,
    unlock_service,
)
from dropmate.services.relay import Relay

logger = logging.getLogger(__name__)


def run_owner_command(command: OwnerCommand, reply_token: str | None, db: Session, relay: Relay) -> None:
    if command.verb is CommandVerb.STATUS:
        locker_status_reply_service(command.locker_id, db, relay, reply_token=reply_token)
    elif command.verb is CommandVerb.DISABLE:
        set_locker_disabled_service(command.locker_id, True, db, relay, reply_token=reply_token)
    elif command.verb is CommandVerb.ENABLE:
        set_locker_disabled_service(command.locker_id, False, db, relay, reply_token=reply_token)
    elif command.verb is CommandVerb.UNLOCK:
        unlock_service(command.locker_id, db, relay, reply_token=reply_token)


def _handle_event(event: LineEvent, db: Session, relay: Relay) -> None:
    if not (event.is_text_message or event.is_postback):
        logger.info("ignoring LINE event of type %s", event.type)
        return

    default_locker_id = relay.settings.default_locker_id

    if event.sender_id != relay.notifier.owner_user_id:
        logger.warning("refusing command from non-owner %s", event.sender_id)
        relay.notifier.reply_text(event.reply_token, owner_messages.REFUSAL_TEXT)
        return

    if event.is_text_message:
        text = event.message.text if event.message else ""
        logger.info("owner text command: %s", text)
        try:
            command = parse_text_command(text, default_locker_id=default_locker_id)
        except BadCommand:
            relay.notifier.reply_text(event.reply_token, owner_messages.help_text(default_locker_id))
            return
    else:
        data = event.postback.data if event.postback else ""
        logger.info("owner postback: %s", data)
        try:
            command = parse_postback(data, default_locker_id=default_locker_id)
        except BadCommand:
            relay.notifier.reply_text(event.reply_token, owner_messages.BAD_POSTBACK_TEXT)
            return

    run_owner_command(command, event.reply_token, db, relay)


def process_webhook_service(payload: Any, db: Session, relay: Relay) -> int:
    """
    Returns the number of events seen. Raises on a malformed batch; the caller logs and
    still acknowledges, so LINE never redelivers a batch that already had side effects.
    """
    body = LineWebhookBody.model_validate(payload)
    for event in body.events:
        _handle_event(event, db, relay)
    return len(body.events)
