from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from dropmate.presentation.dependencies import get_db, get_relay
from dropmate.services.relay import Relay
from dropmate.services.webhook_service import process_webhook_service

router = APIRouter(tags=["webhook"])
logger = logging.getLogger(__name__)


@router.post("/webhook")
async def line_webhook(
    request: Request,
    db: Session = Depends(get_db),
    relay: Relay = Depends(get_relay),
) -> Response:
    """
    LINE event batch. Always acknowledged with 200: a redelivered batch would repeat its side effects.
    """
    try:
        payload = await request.json()
    except Exception:
        logger.warning("webhook body is not JSON")
        return Response(status_code=status.HTTP_200_OK)

    try:
        handled = await run_in_threadpool(process_webhook_service, payload, db, relay)
        logger.info("webhook handled %d event(s)", handled)
    except Exception:
        logger.exception("webhook error")

    return Response(status_code=status.HTTP_200_OK)
