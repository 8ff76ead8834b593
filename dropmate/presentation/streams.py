from __future__ import annotations

from functools import partial
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from dropmate.core.use_cases.get_request_status import RequestNotFound
from dropmate.infrastructure.realtime.channels import QueueChannel
from dropmate.infrastructure.realtime.registry import Scope
from dropmate.infrastructure.realtime.sse import event_stream
from dropmate.presentation.dependencies import get_db, get_relay
from dropmate.services.dropmate_service import (
    close_stream_service,
    open_locker_stream_service,
    open_request_stream_service,
)
from dropmate.services.relay import Relay

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def _sse_response(request: Request, relay: Relay, scope: Scope, key: str, channel: QueueChannel, snapshot: str):
    body = event_stream(
        client=request,
        channel=channel,
        snapshot=snapshot,
        on_close=partial(close_stream_service, scope, key, channel, relay),
        retry_ms=relay.settings.sse_retry_ms,
        keepalive_seconds=relay.settings.sse_keepalive_seconds,
    )
    return StreamingResponse(body, media_type="text/event-stream", headers=SSE_HEADERS)


@router.get("/status-stream")
async def status_stream(
    request: Request,
    request_id: str = "",
    db: Session = Depends(get_db),
    relay: Relay = Depends(get_relay),
) -> StreamingResponse:
    """
    Live status of one request: snapshot first, then every decision. 404 for unknown ids.
    """
    channel = QueueChannel()
    try:
        snapshot = await run_in_threadpool(open_request_stream_service, request_id, channel, db, relay)
    except RequestNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _sse_response(request, relay, Scope.REQUEST, request_id, channel, snapshot)


@router.get("/locker-stream")
async def locker_stream(
    request: Request,
    locker_id: Optional[str] = None,
    db: Session = Depends(get_db),
    relay: Relay = Depends(get_relay),
) -> StreamingResponse:
    """
    Live QR / door state of one locker.
    """
    locker_id = locker_id or relay.settings.default_locker_id
    channel = QueueChannel()
    snapshot = await run_in_threadpool(open_locker_stream_service, locker_id, channel, db, relay)
    return _sse_response(request, relay, Scope.LOCKER, locker_id, channel, snapshot)
