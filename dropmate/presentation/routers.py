from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from dropmate.core.use_cases.decide_request import AlreadyDecided, Decision
from dropmate.core.use_cases.get_request_status import RequestNotFound
from dropmate.core.use_cases.request_access import LockerDisabled
from dropmate.presentation.dependencies import get_db, get_relay
from dropmate.presentation.views import render_message, render_request_status, render_template
from dropmate.schemas.models import HealthStatus
from dropmate.services.dropmate_service import (
    decide_request_service,
    get_locker_status_service,
    get_request_status_service,
    health_service,
    notify_new_request_service,
    request_access_service,
    set_door_service,
    set_locker_disabled_service,
)
from dropmate.services.relay import Relay

router = APIRouter()


def _bad_request(*lines: str) -> HTMLResponse:
    return render_message("Bad request", "คำสั่งไม่ถูกต้อง", *lines, icon="⚠️", card_class="err", status_code=400)


def _not_found() -> HTMLResponse:
    return render_message(
        "ไม่พบคำขอ", "ไม่พบคำขอนี้", "ไม่พบ Request ID ในระบบ", icon="❓", card_class="err", status_code=404
    )


def _locker_link(locker_id: str) -> dict:
    return {"href": f"/locker?locker_id={quote(locker_id, safe='')}", "label": "📊 ดูสถานะตู้"}


@router.get("/", response_class=HTMLResponse)
def home(relay: Relay = Depends(get_relay)) -> HTMLResponse:
    return render_template("home.html", title="DROPMATE", locker_id=relay.settings.default_locker_id)


@router.get("/health", response_model=HealthStatus)
def health(db: Session = Depends(get_db), relay: Relay = Depends(get_relay)) -> HealthStatus:
    return HealthStatus(**health_service(db, relay))


@router.get("/scan", response_class=HTMLResponse)
def scan(
    background_tasks: BackgroundTasks,
    locker_id: Optional[str] = None,
    db: Session = Depends(get_db),
    relay: Relay = Depends(get_relay),
) -> HTMLResponse:
    """
    Visitor scanned a locker QR code.

    Returns:
      - 200 waiting page (live via /status-stream) when a request was opened
      - 200 rejection page when the owner has closed the QR
    """
    locker_id = locker_id or relay.settings.default_locker_id
    try:
        request = request_access_service(locker_id, db, relay)
    except LockerDisabled:
        return render_message(
            "ตู้ปิดใช้งาน",
            "ปิดรับคำขอชั่วคราว",
            f"ตู้ {locker_id} ถูกปิดโดยเจ้าของ",
            "กรุณาติดต่อเจ้าของตู้",
            icon="⛔",
            card_class="err",
        )

    # Owner push goes out after the page is sent; its failure is only logged
    background_tasks.add_task(notify_new_request_service, request, relay)

    status_url = f"{relay.settings.public_base_url}/status?request_id={quote(request.request_id, safe='')}"
    return render_template("scan_pending.html", title="รออนุมัติ", request=request, status_url=status_url)


@router.get("/status", response_class=HTMLResponse)
def request_status(
    request_id: str = "",
    db: Session = Depends(get_db),
    relay: Relay = Depends(get_relay),
) -> HTMLResponse:
    try:
        request = get_request_status_service(request_id, db, relay)
    except RequestNotFound:
        return _not_found()
    return render_request_status(request)


@router.get("/locker", response_class=HTMLResponse)
def locker_status(
    locker_id: Optional[str] = None,
    db: Session = Depends(get_db),
    relay: Relay = Depends(get_relay),
) -> HTMLResponse:
    locker_id = locker_id or relay.settings.default_locker_id
    locker = get_locker_status_service(locker_id, db, relay)
    return render_template("locker_status.html", title="สถานะตู้", locker=locker)


@router.get("/decision", response_class=HTMLResponse)
def decision(
    action: str = "",
    request_id: str = "",
    locker_id: Optional[str] = None,
    db: Session = Depends(get_db),
    relay: Relay = Depends(get_relay),
) -> HTMLResponse:
    """
    Quick-reply links from the owner notification.

    Returns:
      - 200 after approve / deny / disable
      - 200 warning page if the request was already decided (nothing changes)
      - 404 if the request is unknown
      - 400 on an unknown action
    """
    if action == "disable":
        locker_id = locker_id or relay.settings.default_locker_id
        set_locker_disabled_service(locker_id, True, db, relay)
        return render_message(
            "ปิด QR", "ปิดรับคำขอแล้ว", f"ตู้ {locker_id} ปิดรับคำขอชั่วคราว", icon="⛔", card_class="warn"
        )

    try:
        verdict = Decision(action)
    except ValueError:
        return _bad_request()

    try:
        request = decide_request_service(request_id, verdict, db, relay)
    except RequestNotFound:
        return _not_found()
    except AlreadyDecided as e:
        return render_message(
            "ตัดสินใจแล้ว", "คำขอถูกตัดสินใจแล้ว", f"สถานะ: {e.status.value}", icon="⚠️", card_class="warn"
        )

    if verdict is Decision.APPROVE:
        return render_message(
            "อนุมัติแล้ว", "อนุมัติสำเร็จ", f"คำขอ {request.request_id}", "ได้รับการอนุมัติแล้ว",
            icon="✅", card_class="ok",
        )
    return render_message(
        "ปฏิเสธแล้ว", "ปฏิเสธแล้ว", f"คำขอ {request.request_id}", "ถูกปฏิเสธแล้ว", icon="❌", card_class="err"
    )


@router.get("/enable", response_class=HTMLResponse)
def enable(
    locker_id: Optional[str] = None,
    db: Session = Depends(get_db),
    relay: Relay = Depends(get_relay),
) -> HTMLResponse:
    locker_id = locker_id or relay.settings.default_locker_id
    set_locker_disabled_service(locker_id, False, db, relay)
    return render_message(
        "เปิดรับคำขอ", "เปิดรับคำขอแล้ว", f"ตู้ {locker_id}", icon="✅", card_class="ok", link=_locker_link(locker_id)
    )


@router.get("/door", response_class=HTMLResponse)
def door(
    action: str = "",
    locker_id: Optional[str] = None,
    db: Session = Depends(get_db),
    relay: Relay = Depends(get_relay),
) -> HTMLResponse:
    locker_id = locker_id or relay.settings.default_locker_id
    if action not in ("open", "close"):
        return _bad_request("action ต้องเป็น open หรือ close")

    is_open = action == "open"
    set_door_service(locker_id, is_open, db, relay)
    if is_open:
        return render_message("เปิดประตู", "เปิดประตูแล้ว", f"ตู้ {locker_id}", icon="🔓", card_class="ok")
    return render_message("ปิดประตู", "ปิดประตูแล้ว", f"ตู้ {locker_id}", icon="🔒", card_class="warn")
