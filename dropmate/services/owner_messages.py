"""
Texts sent to the owner over LINE.
"""

from __future__ import annotations

from urllib.parse import quote

from dropmate.core.entities.access_request import AccessRequest
from dropmate.core.entities.locker import Locker
from dropmate.infrastructure.messaging.gateway import Message, text_message

REFUSAL_TEXT = "บัญชีนี้ไม่ได้รับอนุญาตให้ควบคุมตู้"
BAD_POSTBACK_TEXT = "คำสั่งไม่ถูกต้อง"


def help_text(default_locker_id: str) -> str:
    return (
        "คำสั่ง:\n"
        "• สถานะ [LOCKER_ID]  → แสดง QR & ประตู\n"
        "• เปิด [LOCKER_ID]    → เปิด QR\n"
        "• ปิด [LOCKER_ID]     → ปิด QR\n"
        "• ปลดล็อก [LOCKER_ID] → เปิดประตูชั่วคราว\n"
        f"(ไม่ใส่ LOCKER_ID จะใช้ {default_locker_id})"
    )


def locker_status_text(locker: Locker) -> str:
    qr = "ปิด QR" if locker.disabled else "เปิดรับคำขอ"
    door = "ประตูเปิด" if locker.door_open else "ประตูปิด"
    return f"ℹ️ ตู้ {locker.locker_id}\n• QR: {qr}\n• ตู้: {door}"


def qr_disabled_text(locker_id: str) -> str:
    return f"⛔ ปิด QR ของตู้ {locker_id} แล้ว"


def qr_enabled_text(locker_id: str) -> str:
    return f"✅ เปิด QR ของตู้ {locker_id} แล้ว"


def unlocked_text(request: AccessRequest) -> str:
    return f"🔓 ปลดล็อกตู้ {request.locker_id}\nrequest_id: {request.request_id}"


def approved_text(request: AccessRequest) -> str:
    return f"✅ อนุมัติคำขอ {request.request_id} ของตู้ {request.locker_id}"


def denied_text(request: AccessRequest) -> str:
    return f"❌ ปฏิเสธคำขอ {request.request_id} ของตู้ {request.locker_id}"


def _uri_action(label: str, uri: str) -> dict:
    return {"type": "action", "action": {"type": "uri", "label": label, "uri": uri}}


def new_request_message(request: AccessRequest, base_url: str) -> Message:
    """
    Push sent when a visitor scans. The quick replies are plain links back to /decision.
    """
    rid = quote(request.request_id, safe="")
    lid = quote(request.locker_id, safe="")
    approve_url = f"{base_url}/decision?request_id={rid}&action=approve"
    deny_url = f"{base_url}/decision?request_id={rid}&action=deny"
    close_url = f"{base_url}/decision?locker_id={lid}&action=disable"

    return text_message(
        f"📣 มีคำขอจากตู้ {request.locker_id}\nrequest_id: {request.request_id}\n\nต้องการอนุมัติไหม?",
        quickReply={
            "items": [
                _uri_action("✅ อนุมัติ", approve_url),
                _uri_action("❌ ปฏิเสธ", deny_url),
                _uri_action("⛔ ปิด QR", close_url),
            ]
        },
    )
