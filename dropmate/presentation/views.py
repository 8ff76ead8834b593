from __future__ import annotations

from fastapi.responses import HTMLResponse
from jinja2 import DictLoader, Environment, select_autoescape

# ----------------------------
# Templates
# ----------------------------
TEMPLATES = {
    "base.html": """<!doctype html>
<html lang="th">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>{{ title }}</title>
<link rel="icon" href="data:,">
<style>
  * { margin: 0; padding: 0; box-sizing: border-box; }
  body { font-family: -apple-system, 'Segoe UI', Roboto, Arial, sans-serif;
         background: linear-gradient(135deg, #E3F2FD 0%, #BBDEFB 100%);
         min-height: 100vh; padding: 20px; line-height: 1.6; }
  .container { max-width: 480px; margin: 0 auto; }
  .header, .card { background: rgba(255,255,255,0.95); border-radius: 16px; padding: 20px; margin-bottom: 16px; }
  .header h1 { font-size: 24px; }
  .card h2 { text-align: center; margin-bottom: 12px; }
  .card.ok { border-left: 4px solid #2E7D32; }
  .card.err { border-left: 4px solid #C62828; }
  .card.warn { border-left: 4px solid #F9A825; }
  .icon { font-size: 48px; text-align: center; }
  .mono { font-family: ui-monospace, Menlo, monospace; }
  .muted { color: #64748b; }
  .pill { display: inline-block; padding: 4px 12px; border-radius: 999px; background: #E3F2FD; }
  .pill.ok { background: #E8F5E9; color: #2E7D32; }
  .pill.err { background: #FFEBEE; color: #C62828; }
  .info-row { display: flex; justify-content: space-between; padding: 6px 0; }
  .btn-group { display: flex; gap: 8px; margin-top: 16px; flex-wrap: wrap; }
  .btn { display: block; flex: 1; text-align: center; padding: 12px; border-radius: 12px;
         background: #1E88E5; color: #fff; text-decoration: none; }
  .status-grid { display: grid; grid-template-columns: 1fr 1fr; gap: 12px; }
  .status-box { border: 2px solid rgba(100,181,246,0.2); border-radius: 12px; padding: 12px; text-align: center; }
  .status-box .label { font-size: 12px; color: #64748b; }
  .status-box .value { font-size: 20px; font-weight: 600; }
</style>
</head>
<body>
<div class="container">
{% block body %}{% endblock %}
</div>
{% block scripts %}{% endblock %}
</body>
</html>
""",
    "home.html": """{% extends "base.html" %}
{% block body %}
<div class="header">
  <h1>📦 DROPMATE</h1>
  <p>ระบบจัดการตู้ล็อกเกอร์อัจฉริยะ</p>
</div>
<div class="card">
  <h2>💡 คุณสมบัติ</h2>
  <p>✨ เปิด/ปิด QR รับคำขอผ่าน LINE</p>
  <p>📊 ติดตามสถานะแบบ Real-time</p>
  <p>🔓 ปลดล็อกตู้จากระยะไกล</p>
  <div class="btn-group">
    <a class="btn" href="/scan?locker_id={{ locker_id | urlencode }}">📱 ส่งคำขอเปิดตู้</a>
    <a class="btn" href="/locker?locker_id={{ locker_id | urlencode }}">📈 ดูสถานะตู้</a>
  </div>
</div>
<div class="card">
  <h2>📋 วิธีใช้งาน</h2>
  <p><strong>1.</strong> สแกน QR Code เพื่อขอเข้าใช้งานตู้</p>
  <p><strong>2.</strong> รอเจ้าของอนุมัติคำขอ</p>
  <p><strong>3.</strong> เมื่ออนุมัติแล้ว ตู้จะเปิดให้ใช้งาน</p>
</div>
{% endblock %}
""",
    "scan_pending.html": """{% extends "base.html" %}
{% block body %}
<div class="card">
  <div class="icon" id="statusIcon">⏳</div>
  <h2>ส่งคำขอแล้ว</h2>
  <div class="info-row"><span>Request ID:</span><span class="mono">{{ request.request_id }}</span></div>
  <div class="info-row"><span>ตู้:</span><span>{{ request.locker_id }}</span></div>
  <div style="text-align: center; margin-top: 20px;">
    <p class="muted">สถานะปัจจุบัน</p>
    <span id="status" class="pill">รอเจ้าของตอบกลับ</span>
  </div>
  <div id="done" style="display:none;">
    <a class="btn" href="{{ status_url }}">📋 ดูรายละเอียดผล</a>
  </div>
</div>
{% endblock %}
{% block scripts %}
<script>
  const out = document.getElementById('status');
  const icon = document.getElementById('statusIcon');
  const doneBox = document.getElementById('done');
  const views = {
    approved: ['pill ok', '✅ อนุมัติแล้ว', '🎉'],
    denied: ['pill err', '❌ ถูกปฏิเสธ', '😔'],
    closed: ['pill err', '⛔ ปิดคำขอ', '🚫'],
  };
  const es = new EventSource('/status-stream?request_id=' + encodeURIComponent({{ request.request_id | tojson }}));
  es.addEventListener('update', (ev) => {
    const status = JSON.parse(ev.data)?.payload?.status;
    const view = views[status];
    if (!view) return;
    [out.className, out.textContent, icon.textContent] = view;
    doneBox.style.display = 'block';
  });
</script>
{% endblock %}
""",
    "request_status.html": """{% extends "base.html" %}
{% block body %}
<div class="card {{ card_class }}">
  <div class="icon">{{ icon }}</div>
  <h2>สถานะคำขอ</h2>
  <div class="info-row"><span>Request ID:</span><span class="mono">{{ request.request_id }}</span></div>
  <div class="info-row"><span>ตู้:</span><span>{{ request.locker_id }}</span></div>
  <div style="text-align: center; margin-top: 20px;">
    <span class="pill {{ pill_class }}">{{ text }}</span>
  </div>
</div>
{% endblock %}
""",
    "locker_status.html": """{% extends "base.html" %}
{% block body %}
<div class="header">
  <h1>📊 สถานะตู้</h1>
  <p class="mono">{{ locker.locker_id }}</p>
</div>
<div class="card">
  <h2>Real-time Status</h2>
  <div class="status-grid">
    <div class="status-box" id="qrBox">
      <div class="label">QR CODE</div>
      <div class="value" id="qrValue">{{ '🔴 ปิด' if locker.disabled else '🟢 เปิด' }}</div>
    </div>
    <div class="status-box" id="doorBox">
      <div class="label">ประตู</div>
      <div class="value" id="doorValue">{{ '🔓 เปิด' if locker.door_open else '🔒 ปิด' }}</div>
    </div>
  </div>
  <p class="muted" style="text-align: center; margin-top: 20px;">🔄 อัปเดตแบบเรียลไทม์</p>
</div>
{% endblock %}
{% block scripts %}
<script>
  const qrValue = document.getElementById('qrValue');
  const doorValue = document.getElementById('doorValue');
  const es = new EventSource('/locker-stream?locker_id=' + encodeURIComponent({{ locker.locker_id | tojson }}));
  es.addEventListener('update', (ev) => {
    const data = JSON.parse(ev.data)?.payload;
    if (!data) return;
    qrValue.textContent = data.disabled ? '🔴 ปิด' : '🟢 เปิด';
    doorValue.textContent = data.doorOpen ? '🔓 เปิด' : '🔒 ปิด';
  });
</script>
{% endblock %}
""",
    "message.html": """{% extends "base.html" %}
{% block body %}
<div class="card {{ card_class }}">
  <div class="icon">{{ icon }}</div>
  <h2>{{ heading }}</h2>
  {% for line in lines %}<p style="text-align: center;">{{ line }}</p>{% endfor %}
  {% if link %}
  <div class="btn-group"><a class="btn" href="{{ link.href }}">{{ link.label }}</a></div>
  {% endif %}
</div>
{% endblock %}
""",
}

env = Environment(loader=DictLoader(TEMPLATES), autoescape=select_autoescape(["html"]))

# status -> (text, icon, pill class)
REQUEST_STATUS_VIEW = {
    "pending": ("กำลังรอเจ้าของตัดสินใจ...", "⏳", "pending"),
    "approved": ("อนุมัติแล้ว (ตู้เปิดสำเร็จ)", "✅", "ok"),
    "denied": ("ถูกปฏิเสธโดยเจ้าของ", "❌", "err"),
    "closed": ("ปิดคำขอ", "⛔", "err"),
}


def render_template(name: str, status_code: int = 200, **ctx) -> HTMLResponse:
    tpl = env.get_template(name)
    return HTMLResponse(tpl.render(**ctx), status_code=status_code)


def render_message(
    title: str,
    heading: str,
    *lines: str,
    icon: str = "ℹ️",
    card_class: str = "",
    status_code: int = 200,
    link: dict | None = None,
) -> HTMLResponse:
    return render_template(
        "message.html",
        status_code=status_code,
        title=title,
        heading=heading,
        lines=lines,
        icon=icon,
        card_class=card_class,
        link=link,
    )


def render_request_status(request) -> HTMLResponse:
    status = request.status.value
    text, icon, pill_class = REQUEST_STATUS_VIEW.get(status, REQUEST_STATUS_VIEW["pending"])
    card_class = "ok" if status == "approved" else "" if status == "pending" else "err"
    return render_template(
        "request_status.html",
        title="สถานะคำขอ",
        request=request,
        text=text,
        icon=icon,
        pill_class=pill_class,
        card_class=card_class,
    )
