from html import escape

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>{title}</title>
    <style>
        body {{ font-family:'Inter',system-ui,sans-serif; background:#111827; color:#f9fafb; margin:0; }}
        .page {{ max-width:960px; margin:0 auto; padding:32px 20px; }}
        nav {{ display:flex; gap:16px; align-items:center; margin-bottom:24px; }}
        nav form {{ margin:0; }}
        a {{ color:#60a5fa; text-decoration:none; }}
        .card {{ background:#1f2937; padding:20px; border-radius:16px; border:1px solid #374151; margin-bottom:16px; }}
        .slot-card-grid {{ display:grid; grid-template-columns:repeat(auto-fit,minmax(240px,1fr)); gap:16px; }}
        .slot-card-footer {{ display:flex; justify-content:space-between; align-items:center; }}
        .badge-open {{ color:#34d399; }}
        .badge-full {{ color:#f87171; }}
        label {{ display:block; margin:10px 0 4px; color:#d1d5db; }}
        input, select, textarea {{ width:100%; padding:10px; border-radius:10px; border:1px solid #4b5563; background:#111827; color:#f9fafb; box-sizing:border-box; }}
        input[type=checkbox] {{ width:auto; }}
        .btn-primary, .btn-ghost, .btn-danger, button {{ display:inline-block; padding:8px 14px; border-radius:10px; border:none; cursor:pointer; font-weight:600; }}
        .btn-primary, button {{ background:#2563eb; color:#fff; }}
        .btn-ghost {{ background:transparent; border:1px solid #4b5563; color:#f9fafb; }}
        .btn-danger {{ background:#dc2626; color:#fff; }}
        button:disabled {{ background:#4b5563; cursor:not-allowed; }}
        .inline {{ display:inline; }}
        .status-message {{ padding:10px 14px; border-radius:10px; }}
        .status-info {{ background:#1e3a8a; }}
        .status-success {{ background:#065f46; }}
        .status-error {{ background:#7f1d1d; }}
        table {{ width:100%; border-collapse:collapse; }}
        td, th {{ padding:6px 8px; border-bottom:1px solid #374151; text-align:left; }}
        .muted {{ color:#9ca3af; }}
    </style>
</head>
<body>
    <div class="page">
        <nav>{nav}</nav>
        {body}
    </div>
</body>
</html>
"""

PUBLIC_NAV = '<a href="/">Events</a><a href="/checkin">Check In</a>'

ADMIN_NAV = (
    '<a href="/admin/events">Dashboard</a>'
    '<a href="/admin/events/new">New Event</a>'
    '<a href="/admin/reports">Reports</a>'
    '<a href="/">Public Site</a>'
    '<form class="inline" method="post" action="/admin/logout">'
    '<button type="submit" class="btn-ghost" id="logout-link">Log out</button></form>'
)


def e(value) -> str:
    """Экранирует значение для вставки в HTML. None превращается в пустую строку."""
    if value is None:
        return ""
    return escape(str(value))


def render_page(title: str, body: str, admin: bool = False) -> str:
    return PAGE_TEMPLATE.format(
        title=e(title),
        nav=ADMIN_NAV if admin else PUBLIC_NAV,
        body=body,
    )


def status_message(text: str, kind: str = "info") -> str:
    if not text:
        return ""
    return f'<p class="status-message status-{kind}">{e(text)}</p>'


def checked(flag: bool) -> str:
    return " checked" if flag else ""


def selected(flag: bool) -> str:
    return " selected" if flag else ""
