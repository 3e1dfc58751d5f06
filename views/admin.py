from utils.formatting import format_datetime, format_short_datetime, format_time_range, format_timestamp, to_input_value
from utils.stats import CATEGORY_LABELS, CATEGORY_ORDER, EventTotals
from .layout import checked, e, render_page, selected, status_message

SORT_OPTIONS = [
    ("date-asc", "Date (soonest first)"),
    ("date-desc", "Date (latest first)"),
    ("title-asc", "Title (A–Z)"),
    ("title-desc", "Title (Z–A)"),
]


def render_login(error: str = "") -> str:
    body = f"""
        <h1>Admin Login</h1>
        <form id="admin-login-form" class="card" method="post" action="/admin/login">
            <label for="admin-password">Password</label>
            <input type="password" id="admin-password" name="password" autofocus />
            <p id="login-error" class="badge-full">{e(error)}</p>
            <button type="submit">Log in</button>
        </form>"""
    return render_page("Admin Login", body)


def _render_dashboard_card(ev, stats: EventTotals) -> str:
    if ev.deleted_at is not None:
        # Страницы удаленного события недоступны, остается только восстановление
        actions = f"""
            <form class="inline" method="post" action="/admin/events/{ev.id}/restore">
                <button type="submit" class="btn-ghost admin-btn">Restore</button>
            </form>"""
        title_suffix = ' <span class="muted">(deleted)</span>'
    else:
        actions = f"""
            <a class="btn-primary admin-btn" href="/admin/events/{ev.id}/edit">Edit</a>
            <a class="btn-ghost admin-btn" href="/admin/events/{ev.id}/signups">View Signups</a>
            <a class="btn-ghost admin-btn" href="/events/{ev.id}" target="_blank">Public View</a>
            <form class="inline" method="post" action="/admin/events/{ev.id}/delete"
                  onsubmit="return confirm('Are you sure you want to delete this event? This action can be undone, but it will disappear from public view.');">
                <button type="submit" class="btn-danger admin-btn delete-event-btn">Delete</button>
            </form>"""
        title_suffix = ""
    return f"""
        <article class="card admin-event-card">
            <div class="admin-event-header">
                <h3 class="admin-event-title">{e(ev.title)}{title_suffix}</h3>
                <p class="admin-event-datetime">{e(format_datetime(ev.start_time))}</p>
                <p class="admin-event-location">{e(ev.location)}</p>
            </div>
            <div class="admin-event-stats">
                <p><strong>{stats.total_slots}</strong> slots</p>
                <p><strong>{stats.total_signups}</strong> signups</p>
                <p><strong>{stats.fill_rate}%</strong> full</p>
            </div>
            <div class="admin-event-actions">{actions}
            </div>
        </article>"""


def render_dashboard(
    events, stats: dict, q: str = "", sort: str = "date-asc",
    upcoming: bool = False, show_deleted: bool = False, message: str = ""
) -> str:
    options = "".join(
        f'<option value="{key}"{selected(key == sort)}>{e(label)}</option>'
        for key, label in SORT_OPTIONS
    )
    if message:
        listing = status_message(message, "error")
    elif not events:
        listing = "<p>No events match your filters.</p>"
    else:
        listing = "".join(
            _render_dashboard_card(ev, stats.get(ev.id) or EventTotals()) for ev in events
        )
    body = f"""
        <h1>Events</h1>
        <form class="card" method="get" action="/admin/events">
            <label for="search-input">Search</label>
            <input type="search" id="search-input" name="q" value="{e(q)}" placeholder="Title or location" />
            <label for="sort-select">Sort</label>
            <select id="sort-select" name="sort">{options}</select>
            <label><input type="checkbox" id="toggle-upcoming" name="upcoming" value="1"{checked(upcoming)} /> Upcoming only</label>
            <label><input type="checkbox" name="show_deleted" value="1"{checked(show_deleted)} /> Show deleted</label>
            <p><button type="submit">Apply</button></p>
        </form>
        <div id="events-container">{listing}</div>"""
    return render_page("Admin – Events", body, admin=True)


def _event_fields(values: dict) -> str:
    return f"""
        <label for="event-title">Title</label>
        <input type="text" id="event-title" name="title" value="{e(values.get("title"))}" />
        <label for="event-start">Start time</label>
        <input type="datetime-local" id="event-start" name="start_time" value="{e(values.get("start_time"))}" />
        <label for="event-location">Location</label>
        <input type="text" id="event-location" name="location" value="{e(values.get("location"))}" />
        <label for="event-description">Description</label>
        <textarea id="event-description" name="description">{e(values.get("description"))}</textarea>
        <label><input type="checkbox" id="event-public" name="is_public" value="1"{checked(values.get("is_public"))} /> Public</label>"""


def event_form_values(event) -> dict:
    return {
        "title": event.title,
        "start_time": to_input_value(event.start_time),
        "location": event.location,
        "description": event.description,
        "is_public": event.is_public,
    }


def render_create_event(values: dict | None = None, status: str = "", status_kind: str = "info") -> str:
    values = values if values is not None else {"is_public": True}
    body = f"""
        <h1>Create Event</h1>
        <form id="createEventForm" class="card" method="post" action="/admin/events/new">
            {_event_fields(values)}
            <p><button type="submit">Create event</button></p>
        </form>
        <div id="createEventMessage">{status_message(status, status_kind)}</div>"""
    return render_page("Admin – New Event", body, admin=True)


def _render_existing_slot(slot) -> str:
    time_range = format_time_range(slot.start_time, slot.end_time)
    return f"""
        <article class="card">
            <h3>{e(slot.name)}</h3>
            <p><strong>Category:</strong> {e(slot.category)}</p>
            <p><strong>Total Spots:</strong> {slot.quantity_total}</p>
            <p><strong>Filled:</strong> {len(slot.signups or [])}</p>
            {f"<p><strong>Time:</strong> {e(time_range)}</p>" if time_range else ""}
            {f"<p><strong>Notes:</strong> {e(slot.description)}</p>" if slot.description else ""}
            <form class="inline" method="post" action="/admin/slots/{slot.id}/delete"
                  onsubmit="return confirm('Delete this slot and all of its signups?');">
                <button type="submit" class="btn-danger">Delete slot</button>
            </form>
        </article>"""


def render_edit_event(
    event, slots, values: dict | None = None, event_status: str = "",
    event_status_kind: str = "info", slot_status: str = "", slot_status_kind: str = "info",
    slot_values: dict | None = None
) -> str:
    values = values if values is not None else event_form_values(event)
    slot_values = slot_values or {}
    current_category = slot_values.get("category") or "volunteer"
    categories = "".join(
        f'<option value="{key}"{selected(key == current_category)}>{e(CATEGORY_LABELS[key])}</option>'
        for key in CATEGORY_ORDER if key != "uncategorized"
    )
    if slots:
        existing = "".join(_render_existing_slot(slot) for slot in slots)
    else:
        existing = "<p>No slots created yet.</p>"
    body = f"""
        <h1>Edit Event</h1>
        <form id="editEventForm" class="card" method="post" action="/admin/events/{event.id}/edit">
            {_event_fields(values)}
            <p><button type="submit">Save changes</button></p>
        </form>
        <div id="eventFormMessage">{status_message(event_status, event_status_kind)}</div>

        <h2>Add Slot</h2>
        <form id="newSlotForm" class="card" method="post" action="/admin/events/{event.id}/slots">
            <label for="slot-name">Name</label>
            <input type="text" id="slot-name" name="name" value="{e(slot_values.get("name"))}" />
            <label for="slot-category">Category</label>
            <select id="slot-category" name="category">{categories}</select>
            <label for="slot-quantity">Spots</label>
            <input type="number" min="1" id="slot-quantity" name="quantity_total" value="{e(slot_values.get("quantity_total"))}" />
            <label for="slot-start">Start</label>
            <input type="datetime-local" id="slot-start" name="start_time" value="{e(slot_values.get("start_time"))}" />
            <label for="slot-end">End</label>
            <input type="datetime-local" id="slot-end" name="end_time" value="{e(slot_values.get("end_time"))}" />
            <label for="slot-description">Notes</label>
            <textarea id="slot-description" name="description">{e(slot_values.get("description"))}</textarea>
            <p><button type="submit">Add slot</button></p>
        </form>
        <div id="slotMessage">{status_message(slot_status, slot_status_kind)}</div>

        <h2>Existing Slots</h2>
        <div id="existingSlots">{existing}</div>"""
    return render_page(f"Admin – {event.title}", body, admin=True)


def _render_signup_entry(s) -> str:
    if s.checked_in:
        checkin = f"""
            <p class="muted">Checked in {e(format_timestamp(s.checked_in_at))}</p>
            <form class="inline" method="post" action="/admin/signups/{s.id}/undo-checkin">
                <button type="submit" class="btn-ghost">Undo check-in</button>
            </form>"""
    else:
        checkin = '<p class="muted">Not checked in</p>'
    return f"""
        <div class="signup-entry">
            <p><strong>{e(s.full_name)}</strong> ({e(s.email)})</p>
            {f'<p class="note">Note: {e(s.note)}</p>' if s.note else ""}
            {checkin}
            <form class="inline" method="post" action="/admin/signups/{s.id}/delete"
                  onsubmit="return confirm('Remove this signup?');">
                <button type="submit" class="btn-danger">Remove</button>
            </form>
        </div>"""


def render_event_signups(event, slots) -> str:
    sections = []
    for slot in slots:
        signups = slot.signups or []
        if signups:
            entries = "".join(_render_signup_entry(s) for s in signups)
        else:
            entries = "<p>No signups yet.</p>"
        sections.append(f"""
            <div class="card signup-group">
                <h3 style="margin-bottom: 8px;">{e(slot.name)} ({len(signups)})</h3>
                <div class="signup-list">{entries}</div>
            </div>""")
    body = f"""
        <h1 id="event-title">{e(event.title)}</h1>
        <p id="event-info">{e(format_datetime(event.start_time))}</p>
        <p><a class="btn-primary" id="export-csv-btn" href="/admin/events/{event.id}/signups.csv">Export CSV</a></p>
        <div id="signups-container">{"".join(sections) or "<p>No slots created yet.</p>"}</div>"""
    return render_page(f"Signups – {event.title}", body, admin=True)


def render_reports(events, current_event=None, rows=None, message: str = "") -> str:
    current_id = current_event.id if current_event is not None else None
    if events:
        options = '<option value="">Select an event…</option>' + "".join(
            f'<option value="{ev.id}"{selected(ev.id == current_id)}>'
            f"{e(ev.title)} – {e(format_short_datetime(ev.start_time))}</option>"
            for ev in events
        )
    else:
        options = '<option value="">No events available</option>'

    if message:
        preview = status_message(message, "error")
    elif current_event is None:
        preview = '<p id="report-preview-empty">Select an event to preview its signups.</p>'
    elif not rows:
        preview = '<p id="report-preview-empty">No signups found for this event.</p>'
    else:
        body_rows = "".join(
            f"<tr><td>{e(r.full_name)}</td><td>{e(r.email)}</td><td>{e(r.slot_name)}</td>"
            f"<td>{e(r.slot_category)}</td><td>{e(r.checked_in)}</td><td>{e(r.checked_in_at)}</td></tr>"
            for r in rows
        )
        preview = f"""
            <table id="report-preview-table">
                <thead><tr><th>Name</th><th>Email</th><th>Slot</th><th>Category</th><th>Checked In</th><th>Checked In At</th></tr></thead>
                <tbody id="report-preview-body">{body_rows}</tbody>
            </table>"""

    downloads = ""
    if current_event is not None:
        downloads = f"""
            <a class="btn-primary" id="btn-download-signups" href="/admin/reports/{current_event.id}/signups.csv">Download signups</a>
            <a class="btn-primary" id="btn-download-checkins" href="/admin/reports/{current_event.id}/checkins.csv">Download check-ins</a>"""
    body = f"""
        <h1>Reports</h1>
        <form class="card" method="get" action="/admin/reports">
            <label for="report-event-select">Event</label>
            <select id="report-event-select" name="event_id" onchange="this.form.submit()">{options}</select>
            <noscript><p><button type="submit">Show</button></p></noscript>
        </form>
        <p>{downloads}
            <a class="btn-ghost" id="btn-download-all-signups" href="/admin/reports/all-signups.csv">Download all signups</a>
        </p>
        <div class="card">{preview}</div>"""
    return render_page("Admin – Reports", body, admin=True)
