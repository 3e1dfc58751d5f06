from utils.formatting import format_datetime, format_time, format_time_range
from utils.stats import category_label, event_totals, group_slots_by_category
from .layout import e, render_page, status_message


def render_event_list(events, message: str = "") -> str:
    if message:
        body = status_message(message, "error")
    elif not events:
        body = '<p id="eventsMessage">No events are currently available.</p>'
    else:
        cards = [
            f"""
            <article class="card">
                <h2>{e(ev.title)}</h2>
                <p><strong>{e(format_datetime(ev.start_time))}</strong></p>
                <p>{e(ev.location)}</p>
                <div style="margin-top: 12px;">
                    <a class="btn-primary" href="/events/{ev.id}">View Event</a>
                </div>
            </article>"""
            for ev in events
        ]
        body = '<div id="eventsList">' + "".join(cards) + "</div>"
    return render_page("Upcoming Events", "<h1>Upcoming Events</h1>" + body)


def render_event_not_found(reason: str = "We couldn’t load this event. It may have been removed.") -> str:
    body = f"""
        <h1 id="event-title">Event not found.</h1>
        <p id="event-status-message">{e(reason)}</p>
        <p><a href="/">Back to events</a></p>"""
    return render_page("Event not found", body)


def _render_slot_card(fill, selected_slot_id) -> str:
    slot = fill.slot
    meta = format_time_range(slot.start_time, slot.end_time)
    if fill.is_full:
        badge = '<span class="slot-card-badge badge-full">Full</span>'
        action = '<button type="button" class="btn-primary slot-signup-btn slot-btn-full" disabled>Full</button>'
    else:
        badge = f'<span class="slot-card-badge badge-open">{fill.remaining} spots left</span>'
        label = "Selected" if selected_slot_id == slot.id else "Sign up"
        action = (
            f'<a class="btn-primary slot-signup-btn" '
            f'href="?slot={slot.id}#signup-section">{label}</a>'
        )
    return f"""
        <article class="card slot-card">
            <h5 class="slot-card-title">{e(slot.name or "Untitled slot")}</h5>
            {f'<p class="slot-card-meta">{e(meta)}</p>' if meta else ""}
            {f'<p class="slot-card-desc">{e(slot.description)}</p>' if slot.description else ""}
            <div class="slot-card-footer">
                <div>
                    <p class="slot-card-stats">{fill.filled}/{slot.quantity_total or 0} filled</p>
                    {badge}
                </div>
                {action}
            </div>
        </article>"""


def _render_slots(slots, selected_slot_id) -> str:
    if not slots:
        return "<p>No slots have been created yet.</p>"
    sections = []
    for key, fills in group_slots_by_category(slots):
        cards = "".join(_render_slot_card(fill, selected_slot_id) for fill in fills)
        sections.append(f"""
            <div class="slot-category-group">
                <h4 class="slot-category-heading">{e(category_label(key))}</h4>
                <div class="slot-card-grid">{cards}</div>
            </div>""")
    return "".join(sections)


def _render_signup_form(event, slots, selected_slot_id, form: dict) -> str:
    open_slots = {s.id: s for s in slots if len(s.signups or []) < (s.quantity_total or 0)}
    selected = open_slots.get(selected_slot_id)
    if selected is not None:
        label = f"Signing up for: {selected.name or 'Selected slot'}"
        slot_value = selected.id
    else:
        label = "Choose a slot above to sign up."
        slot_value = ""
    return f"""
        <section id="signup-section" class="card">
            <h3>Sign up</h3>
            <p id="signup-selected-label">{e(label)}</p>
            <form id="signup-form" method="post" action="/events/{event.id}/signup">
                <input type="hidden" id="signup-slot-id" name="slot_id" value="{e(slot_value)}" />
                <label for="signup-name">Full name</label>
                <input type="text" id="signup-name" name="full_name" value="{e(form.get("full_name"))}" />
                <label for="signup-email">Email</label>
                <input type="email" id="signup-email" name="email" value="{e(form.get("email"))}" />
                <label for="signup-note">Note (optional)</label>
                <textarea id="signup-note" name="note">{e(form.get("note"))}</textarea>
                <p><button type="submit">Submit signup</button></p>
            </form>
        </section>"""


def render_event_page(
    event, slots, selected_slot_id: int | None = None, form: dict | None = None,
    status: str = "", status_kind: str = "info", slots_error: str = ""
) -> str:
    totals = event_totals(slots)
    stats = (
        f"{totals.total_signups} signups • {totals.total_capacity} total spots "
        f"({totals.fill_rate}% full)"
    )
    slots_html = f"<p>{e(slots_error)}</p>" if slots_error else _render_slots(slots, selected_slot_id)
    body = f"""
        <header>
            <h1 id="event-title">{e(event.title or "Untitled event")}</h1>
            <p id="event-datetime">{e(format_datetime(event.start_time))}</p>
            <p id="event-location">{e(event.location)}</p>
            <p id="event-description">{e(event.description)}</p>
            <p id="event-stats" class="muted">{e(stats)}</p>
        </header>
        <section id="slots-section">
            <h2>Slots</h2>
            <div id="slots-container">{slots_html}</div>
        </section>
        <div id="signup-status">{status_message(status, status_kind)}</div>
        {_render_signup_form(event, slots, selected_slot_id, form or {})}"""
    return render_page(event.title or "Event", body)


def _render_checkin_card(signup, form: dict) -> str:
    slot = signup.slot
    if signup.checked_in:
        status = '<span style="color:green;font-weight:bold;">Checked In</span>'
        action = (
            f'<div class="checkin-success">You checked in at '
            f'{e(format_time(signup.checked_in_at))}</div>'
        )
    else:
        status = '<span style="color:red;font-weight:bold;">Not Checked In</span>'
        action = f"""
            <form method="post" action="/checkin/{signup.id}">
                <input type="hidden" name="last_name" value="{e(form.get("last_name"))}" />
                <input type="hidden" name="email" value="{e(form.get("email"))}" />
                <input type="hidden" name="event" value="{e(form.get("event"))}" />
                <button type="submit" class="checkin-list-btn">Check In</button>
            </form>"""
    return f"""
        <div class="card signup-card">
            <h3>{e(slot.name)}</h3>
            <p><strong>Name:</strong> {e(signup.full_name)}</p>
            <p><strong>Email:</strong> {e(signup.email)}</p>
            <p><strong>Time:</strong> {e(format_time_range(slot.start_time, slot.end_time))}</p>
            <p><strong>Status:</strong> {status}</p>
            {action}
        </div>"""


def render_checkin_page(
    form: dict | None = None, results=None, status: str = "", status_kind: str = "info"
) -> str:
    form = form or {}
    if results is None:
        results_html = ""
    elif not results:
        results_html = "<p>No matching signups found.</p>"
    else:
        results_html = "".join(_render_checkin_card(s, form) for s in results)
    body = f"""
        <h1>Check In</h1>
        <form class="card" method="post" action="/checkin">
            <input type="hidden" name="event" value="{e(form.get("event"))}" />
            <label for="last-name">Last name</label>
            <input type="text" id="last-name" name="last_name" value="{e(form.get("last_name"))}" />
            <label for="email">Email</label>
            <input type="email" id="email" name="email" value="{e(form.get("email"))}" />
            <p><button type="submit" id="checkin-search-btn">Find my signups</button></p>
        </form>
        {status_message(status, status_kind)}
        <div id="matching-signups">{results_html}</div>"""
    return render_page("Check In", body)
