"""Плоские строки отчетов и выгрузка в CSV."""
import csv
import io
import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from .formatting import format_timestamp

SIGNUPS_HEADERS = ["Name", "Email", "Slot", "Category", "Slot Start Time", "Slot End Time", "Note"]
CHECKINS_HEADERS = ["Name", "Email", "Slot", "Category", "Checked In", "Checked In At", "Note"]
ALL_SIGNUPS_HEADERS = [
    "Event", "Event Start Time", "Name", "Email", "Slot", "Category",
    "Checked In", "Checked In At", "Note",
]
SLOT_LIST_HEADERS = ["Slot", "Name", "Email", "Note"]


@dataclass
class ReportRow:
    event_title: str
    event_start_time: str
    slot_name: str
    slot_category: str
    slot_start_time: str
    slot_end_time: str
    full_name: str
    email: str
    note: str
    checked_in: str
    checked_in_at: str
    signup_created_at: str


def build_rows(slots: Iterable, event=None) -> list[ReportRow]:
    """Разворачивает слоты с записями в строки отчета, по одной на запись."""
    event_title = getattr(event, "title", None) or ""
    event_start = format_timestamp(getattr(event, "start_time", None))
    rows = []
    for slot in slots:
        for s in slot.signups or []:
            rows.append(ReportRow(
                event_title=event_title,
                event_start_time=event_start,
                slot_name=slot.name or "",
                slot_category=slot.category or "",
                slot_start_time=format_timestamp(slot.start_time),
                slot_end_time=format_timestamp(slot.end_time),
                full_name=s.full_name or "",
                email=s.email or "",
                note=s.note or "",
                checked_in="Yes" if s.checked_in else "No",
                checked_in_at=format_timestamp(s.checked_in_at),
                signup_created_at=format_timestamp(s.created_at),
            ))
    return rows


def to_csv(headers: Sequence[str], rows: Iterable[Sequence]) -> str:
    """Все поля в кавычках, строки через CRLF."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow(["" if value is None else value for value in row])
    return buffer.getvalue()


def signups_csv(rows: Sequence[ReportRow]) -> str:
    return to_csv(SIGNUPS_HEADERS, (
        [r.full_name, r.email, r.slot_name, r.slot_category, r.slot_start_time, r.slot_end_time, r.note]
        for r in rows
    ))


def checkins_csv(rows: Sequence[ReportRow]) -> str:
    # Включает и отмеченных, и еще не пришедших
    return to_csv(CHECKINS_HEADERS, (
        [r.full_name, r.email, r.slot_name, r.slot_category, r.checked_in, r.checked_in_at, r.note]
        for r in rows
    ))


def all_signups_csv(rows: Sequence[ReportRow]) -> str:
    return to_csv(ALL_SIGNUPS_HEADERS, (
        [r.event_title, r.event_start_time, r.full_name, r.email, r.slot_name,
         r.slot_category, r.checked_in, r.checked_in_at, r.note]
        for r in rows
    ))


def slot_list_csv(slots: Iterable) -> str:
    """Выгрузка со страницы записей события: слот, имя, email, заметка."""
    return to_csv(SLOT_LIST_HEADERS, (
        [slot.name, s.full_name, s.email, s.note or ""]
        for slot in slots
        for s in slot.signups or []
    ))


def slugify(text: str | None) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")[:50]
    return slug or "event"
