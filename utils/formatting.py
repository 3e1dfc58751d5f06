import datetime


def parse_datetime(datetime_str: str | None) -> datetime.datetime | None:
    """Парсит значение поля datetime-local ('ГГГГ-ММ-ДДTЧЧ:ММ')."""
    datetime_str = (datetime_str or "").strip()
    if not datetime_str:
        return None
    try:
        return datetime.datetime.fromisoformat(datetime_str).replace(tzinfo=None, second=0, microsecond=0)
    except ValueError:
        return None


def to_input_value(dt: datetime.datetime | None) -> str:
    """Значение для поля datetime-local."""
    return dt.strftime("%Y-%m-%dT%H:%M") if dt else ""


def format_time(dt: datetime.datetime | None) -> str:
    """'9:05 AM'"""
    if not dt:
        return ""
    return f"{dt.hour % 12 or 12}:{dt:%M %p}"


def format_datetime(dt: datetime.datetime | None) -> str:
    """'Sat, Mar 7, 9:05 AM'"""
    if not dt:
        return ""
    return f"{dt:%a, %b} {dt.day}, {format_time(dt)}"


def format_short_datetime(dt: datetime.datetime | None) -> str:
    """'Mar 7, 9:05 AM' для выпадающего списка отчетов."""
    if not dt:
        return ""
    return f"{dt:%b} {dt.day}, {format_time(dt)}"


def format_timestamp(dt: datetime.datetime | None) -> str:
    """ISO-строка для CSV."""
    return dt.isoformat(timespec="seconds") if dt else ""


def format_time_range(start: datetime.datetime | None, end: datetime.datetime | None) -> str:
    if not start:
        return ""
    if end:
        return f"{format_time(start)} – {format_time(end)}"
    return format_time(start)
