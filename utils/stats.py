"""Подсчет заполненности слотов и группировка для страниц."""
import datetime
import math
from dataclasses import dataclass
from typing import Iterable, Sequence

CATEGORY_LABELS = {
    "volunteer": "Volunteers",
    "food": "Food Donations",
    "concessions": "Concessions",
    "admissions": "Admissions / Front Desk",
    "matcrew": "Mat Crew",
    "other": "Other",
    "uncategorized": "Other",
}

CATEGORY_ORDER = [
    "volunteer",
    "concessions",
    "food",
    "admissions",
    "matcrew",
    "other",
    "uncategorized",
]

SORT_KEYS = ("date-asc", "date-desc", "title-asc", "title-desc")


@dataclass
class SlotFill:
    slot: object
    filled: int
    remaining: int
    category: str

    @property
    def is_full(self) -> bool:
        return self.remaining <= 0


@dataclass
class EventTotals:
    total_slots: int = 0
    total_capacity: int = 0
    total_signups: int = 0

    @property
    def fill_rate(self) -> int:
        return fill_rate(self.total_signups, self.total_capacity)


def fill_rate(signups: int, capacity: int) -> int:
    """Процент заполнения, округленный до целого. 0 при нулевой вместимости."""
    if capacity <= 0:
        return 0
    # Половинки округляем вверх
    return math.floor(signups * 100 / capacity + 0.5)


def slot_fill(slot) -> SlotFill:
    filled = len(slot.signups or [])
    remaining = max(0, (slot.quantity_total or 0) - filled)
    return SlotFill(
        slot=slot,
        filled=filled,
        remaining=remaining,
        category=slot.category or "uncategorized",
    )


def event_totals(slots: Iterable) -> EventTotals:
    totals = EventTotals()
    for slot in slots:
        totals.total_slots += 1
        totals.total_capacity += slot.quantity_total or 0
        totals.total_signups += len(slot.signups or [])
    return totals


def stats_by_event(slots: Iterable) -> dict[int, EventTotals]:
    """Сводка по каждому событию из общего списка слотов."""
    grouped: dict[int, list] = {}
    for slot in slots:
        grouped.setdefault(slot.event_id, []).append(slot)
    return {event_id: event_totals(items) for event_id, items in grouped.items()}


def category_label(key: str) -> str:
    return CATEGORY_LABELS.get(key) or key or "Other"


def _slot_sort_key(fill: SlotFill):
    start = fill.slot.start_time
    return (start is None, start or datetime.datetime.min, fill.slot.name or "")


def group_slots_by_category(slots: Iterable) -> list[tuple[str, list[SlotFill]]]:
    """Группирует слоты по категориям в фиксированном порядке.

    Известные категории идут в порядке CATEGORY_ORDER, остальные следом в
    порядке появления. Внутри категории слоты сортируются по времени начала
    (слоты без времени в конце), затем по названию.
    """
    grouped: dict[str, list[SlotFill]] = {}
    for slot in slots:
        fill = slot_fill(slot)
        grouped.setdefault(fill.category, []).append(fill)

    ordered = [c for c in CATEGORY_ORDER if grouped.get(c)]
    ordered += [c for c in grouped if c not in CATEGORY_ORDER]
    return [(key, sorted(grouped[key], key=_slot_sort_key)) for key in ordered]


def filter_events(
    events: Iterable, query: str = "", upcoming_only: bool = False,
    now: datetime.datetime | None = None
) -> list:
    now = now or datetime.datetime.now()
    result = list(events)
    if upcoming_only:
        result = [ev for ev in result if ev.start_time >= now]
    q = (query or "").strip().lower()
    if q:
        result = [
            ev for ev in result
            if q in (ev.title or "").lower() or q in (ev.location or "").lower()
        ]
    return result


def sort_events(events: Sequence, sort_key: str = "date-asc") -> list:
    """Сортировка для панели администратора. Неизвестный ключ сохраняет порядок."""
    if sort_key == "date-asc":
        return sorted(events, key=lambda ev: ev.start_time)
    if sort_key == "date-desc":
        return sorted(events, key=lambda ev: ev.start_time, reverse=True)
    if sort_key == "title-asc":
        return sorted(events, key=lambda ev: (ev.title or "").lower())
    if sort_key == "title-desc":
        return sorted(events, key=lambda ev: (ev.title or "").lower(), reverse=True)
    return list(events)
