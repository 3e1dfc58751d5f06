import datetime
import logging
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from ..models import Event, Slot
from .errors import NotFoundError

logger = logging.getLogger(__name__)

def _slots_query():
    return select(Slot).options(selectinload(Slot.signups)).order_by(
        Slot.start_time.is_(None), Slot.start_time, Slot.name, Slot.id
    )

async def get_slots_for_event(session: AsyncSession, event_id: int) -> Sequence[Slot]:
    """Получает слоты события вместе с записями на них."""
    result = await session.execute(_slots_query().where(Slot.event_id == event_id))
    return result.scalars().all()

async def get_all_slots_with_signups(session: AsyncSession, include_deleted: bool = False) -> Sequence[Slot]:
    """Слоты всех событий для статистики на панели администратора."""
    query = _slots_query()
    if not include_deleted:
        query = query.join(Event, Event.id == Slot.event_id).where(Event.deleted_at.is_(None))
    result = await session.execute(query)
    return result.scalars().all()

async def get_slot_by_id(session: AsyncSession, slot_id: int) -> Slot | None:
    result = await session.execute(
        select(Slot).options(selectinload(Slot.signups)).filter_by(id=slot_id)
    )
    return result.scalar_one_or_none()

async def create_slot(
    session: AsyncSession, event_id: int, name: str, category: str | None = None,
    quantity_total: int = 1, start_time: datetime.datetime | None = None,
    end_time: datetime.datetime | None = None, description: str | None = None
) -> Slot:
    """Добавляет слот к событию."""
    event = await session.get(Event, event_id)
    if event is None or event.deleted_at is not None:
        raise NotFoundError(f"Event {event_id} not found")

    slot = Slot(
        event_id=event_id,
        name=name,
        category=category,
        quantity_total=max(1, quantity_total),
        start_time=start_time,
        end_time=end_time,
        description=description,
    )
    session.add(slot)
    await session.commit()
    await session.refresh(slot)
    logger.info("К событию #%s добавлен слот #%s '%s'", event_id, slot.id, name)
    return slot

async def update_slot(session: AsyncSession, slot_id: int, **fields) -> Slot:
    """Обновляет поля слота."""
    slot = await get_slot_by_id(session, slot_id)
    if slot is None:
        raise NotFoundError(f"Slot {slot_id} not found")
    if "quantity_total" in fields:
        fields["quantity_total"] = max(1, fields["quantity_total"])
    for name, value in fields.items():
        setattr(slot, name, value)
    await session.commit()
    return slot

async def delete_slot(session: AsyncSession, slot_id: int) -> int | None:
    """Удаляет слот вместе с записями. Возвращает ID события слота."""
    slot = await get_slot_by_id(session, slot_id)
    if slot is None:
        return None
    event_id = slot.event_id
    await session.delete(slot)
    await session.commit()
    logger.info("Слот #%s события #%s удален", slot_id, event_id)
    return event_id
