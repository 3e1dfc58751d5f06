import datetime
import logging
from typing import Sequence
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from ..models import Event, Signup, Slot
from .errors import NotFoundError, SlotFullError

logger = logging.getLogger(__name__)

def normalize_email(email: str) -> str:
    return email.strip().lower()

def last_name_matches(full_name: str, last_name: str) -> bool:
    """Фамилия (последнее слово имени) начинается с введенного текста."""
    parts = (full_name or "").split()
    if not parts:
        return False
    return parts[-1].lower().startswith(last_name.strip().lower())

async def create_signup(
    session: AsyncSession, slot_id: int, full_name: str, email: str,
    note: str | None = None, event_id: int | None = None
) -> Signup:
    """Записывает человека на слот, если на нем еще есть места."""
    result = await session.execute(
        select(Slot)
        .join(Event, Event.id == Slot.event_id)
        .where(Slot.id == slot_id, Event.deleted_at.is_(None))
        .with_for_update()
    )
    slot = result.scalar_one_or_none()
    if slot is None or (event_id is not None and slot.event_id != event_id):
        raise NotFoundError(f"Slot {slot_id} not found")

    filled = await session.scalar(
        select(func.count(Signup.id)).where(Signup.slot_id == slot_id)
    )
    if filled >= slot.quantity_total:
        raise SlotFullError(slot.name)

    signup = Signup(
        slot_id=slot_id,
        full_name=full_name.strip(),
        email=normalize_email(email),
        note=note or None,
    )
    session.add(signup)
    await session.commit()
    await session.refresh(signup)
    logger.info("Новая запись #%s на слот #%s", signup.id, slot_id)
    return signup

async def get_signup_by_id(
    session: AsyncSession, signup_id: int, include_deleted: bool = True
) -> Signup | None:
    """Получает запись по ID. С include_deleted=False записи удаленных событий не находятся."""
    query = select(Signup).options(selectinload(Signup.slot)).filter_by(id=signup_id)
    if not include_deleted:
        query = (
            query.join(Slot, Slot.id == Signup.slot_id)
            .join(Event, Event.id == Slot.event_id)
            .where(Event.deleted_at.is_(None))
        )
    result = await session.execute(query)
    return result.scalar_one_or_none()

async def search_signups(
    session: AsyncSession, email: str, last_name: str, event_id: int | None = None
) -> list[Signup]:
    """Ищет записи для отметки по email и началу фамилии."""
    query = (
        select(Signup)
        .join(Slot, Slot.id == Signup.slot_id)
        .join(Event, Event.id == Slot.event_id)
        .options(selectinload(Signup.slot))
        .where(Signup.email == normalize_email(email), Event.deleted_at.is_(None))
        .order_by(Slot.start_time.is_(None), Slot.start_time, Signup.id)
    )
    if event_id is not None:
        query = query.where(Slot.event_id == event_id)
    result = await session.execute(query)
    # Фильтрацию по фамилии делаем в Python: имя хранится одной строкой
    return [s for s in result.scalars().all() if last_name_matches(s.full_name, last_name)]

async def check_in(session: AsyncSession, signup_id: int) -> Signup:
    """Отмечает приход. Повторная отметка сохраняет первое время."""
    signup = await get_signup_by_id(session, signup_id)
    if signup is None:
        raise NotFoundError(f"Signup {signup_id} not found")
    if not signup.checked_in:
        signup.checked_in = True
        signup.checked_in_at = datetime.datetime.now()
        await session.commit()
        logger.info("Запись #%s отмечена", signup_id)
    return signup

async def undo_check_in(session: AsyncSession, signup_id: int) -> Signup:
    signup = await get_signup_by_id(session, signup_id)
    if signup is None:
        raise NotFoundError(f"Signup {signup_id} not found")
    signup.checked_in = False
    signup.checked_in_at = None
    await session.commit()
    logger.info("Отметка записи #%s снята", signup_id)
    return signup

async def delete_signup(session: AsyncSession, signup_id: int) -> int | None:
    """Удаляет запись. Возвращает ID события, к которому она относилась."""
    signup = await get_signup_by_id(session, signup_id)
    if signup is None:
        return None
    event_id = signup.slot.event_id
    await session.delete(signup)
    await session.commit()
    logger.info("Запись #%s удалена", signup_id)
    return event_id
