import datetime
import logging
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from ..models import Event
from .errors import NotFoundError

logger = logging.getLogger(__name__)

async def list_events(session: AsyncSession, include_deleted: bool = False) -> Sequence[Event]:
    """Возвращает события, отсортированные по времени начала."""
    query = select(Event).order_by(Event.start_time, Event.id)
    if not include_deleted:
        query = query.where(Event.deleted_at.is_(None))
    result = await session.execute(query)
    return result.scalars().all()

async def list_public_events(session: AsyncSession) -> Sequence[Event]:
    """Возвращает публичные неудаленные события для главной страницы."""
    result = await session.execute(
        select(Event)
        .where(Event.deleted_at.is_(None), Event.is_public.is_(True))
        .order_by(Event.start_time, Event.id)
    )
    return result.scalars().all()

async def get_event_by_id(
    session: AsyncSession, event_id: int, include_deleted: bool = False
) -> Event | None:
    """Получает событие по его ID. Удаленные события по умолчанию не возвращаются."""
    query = select(Event).filter_by(id=event_id)
    if not include_deleted:
        query = query.where(Event.deleted_at.is_(None))
    result = await session.execute(query)
    return result.scalar_one_or_none()

async def create_event(
    session: AsyncSession, title: str, start_time: datetime.datetime,
    location: str | None = None, description: str | None = None, is_public: bool = True
) -> Event:
    """Создает новое событие."""
    new_event = Event(
        title=title,
        start_time=start_time,
        location=location,
        description=description,
        is_public=is_public,
    )
    session.add(new_event)
    await session.commit()
    await session.refresh(new_event)
    logger.info("Создано событие #%s '%s'", new_event.id, new_event.title)
    return new_event

async def update_event(session: AsyncSession, event_id: int, **fields) -> Event:
    """Обновляет поля события."""
    event = await get_event_by_id(session, event_id)
    if event is None:
        raise NotFoundError(f"Event {event_id} not found")
    for name, value in fields.items():
        setattr(event, name, value)
    await session.commit()
    logger.info("Событие #%s обновлено", event_id)
    return event

async def soft_delete_event(session: AsyncSession, event_id: int) -> bool:
    """Помечает событие удаленным. Повторное удаление ничего не меняет."""
    event = await get_event_by_id(session, event_id, include_deleted=True)
    if event is None:
        return False
    if event.deleted_at is None:
        event.deleted_at = datetime.datetime.now()
        await session.commit()
        logger.info("Событие #%s удалено", event_id)
    return True

async def restore_event(session: AsyncSession, event_id: int) -> bool:
    """Снимает пометку удаления с события."""
    event = await get_event_by_id(session, event_id, include_deleted=True)
    if event is None:
        return False
    if event.deleted_at is not None:
        event.deleted_at = None
        await session.commit()
        logger.info("Событие #%s восстановлено", event_id)
    return True
