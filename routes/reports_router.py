import logging

from fastapi import APIRouter, Depends, FastAPI, HTTPException
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.exc import SQLAlchemyError

from database.session import async_session_maker
from database.crud import crud_event, crud_slot
from utils.reports import all_signups_csv, build_rows, checkins_csv, signups_csv, slugify
from views.admin import render_reports
from .auth_router import require_admin
from .public_router import parse_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/reports", tags=["reports"], dependencies=[Depends(require_admin)])


def csv_response(content: str, filename: str) -> Response:
    return Response(
        content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def load_event_rows(event_id: int):
    """Событие и плоские строки отчета по нему. Нет записей -> 404."""
    async with async_session_maker() as session:
        event = await crud_event.get_event_by_id(session, event_id)
        if event is None:
            raise HTTPException(status_code=404, detail="Event not found")
        slots = await crud_slot.get_slots_for_event(session, event_id)
    rows = build_rows(slots, event)
    if not rows:
        raise HTTPException(status_code=404, detail="No signups found for this event.")
    return event, rows


@router.get("", response_class=HTMLResponse)
async def reports_page(event_id: str | None = None):
    selected_id = parse_id(event_id)
    try:
        async with async_session_maker() as session:
            events = await crud_event.list_events(session)
            current_event = next((ev for ev in events if ev.id == selected_id), None)
            rows = None
            if current_event is not None:
                slots = await crud_slot.get_slots_for_event(session, current_event.id)
                rows = build_rows(slots, current_event)
    except SQLAlchemyError:
        logger.exception("Ошибка загрузки данных для отчета")
        return HTMLResponse(render_reports([], message="Error loading report data."), status_code=500)
    return HTMLResponse(render_reports(events, current_event, rows))


@router.get("/all-signups.csv")
async def download_all_signups():
    async with async_session_maker() as session:
        events = await crud_event.list_events(session)

    rows = []
    for event in events:
        try:
            async with async_session_maker() as session:
                slots = await crud_slot.get_slots_for_event(session, event.id)
        except SQLAlchemyError:
            # Пропускаем событие, остальные выгружаем
            logger.exception("Ошибка загрузки слотов события #%s для общей выгрузки", event.id)
            continue
        rows.extend(build_rows(slots, event))
    if not rows:
        raise HTTPException(status_code=404, detail="No signups found across any events.")
    return csv_response(all_signups_csv(rows), "all_signups.csv")


@router.get("/{event_id}/signups.csv")
async def download_event_signups(event_id: int):
    event, rows = await load_event_rows(event_id)
    return csv_response(signups_csv(rows), f"signups_{slugify(event.title)}.csv")


@router.get("/{event_id}/checkins.csv")
async def download_event_checkins(event_id: int):
    event, rows = await load_event_rows(event_id)
    return csv_response(checkins_csv(rows), f"checkins_{slugify(event.title)}.csv")


def setup(app: FastAPI):
    app.include_router(router)
