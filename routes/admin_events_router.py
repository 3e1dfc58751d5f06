import logging

from fastapi import APIRouter, Depends, FastAPI, Form, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from sqlalchemy.exc import SQLAlchemyError

from database.session import async_session_maker
from database.crud import crud_event, crud_signup, crud_slot
from database.crud.errors import NotFoundError
from utils.formatting import parse_datetime
from utils.reports import slot_list_csv
from utils.stats import SORT_KEYS, filter_events, sort_events, stats_by_event
from views.admin import render_create_event, render_dashboard, render_edit_event, render_event_signups
from .auth_router import DASHBOARD_URL, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def clean(value: str) -> str | None:
    value = value.strip()
    return value or None


def parse_quantity(value: str) -> int:
    """Количество мест; пустое или неверное значение превращается в 1."""
    try:
        quantity = int(value)
    except (TypeError, ValueError):
        return 1
    return quantity if quantity > 0 else 1


async def load_event_or_404(event_id: int):
    async with async_session_maker() as session:
        event = await crud_event.get_event_by_id(session, event_id)
        if event is None:
            raise HTTPException(status_code=404, detail="Event not found")
        slots = await crud_slot.get_slots_for_event(session, event_id)
    return event, slots


# --- Панель событий ---

@router.get("", include_in_schema=False)
async def admin_root():
    return RedirectResponse(DASHBOARD_URL, status_code=303)


@router.get("/events", response_class=HTMLResponse)
async def dashboard(
    q: str = "", sort: str = "date-asc", upcoming: bool = False, show_deleted: bool = False
):
    if sort not in SORT_KEYS:
        sort = "date-asc"
    try:
        async with async_session_maker() as session:
            events = await crud_event.list_events(session, include_deleted=show_deleted)
            slots = await crud_slot.get_all_slots_with_signups(session, include_deleted=show_deleted)
    except SQLAlchemyError:
        logger.exception("Ошибка загрузки событий для панели")
        return HTMLResponse(
            render_dashboard([], {}, q, sort, upcoming, show_deleted, message="Error loading events."),
            status_code=500,
        )
    events = sort_events(filter_events(events, q, upcoming_only=upcoming), sort)
    return HTMLResponse(render_dashboard(events, stats_by_event(slots), q, sort, upcoming, show_deleted))


@router.post("/events/{event_id}/delete")
async def delete_event(event_id: int):
    async with async_session_maker() as session:
        found = await crud_event.soft_delete_event(session, event_id)
    if not found:
        raise HTTPException(status_code=404, detail="Event not found")
    return RedirectResponse(DASHBOARD_URL, status_code=303)


@router.post("/events/{event_id}/restore")
async def restore_event(event_id: int):
    async with async_session_maker() as session:
        found = await crud_event.restore_event(session, event_id)
    if not found:
        raise HTTPException(status_code=404, detail="Event not found")
    return RedirectResponse(f"{DASHBOARD_URL}?show_deleted=1", status_code=303)


# --- Создание и редактирование ---

@router.get("/events/new", response_class=HTMLResponse)
async def new_event_page():
    return HTMLResponse(render_create_event())


@router.post("/events/new", response_class=HTMLResponse)
async def create_event(
    title: str = Form(""),
    start_time: str = Form(""),
    location: str = Form(""),
    description: str = Form(""),
    is_public: bool = Form(False),
):
    values = {
        "title": title.strip(), "start_time": start_time.strip(), "location": location.strip(),
        "description": description.strip(), "is_public": is_public,
    }
    start = parse_datetime(start_time)
    if not values["title"] or start is None:
        return HTMLResponse(
            render_create_event(values, "Title and start time are required.", "error"),
            status_code=400,
        )
    try:
        async with async_session_maker() as session:
            await crud_event.create_event(
                session, title=values["title"], start_time=start,
                location=clean(location), description=clean(description), is_public=is_public,
            )
    except SQLAlchemyError:
        logger.exception("Ошибка создания события")
        return HTMLResponse(
            render_create_event(values, "Error creating event. Check logs.", "error"),
            status_code=500,
        )
    return HTMLResponse(render_create_event(status="Event created successfully!", status_kind="success"))


@router.get("/events/{event_id}/edit", response_class=HTMLResponse)
async def edit_event_page(event_id: int):
    event, slots = await load_event_or_404(event_id)
    return HTMLResponse(render_edit_event(event, slots))


@router.post("/events/{event_id}/edit", response_class=HTMLResponse)
async def update_event(
    event_id: int,
    title: str = Form(""),
    start_time: str = Form(""),
    location: str = Form(""),
    description: str = Form(""),
    is_public: bool = Form(False),
):
    values = {
        "title": title.strip(), "start_time": start_time.strip(), "location": location.strip(),
        "description": description.strip(), "is_public": is_public,
    }
    event, slots = await load_event_or_404(event_id)
    start = parse_datetime(start_time)
    if not values["title"] or start is None:
        return HTMLResponse(
            render_edit_event(event, slots, values, "Title and start time are required.", "error"),
            status_code=400,
        )
    try:
        async with async_session_maker() as session:
            event = await crud_event.update_event(
                session, event_id, title=values["title"], start_time=start,
                location=clean(location), description=clean(description), is_public=is_public,
            )
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except SQLAlchemyError:
        logger.exception("Ошибка обновления события #%s", event_id)
        return HTMLResponse(
            render_edit_event(event, slots, values, "Error updating event.", "error"),
            status_code=500,
        )
    return HTMLResponse(render_edit_event(event, slots, event_status="Event updated successfully!",
                                          event_status_kind="success"))


@router.post("/events/{event_id}/slots", response_class=HTMLResponse)
async def add_slot(
    event_id: int,
    name: str = Form(""),
    category: str = Form("volunteer"),
    quantity_total: str = Form(""),
    start_time: str = Form(""),
    end_time: str = Form(""),
    description: str = Form(""),
):
    slot_values = {
        "name": name.strip(), "category": category.strip(), "quantity_total": quantity_total.strip(),
        "start_time": start_time.strip(), "end_time": end_time.strip(), "description": description.strip(),
    }
    event, slots = await load_event_or_404(event_id)
    if not slot_values["name"]:
        return HTMLResponse(
            render_edit_event(event, slots, slot_status="Slot name is required.",
                              slot_status_kind="error", slot_values=slot_values),
            status_code=400,
        )
    try:
        async with async_session_maker() as session:
            await crud_slot.create_slot(
                session, event_id, name=slot_values["name"],
                category=clean(category), quantity_total=parse_quantity(quantity_total),
                start_time=parse_datetime(start_time), end_time=parse_datetime(end_time),
                description=clean(description),
            )
            slots = await crud_slot.get_slots_for_event(session, event_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except SQLAlchemyError:
        logger.exception("Ошибка добавления слота к событию #%s", event_id)
        return HTMLResponse(
            render_edit_event(event, slots, slot_status="Error adding slot.",
                              slot_status_kind="error", slot_values=slot_values),
            status_code=500,
        )
    # Категорию оставляем, остальные поля формы очищаем
    return HTMLResponse(render_edit_event(
        event, slots, slot_status="Slot added successfully!", slot_status_kind="success",
        slot_values={"category": slot_values["category"]},
    ))


@router.post("/slots/{slot_id}/delete")
async def delete_slot(slot_id: int):
    async with async_session_maker() as session:
        event_id = await crud_slot.delete_slot(session, slot_id)
    if event_id is None:
        raise HTTPException(status_code=404, detail="Slot not found")
    return RedirectResponse(f"/admin/events/{event_id}/edit", status_code=303)


# --- Записи ---

@router.get("/events/{event_id}/signups", response_class=HTMLResponse)
async def event_signups(event_id: int):
    event, slots = await load_event_or_404(event_id)
    return HTMLResponse(render_event_signups(event, slots))


@router.get("/events/{event_id}/signups.csv")
async def event_signups_csv(event_id: int):
    _, slots = await load_event_or_404(event_id)
    return Response(
        slot_list_csv(slots),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="signups.csv"'},
    )


@router.post("/signups/{signup_id}/delete")
async def delete_signup(signup_id: int):
    async with async_session_maker() as session:
        event_id = await crud_signup.delete_signup(session, signup_id)
    if event_id is None:
        raise HTTPException(status_code=404, detail="Signup not found")
    return RedirectResponse(f"/admin/events/{event_id}/signups", status_code=303)


@router.post("/signups/{signup_id}/undo-checkin")
async def undo_checkin(signup_id: int):
    try:
        async with async_session_maker() as session:
            signup = await crud_signup.undo_check_in(session, signup_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Signup not found")
    return RedirectResponse(f"/admin/events/{signup.slot.event_id}/signups", status_code=303)


def setup(app: FastAPI):
    app.include_router(router)
