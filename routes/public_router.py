import logging

from fastapi import APIRouter, FastAPI, Form
from fastapi.responses import HTMLResponse
from sqlalchemy.exc import SQLAlchemyError

from database.session import async_session_maker
from database.crud import crud_event, crud_signup, crud_slot
from database.crud.errors import NotFoundError, SlotFullError
from views.public import render_event_list, render_event_not_found, render_event_page

logger = logging.getLogger(__name__)

router = APIRouter(tags=["public"])


def parse_id(value: str | None) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@router.get("/", response_class=HTMLResponse)
async def list_events():
    try:
        async with async_session_maker() as session:
            events = await crud_event.list_public_events(session)
    except SQLAlchemyError:
        logger.exception("Ошибка загрузки списка событий")
        return HTMLResponse(render_event_list([], message="Error loading events."), status_code=500)
    return HTMLResponse(render_event_list(events))


@router.get("/events/{event_id}", response_class=HTMLResponse)
async def event_page(event_id: int, slot: str | None = None):
    async with async_session_maker() as session:
        event = await crud_event.get_event_by_id(session, event_id)
        if event is None:
            return HTMLResponse(render_event_not_found(), status_code=404)
        try:
            slots = await crud_slot.get_slots_for_event(session, event_id)
        except SQLAlchemyError:
            logger.exception("Ошибка загрузки слотов события #%s", event_id)
            return HTMLResponse(render_event_page(
                event, [], slots_error="We couldn’t load slots for this event."
            ))
    return HTMLResponse(render_event_page(event, slots, selected_slot_id=parse_id(slot)))


@router.post("/events/{event_id}/signup", response_class=HTMLResponse)
async def signup(
    event_id: int,
    slot_id: str = Form(""),
    full_name: str = Form(""),
    email: str = Form(""),
    note: str = Form(""),
):
    form = {"full_name": full_name.strip(), "email": email.strip(), "note": note.strip()}
    selected_slot_id = parse_id(slot_id)

    async with async_session_maker() as session:
        event = await crud_event.get_event_by_id(session, event_id)
    if event is None:
        return HTMLResponse(render_event_not_found(), status_code=404)

    status, kind, status_code = "", "error", 400
    if selected_slot_id is None:
        status = "Please select a slot above before submitting."
    elif not form["full_name"] or not form["email"]:
        status = "Name and email are required to sign up."
    else:
        try:
            async with async_session_maker() as session:
                await crud_signup.create_signup(
                    session, selected_slot_id, form["full_name"], form["email"],
                    note=form["note"] or None, event_id=event_id,
                )
        except SlotFullError:
            status, status_code = "This slot is full.", 409
        except NotFoundError:
            status = "Please select a slot above before submitting."
        except SQLAlchemyError:
            logger.exception("Ошибка сохранения записи на слот #%s", selected_slot_id)
            status, status_code = "There was an issue saving your signup. Please try again.", 500
        else:
            status, kind, status_code = "You’re signed up. Thank you!", "success", 200
            # Имя и email оставляем, чтобы можно было записаться еще на слот
            form["note"] = ""

    async with async_session_maker() as session:
        slots = await crud_slot.get_slots_for_event(session, event_id)

    return HTMLResponse(
        render_event_page(
            event, slots, selected_slot_id=selected_slot_id, form=form,
            status=status, status_kind=kind,
        ),
        status_code=status_code,
    )


def setup(app: FastAPI):
    app.include_router(router)
