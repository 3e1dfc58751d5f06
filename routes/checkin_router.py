import logging

from fastapi import APIRouter, FastAPI, Form
from fastapi.responses import HTMLResponse
from sqlalchemy.exc import SQLAlchemyError

from database.session import async_session_maker
from database.crud import crud_signup
from database.crud.errors import NotFoundError
from views.public import render_checkin_page
from .public_router import parse_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/checkin", tags=["checkin"])


async def _search(form: dict) -> HTMLResponse:
    if not form["last_name"] or not form["email"]:
        return HTMLResponse(
            render_checkin_page(form, status="Please enter last name and email.", status_kind="error"),
            status_code=400,
        )
    try:
        async with async_session_maker() as session:
            results = await crud_signup.search_signups(
                session, form["email"], form["last_name"], event_id=parse_id(form["event"])
            )
    except SQLAlchemyError:
        logger.exception("Ошибка поиска записей для отметки")
        return HTMLResponse(
            render_checkin_page(form, status="Error searching signups.", status_kind="error"),
            status_code=500,
        )
    return HTMLResponse(render_checkin_page(form, results=results))


@router.get("", response_class=HTMLResponse)
async def checkin_page(event: str | None = None):
    """Страница отметки. Параметр event (например, из QR-кода) ограничивает поиск одним событием."""
    return HTMLResponse(render_checkin_page({"event": event or ""}))


@router.post("", response_class=HTMLResponse)
async def search(last_name: str = Form(""), email: str = Form(""), event: str = Form("")):
    form = {"last_name": last_name.strip(), "email": email.strip(), "event": event.strip()}
    return await _search(form)


@router.post("/{signup_id}", response_class=HTMLResponse)
async def check_in(
    signup_id: int, last_name: str = Form(""), email: str = Form(""), event: str = Form("")
):
    form = {"last_name": last_name.strip(), "email": email.strip(), "event": event.strip()}
    try:
        async with async_session_maker() as session:
            signup = await crud_signup.get_signup_by_id(session, signup_id, include_deleted=False)
            event_id = parse_id(form["event"])
            # Отметить можно только ту запись, которую нашли по этим же email, фамилии и событию
            if signup is None or not form["last_name"] \
                    or signup.email != crud_signup.normalize_email(email) \
                    or not crud_signup.last_name_matches(signup.full_name, last_name) \
                    or (event_id is not None and signup.slot.event_id != event_id):
                raise NotFoundError(f"Signup {signup_id} not found")
            await crud_signup.check_in(session, signup_id)
    except NotFoundError:
        return HTMLResponse(
            render_checkin_page(form, status="Error checking in.", status_kind="error"),
            status_code=404,
        )
    except SQLAlchemyError:
        logger.exception("Ошибка отметки записи #%s", signup_id)
        return HTMLResponse(
            render_checkin_page(form, status="Error checking in.", status_kind="error"),
            status_code=500,
        )
    return await _search(form)


def setup(app: FastAPI):
    app.include_router(router)
