import logging
import os
import secrets

from fastapi import APIRouter, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from views.admin import render_login

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin-auth"])

SESSION_KEY = "admin_authenticated"
LOGIN_URL = "/admin/login"
DASHBOARD_URL = "/admin/events"


class AdminLoginRequired(Exception):
    """Админская страница открыта без входа."""


def is_admin(request: Request) -> bool:
    return request.session.get(SESSION_KEY) is True


def require_admin(request: Request) -> None:
    """Зависимость для админских страниц: без входа отправляет на страницу логина."""
    if not is_admin(request):
        raise AdminLoginRequired()


def check_password(value: str) -> bool:
    expected = os.getenv("ADMIN_PASSWORD")
    if not expected:
        logger.warning("ADMIN_PASSWORD не задан, вход в админку невозможен")
        return False
    return secrets.compare_digest(value.encode(), expected.encode())


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    if is_admin(request):
        return RedirectResponse(DASHBOARD_URL, status_code=303)
    return HTMLResponse(render_login())


@router.post("/login", response_class=HTMLResponse)
async def login(request: Request, password: str = Form("")):
    if check_password(password.strip()):
        request.session[SESSION_KEY] = True
        logger.info("Вход администратора")
        return RedirectResponse(DASHBOARD_URL, status_code=303)
    return HTMLResponse(render_login("Incorrect password."), status_code=401)


@router.post("/logout")
async def logout(request: Request):
    request.session.pop(SESSION_KEY, None)
    return RedirectResponse(LOGIN_URL, status_code=303)


async def redirect_to_login(request: Request, exc: AdminLoginRequired):
    return RedirectResponse(LOGIN_URL, status_code=303)


def setup(app: FastAPI):
    app.add_exception_handler(AdminLoginRequired, redirect_to_login)
    app.include_router(router)
