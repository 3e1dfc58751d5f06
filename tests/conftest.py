import os
import tempfile
from pathlib import Path

import pytest

# DATABASE_URL читается при импорте database.session, поэтому задаем его до импорта приложения
DB_PATH = Path(tempfile.mkdtemp(prefix="signups-test-")) / "test.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"

from fastapi.testclient import TestClient  # noqa: E402

from database.session import async_session_maker  # noqa: E402
from main import app  # noqa: E402

ADMIN_PASSWORD = "test-admin-password"


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    if DB_PATH.exists():
        DB_PATH.unlink()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(client):
    response = client.post("/admin/login", data={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def db(client):
    """Вызывает CRUD-функцию в цикле событий приложения.

    db(crud_event.create_event, title=..., ...) -> результат функции
    """
    def call(crud_func, *args, **kwargs):
        async def _run():
            async with async_session_maker() as session:
                return await crud_func(session, *args, **kwargs)
        return client.portal.call(_run)
    return call
