import importlib
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from database.session import dispose_engine, init_models

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("signup_site")

ROUTES_DIR = Path(__file__).resolve().parent / "routes"


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    logger.info("База данных готова, сайт запущен")
    yield
    await dispose_engine()


app = FastAPI(title="Event Signups", lifespan=lifespan, docs_url=None, redoc_url=None)
app.add_middleware(
    SessionMiddleware,
    secret_key=os.getenv("SESSION_SECRET", "signup-site-session"),
    same_site="lax",
)


@app.get("/healthz")
async def healthz() -> dict:
    return {"status": "ok"}


# Подключаем все модули с маршрутами из папки routes
for filename in sorted(os.listdir(ROUTES_DIR)):
    if filename.endswith(".py") and not filename.startswith("__"):
        module = importlib.import_module(f"routes.{filename[:-3]}")
        module.setup(app)
        logger.debug("Подключены маршруты: %s", filename)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )
