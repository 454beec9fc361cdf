# lifetrack/app/main.py
import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from datetime import timedelta

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from lifetrack.app.api.v1.router import api_router
from lifetrack.app.core.config import settings
from lifetrack.app.db.init_db import create_tables
from lifetrack.app.security.sessions import (
    InMemorySessionStore,
    SessionManager,
    run_session_sweeper,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def build_session_manager() -> SessionManager:
    store = InMemorySessionStore(ttl=timedelta(hours=settings.SESSION_TTL_HOURS))
    return SessionManager(
        store,
        cookie_name=settings.SESSION_COOKIE_NAME,
        secure=settings.session_cookie_secure,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()

    sweeper = None
    if settings.SESSION_SWEEP_INTERVAL_SECONDS > 0:
        sweeper = asyncio.create_task(
            run_session_sweeper(app.state.session_manager, settings.SESSION_SWEEP_INTERVAL_SECONDS)
        )
    logger.info("%s started", settings.PROJECT_NAME)

    yield

    if sweeper is not None:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)
app.state.session_manager = build_session_manager()

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    return {"message": "Welcome to the Lifetrack API"}
