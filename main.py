import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI

from config import settings
from database import Database
from errors import register_exception_handlers
from limiter import limiter
from logs import setup_logging
from middleware import add_middlewares
from endpoints.endpoints_auth import router_auth
from endpoints.endpoints_health import router_health
from endpoints.endpoints_notes import router_notes
from endpoints.endpoints_user import router_user

logger = logging.getLogger(__name__)


# lifespan (before yield - on start, after yield - on exit)
@asynccontextmanager
async def lifespan(
    app: FastAPI,
):
    db: Database = app.state.db
    await db.create_all_tables()
    logger.info("Database ready environment=%s", settings.environment)
    yield
    await db.dispose()


def create_app(database: Database | None = None) -> FastAPI:
    """Build the API around the given store, a fresh one from settings by default"""
    app = FastAPI(
        title=settings.app_name,
        description="Create and store your notes with comfort",
        summary="Notes manager",
        lifespan=lifespan,
        version="1.0",
    )

    app.state.db = database or Database()
    app.state.limiter = limiter
    app.state.started_at = time.monotonic()

    add_middlewares(app)
    register_exception_handlers(app)

    for router in (router_auth, router_notes, router_user, router_health):
        app.include_router(router, prefix=settings.api_prefix)

    return app


setup_logging(settings.log_level)
app = create_app()
