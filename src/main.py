"""smart pantry - Household inventory tracker with natural-language commands."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.core import db_client
from src.core.config import constants, settings
from src.core.logging import configure_logfire, instrument_fastapi
from src.interface.assistant_webhook import router as assistant_router
from src.interface.pantry_router import router as pantry_router
from src.services.pantry_service import COLLECTION


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Open the pantry database for the lifetime of the app."""
    # Logfire first so schema setup is traced
    configure_logfire()

    await db_client.init_db()
    logger.info("Database initialized", extra={"db_path": str(db_client.get_db_path())})

    yield

    await db_client.close_connection()
    logger.info("Database connection closed")


app = FastAPI(
    title="smart-pantry",
    description="Household inventory tracker with natural-language commands",
    version="0.1.0",
    lifespan=lifespan,
)

instrument_fastapi(app)

app.include_router(pantry_router)
app.include_router(assistant_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Liveness check."""
    return JSONResponse(content={"status": "healthy"}, status_code=constants.HTTP_OK)


@app.get("/health/database")
async def database_health_check() -> JSONResponse:
    """Readiness check: the pantry table can be queried."""
    try:
        await db_client.list_records(collection=COLLECTION, per_page=1)
    except db_client.DatabaseError as e:
        logger.error("database_health_check_failed", extra={"error": str(e)})
        return JSONResponse(
            content={"status": "unavailable", "db_path": settings.sqlite_db_path},
            status_code=constants.HTTP_SERVICE_UNAVAILABLE,
        )

    return JSONResponse(
        content={"status": "healthy", "db_path": settings.sqlite_db_path},
        status_code=constants.HTTP_OK,
    )
