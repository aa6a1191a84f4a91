from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from app.api import router
from app.web import router as web_router
from datastore.readings import ReadingStoreError, build_default_store
from logging_config import configure_logging
from services.monitor import MonitorService, build_default_monitor
from services.sensor import SensorUnavailableError

logger = logging.getLogger(__name__)


async def _sensor_error_handler(_request: Request, exc: SensorUnavailableError) -> PlainTextResponse:
    logger.error("Sensor read failed", extra={"reason": str(exc)})
    return PlainTextResponse(
        f"Error reading temperature: {exc}",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def _store_error_handler(_request: Request, exc: ReadingStoreError) -> PlainTextResponse:
    logger.error("Reading store query failed", extra={"reason": str(exc)})
    return PlainTextResponse(
        f"Error querying database: {exc}",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def create_app(monitor: Optional[MonitorService] = None) -> FastAPI:
    """Build the application.

    When ``monitor`` is omitted the default one is built from settings during
    startup; a store that cannot be initialized aborts startup.
    """
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.monitor = monitor if monitor is not None else build_default_monitor()
        try:
            yield
        finally:
            app.state.monitor.shutdown()
            if monitor is None:
                build_default_monitor.cache_clear()
                build_default_store.cache_clear()

    app = FastAPI(
        title="piheat",
        description="Raspberry Pi CPU temperature monitor with historical charts.",
        version="0.1.0",
        lifespan=lifespan,
    )
    static_dir = Path(__file__).resolve().parent.parent / "static"
    app.mount("/static", StaticFiles(directory=static_dir), name="static")
    app.add_exception_handler(SensorUnavailableError, _sensor_error_handler)
    app.add_exception_handler(ReadingStoreError, _store_error_handler)
    app.include_router(router)
    app.include_router(web_router)
    return app

app = create_app()
