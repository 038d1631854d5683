"""Application factory for the Movie Leaks addon."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers import addon, health, refresh
from .settings import AddonSettings
from .state import AppState

logger = logging.getLogger(__name__)


def create_app(
    settings: AddonSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application."""

    resolved_settings = settings or AddonSettings()
    app_state = AppState(settings=resolved_settings, transport=transport)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Starting catalog refresh every %.0f seconds", resolved_settings.refresh_interval_seconds
        )
        refresher = app_state.refresher
        refresher.start(immediate=resolved_settings.refresh_on_startup)
        try:
            yield
        finally:
            await refresher.stop()
            await app_state.fetch_client.aclose()

    app = FastAPI(title=resolved_settings.addon_name, version=resolved_settings.addon_version, lifespan=lifespan)
    app.state.app_state = app_state
    app.state.settings = app_state.settings

    # Stremio clients fetch addon resources cross-origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    for router in (
        addon.router,
        health.router,
        refresh.router,
    ):
        app.include_router(router)

    return app
