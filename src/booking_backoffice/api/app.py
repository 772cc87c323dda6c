"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from booking_backoffice.api.admin import router as admin_router
from booking_backoffice.api.webhooks import router as webhooks_router
from booking_backoffice.app_logging import configure_logging
from booking_backoffice.containers import AppContainer
from booking_backoffice.scheduler import build_scheduler


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level.upper())
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        settings = state_container.settings
        scheduler = None
        if settings.scheduler_enabled:
            scheduler = build_scheduler(
                state_container.hold_sweeper, settings.hold_sweep_interval_seconds
            )
            scheduler.start()
            logger.info(
                "Hold sweep scheduled every %ss", settings.hold_sweep_interval_seconds
            )
        app.state.scheduler = scheduler
        yield
        if scheduler is not None:
            scheduler.shutdown(wait=False)
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)
    app.include_router(webhooks_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
