"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from lotterypay import __version__
from lotterypay.api.middleware import setup_middleware
from lotterypay.core.config import Settings
from lotterypay.core.database import Database
from lotterypay.core.logging import setup_logging
from lotterypay.services.factory import build_email_service, build_sampler, build_ticket_service
from lotterypay.workers.webhook_worker import WebhookWorker

logger = logging.getLogger(__name__)

SERVICE_NAME = "De Boss Loterij Payment Module"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    if not settings.is_testing:
        setup_logging(level=settings.log_level, log_format=settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting %s (env=%s)", SERVICE_NAME, settings.app_env)
        if settings.is_testing:
            yield
            return

        # Any of these raising aborts startup with the reason in the log
        settings.require_complete()
        build_sampler(settings)

        database = Database(settings).open()
        email_service = build_email_service(settings)
        ticket_service = build_ticket_service(settings, database, email_service=email_service)
        webhook_worker = WebhookWorker(ticket_service)
        webhook_worker.start()

        app.state.database = database
        app.state.email_service = email_service
        app.state.ticket_service = ticket_service
        app.state.webhook_worker = webhook_worker
        logger.info("Mollie integration: configured; email: %s", settings.smtp_host)
        try:
            yield
        finally:
            logger.info("Shutting down %s", SERVICE_NAME)
            webhook_worker.stop()
            database.close()

    application = FastAPI(
        title="lotterypay",
        description="Lottery ticket sales with hosted-checkout payments",
        version=__version__,
        lifespan=lifespan,
    )
    application.state.settings = settings

    setup_middleware(application)
    _register_routes(application)

    @application.get("/", tags=["health"])
    def service_info() -> dict[str, Any]:
        return {
            "name": SERVICE_NAME,
            "version": __version__,
            "endpoints": {
                "health": "GET /health",
                "createTicket": "POST /api/lottery/ticket",
                "getTicket": "GET /api/lottery/ticket/{ticket_id}",
                "checkStatus": "GET /api/lottery/ticket/{ticket_id}/status",
                "getTicketsByEmail": "GET /api/lottery/tickets/email/{email}",
                "webhook": "POST /api/lottery/webhook",
            },
        }

    return application


def _register_routes(app: FastAPI) -> None:
    from lotterypay.api.routes.health import router as health_router
    from lotterypay.api.routes.tickets import router as tickets_router
    from lotterypay.api.routes.webhooks import router as webhooks_router

    app.include_router(health_router, tags=["health"])
    app.include_router(tickets_router)
    app.include_router(webhooks_router)


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "lotterypay.main:app",
        host=settings.app_host,
        port=settings.app_port,
        log_config=None,
    )


# Module-level app instance for uvicorn (uvicorn lotterypay.main:app)
app = create_app()
