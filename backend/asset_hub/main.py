"""
Asset Hub API.

FastAPI application exposing the publication gate, quota summary, asset
lifecycle, Stripe webhook and health check.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from asset_hub.api.routes import assets, health, webhooks_stripe
from asset_hub.config import Settings, get_settings
from asset_hub.database.session import create_all_tables
from asset_hub.platform.errors import ErrorHandlerMiddleware, register_exception_handlers

logger = logging.getLogger(__name__)


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.auto_create_tables:
            create_all_tables()
            logger.info("Database tables ensured")
        yield

    app = FastAPI(
        title="Asset Hub API",
        description="Asset publication and subscription entitlement service",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Must wrap everything else so unhandled errors never leak stack traces
    app.add_middleware(ErrorHandlerMiddleware)
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(assets.router)
    app.include_router(webhooks_stripe.router)

    return app


app = create_app()
