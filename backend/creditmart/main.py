"""CreditMart API — FastAPI application entry point.

Invariants:
    - Routers registered explicitly, all under /api/v1
    - Global error handlers render every failure as {"error": {...}}
    - CORS configured from settings
    - Database pool opened on startup and disposed on shutdown (lifespan)

Design Decisions:
    - create_app() builds the app from Settings; the module-level `app` is what
      uvicorn serves (uvicorn creditmart.main:app)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from creditmart.api.error_handlers import register_error_handlers
from creditmart.api.routes import health, orders, products, users
from creditmart.api.routes import settings as settings_routes
from creditmart.config import Settings, get_settings
from creditmart.infrastructure import database
from creditmart.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

ROUTERS = (
    health.router,
    products.router,
    orders.router,
    users.router,
    settings_routes.router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info(f"CreditMart API started (admin inbox: user {settings.admin_user_id})")
    try:
        yield
    finally:
        if database.db_manager:
            await database.db_manager.dispose()
        logger.info("CreditMart API shut down")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="CreditMart API", version="1.0.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*", settings.identity_header],
    )
    for router in ROUTERS:
        app.include_router(router)
    register_error_handlers(app)
    return app


app = create_app()
