"""FastAPI application entrypoint. No business logic; only wiring, lifecycle and error handlers."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from app.api.routes import router as api_router
from app.api.routes.health import router as health_router
from app.core.config import settings
from app.core.database import create_store
from app.core.exceptions import register_exception_handlers
from app.core.logging import configure_logging
from app.services.seed import auto_seed_on_startup

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the store and seed before serving; close the store on shutdown."""
    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting server (database=%s)", settings.DB_TYPE)
    store = create_store(settings)
    # A connection failure propagates and aborts startup.
    await run_in_threadpool(store.connect)
    if settings.AUTO_SEED_ON_STARTUP:
        await run_in_threadpool(auto_seed_on_startup, store)
    app.state.store = store
    logger.info(
        "Serving POST %(p)s/auth/login, GET /health, GET %(p)s/me, GET %(p)s/users, "
        "GET %(p)s/admin/test-jwt, GET %(p)s/driver/test-jwt",
        {"p": settings.API_PREFIX},
    )
    try:
        yield
    finally:
        logger.info("Shutting down gracefully")
        app.state.store = None
        await run_in_threadpool(store.close)


app = FastAPI(
    title="Fleet Auth API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(health_router, tags=["health"])
app.include_router(api_router, prefix=settings.API_PREFIX)
