"""Catalog API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Every router uses EnvelopeRoute: success bodies are normalized and enveloped
    - Global error handlers map every raised error to the error envelope
    - CORS configured from settings (not hardcoded)
    - Document store opened on startup and closed on shutdown via lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import courses, health, products, users
from app.config import get_settings
from app.infrastructure.database import close_store, init_store
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    store = init_store(
        settings.mongodb_url,
        settings.mongodb_database,
        timeout_ms=settings.mongodb_timeout_ms,
    )
    await store.ensure_indexes()
    logger.info("Catalog API started")
    yield
    await close_store()
    logger.info("Catalog API shutting down")


app = FastAPI(title="Catalog API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(courses.router)
app.include_router(products.router)

register_error_handlers(app)
