"""Goal Ledger API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map LedgerError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Document store initialized on startup via lifespan context manager; the
      empty document is created once, never on a failed load

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Three error handler layers: LedgerError (domain), RequestValidationError
      (Pydantic), Exception (catch-all) — never leaks internal details
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import activities, auth, database, goals, health
from app.config import Settings, get_settings
from app.core.repository_protocols import DocumentRepository
from app.infrastructure.database import init_db
from app.infrastructure.document_repositories import (
    JsonFileDocumentRepository, SqlDocumentRepository,
)
from app.infrastructure.document_store import init_document_store
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


def build_repository(settings: Settings) -> DocumentRepository:
    """Pick the document backend named in settings."""
    if settings.document_backend == "file":
        return JsonFileDocumentRepository(settings.document_file_path)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    return SqlDocumentRepository(manager)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    store = init_document_store(
        build_repository(settings), settings.store_io_timeout_seconds,
    )
    await store.initialize()
    logger.info(f"Goal Ledger API started ({settings.document_backend} backend)")
    yield
    from app.infrastructure.database import db_manager

    if db_manager:
        await db_manager.dispose()
    logger.info("Goal Ledger API shutting down")


app = FastAPI(
    title="Goal Ledger API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(goals.router)
app.include_router(activities.router)
app.include_router(database.router)

register_error_handlers(app)


@app.get("/", tags=["root"])
async def root():
    """Service banner with the endpoint map."""
    return {
        "message": "Goal Ledger API is running",
        "version": app.version,
        "status": "OK",
        "endpoints": {
            "auth": ["POST /api/v1/auth/register", "POST /api/v1/auth/login"],
            "goals": [
                "GET /api/v1/goals/{owner_id}",
                "GET /api/v1/goals/{owner_id}/summary",
                "POST /api/v1/goals",
                "PUT /api/v1/goals/{goal_id}",
                "POST /api/v1/goals/{goal_id}/add-money",
                "DELETE /api/v1/goals/{goal_id}",
            ],
            "activities": ["GET /api/v1/activities/{owner_id}"],
            "database": ["GET /api/v1/database", "GET /api/v1/database/stats"],
        },
    }
