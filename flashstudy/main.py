"""
FlashStudy - Main FastAPI Application

Entry point for the API server. ``create_app`` wires settings, the
study session store, rate limiting and routers into one application.
"""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from flashstudy import __version__
from flashstudy.config import Settings, get_settings
from flashstudy.database import create_tables
from flashstudy.flashcards import cards_router, decks_router
from flashstudy.generation import generation_router
from flashstudy.rate_limit import limiter
from flashstudy.study.router import study_router
from flashstudy.study.store import StudySessionStore

logger = logging.getLogger(__name__)

API_V1_PREFIX = "/api/v1"

DESCRIPTION = """
FlashStudy API - flashcard decks and interactive study sessions.

## Features

* **Decks & Cards** - Create decks and add front/back cards
* **Generation** - Fill a deck with AI-generated cards (Pro)
* **Study** - Flip, navigate and grade cards with buttons or keyboard shortcuts

Study sessions live in memory and are never persisted.
"""


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup; report dropped study sessions on shutdown."""
    settings = app.state.settings
    logger.info(f"[Startup] Starting {settings.app_name} v{settings.app_version}")

    try:
        await create_tables()
    except Exception as e:
        # Migrations may own the schema; serve anyway
        logger.error(f"[Startup] Database initialization failed: {e}")

    yield

    logger.info(f"[Shutdown] Dropping {len(app.state.study_store)} open study session(s)")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"[App] Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "code": "INTERNAL_ERROR"},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FlashStudy application."""
    settings = settings or get_settings()
    configure_logging(settings.debug)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version or __version__,
        description=DESCRIPTION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.study_store = StudySessionStore(
        ttl=timedelta(minutes=settings.study_session_ttl_minutes),
        max_sessions_per_user=settings.study_max_sessions_per_user,
    )
    app.state.limiter = limiter

    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", tags=["Health"])
    async def root():
        return {"name": settings.app_name, "version": app.version, "status": "running"}

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "healthy", "study_sessions": len(app.state.study_store)}

    for router in (decks_router, cards_router, generation_router, study_router):
        app.include_router(router, prefix=API_V1_PREFIX)

    return app


app = create_app()
