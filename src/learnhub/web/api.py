"""FastAPI application factory.

Main entry point for the learnhub Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from learnhub import __version__
from learnhub.config.app_config import load_app_config
from learnhub.db.database import get_db_path, init_db
from learnhub.web.errors import register_exception_handlers
from learnhub.web.routes import (
    books_router,
    calendar_router,
    courses_router,
    dashboard_router,
    health_router,
    lessons_router,
    library_router,
    storage_router,
    tags_router,
    uploads_router,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    config = load_app_config()
    logger.info(
        "api_startup",
        db_path=str(get_db_path().absolute()),
        storage_root=str(config.storage.root.absolute()),
        public_base_url=config.storage.public_base_url,
    )
    yield
    logger.info("api_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    The database is initialized here so the schema exists even when the
    app is driven without running its lifespan.

    Returns:
        Configured FastAPI app instance
    """
    config = load_app_config()
    init_db(config.database.path)

    app = FastAPI(
        title="learnhub API",
        description="Personal learning hub: books, courses, streaks and study calendar",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(books_router)
    app.include_router(courses_router)
    app.include_router(lessons_router)
    app.include_router(uploads_router)
    app.include_router(tags_router)
    app.include_router(calendar_router)
    app.include_router(dashboard_router)
    app.include_router(library_router)
    app.include_router(storage_router)

    return app
