"""Route handlers for the Web API."""

from learnhub.web.routes.health import router as health_router
from learnhub.web.routes.books import router as books_router
from learnhub.web.routes.courses import router as courses_router
from learnhub.web.routes.lessons import router as lessons_router
from learnhub.web.routes.uploads import router as uploads_router
from learnhub.web.routes.tags import router as tags_router
from learnhub.web.routes.calendar import router as calendar_router
from learnhub.web.routes.dashboard import router as dashboard_router
from learnhub.web.routes.library import router as library_router
from learnhub.web.routes.storage import router as storage_router

__all__ = [
    "health_router",
    "books_router",
    "courses_router",
    "lessons_router",
    "uploads_router",
    "tags_router",
    "calendar_router",
    "dashboard_router",
    "library_router",
    "storage_router",
]
