"""Exception handlers for the Web API.

Every error response carries the usual ``detail`` plus a ``notification``
the client shows as a destructive toast.
"""

import sqlite3

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from learnhub.core.calendar_view import CalendarBlockError
from learnhub.core.course_editor import CourseValidationError
from learnhub.core.pdf_pages import PageOutOfRangeError, PdfOpenError
from learnhub.core.recurrence import RecurrenceError
from learnhub.db.database import RecordNotFoundError
from learnhub.storage.blob_store import ObjectExistsError, ObjectNotFoundError, StorageError
from learnhub.utils.validators import FileTooLargeError, TimeRangeError, UploadValidationError

logger = structlog.get_logger(__name__)

# Toast titles per status code
_TITLES = {
    status.HTTP_400_BAD_REQUEST: "Invalid input",
    status.HTTP_404_NOT_FOUND: "Not found",
    status.HTTP_409_CONFLICT: "Conflict",
    status.HTTP_413_REQUEST_ENTITY_TOO_LARGE: "File too large",
    status.HTTP_422_UNPROCESSABLE_ENTITY: "Validation error",
}


def error_body(status_code: int, detail: str, title: str | None = None) -> dict:
    """JSON body for an error response."""
    return {
        "detail": detail,
        "notification": {
            "title": title or _TITLES.get(status_code, "Error"),
            "description": detail,
            "variant": "destructive",
        },
    }


def _respond(status_code: int, detail: str, title: str | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(status_code, detail, title))


async def _http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, detail),
        headers=getattr(exc, "headers", None),
    )


async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return _respond(status.HTTP_422_UNPROCESSABLE_ENTITY, "; ".join(messages) or "Invalid request")


async def _record_not_found(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    return _respond(status.HTTP_404_NOT_FOUND, str(exc))


async def _upload_rejected(request: Request, exc: UploadValidationError) -> JSONResponse:
    logger.info("uploads.rejected", path=request.url.path, reason=str(exc))
    return _respond(status.HTTP_400_BAD_REQUEST, str(exc), title="Upload failed")


async def _file_too_large(request: Request, exc: FileTooLargeError) -> JSONResponse:
    logger.info("uploads.too_large", path=request.url.path, size=exc.size, limit=exc.limit)
    return _respond(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, str(exc))


async def _invalid_input(request: Request, exc: ValueError) -> JSONResponse:
    return _respond(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))


async def _pdf_unreadable(request: Request, exc: PdfOpenError) -> JSONResponse:
    return _respond(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc), title="Error loading PDF")


async def _page_out_of_range(request: Request, exc: PageOutOfRangeError) -> JSONResponse:
    return _respond(status.HTTP_404_NOT_FOUND, str(exc))


async def _object_not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return _respond(status.HTTP_404_NOT_FOUND, str(exc))


async def _object_exists(request: Request, exc: ObjectExistsError) -> JSONResponse:
    return _respond(status.HTTP_409_CONFLICT, str(exc), title="Upload failed")


async def _storage_failed(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("storage.request_failed", path=request.url.path, error=str(exc))
    return _respond(status.HTTP_502_BAD_GATEWAY, str(exc), title="Storage error")


async def _integrity_error(request: Request, exc: sqlite3.IntegrityError) -> JSONResponse:
    logger.warning("db.integrity_error", path=request.url.path, error=str(exc))
    return _respond(status.HTTP_409_CONFLICT, f"Conflicting data: {exc}")


async def _database_error(request: Request, exc: sqlite3.Error) -> JSONResponse:
    logger.error("db.request_failed", path=request.url.path, error=str(exc))
    return _respond(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Database error, please try again",
        title="Error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all handlers. Lookup follows the exception's MRO, so the
    most specific handler wins."""
    app.add_exception_handler(StarletteHTTPException, _http_exception)
    app.add_exception_handler(RequestValidationError, _request_validation)
    app.add_exception_handler(RecordNotFoundError, _record_not_found)
    app.add_exception_handler(UploadValidationError, _upload_rejected)
    app.add_exception_handler(FileTooLargeError, _file_too_large)
    app.add_exception_handler(CourseValidationError, _invalid_input)
    app.add_exception_handler(RecurrenceError, _invalid_input)
    app.add_exception_handler(TimeRangeError, _invalid_input)
    app.add_exception_handler(CalendarBlockError, _invalid_input)
    app.add_exception_handler(PdfOpenError, _pdf_unreadable)
    app.add_exception_handler(PageOutOfRangeError, _page_out_of_range)
    app.add_exception_handler(ObjectNotFoundError, _object_not_found)
    app.add_exception_handler(ObjectExistsError, _object_exists)
    app.add_exception_handler(StorageError, _storage_failed)
    app.add_exception_handler(sqlite3.IntegrityError, _integrity_error)
    app.add_exception_handler(sqlite3.Error, _database_error)
