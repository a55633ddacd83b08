"""Upload orchestration for books and lesson media.

Responsibilities:
- Validate file type and size before touching storage
- Check PDF magic bytes
- Store files in their bucket under a timestamped name
- Register books with the public URLs of their files
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from learnhub.config.app_config import UploadLimits, load_app_config
from learnhub.db.books_repository import BookRecord, insert_book
from learnhub.storage.blob_store import (
    BOOKS_BUCKET,
    MEDIA_BUCKET,
    BlobStore,
    StorageError,
    book_object_path,
    get_blob_store,
    media_object_path,
)
from learnhub.utils.text_utils import clean_optional
from learnhub.utils.validators import (
    UnknownUploadKindError,
    UploadValidationError,
    validate_upload,
)

logger = structlog.get_logger(__name__)

PDF_MAGIC = b"%PDF"

# Kinds a lesson can carry as uploaded media
MEDIA_KINDS = ("video", "image", "pdf")


@dataclass
class UploadedFile:
    """A file received from a form."""

    filename: str
    content_type: str | None
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class InvalidPdfError(UploadValidationError):
    """Raised when a file declared as PDF doesn't start with %PDF."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"'{filename}' is not a valid PDF file")


class MissingTitleError(UploadValidationError):
    """Raised when a book is submitted without a title."""

    def __init__(self):
        super().__init__("Please enter a book title.")


def check_upload(kind: str, upload: UploadedFile, limits: UploadLimits | None = None) -> None:
    """Validate type, size and (for PDFs) magic bytes.

    Raises:
        UploadValidationError: If the file is rejected
    """
    validate_upload(kind, upload.filename, upload.content_type, upload.size, limits)
    if kind == "pdf" and not upload.data.startswith(PDF_MAGIC):
        raise InvalidPdfError(upload.filename)


def _discard(store: BlobStore, paths: list[str]) -> None:
    """Remove objects stored for a book that could not be saved."""
    for path in paths:
        try:
            store.delete(BOOKS_BUCKET, path)
        except StorageError as e:
            logger.error("books.cleanup_failed", path=path, error=str(e))
        else:
            logger.info("books.upload_rolled_back", path=path)


def upload_book(
    title: str,
    topic: str | None = None,
    summary: str | None = None,
    notes: str | None = None,
    pdf: UploadedFile | None = None,
    cover: UploadedFile | None = None,
    store: BlobStore | None = None,
    limits: UploadLimits | None = None,
) -> BookRecord:
    """Store a book's files and register it.

    Both files are validated before either is written. Files already
    stored are removed again if a later step fails.

    Raises:
        UploadValidationError: If the title is blank or a file is rejected
        StorageError: If storing a file fails
    """
    title = (title or "").strip()
    if not title:
        raise MissingTitleError()

    store = store or get_blob_store()
    limits = limits or load_app_config().uploads

    if pdf is not None:
        check_upload("pdf", pdf, limits)
    if cover is not None:
        check_upload("cover", cover, limits)

    pdf_url = None
    cover_image_url = None
    stored: list[str] = []

    try:
        if pdf is not None:
            path = store.upload(
                BOOKS_BUCKET, book_object_path("pdf", pdf.filename), pdf.data, pdf.content_type
            )
            stored.append(path)
            pdf_url = store.get_public_url(BOOKS_BUCKET, path)

        if cover is not None:
            path = store.upload(
                BOOKS_BUCKET,
                book_object_path("cover", cover.filename),
                cover.data,
                cover.content_type,
            )
            stored.append(path)
            cover_image_url = store.get_public_url(BOOKS_BUCKET, path)

        book = insert_book(
            title=title,
            topic=clean_optional(topic),
            summary=clean_optional(summary),
            notes=clean_optional(notes),
            pdf_url=pdf_url,
            cover_image_url=cover_image_url,
        )
    except Exception:
        _discard(store, stored)
        raise

    logger.info(
        "books.uploaded",
        book_id=book.id,
        has_pdf=pdf_url is not None,
        has_cover=cover_image_url is not None,
    )
    return book


def upload_lesson_media(
    kind: str,
    upload: UploadedFile,
    store: BlobStore | None = None,
    limits: UploadLimits | None = None,
) -> str:
    """Store a video, image or PDF for a lesson.

    Returns:
        Public URL of the stored file

    Raises:
        UploadValidationError: If the file is rejected
        StorageError: If storing the file fails
    """
    if kind not in MEDIA_KINDS:
        raise UnknownUploadKindError(kind)

    store = store or get_blob_store()
    limits = limits or load_app_config().uploads

    check_upload(kind, upload, limits)

    path = store.upload(
        MEDIA_BUCKET, media_object_path(kind, upload.filename), upload.data, upload.content_type
    )
    url = store.get_public_url(MEDIA_BUCKET, path)

    logger.info("media.uploaded", kind=kind, path=path, size=upload.size)
    return url
