"""Book endpoints: upload, edit, notes and the PDF viewer."""

from pathlib import Path

import structlog
from fastapi import APIRouter, File, Form, HTTPException, Query, Response, UploadFile, status

from learnhub.core.pdf_pages import DEFAULT_PAGE_WIDTH, MAX_PAGE_WIDTH, get_page_count, render_page_png
from learnhub.core.uploads import UploadedFile, upload_book
from learnhub.db.books_repository import (
    BookRecord,
    delete_book,
    get_all_books,
    get_book_by_id,
    update_book,
    update_book_notes,
)
from learnhub.storage.blob_store import get_blob_store
from learnhub.utils.text_utils import clean_optional
from learnhub.web.schemas import (
    BookListResponse,
    BookResponse,
    BookUpdate,
    NotesUpdate,
    PageInfoResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/books", tags=["books"])


def _get_book_or_404(book_id: str) -> BookRecord:
    book = get_book_by_id(book_id)
    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Book '{book_id}' not found",
        )
    return book


def _book_pdf_path(book: BookRecord) -> Path:
    """Local file behind a book's pdf_url."""
    if not book.pdf_url:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Book '{book.id}' has no PDF",
        )
    store = get_blob_store()
    bucket, path = store.path_from_public_url(book.pdf_url)
    return store.open_object(bucket, path)


async def _read_upload(upload: UploadFile | None) -> UploadedFile | None:
    # Browsers send an empty part when no file was chosen
    if upload is None or not upload.filename:
        return None
    return UploadedFile(
        filename=upload.filename,
        content_type=upload.content_type,
        data=await upload.read(),
    )


@router.get("", response_model=BookListResponse)
async def list_books() -> BookListResponse:
    """List all books, newest first."""
    books = [BookResponse.model_validate(b) for b in get_all_books()]
    logger.info("books.listed", count=len(books))
    return BookListResponse(books=books, count=len(books))


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    title: str = Form(""),
    topic: str | None = Form(None),
    summary: str | None = Form(None),
    notes: str | None = Form(None),
    pdf: UploadFile | None = File(None),
    cover: UploadFile | None = File(None),
) -> BookResponse:
    """Upload a book with an optional PDF and cover image."""
    book = upload_book(
        title=title,
        topic=topic,
        summary=summary,
        notes=notes,
        pdf=await _read_upload(pdf),
        cover=await _read_upload(cover),
    )
    return BookResponse.model_validate(book)


@router.get("/{book_id}", response_model=BookResponse)
async def get_book(book_id: str) -> BookResponse:
    """Get a specific book."""
    return BookResponse.model_validate(_get_book_or_404(book_id))


@router.patch("/{book_id}", response_model=BookResponse)
async def edit_book(book_id: str, changes: BookUpdate) -> BookResponse:
    """Change title, topic, summary or notes of a book."""
    book = _get_book_or_404(book_id)

    fields = changes.model_dump(exclude_unset=True)
    if "title" in fields:
        title = clean_optional(fields["title"])
        if title is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Please enter a book title.",
            )
        fields["title"] = title
    for name in ("topic", "summary", "notes"):
        if name in fields:
            fields[name] = clean_optional(fields[name])

    if fields:
        book = update_book(book_id, **fields)
    return BookResponse.model_validate(book)


@router.put("/{book_id}/notes", response_model=BookResponse)
async def save_book_notes(book_id: str, body: NotesUpdate) -> BookResponse:
    """Save the reading notes of a book."""
    _get_book_or_404(book_id)
    book = update_book_notes(book_id, body.notes)
    logger.info("books.notes_saved", book_id=book_id, length=len(body.notes))
    return BookResponse.model_validate(book)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_book(book_id: str) -> None:
    """Delete a book and its stored files."""
    book = _get_book_or_404(book_id)
    delete_book(book_id)

    store = get_blob_store()
    for url in (book.pdf_url, book.cover_image_url):
        if not url:
            continue
        bucket, path = store.path_from_public_url(url)
        if store.exists(bucket, path):
            store.delete(bucket, path)


@router.get("/{book_id}/pages", response_model=PageInfoResponse)
async def get_page_info(book_id: str) -> PageInfoResponse:
    """Number of pages of a book's PDF."""
    book = _get_book_or_404(book_id)
    return PageInfoResponse(book_id=book.id, page_count=get_page_count(_book_pdf_path(book)))


@router.get("/{book_id}/pages/{page_number}")
async def get_page_image(
    book_id: str,
    page_number: int,
    width: int = Query(DEFAULT_PAGE_WIDTH, ge=1, le=MAX_PAGE_WIDTH),
) -> Response:
    """One page of a book's PDF as PNG."""
    book = _get_book_or_404(book_id)
    png = render_page_png(_book_pdf_path(book), page_number, width=width)
    return Response(content=png, media_type="image/png")
