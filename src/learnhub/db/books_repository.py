"""Repository functions for books table.

Provides CRUD operations for the books table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from learnhub.db.database import RecordNotFoundError, get_db, new_id, utc_now

logger = structlog.get_logger(__name__)

# Columns that may be changed after creation
UPDATABLE_FIELDS = ("title", "topic", "summary", "notes", "pdf_url", "cover_image_url")


@dataclass
class BookRecord:
    """Book record from database."""

    id: str
    title: str
    topic: str | None
    summary: str | None
    notes: str | None
    pdf_url: str | None
    cover_image_url: str | None
    created_at: str
    updated_at: str


def insert_book(
    title: str,
    topic: str | None = None,
    summary: str | None = None,
    notes: str | None = None,
    pdf_url: str | None = None,
    cover_image_url: str | None = None,
) -> BookRecord:
    """Insert a new book record.

    Args:
        title: Book title (required, non-blank)
        topic: Free-form topic used by library filters
        summary: Short summary
        notes: Personal notes
        pdf_url: Public URL of the uploaded PDF
        cover_image_url: Public URL of the uploaded cover

    Returns:
        The stored BookRecord

    Raises:
        sqlite3.IntegrityError: If the title is blank
    """
    book_id = new_id()
    now = utc_now()

    with get_db() as conn:
        conn.execute(
            """
            INSERT INTO books (
                id, title, topic, summary, notes,
                pdf_url, cover_image_url, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (book_id, title, topic, summary, notes, pdf_url, cover_image_url, now, now),
        )

    logger.debug("books.inserted", book_id=book_id)

    return BookRecord(
        id=book_id,
        title=title,
        topic=topic,
        summary=summary,
        notes=notes,
        pdf_url=pdf_url,
        cover_image_url=cover_image_url,
        created_at=now,
        updated_at=now,
    )


def get_book_by_id(book_id: str) -> BookRecord | None:
    """Get book by ID.

    Returns:
        BookRecord if found, None otherwise
    """
    with get_db() as conn:
        row = conn.execute("SELECT * FROM books WHERE id = ?", (book_id,)).fetchone()

    if row is None:
        return None

    return _row_to_record(row)


def get_all_books() -> list[BookRecord]:
    """Get all books, newest first."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM books ORDER BY created_at DESC, rowid DESC"
        ).fetchall()

    return [_row_to_record(row) for row in rows]


def update_book(book_id: str, **fields: Any) -> BookRecord:
    """Update selected columns of a book.

    Args:
        book_id: Book identifier (must exist)
        **fields: Any of UPDATABLE_FIELDS

    Returns:
        The updated BookRecord

    Raises:
        ValueError: If an unknown column is given
        RecordNotFoundError: If book_id doesn't exist
    """
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown book fields: {', '.join(sorted(unknown))}")

    if fields:
        assignments = ", ".join(f"{name} = ?" for name in fields)
        with get_db() as conn:
            cursor = conn.execute(
                f"UPDATE books SET {assignments}, updated_at = ? WHERE id = ?",
                (*fields.values(), utc_now(), book_id),
            )
            if cursor.rowcount == 0:
                raise RecordNotFoundError("books", book_id)
        logger.debug("books.updated", book_id=book_id, fields=sorted(fields))

    book = get_book_by_id(book_id)
    if book is None:
        raise RecordNotFoundError("books", book_id)
    return book


def update_book_notes(book_id: str, notes: str) -> BookRecord:
    """Replace the personal notes of a book."""
    return update_book(book_id, notes=notes)


def delete_book(book_id: str) -> bool:
    """Delete book by ID.

    Lessons linking the book keep existing with book_id cleared.

    Returns:
        True if deleted, False if not found
    """
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM books WHERE id = ?", (book_id,))

    deleted = cursor.rowcount > 0
    if deleted:
        logger.debug("books.deleted", book_id=book_id)

    return deleted


def _row_to_record(row) -> BookRecord:
    """Convert database row to BookRecord."""
    return BookRecord(
        id=row["id"],
        title=row["title"],
        topic=row["topic"],
        summary=row["summary"],
        notes=row["notes"],
        pdf_url=row["pdf_url"],
        cover_image_url=row["cover_image_url"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
