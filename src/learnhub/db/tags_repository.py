"""Repository functions for tags and the course_tags join table."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from learnhub.db.database import RecordNotFoundError, get_db, new_id, utc_now

logger = structlog.get_logger(__name__)


@dataclass
class TagRecord:
    """Tag record from database."""

    id: str
    name: str
    color: str | None
    created_at: str


def insert_tag(name: str, color: str | None = None) -> TagRecord:
    """Insert a new tag.

    Raises:
        sqlite3.IntegrityError: If a tag with the same name exists
    """
    tag_id = new_id()
    now = utc_now()

    with get_db() as conn:
        conn.execute(
            "INSERT INTO tags (id, name, color, created_at) VALUES (?, ?, ?, ?)",
            (tag_id, name, color, now),
        )

    logger.debug("tags.inserted", tag_id=tag_id, name=name)

    return TagRecord(id=tag_id, name=name, color=color, created_at=now)


def get_tag_by_id(tag_id: str) -> TagRecord | None:
    with get_db() as conn:
        row = conn.execute("SELECT * FROM tags WHERE id = ?", (tag_id,)).fetchone()

    return _row_to_record(row) if row else None


def get_all_tags() -> list[TagRecord]:
    """All tags ordered by name."""
    with get_db() as conn:
        rows = conn.execute("SELECT * FROM tags ORDER BY name ASC").fetchall()

    return [_row_to_record(row) for row in rows]


def delete_tag(tag_id: str) -> bool:
    """Delete a tag and detach it from every course.

    Returns:
        True if deleted, False if not found
    """
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM tags WHERE id = ?", (tag_id,))

    deleted = cursor.rowcount > 0
    if deleted:
        logger.debug("tags.deleted", tag_id=tag_id)

    return deleted


def get_tags_for_course(course_id: str) -> list[TagRecord]:
    """Tags attached to one course, ordered by name."""
    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT t.* FROM tags t
            JOIN course_tags ct ON ct.tag_id = t.id
            WHERE ct.course_id = ?
            ORDER BY t.name ASC
            """,
            (course_id,),
        ).fetchall()

    return [_row_to_record(row) for row in rows]


def get_tags_by_course() -> dict[str, list[TagRecord]]:
    """Tags of every course in one query, keyed by course id."""
    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT ct.course_id AS course_id, t.* FROM course_tags ct
            JOIN tags t ON t.id = ct.tag_id
            ORDER BY t.name ASC
            """
        ).fetchall()

    result: dict[str, list[TagRecord]] = {}
    for row in rows:
        result.setdefault(row["course_id"], []).append(_row_to_record(row))
    return result


def set_course_tags(course_id: str, tag_ids: list[str]) -> list[TagRecord]:
    """Replace the tag set of a course (delete-and-reinsert).

    Duplicate ids are collapsed.

    Raises:
        RecordNotFoundError: If the course or any tag doesn't exist
    """
    unique_ids = list(dict.fromkeys(tag_ids))
    now = utc_now()

    with get_db() as conn:
        if conn.execute("SELECT 1 FROM courses WHERE id = ?", (course_id,)).fetchone() is None:
            raise RecordNotFoundError("courses", course_id)

        for tag_id in unique_ids:
            if conn.execute("SELECT 1 FROM tags WHERE id = ?", (tag_id,)).fetchone() is None:
                raise RecordNotFoundError("tags", tag_id)

        conn.execute("DELETE FROM course_tags WHERE course_id = ?", (course_id,))
        conn.executemany(
            "INSERT INTO course_tags (id, course_id, tag_id, created_at) VALUES (?, ?, ?, ?)",
            [(new_id(), course_id, tag_id, now) for tag_id in unique_ids],
        )

    logger.debug("course_tags.replaced", course_id=course_id, count=len(unique_ids))

    return get_tags_for_course(course_id)


def _row_to_record(row) -> TagRecord:
    """Convert database row to TagRecord."""
    return TagRecord(
        id=row["id"],
        name=row["name"],
        color=row["color"],
        created_at=row["created_at"],
    )
