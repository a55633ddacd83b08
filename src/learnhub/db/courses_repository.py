"""Repository functions for courses and lessons tables.

Lessons belong to a course and are ordered by order_index. Saving a
course replaces its whole lesson list (delete-and-reinsert), so lesson
ids change on every save.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from learnhub.db.database import RecordNotFoundError, get_db, new_id, utc_now

logger = structlog.get_logger(__name__)

COURSE_FIELDS = ("title", "category", "topic", "description", "notes")
LESSON_FIELDS = (
    "title",
    "content_type",
    "content_url",
    "video_file_url",
    "book_id",
    "notes",
    "order_index",
)


@dataclass
class CourseRecord:
    """Course record from database."""

    id: str
    title: str
    category: str | None
    topic: str | None
    description: str | None
    notes: str | None
    created_at: str
    updated_at: str


@dataclass
class LessonRecord:
    """Lesson record from database."""

    id: str
    course_id: str
    title: str
    content_type: str
    content_url: str | None
    video_file_url: str | None
    book_id: str | None
    notes: str | None
    order_index: int
    created_at: str


# =============================================================================
# COURSES
# =============================================================================


def insert_course(
    title: str,
    category: str | None = None,
    topic: str | None = None,
    description: str | None = None,
    notes: str | None = None,
) -> CourseRecord:
    """Insert a new course.

    Raises:
        sqlite3.IntegrityError: If the title is blank
    """
    course_id = new_id()
    now = utc_now()

    with get_db() as conn:
        conn.execute(
            """
            INSERT INTO courses (
                id, title, category, topic, description, notes, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (course_id, title, category, topic, description, notes, now, now),
        )

    logger.debug("courses.inserted", course_id=course_id)

    return CourseRecord(
        id=course_id,
        title=title,
        category=category,
        topic=topic,
        description=description,
        notes=notes,
        created_at=now,
        updated_at=now,
    )


def get_course_by_id(course_id: str) -> CourseRecord | None:
    """Get course by ID, or None."""
    with get_db() as conn:
        row = conn.execute("SELECT * FROM courses WHERE id = ?", (course_id,)).fetchone()

    if row is None:
        return None

    return _row_to_course(row)


def get_all_courses() -> list[CourseRecord]:
    """Get all courses, newest first."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM courses ORDER BY created_at DESC, rowid DESC"
        ).fetchall()

    return [_row_to_course(row) for row in rows]


def update_course(course_id: str, **fields: Any) -> CourseRecord:
    """Update selected course columns.

    Raises:
        ValueError: If an unknown column is given
        RecordNotFoundError: If course_id doesn't exist
    """
    unknown = set(fields) - set(COURSE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown course fields: {', '.join(sorted(unknown))}")

    if fields:
        assignments = ", ".join(f"{name} = ?" for name in fields)
        with get_db() as conn:
            cursor = conn.execute(
                f"UPDATE courses SET {assignments}, updated_at = ? WHERE id = ?",
                (*fields.values(), utc_now(), course_id),
            )
            if cursor.rowcount == 0:
                raise RecordNotFoundError("courses", course_id)
        logger.debug("courses.updated", course_id=course_id, fields=sorted(fields))

    course = get_course_by_id(course_id)
    if course is None:
        raise RecordNotFoundError("courses", course_id)
    return course


def delete_course(course_id: str) -> bool:
    """Delete a course together with its lessons, progress and tag links.

    Returns:
        True if deleted, False if not found
    """
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM courses WHERE id = ?", (course_id,))

    deleted = cursor.rowcount > 0
    if deleted:
        logger.debug("courses.deleted", course_id=course_id)

    return deleted


# =============================================================================
# LESSONS
# =============================================================================


def get_lessons_for_course(course_id: str) -> list[LessonRecord]:
    """Lessons of a course in play order."""
    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT * FROM lessons
            WHERE course_id = ?
            ORDER BY order_index ASC, rowid ASC
            """,
            (course_id,),
        ).fetchall()

    return [_row_to_lesson(row) for row in rows]


def get_lesson_by_id(lesson_id: str) -> LessonRecord | None:
    """Get lesson by ID, or None."""
    with get_db() as conn:
        row = conn.execute("SELECT * FROM lessons WHERE id = ?", (lesson_id,)).fetchone()

    if row is None:
        return None

    return _row_to_lesson(row)


def count_lessons_by_course() -> dict[str, int]:
    """Number of lessons per course id (courses without lessons are absent)."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT course_id, COUNT(*) AS total FROM lessons GROUP BY course_id"
        ).fetchall()

    return {row["course_id"]: row["total"] for row in rows}


def replace_lessons(course_id: str, lessons: list[dict[str, Any]]) -> list[LessonRecord]:
    """Replace all lessons of a course.

    Existing lessons (and their completion records) are deleted, then the
    given lessons are inserted in a single transaction.

    Args:
        course_id: Owning course (must exist)
        lessons: Dicts with keys from LESSON_FIELDS

    Returns:
        The inserted lessons in play order

    Raises:
        RecordNotFoundError: If course_id doesn't exist
    """
    now = utc_now()
    records: list[LessonRecord] = []

    with get_db() as conn:
        exists = conn.execute(
            "SELECT 1 FROM courses WHERE id = ?", (course_id,)
        ).fetchone()
        if exists is None:
            raise RecordNotFoundError("courses", course_id)

        conn.execute("DELETE FROM lessons WHERE course_id = ?", (course_id,))

        for lesson in lessons:
            record = LessonRecord(
                id=new_id(),
                course_id=course_id,
                title=lesson["title"],
                content_type=lesson["content_type"],
                content_url=lesson.get("content_url"),
                video_file_url=lesson.get("video_file_url"),
                book_id=lesson.get("book_id"),
                notes=lesson.get("notes"),
                order_index=int(lesson.get("order_index", 0)),
                created_at=now,
            )
            conn.execute(
                """
                INSERT INTO lessons (
                    id, course_id, title, content_type, content_url,
                    video_file_url, book_id, notes, order_index, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    record.course_id,
                    record.title,
                    record.content_type,
                    record.content_url,
                    record.video_file_url,
                    record.book_id,
                    record.notes,
                    record.order_index,
                    record.created_at,
                ),
            )
            records.append(record)

    logger.debug("lessons.replaced", course_id=course_id, count=len(records))

    return sorted(records, key=lambda r: r.order_index)


def update_lesson_notes(lesson_id: str, notes: str) -> LessonRecord:
    """Replace the notes of a single lesson.

    Raises:
        RecordNotFoundError: If lesson_id doesn't exist
    """
    with get_db() as conn:
        cursor = conn.execute(
            "UPDATE lessons SET notes = ? WHERE id = ?", (notes, lesson_id)
        )
        if cursor.rowcount == 0:
            raise RecordNotFoundError("lessons", lesson_id)

    logger.debug("lessons.notes_updated", lesson_id=lesson_id)

    lesson = get_lesson_by_id(lesson_id)
    if lesson is None:
        raise RecordNotFoundError("lessons", lesson_id)
    return lesson


def _row_to_course(row) -> CourseRecord:
    """Convert database row to CourseRecord."""
    return CourseRecord(
        id=row["id"],
        title=row["title"],
        category=row["category"],
        topic=row["topic"],
        description=row["description"],
        notes=row["notes"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_lesson(row) -> LessonRecord:
    """Convert database row to LessonRecord."""
    return LessonRecord(
        id=row["id"],
        course_id=row["course_id"],
        title=row["title"],
        content_type=row["content_type"],
        content_url=row["content_url"],
        video_file_url=row["video_file_url"],
        book_id=row["book_id"],
        notes=row["notes"],
        order_index=row["order_index"],
        created_at=row["created_at"],
    )
