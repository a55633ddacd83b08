"""Repository functions for lesson progress, daily streaks and monthly stats.

Timestamps are stored as UTC ISO-8601 strings, so range queries compare
them lexically.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone

import structlog

from learnhub.db.database import get_db, new_id, utc_now

logger = structlog.get_logger(__name__)


@dataclass
class CompletionRecord:
    """A completed lesson joined with its lesson and course titles."""

    lesson_id: str
    completed_at: str
    lesson_title: str
    course_id: str
    course_title: str


@dataclass
class DailyStreakRecord:
    """Lessons completed on one calendar day."""

    date: date
    lessons_completed: int


@dataclass
class MonthlyProgressRecord:
    """Aggregated progress for one calendar month."""

    year: int
    month: int
    lessons_completed: int
    courses_started: int
    courses_completed: int
    updated_at: str


@dataclass
class CourseCompletionStats:
    """Per-course completion counts and first/last completion time."""

    course_id: str
    total_lessons: int
    completed_lessons: int
    first_completed_at: str | None
    last_completed_at: str | None


def _to_utc_iso(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat()


# =============================================================================
# LESSON PROGRESS
# =============================================================================


def mark_lesson_complete(lesson_id: str, completed_at: datetime) -> None:
    """Record a lesson as completed.

    Raises:
        sqlite3.IntegrityError: If the lesson doesn't exist or is already completed
    """
    with get_db() as conn:
        conn.execute(
            "INSERT INTO lesson_progress (id, lesson_id, completed_at) VALUES (?, ?, ?)",
            (new_id(), lesson_id, _to_utc_iso(completed_at)),
        )

    logger.debug("progress.completed", lesson_id=lesson_id)


def unmark_lesson_complete(lesson_id: str) -> bool:
    """Remove the completion of a lesson.

    Returns:
        True if a completion was removed
    """
    with get_db() as conn:
        cursor = conn.execute(
            "DELETE FROM lesson_progress WHERE lesson_id = ?", (lesson_id,)
        )

    removed = cursor.rowcount > 0
    if removed:
        logger.debug("progress.uncompleted", lesson_id=lesson_id)
    return removed


def is_lesson_completed(lesson_id: str) -> bool:
    with get_db() as conn:
        row = conn.execute(
            "SELECT 1 FROM lesson_progress WHERE lesson_id = ?", (lesson_id,)
        ).fetchone()
    return row is not None


def get_completed_at(lesson_id: str) -> datetime | None:
    """When a lesson was completed, or None if it isn't."""
    with get_db() as conn:
        row = conn.execute(
            "SELECT completed_at FROM lesson_progress WHERE lesson_id = ?", (lesson_id,)
        ).fetchone()
    return datetime.fromisoformat(row["completed_at"]) if row else None


def get_completed_lesson_ids(lesson_ids: list[str]) -> set[str]:
    """Subset of lesson_ids that have a completion record."""
    if not lesson_ids:
        return set()

    placeholders = ", ".join("?" for _ in lesson_ids)
    with get_db() as conn:
        rows = conn.execute(
            f"SELECT lesson_id FROM lesson_progress WHERE lesson_id IN ({placeholders})",
            tuple(lesson_ids),
        ).fetchall()

    return {row["lesson_id"] for row in rows}


_COMPLETION_SELECT = """
    SELECT lp.lesson_id, lp.completed_at,
           l.title AS lesson_title, c.id AS course_id, c.title AS course_title
    FROM lesson_progress lp
    JOIN lessons l ON l.id = lp.lesson_id
    JOIN courses c ON c.id = l.course_id
"""


def get_recent_completions(limit: int = 5) -> list[CompletionRecord]:
    """Most recent completions, newest first."""
    with get_db() as conn:
        rows = conn.execute(
            _COMPLETION_SELECT + " ORDER BY lp.completed_at DESC LIMIT ?",
            (limit,),
        ).fetchall()

    return [_row_to_completion(row) for row in rows]


def get_completions_between(start: datetime, end: datetime) -> list[CompletionRecord]:
    """Completions with start <= completed_at < end, oldest first."""
    with get_db() as conn:
        rows = conn.execute(
            _COMPLETION_SELECT
            + " WHERE lp.completed_at >= ? AND lp.completed_at < ?"
            + " ORDER BY lp.completed_at ASC",
            (_to_utc_iso(start), _to_utc_iso(end)),
        ).fetchall()

    return [_row_to_completion(row) for row in rows]


def get_course_completion_stats() -> list[CourseCompletionStats]:
    """Lesson totals and completion span for every course."""
    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT c.id AS course_id,
                   COUNT(l.id) AS total_lessons,
                   COUNT(lp.id) AS completed_lessons,
                   MIN(lp.completed_at) AS first_completed_at,
                   MAX(lp.completed_at) AS last_completed_at
            FROM courses c
            LEFT JOIN lessons l ON l.course_id = c.id
            LEFT JOIN lesson_progress lp ON lp.lesson_id = l.id
            GROUP BY c.id
            """
        ).fetchall()

    return [
        CourseCompletionStats(
            course_id=row["course_id"],
            total_lessons=row["total_lessons"],
            completed_lessons=row["completed_lessons"],
            first_completed_at=row["first_completed_at"],
            last_completed_at=row["last_completed_at"],
        )
        for row in rows
    ]


# =============================================================================
# DAILY STREAKS
# =============================================================================


def get_streak_log(
    until: date | None = None, limit: int | None = None
) -> list[DailyStreakRecord]:
    """Day records, date-descending.

    Args:
        until: Skip records dated after this day
        limit: Maximum number of records (None for all)
    """
    query = "SELECT date, lessons_completed FROM daily_streaks"
    params: list = []
    if until is not None:
        query += " WHERE date <= ?"
        params.append(until.isoformat())
    query += " ORDER BY date DESC"
    if limit is not None:
        query += " LIMIT ?"
        params.append(limit)

    with get_db() as conn:
        rows = conn.execute(query, params).fetchall()

    return [
        DailyStreakRecord(
            date=date.fromisoformat(row["date"]),
            lessons_completed=row["lessons_completed"],
        )
        for row in rows
    ]


def get_day_count(day: date) -> int:
    """Lessons completed on a day (0 if no record)."""
    with get_db() as conn:
        row = conn.execute(
            "SELECT lessons_completed FROM daily_streaks WHERE date = ?",
            (day.isoformat(),),
        ).fetchone()

    return row["lessons_completed"] if row else 0


def increment_day(day: date) -> int:
    """Add one completed lesson to a day, creating the record if needed.

    Returns:
        The new count for the day
    """
    with get_db() as conn:
        conn.execute(
            """
            INSERT INTO daily_streaks (id, date, lessons_completed, created_at)
            VALUES (?, ?, 1, ?)
            ON CONFLICT(date) DO UPDATE SET lessons_completed = lessons_completed + 1
            """,
            (new_id(), day.isoformat(), utc_now()),
        )
        row = conn.execute(
            "SELECT lessons_completed FROM daily_streaks WHERE date = ?",
            (day.isoformat(),),
        ).fetchone()

    logger.debug("streaks.incremented", date=day.isoformat(), count=row["lessons_completed"])
    return row["lessons_completed"]


# =============================================================================
# MONTHLY PROGRESS
# =============================================================================


def upsert_monthly_progress(
    year: int,
    month: int,
    lessons_completed: int,
    courses_started: int,
    courses_completed: int,
) -> None:
    """Store the aggregate for a month, replacing previous values."""
    now = utc_now()
    with get_db() as conn:
        conn.execute(
            """
            INSERT INTO monthly_progress (
                id, year, month, lessons_completed, courses_started,
                courses_completed, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(year, month) DO UPDATE SET
                lessons_completed = excluded.lessons_completed,
                courses_started = excluded.courses_started,
                courses_completed = excluded.courses_completed,
                updated_at = excluded.updated_at
            """,
            (
                new_id(),
                year,
                month,
                lessons_completed,
                courses_started,
                courses_completed,
                now,
                now,
            ),
        )

    logger.debug("monthly_progress.upserted", year=year, month=month)


def get_monthly_progress(year: int, month: int) -> MonthlyProgressRecord | None:
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM monthly_progress WHERE year = ? AND month = ?",
            (year, month),
        ).fetchone()

    if row is None:
        return None

    return MonthlyProgressRecord(
        year=row["year"],
        month=row["month"],
        lessons_completed=row["lessons_completed"],
        courses_started=row["courses_started"],
        courses_completed=row["courses_completed"],
        updated_at=row["updated_at"],
    )


def _row_to_completion(row) -> CompletionRecord:
    return CompletionRecord(
        lesson_id=row["lesson_id"],
        completed_at=row["completed_at"],
        lesson_title=row["lesson_title"],
        course_id=row["course_id"],
        course_title=row["course_title"],
    )
