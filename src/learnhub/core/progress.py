"""Lesson completion, daily streak bookkeeping and monthly aggregates.

Completing a lesson bumps the count of its day in daily_streaks.
Un-completing removes the completion record but leaves the day count
alone, so a streak earned today is not lost by toggling.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import structlog

from learnhub.db.courses_repository import get_lesson_by_id, get_lessons_for_course
from learnhub.db.database import RecordNotFoundError
from learnhub.db.progress_repository import (
    MonthlyProgressRecord,
    get_completed_at,
    get_completed_lesson_ids,
    get_completions_between,
    get_course_completion_stats,
    get_monthly_progress,
    increment_day,
    mark_lesson_complete,
    unmark_lesson_complete,
    upsert_monthly_progress,
)

logger = structlog.get_logger(__name__)


@dataclass
class CourseProgress:
    """Completion state of one course."""

    course_id: str
    total_lessons: int
    completed_lessons: int

    @property
    def percentage(self) -> float:
        if self.total_lessons == 0:
            return 0.0
        return self.completed_lessons / self.total_lessons * 100

    @property
    def is_active(self) -> bool:
        """Started but not finished."""
        return 0 < self.percentage < 100


def toggle_lesson_completion(lesson_id: str, now: datetime | None = None) -> bool:
    """Flip the completion state of a lesson.

    Args:
        lesson_id: Lesson to toggle
        now: Completion time (defaults to current UTC time)

    Returns:
        True if the lesson is now completed, False if it was un-completed

    Raises:
        RecordNotFoundError: If the lesson doesn't exist
    """
    if get_lesson_by_id(lesson_id) is None:
        raise RecordNotFoundError("lessons", lesson_id)

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)

    completed_at = get_completed_at(lesson_id)
    if completed_at is not None:
        unmark_lesson_complete(lesson_id)
        completed = False
        # The removed completion may belong to an earlier month
        if (completed_at.year, completed_at.month) != (now.year, now.month):
            refresh_monthly_progress(completed_at.year, completed_at.month)
    else:
        mark_lesson_complete(lesson_id, now)
        day_total = increment_day(now.date())
        completed = True
        logger.info("progress.lesson_completed", lesson_id=lesson_id, today_total=day_total)

    refresh_monthly_progress(now.year, now.month)
    return completed


def course_progress(course_id: str) -> CourseProgress:
    """Total and completed lessons of one course."""
    lesson_ids = [lesson.id for lesson in get_lessons_for_course(course_id)]
    completed = get_completed_lesson_ids(lesson_ids)
    return CourseProgress(
        course_id=course_id,
        total_lessons=len(lesson_ids),
        completed_lessons=len(completed),
    )


def all_course_progress() -> dict[str, CourseProgress]:
    """Progress of every course, keyed by course id."""
    return {
        stats.course_id: CourseProgress(
            course_id=stats.course_id,
            total_lessons=stats.total_lessons,
            completed_lessons=stats.completed_lessons,
        )
        for stats in get_course_completion_stats()
    }


def _month_range(year: int, month: int) -> tuple[datetime, datetime]:
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


def _in_month(timestamp: str | None, start: datetime, end: datetime) -> bool:
    if timestamp is None:
        return False
    moment = datetime.fromisoformat(timestamp)
    return start <= moment < end


def refresh_monthly_progress(year: int, month: int) -> MonthlyProgressRecord:
    """Recompute and store the aggregate for a month.

    - lessons_completed: completions dated in the month
    - courses_started: courses whose first completion falls in the month
    - courses_completed: fully completed courses whose last completion
      falls in the month
    """
    start, end = _month_range(year, month)
    lessons_completed = len(get_completions_between(start, end))

    courses_started = 0
    courses_completed = 0
    for stats in get_course_completion_stats():
        if _in_month(stats.first_completed_at, start, end):
            courses_started += 1
        finished = stats.total_lessons > 0 and stats.completed_lessons == stats.total_lessons
        if finished and _in_month(stats.last_completed_at, start, end):
            courses_completed += 1

    upsert_monthly_progress(
        year=year,
        month=month,
        lessons_completed=lessons_completed,
        courses_started=courses_started,
        courses_completed=courses_completed,
    )

    record = get_monthly_progress(year, month)
    if record is None:
        raise RecordNotFoundError("monthly_progress", f"{year}-{month:02d}")
    return record
