"""Dashboard aggregates: streak, today's progress, course progress, activity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone

import structlog

from learnhub.core.progress import CourseProgress, all_course_progress
from learnhub.core.streaks import compute_streak
from learnhub.db.books_repository import get_all_books
from learnhub.db.courses_repository import CourseRecord, get_all_courses
from learnhub.db.progress_repository import (
    CompletionRecord,
    get_day_count,
    get_recent_completions,
    get_streak_log,
)

logger = structlog.get_logger(__name__)

RECENT_ACTIVITY_LIMIT = 5


@dataclass
class CourseProgressEntry:
    """A course with its completion numbers."""

    course: CourseRecord
    progress: CourseProgress


@dataclass
class DashboardSummary:
    """Numbers shown on the dashboard."""

    today: date
    streak: int
    lessons_today: int
    total_courses: int
    active_courses: int
    total_books: int
    course_progress: list[CourseProgressEntry] = field(default_factory=list)
    recent_activity: list[CompletionRecord] = field(default_factory=list)


def build_dashboard(today: date | None = None) -> DashboardSummary:
    """Collect dashboard numbers.

    Args:
        today: Reference day for the streak (defaults to the current UTC date)
    """
    today = today or datetime.now(timezone.utc).date()

    streak = compute_streak(get_streak_log(until=today), today)
    courses = get_all_courses()
    progress_by_course = all_course_progress()

    entries = [
        CourseProgressEntry(
            course=course,
            progress=progress_by_course.get(
                course.id,
                CourseProgress(course_id=course.id, total_lessons=0, completed_lessons=0),
            ),
        )
        for course in courses
    ]

    summary = DashboardSummary(
        today=today,
        streak=streak,
        lessons_today=get_day_count(today),
        total_courses=len(courses),
        active_courses=sum(1 for e in entries if e.progress.is_active),
        total_books=len(get_all_books()),
        course_progress=entries,
        recent_activity=get_recent_completions(limit=RECENT_ACTIVITY_LIMIT),
    )

    logger.debug(
        "dashboard.built",
        streak=summary.streak,
        courses=summary.total_courses,
        books=summary.total_books,
    )
    return summary
