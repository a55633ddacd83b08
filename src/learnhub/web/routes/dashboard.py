"""Dashboard endpoint."""

from datetime import date

from fastapi import APIRouter, Query

from learnhub.core.dashboard import build_dashboard
from learnhub.core.streaks import streak_label
from learnhub.web.schemas import (
    CompletedLessonResponse,
    CourseProgressResponse,
    CourseResponse,
    DashboardResponse,
)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(today: date | None = Query(None)) -> DashboardResponse:
    """Streak, today's count, course and book totals, progress and recent activity."""
    summary = build_dashboard(today)
    return DashboardResponse(
        today=summary.today,
        streak=summary.streak,
        streak_label=streak_label(summary.streak),
        lessons_today=summary.lessons_today,
        total_courses=summary.total_courses,
        active_courses=summary.active_courses,
        total_books=summary.total_books,
        course_progress=[
            CourseProgressResponse(
                course=CourseResponse.model_validate(entry.course),
                total_lessons=entry.progress.total_lessons,
                completed_lessons=entry.progress.completed_lessons,
                percentage=entry.progress.percentage,
            )
            for entry in summary.course_progress
        ],
        recent_activity=[
            CompletedLessonResponse.model_validate(c) for c in summary.recent_activity
        ],
    )
