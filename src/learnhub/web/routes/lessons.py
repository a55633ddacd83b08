"""Lesson endpoints: completion toggle and notes."""

import structlog
from fastapi import APIRouter, HTTPException, status

from learnhub.core.progress import course_progress, toggle_lesson_completion
from learnhub.db.courses_repository import get_lesson_by_id, update_lesson_notes
from learnhub.web.routes.courses import progress_response
from learnhub.web.schemas import (
    LessonResponse,
    NotesUpdate,
    Notification,
    ToggleCompletionResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/lessons", tags=["lessons"])


@router.post("/{lesson_id}/toggle-complete", response_model=ToggleCompletionResponse)
async def toggle_complete(lesson_id: str) -> ToggleCompletionResponse:
    """Mark a lesson complete, or undo a completion."""
    lesson = get_lesson_by_id(lesson_id)
    if lesson is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Lesson '{lesson_id}' not found",
        )

    completed = toggle_lesson_completion(lesson_id)

    notification = None
    if completed:
        notification = Notification(
            title="Lesson Complete!",
            description="Great progress! Keep it up!",
        )

    return ToggleCompletionResponse(
        lesson_id=lesson_id,
        completed=completed,
        progress=progress_response(course_progress(lesson.course_id)),
        notification=notification,
    )


@router.put("/{lesson_id}/notes", response_model=LessonResponse)
async def save_lesson_notes(lesson_id: str, body: NotesUpdate) -> LessonResponse:
    """Save the notes of a single lesson."""
    lesson = update_lesson_notes(lesson_id, body.notes)
    logger.info("lessons.notes_saved", lesson_id=lesson_id, length=len(body.notes))
    return LessonResponse.model_validate(lesson)
