"""Course endpoints: authoring, player view and course tags."""

import structlog
from fastapi import APIRouter, HTTPException, status

from learnhub.core.course_editor import CourseDraft, LessonDraft, save_course
from learnhub.core.progress import CourseProgress, course_progress
from learnhub.db.courses_repository import (
    CourseRecord,
    LessonRecord,
    delete_course,
    get_all_courses,
    get_course_by_id,
    get_lessons_for_course,
)
from learnhub.db.progress_repository import get_completed_lesson_ids
from learnhub.db.tags_repository import TagRecord, get_tags_for_course, set_course_tags
from learnhub.web.schemas import (
    CourseDetailResponse,
    CourseInput,
    CourseListResponse,
    CoursePlayerResponse,
    CourseResponse,
    CourseTagsUpdate,
    LessonResponse,
    PlayerLessonResponse,
    ProgressResponse,
    TagListResponse,
    TagResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/courses", tags=["courses"])


def _get_course_or_404(course_id: str) -> CourseRecord:
    course = get_course_by_id(course_id)
    if course is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Course '{course_id}' not found",
        )
    return course


def _detail(
    course: CourseRecord, lessons: list[LessonRecord], tags: list[TagRecord]
) -> CourseDetailResponse:
    return CourseDetailResponse(
        **CourseResponse.model_validate(course).model_dump(),
        lessons=[LessonResponse.model_validate(lesson) for lesson in lessons],
        tags=[TagResponse.model_validate(tag) for tag in tags],
    )


def progress_response(progress: CourseProgress) -> ProgressResponse:
    return ProgressResponse(
        total_lessons=progress.total_lessons,
        completed_lessons=progress.completed_lessons,
        percentage=progress.percentage,
    )


def _save(body: CourseInput, course_id: str | None = None) -> CourseDetailResponse:
    saved = save_course(
        CourseDraft(
            title=body.title,
            category=body.category,
            topic=body.topic,
            description=body.description,
            notes=body.notes,
        ),
        [LessonDraft(**lesson.model_dump()) for lesson in body.lessons],
        tag_ids=body.tag_ids,
        course_id=course_id,
    )
    return _detail(saved.course, saved.lessons, saved.tags)


@router.get("", response_model=CourseListResponse)
async def list_courses() -> CourseListResponse:
    """List all courses, newest first."""
    courses = [CourseResponse.model_validate(c) for c in get_all_courses()]
    return CourseListResponse(courses=courses, count=len(courses))


@router.post("", response_model=CourseDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_course(body: CourseInput) -> CourseDetailResponse:
    """Create a course with its lessons and tags."""
    return _save(body)


@router.get("/{course_id}", response_model=CourseDetailResponse)
async def get_course(course_id: str) -> CourseDetailResponse:
    """Get a course with lessons (in order) and tags."""
    course = _get_course_or_404(course_id)
    return _detail(course, get_lessons_for_course(course_id), get_tags_for_course(course_id))


@router.put("/{course_id}", response_model=CourseDetailResponse)
async def update_course(course_id: str, body: CourseInput) -> CourseDetailResponse:
    """Replace a course's fields and lessons.

    Tags are only replaced when tag_ids is present in the body.
    """
    _get_course_or_404(course_id)
    return _save(body, course_id=course_id)


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_course(course_id: str) -> None:
    """Delete a course, its lessons, their progress and its tag links."""
    if not delete_course(course_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Course '{course_id}' not found",
        )


@router.get("/{course_id}/player", response_model=CoursePlayerResponse)
async def get_course_player(course_id: str) -> CoursePlayerResponse:
    """Lessons with completion flags, the lesson to resume at, and progress."""
    course = _get_course_or_404(course_id)
    lessons = get_lessons_for_course(course_id)
    completed = get_completed_lesson_ids([lesson.id for lesson in lessons])

    player_lessons = [
        PlayerLessonResponse(
            **LessonResponse.model_validate(lesson).model_dump(),
            completed=lesson.id in completed,
        )
        for lesson in lessons
    ]
    # Resume at the first lesson not done yet, else the first lesson
    current = next((lesson for lesson in player_lessons if not lesson.completed), None)
    if current is None and player_lessons:
        current = player_lessons[0]

    return CoursePlayerResponse(
        course=CourseResponse.model_validate(course),
        lessons=player_lessons,
        current_lesson_id=current.id if current else None,
        progress=progress_response(course_progress(course_id)),
    )


@router.get("/{course_id}/tags", response_model=TagListResponse)
async def get_course_tags(course_id: str) -> TagListResponse:
    """Tags attached to a course."""
    _get_course_or_404(course_id)
    tags = [TagResponse.model_validate(t) for t in get_tags_for_course(course_id)]
    return TagListResponse(tags=tags, count=len(tags))


@router.put("/{course_id}/tags", response_model=TagListResponse)
async def replace_course_tags(course_id: str, body: CourseTagsUpdate) -> TagListResponse:
    """Replace the tag set of a course."""
    tags = [TagResponse.model_validate(t) for t in set_course_tags(course_id, body.tag_ids)]
    logger.info("courses.tags_replaced", course_id=course_id, count=len(tags))
    return TagListResponse(tags=tags, count=len(tags))
