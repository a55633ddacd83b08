"""Course authoring: lesson drafts, ordering, and saving courses.

A course is saved as a whole. On update the course row is changed in
place while its lessons and tags are deleted and reinserted, so the
stored order always equals the draft order.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

import structlog

from learnhub.db.books_repository import get_book_by_id
from learnhub.db.courses_repository import (
    CourseRecord,
    LessonRecord,
    get_course_by_id,
    insert_course,
    replace_lessons,
    update_course,
)
from learnhub.db.database import RecordNotFoundError
from learnhub.db.tags_repository import (
    TagRecord,
    get_tag_by_id,
    get_tags_for_course,
    set_course_tags,
)
from learnhub.utils.text_utils import clean_optional

logger = structlog.get_logger(__name__)

CONTENT_TYPES = ("video", "image", "note", "text", "book")


class CourseValidationError(ValueError):
    """Raised when a course or one of its lessons is invalid."""

    pass


@dataclass
class LessonDraft:
    """A lesson as edited in the course form, before saving."""

    content_type: str
    title: str = ""
    content_url: str | None = None
    video_file_url: str | None = None
    book_id: str | None = None
    notes: str | None = None
    order_index: int = 0


@dataclass
class CourseDraft:
    """Course fields as edited in the form."""

    title: str
    category: str | None = None
    topic: str | None = None
    description: str | None = None
    notes: str | None = None


@dataclass
class SavedCourse:
    course: CourseRecord
    lessons: list[LessonRecord] = field(default_factory=list)
    tags: list[TagRecord] = field(default_factory=list)


def normalize_lessons(drafts: list[LessonDraft]) -> list[LessonDraft]:
    """Number lessons 0..n-1 in list order and fill blank titles.

    A lesson without a title is named "Lesson N" (1-based position).
    """
    normalized = []
    for index, draft in enumerate(drafts):
        title = (draft.title or "").strip() or f"Lesson {index + 1}"
        normalized.append(
            replace(
                draft,
                title=title,
                order_index=index,
                content_url=clean_optional(draft.content_url),
                video_file_url=clean_optional(draft.video_file_url),
                book_id=clean_optional(draft.book_id),
                notes=clean_optional(draft.notes),
            )
        )
    return normalized


def reorder_lessons(drafts: list[LessonDraft], from_index: int, to_index: int) -> list[LessonDraft]:
    """Move one lesson and renumber order_index.

    Raises:
        IndexError: If either index is out of range
    """
    if not (0 <= from_index < len(drafts)) or not (0 <= to_index < len(drafts)):
        raise IndexError(f"Cannot move lesson {from_index} to {to_index} of {len(drafts)}")

    moved = list(drafts)
    lesson = moved.pop(from_index)
    moved.insert(to_index, lesson)
    return [replace(d, order_index=i) for i, d in enumerate(moved)]


def validate_course(course: CourseDraft, lessons: list[LessonDraft]) -> None:
    """Check a course before any write.

    Raises:
        CourseValidationError: On a blank title, unknown content type, or a
            book lesson without an existing book
    """
    if not (course.title or "").strip():
        raise CourseValidationError("Course title is required")

    for index, lesson in enumerate(lessons, start=1):
        if lesson.content_type not in CONTENT_TYPES:
            raise CourseValidationError(
                f"Lesson {index}: unknown content type '{lesson.content_type}'. "
                f"Expected one of: {', '.join(CONTENT_TYPES)}"
            )
        if lesson.content_type == "book":
            if not lesson.book_id:
                raise CourseValidationError(f"Lesson {index}: a book lesson needs a book")
            if get_book_by_id(lesson.book_id) is None:
                raise CourseValidationError(f"Lesson {index}: book '{lesson.book_id}' not found")


def save_course(
    course: CourseDraft,
    lessons: list[LessonDraft],
    tag_ids: list[str] | None = None,
    course_id: str | None = None,
) -> SavedCourse:
    """Create a course, or update an existing one, with its lessons and tags.

    Args:
        course: Course fields
        lessons: Lessons in display order
        tag_ids: Tags to attach (None leaves tags of an existing course untouched)
        course_id: Existing course to update; None creates a new course

    Raises:
        CourseValidationError: If validation fails
        RecordNotFoundError: If course_id or a tag doesn't exist
    """
    lessons = normalize_lessons(lessons)
    validate_course(course, lessons)
    for tag_id in tag_ids or []:
        if get_tag_by_id(tag_id) is None:
            raise RecordNotFoundError("tags", tag_id)

    fields = {
        "title": course.title.strip(),
        "category": clean_optional(course.category),
        "topic": clean_optional(course.topic),
        "description": clean_optional(course.description),
        "notes": clean_optional(course.notes),
    }

    if course_id is None:
        record = insert_course(**fields)
        action = "created"
    else:
        if get_course_by_id(course_id) is None:
            raise RecordNotFoundError("courses", course_id)
        record = update_course(course_id, **fields)
        action = "updated"

    stored_lessons = replace_lessons(
        record.id,
        [
            {
                "title": lesson.title,
                "content_type": lesson.content_type,
                "content_url": lesson.content_url,
                "video_file_url": lesson.video_file_url,
                "book_id": lesson.book_id,
                "notes": lesson.notes,
                "order_index": lesson.order_index,
            }
            for lesson in lessons
        ],
    )

    if tag_ids is not None:
        tags = set_course_tags(record.id, tag_ids)
    else:
        tags = get_tags_for_course(record.id)

    logger.info(
        f"courses.{action}",
        course_id=record.id,
        lessons=len(stored_lessons),
        tags=len(tags),
    )
    return SavedCourse(course=record, lessons=stored_lessons, tags=tags)
