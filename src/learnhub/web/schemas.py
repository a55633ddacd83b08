"""Pydantic schemas for the Web API.

Serialization models for books, courses, lessons, tags, calendar blocks,
the dashboard and the library.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from learnhub import __version__


# =============================================================================
# NOTIFICATIONS
# =============================================================================


class Notification(BaseModel):
    """Transient message for the user (toast)."""

    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"


class ErrorResponse(BaseModel):
    """Body of every error response."""

    detail: str
    notification: Notification


# =============================================================================
# BOOK SCHEMAS
# =============================================================================


class BookResponse(BaseModel):
    """Response for a book."""

    id: str
    title: str
    topic: str | None = None
    summary: str | None = None
    notes: str | None = None
    pdf_url: str | None = None
    cover_image_url: str | None = None
    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


class BookListResponse(BaseModel):
    books: list[BookResponse]
    count: int


class BookUpdate(BaseModel):
    """Partial update of a book's text fields."""

    title: str | None = Field(default=None, min_length=1, max_length=300)
    topic: str | None = Field(default=None, max_length=200)
    summary: str | None = None
    notes: str | None = None


class NotesUpdate(BaseModel):
    """Request body for saving notes of a lesson or book."""

    notes: str = Field(default="", max_length=100_000)


class PageInfoResponse(BaseModel):
    book_id: str
    page_count: int


# =============================================================================
# TAG SCHEMAS
# =============================================================================


class TagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    color: str = Field(default="#3B82F6")

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Tag name must not be blank")
        return value


class TagResponse(BaseModel):
    id: str
    name: str
    color: str | None = None

    model_config = {"from_attributes": True}


class TagListResponse(BaseModel):
    tags: list[TagResponse]
    count: int


class CourseTagsUpdate(BaseModel):
    tag_ids: list[str] = Field(default_factory=list)


# =============================================================================
# COURSE SCHEMAS
# =============================================================================


ContentTypeName = Literal["video", "image", "note", "text", "book"]


class LessonInput(BaseModel):
    """A lesson in a course create/update request."""

    title: str = Field(default="", max_length=300)
    content_type: ContentTypeName
    content_url: str | None = None
    video_file_url: str | None = None
    book_id: str | None = None
    notes: str | None = None


class CourseInput(BaseModel):
    """Request body for creating or replacing a course."""

    title: str = Field(..., max_length=300)
    category: str | None = Field(default=None, max_length=200)
    topic: str | None = Field(default=None, max_length=200)
    description: str | None = None
    notes: str | None = None
    lessons: list[LessonInput] = Field(default_factory=list)
    tag_ids: list[str] | None = None


class LessonResponse(BaseModel):
    id: str
    course_id: str
    title: str
    content_type: str
    content_url: str | None = None
    video_file_url: str | None = None
    book_id: str | None = None
    notes: str | None = None
    order_index: int

    model_config = {"from_attributes": True}


class CourseResponse(BaseModel):
    id: str
    title: str
    category: str | None = None
    topic: str | None = None
    description: str | None = None
    notes: str | None = None
    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


class CourseDetailResponse(CourseResponse):
    lessons: list[LessonResponse] = Field(default_factory=list)
    tags: list[TagResponse] = Field(default_factory=list)


class CourseListResponse(BaseModel):
    courses: list[CourseResponse]
    count: int


class ProgressResponse(BaseModel):
    total_lessons: int
    completed_lessons: int
    percentage: float


class PlayerLessonResponse(LessonResponse):
    completed: bool = False


class CoursePlayerResponse(BaseModel):
    """Course as seen by the player: lessons with completion flags."""

    course: CourseResponse
    lessons: list[PlayerLessonResponse]
    current_lesson_id: str | None = None
    progress: ProgressResponse


class ToggleCompletionResponse(BaseModel):
    lesson_id: str
    completed: bool
    progress: ProgressResponse
    notification: Notification | None = None


class MediaUploadResponse(BaseModel):
    kind: str
    url: str


# =============================================================================
# CALENDAR SCHEMAS
# =============================================================================


class CalendarBlockCreate(BaseModel):
    date: date
    title: str = Field(default="", max_length=200)
    description: str | None = None
    start_time: str = ""
    end_time: str = ""


class RecurringBlockCreate(BaseModel):
    start_date: date
    frequency: Literal["daily", "business_days", "custom"]
    weeks: int = Field(..., ge=1, le=52)
    weekdays: list[int] | None = None
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    start_time: str
    end_time: str


class CalendarBlockResponse(BaseModel):
    id: str
    date: date
    start_time: str
    end_time: str
    title: str | None = None
    description: str | None = None

    model_config = {"from_attributes": True}


class RecurringBlocksResponse(BaseModel):
    blocks: list[CalendarBlockResponse]
    count: int


class CompletedLessonResponse(BaseModel):
    lesson_id: str
    lesson_title: str
    course_id: str
    course_title: str
    completed_at: str

    model_config = {"from_attributes": True}


class CalendarDayResponse(BaseModel):
    date: date
    blocks: list[CalendarBlockResponse] = Field(default_factory=list)
    completed_lessons: list[CompletedLessonResponse] = Field(default_factory=list)


class CalendarMonthResponse(BaseModel):
    year: int
    month: int
    label: str
    day_names: list[str]
    cells: list[CalendarDayResponse | None]
    previous: tuple[int, int]
    next: tuple[int, int]


# =============================================================================
# DASHBOARD & LIBRARY SCHEMAS
# =============================================================================


class CourseProgressResponse(BaseModel):
    course: CourseResponse
    total_lessons: int
    completed_lessons: int
    percentage: float


class DashboardResponse(BaseModel):
    today: date
    streak: int
    streak_label: str
    lessons_today: int
    total_courses: int
    active_courses: int
    total_books: int
    course_progress: list[CourseProgressResponse]
    recent_activity: list[CompletedLessonResponse]


class LibraryItemResponse(BaseModel):
    type: Literal["course", "book"]
    id: str
    title: str
    topic: str | None = None
    description: str | None = None
    category: str | None = None
    cover_image_url: str | None = None
    tags: list[TagResponse] = Field(default_factory=list)


class LibraryResponse(BaseModel):
    items: list[LibraryItemResponse]
    count: int


class TopicListResponse(BaseModel):
    topics: list[str]


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = __version__
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
