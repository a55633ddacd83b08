"""Library listing: courses and books in one filterable list."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from learnhub.db.books_repository import BookRecord, get_all_books
from learnhub.db.courses_repository import CourseRecord, get_all_courses
from learnhub.db.tags_repository import TagRecord, get_tags_by_course
from learnhub.utils.text_utils import matches_search

ALL = "all"


class ContentType(str, Enum):
    ALL = "all"
    COURSE = "course"
    BOOK = "book"


@dataclass
class LibraryItem:
    """A course or book as shown in the library grid."""

    type: ContentType
    id: str
    title: str
    topic: str | None
    description: str | None
    cover_image_url: str | None = None
    category: str | None = None
    created_at: str = ""
    tags: list[TagRecord] = field(default_factory=list)


@dataclass
class LibraryFilters:
    content_type: ContentType = ContentType.ALL
    topic: str = ALL
    tag_ids: list[str] = field(default_factory=list)
    search: str = ""


def course_item(course: CourseRecord, tags: list[TagRecord]) -> LibraryItem:
    return LibraryItem(
        type=ContentType.COURSE,
        id=course.id,
        title=course.title,
        topic=course.topic,
        description=course.description,
        category=course.category,
        created_at=course.created_at,
        tags=list(tags),
    )


def book_item(book: BookRecord) -> LibraryItem:
    return LibraryItem(
        type=ContentType.BOOK,
        id=book.id,
        title=book.title,
        topic=book.topic,
        description=book.summary,
        cover_image_url=book.cover_image_url,
        created_at=book.created_at,
    )


def filter_items(items: list[LibraryItem], filters: LibraryFilters) -> list[LibraryItem]:
    """Apply type, topic, tag and search filters in that order.

    Books carry no tags, so any tag filter excludes them. A course matches
    a tag filter if it has at least one of the selected tags.
    """
    content_type = ContentType(filters.content_type)
    result = [
        item
        for item in items
        if content_type is ContentType.ALL or item.type is content_type
    ]

    if filters.topic and filters.topic != ALL:
        result = [item for item in result if item.topic == filters.topic]

    if filters.tag_ids:
        wanted = set(filters.tag_ids)
        result = [
            item
            for item in result
            if item.type is ContentType.COURSE and any(t.id in wanted for t in item.tags)
        ]

    if filters.search:
        result = [item for item in result if matches_search(filters.search, item.title, item.topic)]

    return result


def list_library(filters: LibraryFilters | None = None) -> list[LibraryItem]:
    """Courses (newest first) followed by books (newest first), filtered."""
    tags_by_course = get_tags_by_course()
    items = [course_item(c, tags_by_course.get(c.id, [])) for c in get_all_courses()]
    items.extend(book_item(b) for b in get_all_books())
    return filter_items(items, filters or LibraryFilters())


def list_topics() -> list[str]:
    """Distinct non-empty topics across courses and books, sorted."""
    topics = {c.topic for c in get_all_courses() if c.topic}
    topics.update(b.topic for b in get_all_books() if b.topic)
    return sorted(topics, key=str.lower)
