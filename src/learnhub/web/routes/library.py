"""Library endpoints: courses and books in one filterable list."""

from fastapi import APIRouter, Query

from learnhub.core.library import ALL, ContentType, LibraryFilters, list_library, list_topics
from learnhub.web.schemas import (
    LibraryItemResponse,
    LibraryResponse,
    TagResponse,
    TopicListResponse,
)

router = APIRouter(prefix="/api/library", tags=["library"])


@router.get("", response_model=LibraryResponse)
async def get_library(
    content_type: ContentType = Query(ContentType.ALL, alias="type"),
    topic: str = Query(ALL),
    tags: list[str] | None = Query(None),
    q: str = Query(""),
) -> LibraryResponse:
    """List courses then books, filtered by type, topic, tags and search text."""
    filters = LibraryFilters(
        content_type=content_type, topic=topic, tag_ids=tags or [], search=q.strip()
    )
    items = [
        LibraryItemResponse(
            type=item.type.value,
            id=item.id,
            title=item.title,
            topic=item.topic,
            description=item.description,
            category=item.category,
            cover_image_url=item.cover_image_url,
            tags=[TagResponse.model_validate(t) for t in item.tags],
        )
        for item in list_library(filters)
    ]
    return LibraryResponse(items=items, count=len(items))


@router.get("/topics", response_model=TopicListResponse)
async def get_topics() -> TopicListResponse:
    """Distinct topics of courses and books."""
    return TopicListResponse(topics=list_topics())
