"""Tag endpoints."""

import structlog
from fastapi import APIRouter, HTTPException, status

from learnhub.db.tags_repository import delete_tag, get_all_tags, insert_tag
from learnhub.utils.validators import validate_hex_color
from learnhub.web.schemas import TagCreate, TagListResponse, TagResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/tags", tags=["tags"])


@router.get("", response_model=TagListResponse)
async def list_tags() -> TagListResponse:
    """List all tags by name."""
    tags = [TagResponse.model_validate(t) for t in get_all_tags()]
    return TagListResponse(tags=tags, count=len(tags))


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(body: TagCreate) -> TagResponse:
    """Create a tag. Names are unique."""
    try:
        color = validate_hex_color(body.color)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    if any(t.name == body.name for t in get_all_tags()):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Tag '{body.name}' already exists",
        )

    tag = insert_tag(body.name, color)
    logger.info("tags.created", tag_id=tag.id, name=tag.name)
    return TagResponse.model_validate(tag)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_tag(tag_id: str) -> None:
    """Delete a tag and detach it from all courses."""
    if not delete_tag(tag_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tag '{tag_id}' not found",
        )
    logger.info("tags.deleted", tag_id=tag_id)
