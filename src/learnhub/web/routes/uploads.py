"""Lesson media upload endpoint."""

from fastapi import APIRouter, File, UploadFile, status

from learnhub.core.uploads import UploadedFile, upload_lesson_media
from learnhub.web.schemas import MediaUploadResponse

router = APIRouter(prefix="/api/uploads", tags=["uploads"])


@router.post("/{kind}", response_model=MediaUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_media(kind: str, file: UploadFile = File(...)) -> MediaUploadResponse:
    """Store a video, image or PDF for a lesson and return its public URL."""
    upload = UploadedFile(
        filename=file.filename or "",
        content_type=file.content_type,
        data=await file.read(),
    )
    return MediaUploadResponse(kind=kind, url=upload_lesson_media(kind, upload))
