"""Serves stored blobs under their public URLs."""

from fastapi import APIRouter
from fastapi.responses import FileResponse

from learnhub.storage.blob_store import get_blob_store

router = APIRouter(prefix="/storage", tags=["storage"])


@router.get("/{bucket}/{path:path}")
async def get_object(bucket: str, path: str) -> FileResponse:
    """Stream an object from a bucket."""
    return FileResponse(get_blob_store().open_object(bucket, path))
