"""Blob storage for uploaded PDFs, covers, videos and images."""

from learnhub.storage.blob_store import (
    BOOKS_BUCKET,
    MEDIA_BUCKET,
    BlobStore,
    ObjectExistsError,
    ObjectNotFoundError,
    StorageError,
    get_blob_store,
    reset_blob_store,
)

__all__ = [
    "BOOKS_BUCKET",
    "MEDIA_BUCKET",
    "BlobStore",
    "ObjectExistsError",
    "ObjectNotFoundError",
    "StorageError",
    "get_blob_store",
    "reset_blob_store",
]
