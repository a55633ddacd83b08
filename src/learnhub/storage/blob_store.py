"""Filesystem-backed blob storage with public URLs.

Objects live under <root>/<bucket>/<path>. A bucket must be declared in
the configuration; object paths are relative and may not escape their
bucket. Uploads never overwrite an existing object.
"""

from __future__ import annotations

import time
from pathlib import Path, PurePosixPath
from urllib.parse import quote, unquote, urlparse

import structlog

from learnhub.config.app_config import StorageConfig, load_app_config
from learnhub.utils.text_utils import sanitize_filename
from learnhub.utils.validators import file_extension

logger = structlog.get_logger(__name__)

BOOKS_BUCKET = "books"
MEDIA_BUCKET = "course-videos"


class StorageError(Exception):
    """Base exception for blob storage failures."""

    pass


class ObjectExistsError(StorageError):
    """Raised when uploading to a path that is already taken."""

    def __init__(self, bucket: str, path: str):
        self.bucket = bucket
        self.path = path
        super().__init__(f"Object already exists: {bucket}/{path}")


class ObjectNotFoundError(StorageError):
    """Raised when reading or deleting a missing object."""

    def __init__(self, bucket: str, path: str):
        self.bucket = bucket
        self.path = path
        super().__init__(f"Object not found: {bucket}/{path}")


class BlobStore:
    """Bucket/path object store with public URL generation."""

    def __init__(self, root: Path, public_base_url: str, buckets: list[str]):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")
        self.buckets = list(buckets)

    @classmethod
    def from_config(cls, config: StorageConfig) -> "BlobStore":
        return cls(config.root, config.public_base_url, config.buckets)

    def resolve(self, bucket: str, path: str) -> Path:
        """Filesystem location of an object.

        Raises:
            StorageError: If the bucket is unknown or the path escapes it
        """
        if bucket not in self.buckets:
            raise StorageError(f"Unknown bucket: {bucket}")

        relative = PurePosixPath(path)
        if not path or relative.is_absolute() or ".." in relative.parts:
            raise StorageError(f"Invalid object path: {path!r}")

        return self.root / bucket / Path(*relative.parts)

    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str | None = None,
    ) -> str:
        """Store bytes at bucket/path.

        Returns:
            The object path, for use with get_public_url()

        Raises:
            ObjectExistsError: If the path is already taken
            StorageError: If the bucket/path is invalid or the write fails
        """
        target = self.resolve(bucket, path)
        if target.exists():
            raise ObjectExistsError(bucket, path)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            logger.error("storage.upload_failed", bucket=bucket, path=path, error=str(e))
            raise StorageError(f"Failed to store {bucket}/{path}: {e}") from e

        logger.info(
            "storage.uploaded",
            bucket=bucket,
            path=path,
            size=len(data),
            content_type=content_type,
        )
        return path

    def get_public_url(self, bucket: str, path: str) -> str:
        """Public URL under which the object is served."""
        self.resolve(bucket, path)
        return f"{self.public_base_url}/{quote(bucket)}/{quote(path)}"

    def path_from_public_url(self, url: str) -> tuple[str, str]:
        """Inverse of get_public_url().

        Raises:
            StorageError: If the URL does not point into this store
        """
        base_path = urlparse(self.public_base_url).path.rstrip("/")
        url_path = unquote(urlparse(url).path)

        if not url_path.startswith(base_path + "/"):
            raise StorageError(f"URL is not served by this store: {url}")

        bucket, _, path = url_path[len(base_path) + 1 :].partition("/")
        self.resolve(bucket, path)
        return bucket, path

    def exists(self, bucket: str, path: str) -> bool:
        return self.resolve(bucket, path).is_file()

    def open_object(self, bucket: str, path: str) -> Path:
        """Existing file for an object.

        Raises:
            ObjectNotFoundError: If there is no such object
        """
        target = self.resolve(bucket, path)
        if not target.is_file():
            raise ObjectNotFoundError(bucket, path)
        return target

    def delete(self, bucket: str, path: str) -> None:
        """Remove an object.

        Raises:
            ObjectNotFoundError: If there is no such object
        """
        target = self.open_object(bucket, path)
        target.unlink()
        logger.info("storage.deleted", bucket=bucket, path=path)


# =============================================================================
# OBJECT NAMING
# =============================================================================

# Folder per upload kind inside its bucket
_KIND_FOLDERS = {
    "pdf": "pdfs",
    "cover": "covers",
    "video": "videos",
    "image": "images",
}


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def book_object_path(kind: str, filename: str, timestamp_ms: int | None = None) -> str:
    """Path for a book's PDF or cover: "<folder>/<ms>_<name>"."""
    stamp = timestamp_ms if timestamp_ms is not None else _timestamp_ms()
    return f"{_KIND_FOLDERS[kind]}/{stamp}_{sanitize_filename(filename)}"


def media_object_path(kind: str, filename: str, timestamp_ms: int | None = None) -> str:
    """Path for lesson media: "<folder>/<ms>.<ext>".

    PDFs always get the .pdf extension.
    """
    stamp = timestamp_ms if timestamp_ms is not None else _timestamp_ms()
    if kind == "pdf":
        ext = ".pdf"
    else:
        ext = file_extension(sanitize_filename(filename))
    return f"{_KIND_FOLDERS[kind]}/{stamp}{ext}"


# Module-level store built from configuration
_store: BlobStore | None = None


def get_blob_store() -> BlobStore:
    """Store configured by load_app_config() (cached)."""
    global _store
    if _store is None:
        _store = BlobStore.from_config(load_app_config().storage)
    return _store


def reset_blob_store() -> None:
    """Drop the cached store so the next call re-reads configuration."""
    global _store
    _store = None
