"""Tests for the filesystem blob store."""

import pytest

from learnhub.storage.blob_store import (
    BOOKS_BUCKET,
    MEDIA_BUCKET,
    BlobStore,
    ObjectExistsError,
    ObjectNotFoundError,
    StorageError,
    book_object_path,
    get_blob_store,
    media_object_path,
    reset_blob_store,
)


@pytest.fixture
def blob_store(tmp_path):
    return BlobStore(
        root=tmp_path / "storage",
        public_base_url="http://localhost:8000/storage/",
        buckets=[BOOKS_BUCKET, MEDIA_BUCKET],
    )


class TestUpload:
    """Tests for BlobStore.upload and reads."""

    def test_upload_writes_file(self, blob_store, tmp_path):
        path = blob_store.upload(BOOKS_BUCKET, "pdfs/1_book.pdf", b"%PDF-1.4")
        assert path == "pdfs/1_book.pdf"
        assert (tmp_path / "storage" / "books" / "pdfs" / "1_book.pdf").read_bytes() == b"%PDF-1.4"
        assert blob_store.exists(BOOKS_BUCKET, path)

    def test_upload_never_overwrites(self, blob_store):
        blob_store.upload(BOOKS_BUCKET, "covers/1_a.png", b"one")
        with pytest.raises(ObjectExistsError):
            blob_store.upload(BOOKS_BUCKET, "covers/1_a.png", b"two")
        assert blob_store.open_object(BOOKS_BUCKET, "covers/1_a.png").read_bytes() == b"one"

    def test_unknown_bucket(self, blob_store):
        with pytest.raises(StorageError, match="Unknown bucket"):
            blob_store.upload("avatars", "a.png", b"x")

    @pytest.mark.parametrize("path", ["../escape.pdf", "/etc/passwd", "", "a/../../b"])
    def test_path_must_stay_in_bucket(self, blob_store, path):
        with pytest.raises(StorageError):
            blob_store.resolve(BOOKS_BUCKET, path)

    def test_open_missing_object(self, blob_store):
        with pytest.raises(ObjectNotFoundError):
            blob_store.open_object(MEDIA_BUCKET, "videos/none.mp4")

    def test_delete(self, blob_store):
        blob_store.upload(MEDIA_BUCKET, "images/1.png", b"img")
        blob_store.delete(MEDIA_BUCKET, "images/1.png")
        assert not blob_store.exists(MEDIA_BUCKET, "images/1.png")
        with pytest.raises(ObjectNotFoundError):
            blob_store.delete(MEDIA_BUCKET, "images/1.png")


class TestPublicUrls:
    """Tests for public URL generation and parsing."""

    def test_public_url(self, blob_store):
        url = blob_store.get_public_url(MEDIA_BUCKET, "videos/123.mp4")
        assert url == "http://localhost:8000/storage/course-videos/videos/123.mp4"

    def test_round_trip_with_quoting(self, blob_store):
        url = blob_store.get_public_url(BOOKS_BUCKET, "pdfs/1_a b.pdf")
        assert "a%20b" in url
        assert blob_store.path_from_public_url(url) == (BOOKS_BUCKET, "pdfs/1_a b.pdf")

    def test_foreign_url_rejected(self, blob_store):
        with pytest.raises(StorageError):
            blob_store.path_from_public_url("https://example.com/other/books/x.pdf")


class TestObjectPaths:
    """Tests for object naming."""

    def test_book_pdf_path(self):
        assert book_object_path("pdf", "My Book.pdf", timestamp_ms=1700) == "pdfs/1700_My_Book.pdf"

    def test_book_cover_path(self):
        assert book_object_path("cover", "cover.png", timestamp_ms=5) == "covers/5_cover.png"

    def test_media_path_keeps_extension(self):
        assert media_object_path("video", "Lecture 1.MP4", timestamp_ms=42) == "videos/42.mp4"
        assert media_object_path("image", "slide.webp", timestamp_ms=42) == "images/42.webp"

    def test_media_pdf_always_pdf(self):
        assert media_object_path("pdf", "handout", timestamp_ms=7) == "pdfs/7.pdf"


class TestConfiguredStore:
    def test_store_uses_config(self, workspace):
        store = get_blob_store()
        assert store.root.as_posix() == "data/storage"
        assert store.buckets == ["books", "course-videos"]
        assert get_blob_store() is store

    def test_reset(self, workspace):
        store = get_blob_store()
        reset_blob_store()
        assert get_blob_store() is not store
