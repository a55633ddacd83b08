"""Shared fixtures.

Every test runs in its own temporary working directory so the default
relative paths (db/, data/storage, data/config) never touch the repo.
"""

from datetime import datetime, timezone
from pathlib import Path

import fitz
import pytest
from fastapi.testclient import TestClient

from learnhub.config.app_config import ENV_OVERRIDES, clear_config_cache
from learnhub.core.course_editor import CourseDraft, LessonDraft, save_course
from learnhub.db.database import init_db
from learnhub.storage.blob_store import get_blob_store, reset_blob_store
from learnhub.web.api import create_app


def make_pdf_bytes(pages: int = 3) -> bytes:
    """Small PDF with one line of text per page."""
    doc = fitz.open()
    for number in range(1, pages + 1):
        page = doc.new_page()
        page.insert_text((72, 72), f"Page {number}: test content")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Isolated working directory with fresh config and storage caches."""
    for var in ENV_OVERRIDES:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_config_cache()
    reset_blob_store()
    yield tmp_path
    clear_config_cache()
    reset_blob_store()


@pytest.fixture
def db(workspace) -> Path:
    """Initialized test database."""
    db_path = workspace / "db" / "test.db"
    init_db(db_path)
    return db_path


@pytest.fixture
def store(workspace):
    """Blob store rooted in the workspace."""
    return get_blob_store()


@pytest.fixture
def pdf_bytes() -> bytes:
    return make_pdf_bytes(3)


@pytest.fixture
def png_bytes() -> bytes:
    """Bytes that pass for a PNG cover (type checks use the content type)."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def pdf_file(tmp_path) -> Path:
    """A 3-page PDF on disk."""
    path = tmp_path / "book.pdf"
    path.write_bytes(make_pdf_bytes(3))
    return path


@pytest.fixture
def make_course(db):
    """Factory creating a course with n text lessons."""

    def _make(title: str = "Python Basics", lessons: int = 3, **fields):
        drafts = [
            LessonDraft(content_type="text", title=f"Part {i + 1}", content_url=f"Body {i + 1}")
            for i in range(lessons)
        ]
        return save_course(CourseDraft(title=title, **fields), drafts)

    return _make


@pytest.fixture
def utc():
    """Build an aware UTC datetime."""

    def _utc(year, month, day, hour=12, minute=0):
        return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)

    return _utc


@pytest.fixture
def client(workspace):
    """Test client on a fresh database in the workspace."""
    return TestClient(create_app())
