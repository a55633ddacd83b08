"""Tests for PDF page access."""

import pytest

from learnhub.core.pdf_pages import (
    PageOutOfRangeError,
    PdfOpenError,
    clamp_page,
    get_page_count,
    render_page_png,
)


def _png_width(data: bytes) -> int:
    # IHDR width is the first field after the 8-byte signature and chunk header
    return int.from_bytes(data[16:20], "big")


class TestGetPageCount:
    def test_counts_pages(self, pdf_file):
        assert get_page_count(pdf_file) == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(PdfOpenError):
            get_page_count(tmp_path / "missing.pdf")

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"this is not a pdf")
        with pytest.raises(PdfOpenError):
            get_page_count(path)


class TestRenderPagePng:
    def test_renders_png(self, pdf_file):
        data = render_page_png(pdf_file, 1)
        assert data.startswith(b"\x89PNG")
        assert abs(_png_width(data) - 800) <= 1

    def test_custom_width(self, pdf_file):
        data = render_page_png(pdf_file, 3, width=300)
        assert abs(_png_width(data) - 300) <= 1

    @pytest.mark.parametrize("page", [0, 4])
    def test_out_of_range(self, pdf_file, page):
        with pytest.raises(PageOutOfRangeError) as exc_info:
            render_page_png(pdf_file, page)
        assert exc_info.value.total_pages == 3


class TestClampPage:
    @pytest.mark.parametrize(
        "page,total,expected",
        [(0, 5, 1), (1, 5, 1), (3, 5, 3), (6, 5, 5), (2, 0, 1)],
    )
    def test_clamp(self, page, total, expected):
        assert clamp_page(page, total) == expected
