"""Tests for text utilities."""

from learnhub.utils.text_utils import clean_optional, matches_search, sanitize_filename


class TestCleanOptional:
    def test_none(self):
        assert clean_optional(None) is None

    def test_blank_becomes_none(self):
        assert clean_optional("   ") is None

    def test_strips(self):
        assert clean_optional("  Python  ") == "Python"


class TestSanitizeFilename:
    def test_keeps_safe_names(self):
        assert sanitize_filename("book-v2.pdf") == "book-v2.pdf"

    def test_drops_directories(self):
        assert sanitize_filename("../../etc/passwd") == "passwd"
        assert sanitize_filename("C:\\Users\\me\\cover.png") == "cover.png"

    def test_replaces_spaces_and_accents(self):
        assert sanitize_filename("Café Crème.pdf") == "Cafe_Creme.pdf"

    def test_fallback(self):
        assert sanitize_filename("???") == "file"
        assert sanitize_filename("", fallback="upload") == "upload"


class TestMatchesSearch:
    def test_case_insensitive(self):
        assert matches_search("pyth", "Learning Python", None)

    def test_any_field(self):
        assert matches_search("data", "Intro", "Data Science")

    def test_no_match(self):
        assert not matches_search("rust", "Python", None)
