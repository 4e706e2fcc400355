"""
Unit tests for text quality checks, language hints, tag normalization and
page-text file parsing
"""
import pytest

from magazine_backend.domain.services.page_text_parser import parse_page_text_file, text_for_pages
from magazine_backend.domain.services.tag_normalizer import normalize_tag, normalize_tags
from magazine_backend.domain.services.text_quality import (
    collapse_whitespace,
    has_meaningful_text,
    meaningful_extract,
)
from magazine_backend.domain.value_objects.language import resolve_language_hint, sanitize_language


class TestTextQuality:

    def test_letter_threshold(self):
        assert has_meaningful_text("a" * 40)
        assert not has_meaningful_text("a" * 39 + "1234567890")
        assert not has_meaningful_text("   ")
        assert not has_meaningful_text(None)

    def test_meaningful_extract(self):
        assert meaningful_extract(None, 30) is None
        assert meaningful_extract(" \x00 ", 30) is None
        assert meaningful_extract("---- ....", 30) is None
        assert meaningful_extract("short text", 30) is None
        assert meaningful_extract("  " + "x" * 20 + "  ", 30) == "x" * 20

    def test_small_minimum_is_honoured(self):
        assert meaningful_extract("a", 2) is None
        assert meaningful_extract("abcdefghijklmnop", 2) == "abcdefghijklmnop"

    def test_collapse_whitespace(self):
        assert collapse_whitespace("a \n\n b\tc") == "a b c"
        assert collapse_whitespace("abcdef", 3) == "abc"


class TestLanguage:

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("English", "eng"),
            ("hi, en", "hin"),
            ("guj", "guj"),
            ("Gujarati / English", "guj"),
            ("12", None),
            (None, None),
        ],
    )
    def test_sanitize_language(self, raw, expected):
        assert sanitize_language(raw) == expected

    def test_resolve_defaults_to_english(self):
        assert resolve_language_hint(None) == "eng"
        assert resolve_language_hint("Marathi") == "mar"


class TestTagNormalizer:

    def test_strips_bullets_and_explanations(self):
        assert normalize_tag("1. jain philosophy - about the text") == "Jain Philosophy"

    def test_caps_word_count(self):
        assert normalize_tag("very long tag name here") == "Very Long Tag"

    def test_min_words(self):
        assert normalize_tag("single", min_words=2) is None

    def test_dedupes_case_insensitively_and_limits(self):
        raw = "- ahimsa\nAHIMSA, meditation; karma\nfasting"
        assert normalize_tags(raw, limit=3) == ["Ahimsa", "Meditation", "Karma"]

    def test_empty_input(self):
        assert normalize_tags("") == []


class TestPageTextParser:

    RAW = "\ufeffignored preface\r\nPage 1\r\nHello\r\nthere\r\n--- Page 2 ---\r\nWorld\r\nPage 0\r\norphan\r\n"

    def test_parse_page_markers(self):
        assert parse_page_text_file(self.RAW) == {1: "Hello\nthere", 2: "World"}

    def test_text_for_pages_skips_missing_pages(self):
        pages = parse_page_text_file(self.RAW)
        assert text_for_pages(pages, [2, 3, 1]) == "World\n\nHello\nthere"

    def test_no_markers(self):
        assert parse_page_text_file("just text") == {}
