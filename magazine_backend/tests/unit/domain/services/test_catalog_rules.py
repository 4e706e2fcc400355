"""
Unit tests for tag and author validation rules
"""
import pytest

from magazine_backend.domain.exceptions import DomainValidationError
from magazine_backend.domain.services.catalog_rules import (
    author_deletion_warnings,
    author_search_pattern,
    like_to_regex,
    normalize_national,
    parse_important,
    parse_positive_ids,
    validate_tag_name,
)
from magazine_backend.constants import AUTHOR_NATIONAL_UPDATE_VALUES, AUTHOR_NATIONAL_VALUES


class TestTagName:

    def test_trims(self):
        assert validate_tag_name("  Ahimsa ") == "Ahimsa"

    @pytest.mark.parametrize("raw", [None, 5, "", "   ", "x" * 101])
    def test_rejects_invalid(self, raw):
        with pytest.raises(DomainValidationError):
            validate_tag_name(raw)

    def test_strict_pattern(self):
        assert validate_tag_name("Jain-Dharma_2", strict=True) == "Jain-Dharma_2"
        assert validate_tag_name("Jain & Dharma") == "Jain & Dharma"
        with pytest.raises(DomainValidationError):
            validate_tag_name("Jain & Dharma", strict=True)


class TestParseImportant:

    @pytest.mark.parametrize(
        "raw,expected",
        [(True, True), (None, None), ("1", True), ("TRUE", True), ("0", False), ("false", False), ("", None), ("null", None)],
    )
    def test_accepted_values(self, raw, expected):
        assert parse_important(raw) is expected

    def test_rejects_other_values(self):
        with pytest.raises(DomainValidationError):
            parse_important("maybe")


class TestAuthorRules:

    def test_national_values(self):
        assert normalize_national("jainmonk", AUTHOR_NATIONAL_VALUES) == "jainmonk"
        assert normalize_national("jainmonk", AUTHOR_NATIONAL_UPDATE_VALUES) is None
        assert normalize_national("null", AUTHOR_NATIONAL_VALUES) is None
        assert normalize_national(None, AUTHOR_NATIONAL_VALUES) is None

    def test_search_pattern(self):
        assert author_search_pattern("J. Smith") == "%j%s%m%i%t%h%"
        assert author_search_pattern(" .. ") is None

    def test_like_to_regex(self):
        regex = like_to_regex(author_search_pattern("jsm"))
        assert regex.match("John Smith")
        assert not regex.match("Mary Jones")
        assert like_to_regex("a_c").match("ABC")

    def test_deletion_warnings(self):
        assert author_deletion_warnings(0) == []
        assert len(author_deletion_warnings(3)) == 1
        assert len(author_deletion_warnings(11)) == 2


class TestParsePositiveIds:

    def test_valid(self):
        assert parse_positive_ids([3, 1]) == [3, 1]

    @pytest.mark.parametrize("raw", [None, [], "1,2", [0], [-1], [True], ["2"]])
    def test_invalid(self, raw):
        with pytest.raises(DomainValidationError):
            parse_positive_ids(raw)
