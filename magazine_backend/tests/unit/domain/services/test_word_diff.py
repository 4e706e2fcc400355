"""
Unit tests for the history word diff
"""
from magazine_backend.domain.services.word_diff import (
    DiffOp,
    diff_lines,
    diff_words,
    split_history_text,
)


def _ops(tokens):
    return [(token.op, token.word) for token in tokens]


class TestDiffWords:
    """Greedy word diff between two versions of a line."""

    def test_identical_text_is_all_same(self):
        tokens = diff_words("a b c", "a b c")
        assert all(token.op is DiffOp.SAME for token in tokens)
        assert [token.word for token in tokens] == ["a", "b", "c"]

    def test_replaced_word(self):
        assert _ops(diff_words("the quick fox", "the slow fox")) == [
            (DiffOp.SAME, "the"),
            (DiffOp.ADDED, "slow"),
            (DiffOp.REMOVED, "quick"),
            (DiffOp.SAME, "fox"),
        ]

    def test_appended_words(self):
        assert _ops(diff_words("hello", "hello there world")) == [
            (DiffOp.SAME, "hello"),
            (DiffOp.ADDED, "there"),
            (DiffOp.ADDED, "world"),
        ]

    def test_removed_words(self):
        assert _ops(diff_words("one two three", "one three")) == [
            (DiffOp.SAME, "one"),
            (DiffOp.REMOVED, "two"),
            (DiffOp.SAME, "three"),
        ]

    def test_moved_word_is_removed_and_added(self):
        tokens = _ops(diff_words("a b", "b a"))
        assert (DiffOp.REMOVED, "a") in tokens
        assert (DiffOp.ADDED, "a") in tokens

    def test_empty_inputs(self):
        assert diff_words("", "") == []
        assert _ops(diff_words(None, "new")) == [(DiffOp.ADDED, "new")]

    def test_token_serialization(self):
        token = diff_words("", "word")[0]
        assert token.to_dict() == {"op": "added", "word": "word"}


class TestDiffLines:

    def test_new_lines_are_compared_against_missing_old_lines(self):
        result = diff_lines(["first"], ["first", "second"])
        assert len(result) == 2
        assert _ops(result[1]) == [(DiffOp.ADDED, "second")]


class TestSplitHistoryText:

    def test_json_array(self):
        assert split_history_text('["line one", "line two"]') == ["line one", "line two"]

    def test_plain_string(self):
        assert split_history_text("plain text") == ["plain text"]

    def test_none(self):
        assert split_history_text(None) == [""]

    def test_list_value(self):
        assert split_history_text(["a", 2]) == ["a", "2"]

    def test_json_scalar_is_kept_as_text(self):
        assert split_history_text("42") == ["42"]
