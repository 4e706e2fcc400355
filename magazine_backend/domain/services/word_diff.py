"""Word-level diff used by the summary/conclusion history view."""
from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence


class DiffOp(Enum):
    SAME = "same"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class DiffToken:
    op: DiffOp
    word: str

    def to_dict(self) -> Dict[str, str]:
        return {"op": self.op.value, "word": self.word}


def _words(text: str) -> List[str]:
    return text.split()


def diff_words(old_text: str, new_text: str) -> List[DiffToken]:
    """
    Greedy two-pointer diff.

    Not a minimal edit script: a word that moved is reported as removed and
    added at its new position.
    """
    old_words = _words(old_text or "")
    new_words = _words(new_text or "")
    old_set = set(old_words)
    new_set = set(new_words)
    tokens: List[DiffToken] = []
    i = j = 0

    while i < len(old_words) or j < len(new_words):
        if i < len(old_words) and j < len(new_words) and old_words[i] == new_words[j]:
            tokens.append(DiffToken(DiffOp.SAME, old_words[i]))
            i += 1
            j += 1
        elif j < len(new_words) and new_words[j] not in old_set:
            tokens.append(DiffToken(DiffOp.ADDED, new_words[j]))
            j += 1
        elif i < len(old_words) and old_words[i] not in new_set:
            tokens.append(DiffToken(DiffOp.REMOVED, old_words[i]))
            i += 1
        else:
            if i < len(old_words):
                tokens.append(DiffToken(DiffOp.REMOVED, old_words[i]))
                i += 1
            if j < len(new_words):
                tokens.append(DiffToken(DiffOp.ADDED, new_words[j]))
                j += 1
    return tokens


def diff_lines(old_lines: Sequence[str], new_lines: Sequence[str]) -> List[List[DiffToken]]:
    """Diff line ``i`` of the new text against line ``i`` of the old text."""
    return [
        diff_words(old_lines[index] if index < len(old_lines) else "", line)
        for index, line in enumerate(new_lines)
    ]


def split_history_text(value: Any) -> List[str]:
    """History rows hold either a JSON array of lines or a plain string."""
    if value is None:
        return [""]
    if isinstance(value, list):
        return [str(item) for item in value]
    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except ValueError:
            return [value]
        if isinstance(decoded, list):
            return [str(item) for item in decoded]
    return [str(value)]
