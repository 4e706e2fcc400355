"""Normalizes free-form tag suggestions returned by the language model."""
from __future__ import annotations

import re
from typing import List, Optional

_SPLIT = re.compile(r"[\n,;]+")
_LEADING_BULLET = re.compile(r"^[-•\d.)\s]+")
# "Tag Name - relates to ..." explanations requested by the generation prompt.
_EXPLANATION = re.compile(r"\s+[-–:]\s+.*$")


def _title_case(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def normalize_tag(raw: str, *, min_words: int = 1, max_words: int = 3) -> Optional[str]:
    cleaned = _LEADING_BULLET.sub("", raw).strip()
    cleaned = _EXPLANATION.sub("", cleaned).strip()
    if not cleaned:
        return None
    words = cleaned.split()[:max_words]
    if len(words) < min_words:
        return None
    return " ".join(_title_case(word) for word in words)


def normalize_tags(raw_text: str, *, min_words: int = 1, max_words: int = 3, limit: int = 8) -> List[str]:
    seen = set()
    tags: List[str] = []
    for raw in _SPLIT.split(raw_text or ""):
        normalized = normalize_tag(raw.strip(), min_words=min_words, max_words=max_words)
        if not normalized:
            continue
        key = normalized.lower()
        if key in seen:
            continue
        seen.add(key)
        tags.append(normalized)
        if len(tags) >= limit:
            break
    return tags
