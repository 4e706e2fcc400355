"""Heuristics deciding whether extracted PDF text is worth keeping."""
from __future__ import annotations

import re
from typing import Optional

from magazine_backend.constants import MIN_VALID_LETTER_COUNT


def has_meaningful_text(text: Optional[str], min_letters: int = MIN_VALID_LETTER_COUNT) -> bool:
    if not text or not text.strip():
        return False
    letters = sum(1 for char in text if char.isalpha())
    return letters >= min_letters


def meaningful_extract(text: Optional[str], min_chars: int) -> Optional[str]:
    """Return cleaned text, or None when it holds no usable content."""
    if not text:
        return None
    cleaned = text.replace("\x00", "").strip()
    if not cleaned:
        return None
    compact = re.sub(r"\s+", "", cleaned)
    if not any(char.isalnum() for char in compact):
        return None
    if len(compact) < min(16, min_chars):
        return None
    return cleaned


def collapse_whitespace(text: str, max_chars: Optional[int] = None) -> str:
    compact = re.sub(r"\s+", " ", text or "").strip()
    return compact[:max_chars] if max_chars is not None else compact
