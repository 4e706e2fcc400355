"""OCR language hints (Tesseract three-letter codes)."""
from __future__ import annotations

import re
from typing import Optional

from magazine_backend.constants import DEFAULT_OCR_LANGUAGE

LANGUAGE_ALIASES = {
    "en": "eng", "eng": "eng", "english": "eng",
    "es": "spa", "spa": "spa", "spanish": "spa", "sp": "spa",
    "fr": "fra", "fra": "fra", "fre": "fra", "french": "fra",
    "de": "deu", "deu": "deu", "ger": "deu", "german": "deu",
    "pt": "por", "por": "por", "portuguese": "por",
    "it": "ita", "ita": "ita", "italian": "ita",
    "hi": "hin", "hin": "hin", "hindi": "hin",
    "mr": "mar", "mar": "mar", "marathi": "mar",
    "bn": "ben", "ben": "ben", "bengali": "ben",
    "ta": "tam", "tam": "tam", "tamil": "tam",
    "te": "tel", "tel": "tel", "telugu": "tel",
    "gu": "guj", "guj": "guj", "gujarati": "guj",
    "ur": "urd", "urd": "urd", "urdu": "urd",
    "ar": "ara", "ara": "ara", "arabic": "ara",
}

_SEPARATORS = re.compile(r"[,/|;\s]+")
_THREE_LETTERS = re.compile(r"^[a-z]{3}$")


def _resolve_piece(piece: str) -> Optional[str]:
    normalized = re.sub(r"[^a-z]", "", piece)
    if not normalized:
        return None
    if normalized in LANGUAGE_ALIASES:
        return LANGUAGE_ALIASES[normalized]
    if _THREE_LETTERS.match(normalized):
        return normalized
    return None


def sanitize_language(raw: Optional[str]) -> Optional[str]:
    """
    Turn a free-text language value ("English", "hi, en", "guj") into a code.

    Returns None when nothing recognisable is present.
    """
    if not raw:
        return None
    lowered = raw.lower()
    for piece in _SEPARATORS.split(lowered):
        resolved = _resolve_piece(piece.strip())
        if resolved:
            return resolved
    return _resolve_piece(lowered)


def resolve_language_hint(raw: Optional[str]) -> str:
    return sanitize_language(raw) or DEFAULT_OCR_LANGUAGE
