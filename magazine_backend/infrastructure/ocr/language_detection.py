"""Pick a Tesseract language for a record from its stored value or its text."""
from __future__ import annotations

import logging
import re
from typing import Optional

from langdetect import DetectorFactory, detect
from langdetect.lang_detect_exception import LangDetectException

from magazine_backend.constants import DEFAULT_OCR_LANGUAGE, LANGUAGE_DETECTION_MIN_CHARS
from magazine_backend.domain.value_objects.language import resolve_language_hint, sanitize_language

logger = logging.getLogger(__name__)

# langdetect is probabilistic; a fixed seed keeps results stable between runs.
DetectorFactory.seed = 0

_WHITESPACE = re.compile(r"\s+")


def detect_language_hint(stored: Optional[str], text: Optional[str] = None) -> str:
    """
    Return the stored language when it is recognisable, otherwise guess from
    ``text``. Samples shorter than LANGUAGE_DETECTION_MIN_CHARS are not guessed.
    """
    from_record = sanitize_language(stored)
    if from_record:
        return from_record

    sample = _WHITESPACE.sub(" ", text or "").strip()
    if len(sample) < LANGUAGE_DETECTION_MIN_CHARS:
        return DEFAULT_OCR_LANGUAGE

    try:
        detected = detect(sample)
    except LangDetectException as exc:
        logger.warning("Language detection failed: %s", exc)
        return DEFAULT_OCR_LANGUAGE
    return resolve_language_hint(detected)
