"""
Unit tests for choosing an OCR language from a record or its text
"""
import pytest
from langdetect.lang_detect_exception import LangDetectException

from magazine_backend.infrastructure.ocr import language_detection
from magazine_backend.infrastructure.ocr.language_detection import detect_language_hint

ENGLISH = (
    "This issue of the magazine collects letters from readers, a report on the annual "
    "gathering and a long essay about the history of the temple and the people who built it."
)
HINDI = "यह पत्रिका हर महीने प्रकाशित होती है और इसमें जैन धर्म के सिद्धांतों के बारे में लेख होते हैं।"


def test_stored_language_wins():
    assert detect_language_hint("Gujarati", ENGLISH) == "guj"


@pytest.mark.parametrize("text,expected", [(ENGLISH, "eng"), (HINDI, "hin")])
def test_guesses_from_text(text, expected):
    assert detect_language_hint(None, text) == expected


@pytest.mark.parametrize("text", [None, "", "Page 12\n\n  Index  "])
def test_short_samples_use_default(text):
    assert detect_language_hint("", text) == "eng"


def test_detection_errors_use_default(monkeypatch):
    def failing(sample):
        raise LangDetectException(0, "No features in text.")

    monkeypatch.setattr(language_detection, "detect", failing)

    assert detect_language_hint(None, "1234 5678 9012 3456 7890 1234 5678") == "eng"


def test_unmapped_languages_use_default(monkeypatch):
    monkeypatch.setattr(language_detection, "detect", lambda sample: "zh-cn")

    assert detect_language_hint(None, ENGLISH) == "eng"
