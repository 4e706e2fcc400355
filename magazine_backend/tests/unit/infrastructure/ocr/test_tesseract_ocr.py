"""
Unit tests for the Tesseract fallback (pytesseract is patched out)
"""
import pytesseract
import pytest

from magazine_backend.domain.exceptions import ExternalServiceError
from magazine_backend.infrastructure.ocr.tesseract_ocr import TesseractOcr


def test_recognize_reads_each_page(monkeypatch, pdf_factory):
    calls = []

    def fake_image_to_string(image, lang):
        calls.append((image.mode, lang))
        return f"  page {len(calls)}  " if len(calls) != 2 else "   "

    monkeypatch.setattr(pytesseract, "image_to_string", fake_image_to_string)

    text = TesseractOcr(scale=1, max_pages=3).recognize(pdf_factory(4), "guj")

    assert text == "page 1\n\npage 3"
    assert calls == [("RGB", "guj")] * 3


def test_missing_binary_is_reported(monkeypatch, pdf_factory):
    def missing(image, lang):
        raise pytesseract.TesseractNotFoundError()

    monkeypatch.setattr(pytesseract, "image_to_string", missing)

    with pytest.raises(ExternalServiceError, match="Tesseract"):
        TesseractOcr(scale=1).recognize(pdf_factory(1))
