"""Text layer extraction with a Tesseract fallback for scanned PDFs."""
from __future__ import annotations

import logging
from typing import Optional

from magazine_backend.application.dto.pipeline_dto import ExtractionResultDTO
from magazine_backend.domain.services.text_quality import has_meaningful_text
from magazine_backend.infrastructure.ocr.language_detection import detect_language_hint
from magazine_backend.infrastructure.ocr.tesseract_ocr import TesseractOcr
from magazine_backend.infrastructure.pdf.pdf_text_extractor import PdfTextExtractor

logger = logging.getLogger(__name__)


class TextExtractionService:

    def __init__(self, extractor: Optional[PdfTextExtractor] = None, ocr: Optional[TesseractOcr] = None):
        self._extractor = extractor or PdfTextExtractor()
        self._ocr = ocr or TesseractOcr()

    def extract(self, data: bytes, language: Optional[str] = None) -> ExtractionResultDTO:
        text = self._extractor.extract(data)
        hint = detect_language_hint(language, text)
        if has_meaningful_text(text):
            return ExtractionResultDTO(text=text, used_ocr=False, language=hint)

        logger.info("Text layer too sparse (%d chars); running OCR in %s", len(text), hint)
        ocr_text = self._ocr.recognize(data, hint)
        if ocr_text:
            return ExtractionResultDTO(text=ocr_text, used_ocr=True, language=detect_language_hint(language, ocr_text))
        return ExtractionResultDTO(text=text, used_ocr=False, language=hint)
