"""Local OCR fallback: render pages with PyMuPDF and read them with Tesseract."""
from __future__ import annotations

import io
import logging

import fitz  # type: ignore
import pytesseract
from PIL import Image

from magazine_backend.constants import DEFAULT_OCR_LANGUAGE, OCR_PAGE_LIMIT, OCR_RENDER_SCALE
from magazine_backend.domain.exceptions import ExternalServiceError
from magazine_backend.infrastructure.pdf.pdf_text_extractor import open_pdf

logger = logging.getLogger(__name__)


class TesseractOcr:

    def __init__(self, *, scale: float = OCR_RENDER_SCALE, max_pages: int = OCR_PAGE_LIMIT) -> None:
        self.scale = scale
        self.max_pages = max_pages

    def recognize(self, data: bytes, language: str = DEFAULT_OCR_LANGUAGE) -> str:
        matrix = fitz.Matrix(self.scale, self.scale)
        chunks = []
        with open_pdf(data) as document:
            pages = min(document.page_count, self.max_pages)
            for index in range(pages):
                pixmap = document.load_page(index).get_pixmap(matrix=matrix, alpha=False)
                image = Image.open(io.BytesIO(pixmap.tobytes("png"))).convert("RGB")
                try:
                    text = pytesseract.image_to_string(image, lang=language or DEFAULT_OCR_LANGUAGE)
                except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
                    raise ExternalServiceError("Tesseract", str(exc)) from exc
                chunks.append(text.strip())
        logger.info("OCR'd %d page(s) in %s", pages, language)
        return "\n\n".join(chunk for chunk in chunks if chunk).strip()
