"""Text-layer extraction with PyMuPDF."""
from __future__ import annotations

import logging
import re
from typing import Optional

import fitz  # type: ignore

from magazine_backend.domain.exceptions import DomainValidationError

logger = logging.getLogger(__name__)

_TRAILING_SPACES = re.compile(r"[ \t]+\n")


def open_pdf(data: bytes) -> "fitz.Document":
    """Open PDF bytes, turning parser failures into a validation error."""
    if not data:
        raise DomainValidationError("PDF file is empty")
    try:
        return fitz.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as exc:
        raise DomainValidationError(f"Invalid PDF file: {exc}") from exc


class PdfTextExtractor:
    """Reads the embedded text layer page by page."""

    def page_count(self, data: bytes) -> int:
        with open_pdf(data) as document:
            return document.page_count

    def extract(self, data: bytes, max_pages: Optional[int] = None) -> str:
        """
        Concatenate page texts separated by a blank line.

        ``max_pages`` limits the scan to the first pages (at least one).
        """
        with open_pdf(data) as document:
            total = document.page_count
            pages = total if max_pages is None else min(total, max(1, max_pages))
            chunks = []
            for index in range(pages):
                text = document.load_page(index).get_text("text") or ""
                chunks.append(_TRAILING_SPACES.sub("\n", text).rstrip())
        text = "\n\n".join(chunks).replace("\x00", "").strip()
        logger.debug("Extracted %d characters from %d page(s)", len(text), pages)
        return text
