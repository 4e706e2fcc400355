"""ExtractText Commands - pull readable text out of record PDFs and uploads."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from magazine_backend.application.dto.pipeline_dto import ExtractionResultDTO
from magazine_backend.application.services.pdf_source import PdfSourceResolver
from magazine_backend.application.services.text_extraction import TextExtractionService
from magazine_backend.domain.exceptions import DomainValidationError, EntityNotFoundError
from magazine_backend.domain.repositories import RecordRepository
from magazine_backend.domain.services.text_quality import has_meaningful_text
from magazine_backend.infrastructure.cache.records_cache import RecordsCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractRecordTextCommand:
    record_id: int
    force: bool = False


class ExtractRecordTextHandler:
    """
    Return a record's stored text when it is usable; otherwise read the PDF
    (text layer first, OCR when the layer is empty or junk) and store it.
    """

    def __init__(
        self,
        record_repository: RecordRepository,
        source_resolver: PdfSourceResolver,
        extraction: TextExtractionService,
        cache: RecordsCache,
    ):
        self._records = record_repository
        self._sources = source_resolver
        self._extraction = extraction
        self._cache = cache

    def handle(self, command: ExtractRecordTextCommand) -> ExtractionResultDTO:
        record = self._records.get(command.record_id)
        if record is None:
            raise EntityNotFoundError("Record", command.record_id, message="Record not found.")

        if not command.force and has_meaningful_text(record.extracted_text):
            return ExtractionResultDTO(text=record.extracted_text or "", used_ocr=False, cached=True)

        if not record.pdf_public_id and not record.pdf_url:
            raise DomainValidationError("PDF URL is missing for this record.")

        result = self._extraction.extract(self._sources.fetch(record), record.language)
        if not result.text.strip():
            raise DomainValidationError("No text could be extracted from this PDF.")

        changes: Dict[str, Any] = {"extracted_text": result.text}
        if not record.language and result.language:
            changes["language"] = result.language
        self._records.update(record.id, changes)
        self._cache.invalidate()
        logger.info(
            "Stored %d characters of extracted text for record %s (ocr=%s)",
            len(result.text), record.id, result.used_ocr,
        )
        return result


@dataclass(frozen=True)
class ExtractTextFromUploadCommand:
    pdf: bytes
    language: Optional[str] = None


class ExtractTextFromUploadHandler:
    """Same extraction for a PDF that has not been saved yet."""

    def __init__(self, extraction: TextExtractionService):
        self._extraction = extraction

    def handle(self, command: ExtractTextFromUploadCommand) -> ExtractionResultDTO:
        if not command.pdf:
            raise DomainValidationError("A PDF file is required.")
        return self._extraction.extract(command.pdf, command.language)
