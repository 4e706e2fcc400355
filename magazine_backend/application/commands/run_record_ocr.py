"""
RunRecordOcr Command - OCR a record's PDF through iLovePDF and re-host it.

The OCR'd file can be larger than the blob store accepts. When an upload is
rejected for size, the file is compressed through iLovePDF at the next level
of the compression plan and the upload retried. Every upload and compression
step is recorded as a timestamped event so callers can report what happened.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional

from magazine_backend.application.dto.pipeline_dto import OcrResultDTO, UploadOutcomeDTO
from magazine_backend.application.services.pdf_source import PdfSourceResolver
from magazine_backend.domain.entities.record import MagazineRecord
from magazine_backend.domain.entities.timestamps import format_timestamp, utc_now
from magazine_backend.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    ExternalServiceError,
    OcrPipelineError,
    RepositoryError,
    StorageSizeLimitError,
)
from magazine_backend.domain.repositories import BlobStorage, RecordRepository
from magazine_backend.domain.services.text_formatting import derive_ocr_public_id
from magazine_backend.domain.services.text_quality import meaningful_extract
from magazine_backend.infrastructure.cache.records_cache import RecordsCache
from magazine_backend.infrastructure.ocr.ilovepdf_client import IlovePdfClient
from magazine_backend.infrastructure.pdf.pdf_text_extractor import PdfTextExtractor

logger = logging.getLogger(__name__)


def build_compression_plan(primary: Optional[str], fallback: Optional[str], max_attempts: int) -> List[str]:
    """Primary level, then the fallback (if different), padded with the last level."""
    plan: List[str] = []
    if primary:
        plan.append(primary)
    if fallback and (not plan or plan[-1] != fallback):
        plan.append(fallback)
    while len(plan) < max_attempts:
        plan.append(plan[-1] if plan else "extreme")
    return plan[:max_attempts]


@dataclass(frozen=True)
class OcrPipelineOptions:
    folder: str = "pdfs"
    languages: tuple = ("eng",)
    compress_level: str = "recommended"
    compress_fallback_level: str = "extreme"
    compress_max_attempts: int = 3
    extract_max_pages: int = 5
    extract_min_chars: int = 30


@dataclass(frozen=True)
class RunRecordOcrCommand:
    record_id: int
    delete_old_asset: bool = False
    reset_extracted_text: bool = True


class RunRecordOcrHandler:

    def __init__(
        self,
        record_repository: RecordRepository,
        storage: BlobStorage,
        ilovepdf: IlovePdfClient,
        source_resolver: PdfSourceResolver,
        cache: RecordsCache,
        *,
        options: Optional[OcrPipelineOptions] = None,
        text_extractor: Optional[PdfTextExtractor] = None,
    ):
        self._records = record_repository
        self._storage = storage
        self._ilovepdf = ilovepdf
        self._sources = source_resolver
        self._cache = cache
        self._options = options or OcrPipelineOptions()
        self._extractor = text_extractor or PdfTextExtractor()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def handle(self, command: RunRecordOcrCommand) -> OcrResultDTO:
        record = self._records.get(command.record_id)
        if record is None:
            raise EntityNotFoundError("Record", command.record_id)

        source_url = self._sources.source_url(record)
        logger.info(
            "Downloading PDF for record %s from %s", record.id, source_url,
            extra={"record_id": record.id, "stage": "download"},
        )
        pdf = self._sources.fetch(record)

        filename = self._original_filename(record)
        ocr_pdf = self._ilovepdf.ocr(
            pdf,
            filename,
            languages=list(self._options.languages),
            output_filename=f"record-{record.id}-ocr.pdf",
        )
        logger.info(
            "Downloaded OCR result for record %s (%d bytes)", record.id, len(ocr_pdf),
            extra={"record_id": record.id, "stage": "ocr"},
        )

        public_id = derive_ocr_public_id(record.pdf_public_id, record.id, self._options.folder)
        upload = self.upload_with_compression(ocr_pdf, public_id, filename)
        if upload.was_compressed:
            logger.info(
                "Compressed before upload: %d bytes stored", upload.bytes,
                extra={"record_id": record.id, "stage": "upload"},
            )

        extracted_text: Optional[str] = None
        extraction_error: Optional[str] = None
        try:
            text = self._extractor.extract(ocr_pdf, max_pages=self._options.extract_max_pages)
            extracted_text = meaningful_extract(text, self._options.extract_min_chars)
            if extracted_text is None:
                logger.warning("No meaningful text detected in OCR'd PDF for record %s", record.id)
        except (DomainException, RuntimeError, ValueError) as exc:
            # PyMuPDF raises RuntimeError for damaged pages.
            extraction_error = str(exc)
            logger.warning("Failed to extract text from OCR'd PDF for record %s: %s", record.id, exc)

        changes: Dict[str, Any] = {"pdf_url": upload.url, "pdf_public_id": upload.public_id}
        if extracted_text:
            changes["extracted_text"] = extracted_text
        elif command.reset_extracted_text:
            changes["extracted_text"] = None
        self._records.update(record.id, changes)
        self._cache.invalidate()

        if command.delete_old_asset and record.pdf_public_id and record.pdf_public_id != upload.public_id:
            try:
                self._storage.delete(record.pdf_public_id)
            except (ExternalServiceError, RepositoryError) as exc:
                logger.warning("Failed to delete old asset %s: %s", record.pdf_public_id, exc)

        return OcrResultDTO(
            record_id=record.id,
            pdf_url=upload.url,
            pdf_public_id=upload.public_id,
            storage_version=upload.version,
            source_url=source_url,
            extracted_text=extracted_text,
            text_extraction_error=extraction_error,
            compression_events=upload.compression_events if upload.was_compressed else None,
        )

    def upload_with_compression(self, data: bytes, public_id: str, filename: str) -> UploadOutcomeDTO:
        options = self._options
        plan = build_compression_plan(
            options.compress_level,
            options.compress_fallback_level,
            options.compress_max_attempts,
        )
        events: List[Dict[str, Any]] = []

        def push(**event: Any) -> None:
            event["timestamp"] = format_timestamp(utc_now())
            events.append({key: value for key, value in event.items() if value is not None})

        current = data
        last_error: Optional[StorageSizeLimitError] = None
        for attempt in range(len(plan) + 1):
            level = plan[attempt - 1] if attempt > 0 else None
            try:
                stored = self._storage.upload(current, public_id)
            except StorageSizeLimitError as exc:
                last_error = exc
                push(type="cloudinary-upload", status="rejected", attempt=attempt,
                     from_compression=attempt > 0, level=level, message=str(exc))
            except DomainException as exc:
                raise OcrPipelineError(str(exc), compression_events=events) from exc
            else:
                push(type="cloudinary-upload", status="success", attempt=attempt,
                     from_compression=attempt > 0, level=level, bytes=len(current))
                return UploadOutcomeDTO(
                    public_id=stored.public_id,
                    url=stored.url,
                    version=stored.version,
                    bytes=len(current),
                    compression_events=events,
                )

            if attempt >= len(plan):
                break
            next_level = plan[attempt]
            before = len(current)
            logger.warning(
                "Storage rejected PDF (size). Compressing with %r and retrying (attempt %d/%d)",
                next_level, attempt + 1, len(plan),
            )
            push(type="compression-start", level=next_level, attempt=attempt + 1, bytes_before=before)
            try:
                current = self._ilovepdf.compress(current, filename, next_level)
            except DomainException as exc:
                raise OcrPipelineError(str(exc), compression_events=events) from exc
            push(type="compression-complete", level=next_level, attempt=attempt + 1,
                 bytes_before=before, bytes_after=len(current))

        message = str(last_error) if last_error else (
            f"Storage rejected PDF after {len(plan)} compression attempt(s). Too large to upload."
        )
        raise OcrPipelineError(message, compression_events=events)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _original_filename(record: MagazineRecord) -> str:
        if record.pdf_public_id:
            name = PurePosixPath(record.pdf_public_id).name
            return name if name.lower().endswith(".pdf") else f"{name}.pdf"
        return f"record-{record.id}.pdf"
