"""AI drafting Commands - record summaries/conclusions/tags and split-field drafts."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Protocol

from magazine_backend.application.services.pdf_source import PdfSourceResolver
from magazine_backend.domain.exceptions import (
    DomainException,
    DomainValidationError,
    EntityNotFoundError,
    ExternalServiceError,
)
from magazine_backend.domain.repositories import RecordRepository
from magazine_backend.domain.services.tag_normalizer import normalize_tags
from magazine_backend.domain.services.text_formatting import format_value
from magazine_backend.domain.services.text_quality import meaningful_extract
from magazine_backend.infrastructure.ai.prompt_builder import (
    PromptBundle,
    RECORD_MODES,
    SPLIT_FIELDS,
    RecordPromptBuilder,
    SplitFieldPromptBuilder,
)
from magazine_backend.infrastructure.cache.records_cache import RecordsCache
from magazine_backend.infrastructure.pdf.pdf_text_extractor import PdfTextExtractor

logger = logging.getLogger(__name__)

SERVICE = "AI"
VARIANTS = ("primary", "regen")


class TextCompleter(Protocol):
    def complete(self, bundle: PromptBundle) -> str: ...


def _variant(raw: Optional[str]) -> str:
    return raw if raw in VARIANTS else "primary"


@dataclass(frozen=True)
class GenerateRecordFieldCommand:
    record_id: Optional[int]
    mode: Optional[str]
    variant: Optional[str] = "primary"


class GenerateRecordFieldHandler:

    def __init__(
        self,
        record_repository: RecordRepository,
        completer: TextCompleter,
        prompt_builder: Optional[RecordPromptBuilder] = None,
    ):
        self._records = record_repository
        self._completer = completer
        self._prompts = prompt_builder or RecordPromptBuilder()

    def handle(self, command: GenerateRecordFieldCommand) -> Dict[str, Any]:
        if not command.record_id or command.mode not in RECORD_MODES:
            raise DomainValidationError("recordId and valid mode are required.")

        record = self._records.get(command.record_id)
        if record is None:
            raise EntityNotFoundError("Record", command.record_id, message="Record not found.")
        text = (record.extracted_text or "").strip()
        if not text:
            raise DomainValidationError("No extracted text is available. Extract text first.")

        bundle = self._prompts.build(
            command.mode,
            text,
            title=format_value(record.title_name) or None,
            name=format_value(record.name) or None,
            variant=_variant(command.variant),
        )
        output = self._completer.complete(bundle)
        if not output:
            raise ExternalServiceError(SERVICE, "AI response was empty.")

        if command.mode == "tags":
            tags = normalize_tags(output, min_words=1, max_words=3, limit=8)
            if not tags:
                raise ExternalServiceError(SERVICE, "AI did not return any tags.")
            return {"tags": tags}
        return {"text": output}


@dataclass(frozen=True)
class DraftSplitFieldCommand:
    text: Optional[str]
    field: Optional[str]
    label: Optional[str] = None
    variant: Optional[str] = "primary"


class DraftSplitFieldHandler:
    """Suggests one metadata field for a split PDF from its extracted text."""

    def __init__(self, completer: TextCompleter, prompt_builder: Optional[SplitFieldPromptBuilder] = None):
        self._completer = completer
        self._prompts = prompt_builder or SplitFieldPromptBuilder()

    def handle(self, command: DraftSplitFieldCommand) -> Dict[str, Any]:
        if not (command.text or "").strip() or not command.field:
            raise DomainValidationError("Both 'text' and 'field' are required.")
        if command.field not in SPLIT_FIELDS:
            raise DomainValidationError("Unsupported field.")

        bundle = self._prompts.build(
            command.field,
            command.text or "",
            label=(command.label or "").strip() or None,
            variant=_variant(command.variant),
        )
        output = self._completer.complete(bundle)
        if command.field == "tags":
            tags = normalize_tags(output, min_words=2, max_words=3, limit=10)
            if not tags:
                raise ExternalServiceError(SERVICE, "No tags returned.")
            return {"tags": tags}
        if not output:
            raise ExternalServiceError(SERVICE, "AI response was empty.")
        return {"value": output}


@dataclass(frozen=True)
class BackfillSummariesCommand:
    limit: int = 5


class BackfillSummariesHandler:
    """
    Fill in missing summaries and conclusions for the oldest records.

    Records are picked by ascending id among those with both columns blank.
    Each record is processed independently; failures are reported per record.
    """

    SUMMARY_CONTEXT = 9000
    CONCLUSION_CONTEXT = 6000
    SUMMARY_TOKENS = 360
    CONCLUSION_TOKENS = 220
    MIN_CHARS = 16

    def __init__(
        self,
        record_repository: RecordRepository,
        source_resolver: PdfSourceResolver,
        completer: TextCompleter,
        cache: RecordsCache,
        *,
        text_extractor: Optional[PdfTextExtractor] = None,
        prompt_builder: Optional[RecordPromptBuilder] = None,
    ):
        self._records = record_repository
        self._sources = source_resolver
        self._completer = completer
        self._cache = cache
        self._extractor = text_extractor or PdfTextExtractor()
        self._prompts = prompt_builder or RecordPromptBuilder()

    def handle(self, command: BackfillSummariesCommand) -> Dict[str, Any]:
        if command.limit <= 0:
            raise DomainValidationError("Invalid limit")

        candidates = [
            record for record in self._records.list_all()
            if not (record.summary or "").strip() and not (record.conclusion or "").strip()
        ][: command.limit]

        results: List[Dict[str, Any]] = []
        for record in candidates:
            try:
                text = record.extracted_text or meaningful_extract(
                    self._extractor.extract(self._sources.fetch(record)), self.MIN_CHARS
                )
                if not text:
                    raise DomainValidationError("No extractable text in PDF")
                summary = self._generate(record, "summary", text, self.SUMMARY_CONTEXT, self.SUMMARY_TOKENS)
                conclusion = self._generate(
                    record, "conclusion", text, self.CONCLUSION_CONTEXT, self.CONCLUSION_TOKENS
                )
                self._records.update(
                    record.id,
                    {"extracted_text": text, "summary": summary, "conclusion": conclusion},
                )
            except DomainException as exc:
                logger.warning("Backfill failed for record %s: %s", record.id, exc)
                results.append({"id": record.id, "status": "error", "error": str(exc)})
            else:
                results.append({"id": record.id, "status": "updated"})

        if any(result["status"] == "updated" for result in results):
            self._cache.invalidate()
        return {"processed": len(results), "results": results}

    def _generate(self, record, mode: str, text: str, max_chars: int, max_tokens: int) -> str:
        bundle = self._prompts.build(
            mode,
            text,
            title=format_value(record.title_name) or None,
            name=format_value(record.name) or None,
            max_chars=max_chars,
        )
        output = self._completer.complete(replace(bundle, max_tokens=max_tokens))
        if not output:
            raise ExternalServiceError(SERVICE, f"AI returned an empty {mode}.")
        return output
