"""Data Transfer Objects for the OCR and text extraction pipelines."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class UploadOutcomeDTO:
    public_id: str
    url: str
    version: Optional[str]
    bytes: int
    compression_events: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def was_compressed(self) -> bool:
        return any(event.get("type") == "compression-start" for event in self.compression_events)


@dataclass(frozen=True)
class OcrResultDTO:
    record_id: int
    pdf_url: str
    pdf_public_id: str
    storage_version: Optional[str]
    source_url: str
    extracted_text: Optional[str] = None
    text_extraction_error: Optional[str] = None
    compression_events: Optional[List[Dict[str, Any]]] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "recordId": self.record_id,
            "pdf_url": self.pdf_url,
            "pdf_public_id": self.pdf_public_id,
            "storage_version": self.storage_version,
            "source_url": self.source_url,
        }
        if self.extracted_text:
            payload["extracted_text"] = self.extracted_text
        if self.text_extraction_error:
            payload["text_extraction_error"] = self.text_extraction_error
        if self.compression_events:
            payload["compression_events"] = self.compression_events
        return payload


@dataclass(frozen=True)
class ExtractionResultDTO:
    text: str
    used_ocr: bool
    language: Optional[str] = None
    cached: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "usedOcr": self.used_ocr,
            "language": self.language,
            "cached": self.cached,
        }
