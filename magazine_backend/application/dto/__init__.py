"""Data Transfer Objects returned by application handlers."""

from .record_dto import HistoryEntryDTO, RecordPageDTO, RecordViewDTO
from .pipeline_dto import ExtractionResultDTO, OcrResultDTO, UploadOutcomeDTO

__all__ = [
    "ExtractionResultDTO",
    "HistoryEntryDTO",
    "OcrResultDTO",
    "RecordPageDTO",
    "RecordViewDTO",
    "UploadOutcomeDTO",
]
