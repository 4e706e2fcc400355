"""
Schemas for the records table, history viewer and text extraction
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class RecordPageSchema(BaseModel):
    data: List[Dict[str, Any]] = Field(default_factory=list)
    count: int = 0


class DiffTokenSchema(BaseModel):
    op: str
    word: str


class HistoryEntrySchema(BaseModel):
    id: Optional[int] = None
    text: str
    lines: List[str] = Field(default_factory=list)
    email: Optional[str] = None
    name: Optional[str] = None
    created_at: Optional[str] = None
    diff: Optional[List[List[DiffTokenSchema]]] = None


class ExtractionResultSchema(BaseModel):
    text: str
    usedOcr: bool
    language: Optional[str] = None
    cached: bool = False


class BatchDeleteRecordsSchema(BaseModel):
    ids: List[int] = Field(default_factory=list)


class ExportRecordsSchema(BaseModel):
    columns: List[str] = Field(default_factory=list)
    format: str = "csv"
    ids: Optional[List[int]] = None
