"""
Schemas for users, AI generation and the split layout editor
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class UserCredentialsSchema(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class GenerateFieldSchema(BaseModel):
    recordId: Optional[int] = None
    mode: Optional[str] = None
    variant: Optional[str] = "primary"


class DraftSplitFieldSchema(BaseModel):
    text: Optional[str] = None
    field: Optional[str] = None
    label: Optional[str] = None
    variant: Optional[str] = "primary"


class LayoutEditSchema(BaseModel):
    layout: Dict[str, Any] = Field(default_factory=dict)
    pageCount: int
    action: str
    position: Optional[int] = None
    sourceIndex: Optional[int] = None
    direction: Optional[str] = None
    crop: Optional[Dict[str, Any]] = None
