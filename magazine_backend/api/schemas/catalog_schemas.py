"""
Schemas for tag and author management
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class TagSchema(BaseModel):
    id: Optional[int] = None
    name: str
    important: Optional[bool] = None
    created_at: Optional[str] = None


class AuthorSchema(BaseModel):
    id: Optional[int] = None
    name: str
    description: Optional[str] = None
    cover_url: Optional[str] = None
    national: Optional[str] = None
    designation: Optional[str] = None
    short_name: Optional[str] = None
    created_at: Optional[str] = None


# Request bodies are loosely typed; the handlers produce the user-facing
# validation messages.
class TagPayloadSchema(BaseModel):
    name: Any = None
    important: Any = None


class AuthorPayloadSchema(BaseModel):
    name: Any = None
    description: Any = None
    cover_url: Any = None
    national: Any = None
    designation: Any = None
    short_name: Any = None


class BulkDeleteSchema(BaseModel):
    ids: Any = None


class RecordLinksSchema(BaseModel):
    recordId: Any = None
    ids: Any = None
