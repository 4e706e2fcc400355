"""
EditEntry Entity - a superseded summary or conclusion.

Every time an editor changes a record's summary or conclusion, the value that
is being replaced is appended to the ``summaries`` or ``conclusions`` table
together with who made the change.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from .timestamps import format_timestamp, parse_timestamp


class EditKind(Enum):
    SUMMARY = "summary"
    CONCLUSION = "conclusion"

    @property
    def table(self) -> str:
        return "summaries" if self is EditKind.SUMMARY else "conclusions"


@dataclass(frozen=True)
class EditEntry:
    id: Optional[int]
    record_id: int
    kind: EditKind
    text: Optional[str]
    email: Optional[str] = None
    name: Optional[str] = None
    created_at: Optional[datetime] = None

    def with_id(self, entry_id: int) -> "EditEntry":
        return replace(self, id=entry_id)

    def to_row(self) -> Dict[str, Any]:
        """Row shape used by the history tables (text column named after the kind)."""
        return {
            "id": self.id,
            "record_id": self.record_id,
            self.kind.value: self.text,
            "email": self.email,
            "name": self.name,
            "created_at": format_timestamp(self.created_at),
        }

    @classmethod
    def from_row(cls, kind: EditKind, row: Dict[str, Any]) -> "EditEntry":
        return cls(
            id=int(row["id"]) if row.get("id") is not None else None,
            record_id=int(row["record_id"]),
            kind=kind,
            text=row.get(kind.value),
            email=row.get("email"),
            name=row.get("name"),
            created_at=parse_timestamp(row.get("created_at")),
        )
