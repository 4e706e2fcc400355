"""Data Transfer Objects for the records table and history viewer."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from magazine_backend.domain.entities.author import Author
from magazine_backend.domain.entities.tag import Tag
from magazine_backend.domain.services.word_diff import DiffToken
from magazine_backend.domain.value_objects.edit_history import EditHistorySummary


@dataclass(frozen=True)
class RecordViewDTO:
    """A record row with display formatting applied plus its links."""

    fields: Dict[str, Any]
    tags: List[Tag] = field(default_factory=list)
    authors_linked: List[Author] = field(default_factory=list)
    edit_history: EditHistorySummary = field(default_factory=EditHistorySummary.empty)

    @property
    def id(self) -> Optional[int]:
        return self.fields.get("id")

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.fields)
        payload["tags"] = [{"id": tag.id, "name": tag.name} for tag in self.tags]
        payload["authors_linked"] = [{"id": author.id, "name": author.name} for author in self.authors_linked]
        payload["editHistory"] = self.edit_history.to_dict()
        return payload


@dataclass(frozen=True)
class RecordPageDTO:
    records: List[RecordViewDTO]
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"data": [record.to_dict() for record in self.records], "count": self.count}


@dataclass(frozen=True)
class HistoryEntryDTO:
    """One superseded summary/conclusion with the diff to the entry after it."""

    id: Optional[int]
    text: str
    lines: List[str]
    email: Optional[str]
    name: Optional[str]
    created_at: Optional[str]
    diff: Optional[List[List[DiffToken]]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "lines": self.lines,
            "email": self.email,
            "name": self.name,
            "created_at": self.created_at,
            "diff": None if self.diff is None else [[token.to_dict() for token in line] for line in self.diff],
        }
