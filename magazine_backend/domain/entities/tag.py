"""Tag entity."""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional

from .timestamps import format_timestamp, parse_timestamp


@dataclass(frozen=True)
class Tag:
    id: Optional[int]
    name: str
    important: Optional[bool] = None
    created_at: Optional[datetime] = None

    def with_id(self, tag_id: int) -> "Tag":
        return replace(self, id=tag_id)

    def renamed(self, name: str, important: Optional[bool]) -> "Tag":
        return replace(self, name=name, important=important)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "important": self.important,
            "created_at": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tag":
        important = data.get("important")
        return cls(
            id=int(data["id"]) if data.get("id") is not None else None,
            name=str(data.get("name") or ""),
            important=bool(important) if important is not None else None,
            created_at=parse_timestamp(data.get("created_at")),
        )
