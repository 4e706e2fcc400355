"""Author entity."""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional

from .timestamps import format_timestamp, parse_timestamp

AUTHOR_FIELDS = ("name", "description", "cover_url", "national", "designation", "short_name")


@dataclass(frozen=True)
class Author:
    id: Optional[int]
    name: str
    description: Optional[str] = None
    cover_url: Optional[str] = None
    national: Optional[str] = None
    designation: Optional[str] = None
    short_name: Optional[str] = None
    created_at: Optional[datetime] = None

    def with_id(self, author_id: int) -> "Author":
        return replace(self, id=author_id)

    def with_changes(self, **changes: Any) -> "Author":
        unknown = set(changes) - set(AUTHOR_FIELDS)
        if unknown:
            raise ValueError(f"Unknown author fields: {sorted(unknown)}")
        return replace(self, **changes)

    @property
    def has_description(self) -> bool:
        return bool(self.description and self.description.strip())

    @property
    def has_cover(self) -> bool:
        return bool(self.cover_url and self.cover_url.strip())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "cover_url": self.cover_url,
            "national": self.national,
            "designation": self.designation,
            "short_name": self.short_name,
            "created_at": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Author":
        return cls(
            id=int(data["id"]) if data.get("id") is not None else None,
            name=str(data.get("name") or ""),
            description=data.get("description"),
            cover_url=data.get("cover_url"),
            national=data.get("national"),
            designation=data.get("designation"),
            short_name=data.get("short_name"),
            created_at=parse_timestamp(data.get("created_at")),
        )
