"""User entity for the editor sign-up / approval flow."""
from __future__ import annotations

import json
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional

from .timestamps import format_timestamp, parse_timestamp


def to_legacy_list(value: str) -> str:
    """Encode a single value the way existing rows store it: ``["value"]``."""
    return json.dumps([value.strip()], ensure_ascii=False)


@dataclass(frozen=True)
class User:
    id: Optional[int]
    name: str
    email: str
    confirmed: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def register(cls, name: str, email: str) -> "User":
        return cls(id=None, name=to_legacy_list(name), email=to_legacy_list(email), confirmed=False)

    def with_id(self, user_id: int) -> "User":
        return replace(self, id=user_id)

    def confirm(self) -> "User":
        return replace(self, confirmed=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "confirmed": self.confirmed,
            "created_at": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=int(data["id"]) if data.get("id") is not None else None,
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            confirmed=bool(data.get("confirmed")),
            created_at=parse_timestamp(data.get("created_at")),
        )
