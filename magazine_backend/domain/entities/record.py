"""
MagazineRecord Entity - one article (or issue split) in the archive.

Records are stored as flat rows. ``authors`` is the free-text author line
typed by editors; linked authors and tags live in junction tables and are
attached by the application layer.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Optional

RECORD_FIELDS = (
    "id",
    "name",
    "timestamp",
    "summary",
    "pdf_public_id",
    "pdf_url",
    "volume",
    "number",
    "title_name",
    "page_numbers",
    "authors",
    "language",
    "email",
    "creator_name",
    "conclusion",
    "extracted_text",
)

# Fields an editor may change through the update flow.
EDITABLE_RECORD_FIELDS = tuple(
    name for name in RECORD_FIELDS if name not in {"id", "pdf_public_id", "pdf_url", "extracted_text"}
)


@dataclass(frozen=True)
class MagazineRecord:
    """Immutable record row. Use ``with_changes`` to derive updated copies."""

    id: Optional[int]
    name: str
    timestamp: Optional[str] = None
    summary: Optional[str] = None
    pdf_public_id: Optional[str] = None
    pdf_url: Optional[str] = None
    volume: Optional[str] = None
    number: Optional[str] = None
    title_name: Optional[str] = None
    page_numbers: Optional[str] = None
    authors: Optional[str] = None
    language: Optional[str] = None
    email: Optional[str] = None
    creator_name: Optional[str] = None
    conclusion: Optional[str] = None
    extracted_text: Optional[str] = None

    def with_changes(self, **changes: Any) -> "MagazineRecord":
        unknown = set(changes) - set(RECORD_FIELDS)
        if unknown:
            raise ValueError(f"Unknown record fields: {sorted(unknown)}")
        return replace(self, **changes)

    def with_id(self, record_id: int) -> "MagazineRecord":
        return replace(self, id=record_id)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MagazineRecord":
        known = {f.name for f in fields(cls)}
        payload = {key: value for key, value in data.items() if key in known}
        payload.setdefault("id", None)
        payload["name"] = payload.get("name") or ""
        if payload.get("id") is not None:
            payload["id"] = int(payload["id"])
        for key, value in list(payload.items()):
            if key != "id" and value is not None and not isinstance(value, str):
                payload[key] = str(value)
        return cls(**payload)
