"""Edit history summary attached to every row of the records table."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class LatestEditor:
    name: str
    email: str
    edited_at: datetime
    time_from_now: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "editedAt": self.edited_at.isoformat(),
            "timeFromNow": self.time_from_now,
        }


@dataclass(frozen=True)
class EditHistorySummary:
    count: int = 0
    editors: List[str] = field(default_factory=list)
    editor_counts: Dict[str, int] = field(default_factory=dict)
    latest_editor: Optional[LatestEditor] = None

    @classmethod
    def empty(cls) -> "EditHistorySummary":
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "editors": list(self.editors),
            "editorCounts": dict(self.editor_counts),
            "latestEditor": self.latest_editor.to_dict() if self.latest_editor else None,
        }
