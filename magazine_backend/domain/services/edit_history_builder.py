"""Aggregates edit entries into the per-record history summary."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, Optional

from magazine_backend.domain.entities.edit_entry import EditEntry
from magazine_backend.domain.value_objects.edit_history import EditHistorySummary, LatestEditor

from .text_formatting import format_value, time_from_now


def build_edit_history(
    entries: Iterable[EditEntry],
    now: Optional[datetime] = None,
) -> Dict[int, EditHistorySummary]:
    counts: Dict[int, int] = {}
    editors: Dict[int, list] = {}
    editor_counts: Dict[int, Dict[str, int]] = {}
    latest: Dict[int, tuple] = {}

    for entry in entries:
        record_id = entry.record_id
        name = format_value(entry.name)
        email = format_value(entry.email)
        counts[record_id] = counts.get(record_id, 0) + 1
        names = editors.setdefault(record_id, [])
        if name and email and name not in names:
            names.append(name)
        if name:
            per_name = editor_counts.setdefault(record_id, {})
            per_name[name] = per_name.get(name, 0) + 1
        if entry.created_at is not None:
            current = latest.get(record_id)
            if current is None or entry.created_at > current[0]:
                latest[record_id] = (entry.created_at, name or "", email or "")

    summaries: Dict[int, EditHistorySummary] = {}
    for record_id, count in counts.items():
        latest_editor = None
        if record_id in latest:
            edited_at, name, email = latest[record_id]
            latest_editor = LatestEditor(
                name=name,
                email=email,
                edited_at=edited_at,
                time_from_now=time_from_now(edited_at, now),
            )
        summaries[record_id] = EditHistorySummary(
            count=count,
            editors=editors.get(record_id, []),
            editor_counts=editor_counts.get(record_id, {}),
            latest_editor=latest_editor,
        )
    return summaries
