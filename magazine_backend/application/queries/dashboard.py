"""Query handlers behind the dashboard page."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from magazine_backend.constants import MAGAZINE_NAMES_LIMIT
from magazine_backend.domain.entities.edit_entry import EditEntry, EditKind
from magazine_backend.domain.repositories import EditHistoryRepository, RecordRepository
from magazine_backend.domain.services.activity_aggregator import build_insights, build_user_activity
from magazine_backend.domain.services.text_formatting import format_value


@dataclass(frozen=True)
class GetInsightsQuery:
    top: int = 5


class GetInsightsHandler:
    """Top authors, titles and creators across all records."""

    def __init__(self, record_repository: RecordRepository):
        self._records = record_repository

    def handle(self, query: GetInsightsQuery) -> Dict[str, List[Dict[str, Any]]]:
        records = [
            record.with_changes(
                authors=format_value(record.authors) or None,
                title_name=format_value(record.title_name) or None,
                creator_name=format_value(record.creator_name) or None,
            )
            for record in self._records.list_all()
        ]
        return build_insights(records, query.top)


def _formatted(entry: EditEntry) -> EditEntry:
    return replace(entry, name=format_value(entry.name) or None, email=format_value(entry.email) or None)


@dataclass(frozen=True)
class GetUserActivityQuery:
    email: Optional[str] = None


class GetUserActivityHandler:
    """Per-editor activity grouped by magazine."""

    def __init__(self, record_repository: RecordRepository, history_repository: EditHistoryRepository):
        self._records = record_repository
        self._history = history_repository

    def handle(self, query: GetUserActivityQuery) -> List[Dict[str, Any]]:
        records = [
            record.with_changes(
                creator_name=format_value(record.creator_name) or None,
                email=format_value(record.email) or None,
            )
            for record in self._records.list_all()
        ]
        summaries = [_formatted(entry) for entry in self._history.list_all(EditKind.SUMMARY)]
        conclusions = [_formatted(entry) for entry in self._history.list_all(EditKind.CONCLUSION)]
        activity = build_user_activity(records, summaries, conclusions)
        if query.email:
            wanted = query.email.strip().lower()
            activity = [user for user in activity if format_value(user["userEmail"]).lower() == wanted]
        return activity


@dataclass(frozen=True)
class ListMagazineNamesQuery:
    query: Optional[str] = None
    limit: int = MAGAZINE_NAMES_LIMIT


class ListMagazineNamesHandler:

    def __init__(self, record_repository: RecordRepository):
        self._records = record_repository

    def handle(self, query: ListMagazineNamesQuery) -> List[str]:
        limit = max(1, min(query.limit, MAGAZINE_NAMES_LIMIT))
        return self._records.magazine_names((query.query or "").strip() or None, limit)
