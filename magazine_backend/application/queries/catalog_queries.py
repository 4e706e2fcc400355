"""Query handlers for the tag and author management pages."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

from magazine_backend.constants import RECENT_WINDOW_DAYS, SEARCH_LIMIT
from magazine_backend.domain.entities.author import Author
from magazine_backend.domain.entities.tag import Tag
from magazine_backend.domain.exceptions import EntityNotFoundError
from magazine_backend.domain.repositories import AuthorRepository, CatalogRepository, RecordRepository, TagRepository
from magazine_backend.domain.services.catalog_rules import author_deletion_warnings
from magazine_backend.domain.services.text_formatting import format_value
from magazine_backend.domain.value_objects.catalog_query import CatalogListCriteria
from magazine_backend.infrastructure.export.tabular_writer import write_csv

TAG_EXPORT_COLUMNS = ("id", "name", "important", "created_at")
AUTHOR_EXPORT_COLUMNS = ("id", "name", "description", "cover_url", "national", "created_at")
# Columns shown in the "records using this entry" dialog.
LINKED_RECORD_COLUMNS = ("id", "name", "timestamp", "volume", "number", "title_name")


@dataclass(frozen=True)
class SearchCatalogQuery:
    query: Optional[str] = None
    limit: int = SEARCH_LIMIT


class SearchCatalogHandler:

    def __init__(self, catalog: CatalogRepository):
        self._catalog = catalog

    def handle(self, query: SearchCatalogQuery) -> List[Any]:
        return self._catalog.search(query.query, query.limit)


class ListCatalogHandler:

    def __init__(self, catalog: CatalogRepository):
        self._catalog = catalog

    def handle(self, criteria: CatalogListCriteria) -> List[Any]:
        return self._catalog.list(criteria)


class ExportCatalogHandler:
    """CSV export of the entries matching the list filters."""

    def __init__(self, catalog: CatalogRepository, columns: Sequence[str]):
        self._catalog = catalog
        self._columns = tuple(columns)

    def handle(self, criteria: CatalogListCriteria) -> str:
        rows = []
        for entry in self._catalog.list(criteria):
            data = entry.to_dict()
            rows.append([data.get(column) for column in self._columns])
        return write_csv(self._columns, rows)


def _recent_cutoff(now: Optional[datetime]) -> datetime:
    return (now or datetime.now(timezone.utc)) - timedelta(days=RECENT_WINDOW_DAYS)


class TagStatsHandler:

    def __init__(self, tag_repository: TagRepository):
        self._tags = tag_repository

    def handle(self, now: Optional[datetime] = None) -> Dict[str, int]:
        tags: List[Tag] = self._tags.list_all()
        cutoff = _recent_cutoff(now)
        return {
            "totalTags": len(tags),
            "recentTags": sum(1 for tag in tags if tag.created_at is not None and tag.created_at >= cutoff),
            "importantTags": sum(1 for tag in tags if tag.important is True),
            "usedTags": len(self._tags.linked_entry_ids()),
        }


class AuthorStatsHandler:

    def __init__(self, author_repository: AuthorRepository):
        self._authors = author_repository

    def handle(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        authors: List[Author] = self._authors.list_all()
        cutoff = _recent_cutoff(now)
        total = len(authors)
        with_description = sum(1 for author in authors if author.has_description)
        with_cover = sum(1 for author in authors if author.has_cover)

        def rate(count: int) -> str:
            return f"{count / total * 100:.1f}" if total else "0.0"

        return {
            "totalAuthors": total,
            "recentAuthors": sum(
                1 for author in authors if author.created_at is not None and author.created_at >= cutoff
            ),
            "authorsWithDescription": with_description,
            "authorsWithCover": with_cover,
            "completionRate": {"description": rate(with_description), "coverImage": rate(with_cover)},
        }


@dataclass(frozen=True)
class LinkedRecordsQuery:
    entry_id: int
    offset: int = 0
    limit: int = SEARCH_LIMIT


class LinkedRecordsHandler:
    """Records linked to one tag or author, a page at a time."""

    def __init__(self, catalog: CatalogRepository, record_repository: RecordRepository, *, entity_type: str):
        self._catalog = catalog
        self._records = record_repository
        self._entity_type = entity_type

    def handle(self, query: LinkedRecordsQuery) -> Dict[str, Any]:
        self._require(query.entry_id)
        record_ids = sorted(self._catalog.record_ids_for([query.entry_id]), reverse=True)
        offset = max(query.offset, 0)
        limit = max(query.limit, 1)
        page = self._records.list_by_ids(record_ids[offset:offset + limit])
        records = [
            {column: format_value(getattr(record, column)) for column in LINKED_RECORD_COLUMNS}
            for record in page
        ]
        return {"records": records, "hasMore": len(records) == limit}

    def count(self, entry_id: int) -> Dict[str, int]:
        self._require(entry_id)
        return {"count": len(self._catalog.record_ids_for([entry_id]))}

    def _require(self, entry_id: int) -> None:
        if self._catalog.get(entry_id) is None:
            raise EntityNotFoundError(self._entity_type, entry_id, message=f"{self._entity_type} not found")


class ValidateAuthorDeletionHandler:

    def __init__(self, author_repository: AuthorRepository):
        self._authors = author_repository

    def handle(self, author_id: int) -> Dict[str, Any]:
        if self._authors.get(author_id) is None:
            return {"canDelete": False, "recordCount": 0, "warnings": ["Author not found"]}
        related = len(self._authors.record_ids_for([author_id]))
        return {"canDelete": True, "recordCount": related, "warnings": author_deletion_warnings(related)}

