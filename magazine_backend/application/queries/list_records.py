"""Query handler for the paginated records table."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional

from magazine_backend.application.dto.record_dto import RecordPageDTO
from magazine_backend.application.services.record_views import RecordViewAssembler
from magazine_backend.constants import RECORDS_PAGE_SIZE
from magazine_backend.domain.entities.user import to_legacy_list
from magazine_backend.domain.repositories import (
    AuthorRepository,
    CatalogRepository,
    EditHistoryRepository,
    RecordRepository,
    TagRepository,
)
from magazine_backend.domain.value_objects.record_query import (
    FilterMode,
    RecordSearchCriteria,
    RecordSort,
    parse_column_filters,
)
from magazine_backend.infrastructure.cache.records_cache import RecordsCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListRecordsQuery:
    page: int = 0
    page_size: int = RECORDS_PAGE_SIZE
    sort_by: Optional[str] = "id"
    sort_order: Optional[str] = "desc"
    filters: Mapping[str, Any] = field(default_factory=dict)
    global_filter: Optional[str] = None
    email: Optional[str] = None
    no_cache: bool = False

    def cache_params(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "page_size": self.page_size,
            "sort_by": self.sort_by,
            "sort_order": self.sort_order,
            "filters": dict(self.filters),
            "global_filter": self.global_filter,
            "email": self.email,
        }


class _EmptyPage(Exception):
    """A filter resolved to no candidate records."""


class ListRecordsHandler:
    """Handles one page of the records table, served from the TTL cache when possible."""

    def __init__(
        self,
        record_repository: RecordRepository,
        tag_repository: TagRepository,
        author_repository: AuthorRepository,
        history_repository: EditHistoryRepository,
        cache: RecordsCache,
    ):
        self._records = record_repository
        self._tags = tag_repository
        self._authors = author_repository
        self._history = history_repository
        self._cache = cache
        self._views = RecordViewAssembler(tag_repository, author_repository, history_repository)

    def handle(self, query: ListRecordsQuery) -> RecordPageDTO:
        key = self._cache.key_for(query.cache_params())
        if not query.no_cache:
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug("Records page served from cache")
                return cached

        try:
            criteria = self._criteria(query)
        except _EmptyPage:
            page = RecordPageDTO(records=[], count=0)
        else:
            records, total = self._records.search(criteria)
            page = RecordPageDTO(records=self._views.assemble(records), count=total)

        self._cache.set(key, page)
        return page

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _criteria(self, query: ListRecordsQuery) -> RecordSearchCriteria:
        include_ids: Optional[FrozenSet[int]] = None
        exclude_ids: FrozenSet[int] = frozenset()

        if query.email:
            formatted = to_legacy_list(query.email)
            ids = set(self._history.record_ids_for_email(formatted))
            ids.update(self._records.ids_matching_email(formatted))
            if not ids:
                raise _EmptyPage()
            include_ids = frozenset(ids)

        column_filters = []
        for column_filter in parse_column_filters(query.filters):
            if not column_filter.is_link_filter:
                column_filters.append(column_filter)
                continue
            catalog: CatalogRepository = self._tags if column_filter.column == "tags" else self._authors
            mode = column_filter.mode
            if mode is FilterMode.EMPTY:
                exclude_ids = exclude_ids | frozenset(catalog.linked_record_ids())
            elif mode is FilterMode.NONEMPTY:
                include_ids = RecordSearchCriteria.intersect(include_ids, catalog.linked_record_ids())
            else:
                entry_ids = catalog.ids_matching_name(str(column_filter.value))
                record_ids = catalog.record_ids_for(entry_ids) if entry_ids else []
                if not record_ids:
                    raise _EmptyPage()
                include_ids = RecordSearchCriteria.intersect(include_ids, record_ids)

        if include_ids is not None and not include_ids:
            raise _EmptyPage()

        page = max(query.page, 0)
        page_size = max(query.page_size, 1)
        return RecordSearchCriteria(
            filters=tuple(column_filters),
            global_filter=(query.global_filter or "").strip() or None,
            include_ids=include_ids,
            exclude_ids=exclude_ids,
            sort=RecordSort.from_params(query.sort_by, query.sort_order),
            offset=page * page_size,
            limit=page_size,
        )
