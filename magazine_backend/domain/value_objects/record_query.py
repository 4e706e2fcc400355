"""
Value objects describing a records table query.

The records table sends column filters as a JSON object. Two sentinel values
select rows whose column is blank or non-blank; any other string is a
case-insensitive substring match.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from magazine_backend.constants import EMPTY_SENTINEL, NONEMPTY_SENTINEL

# Columns where the blank/non-blank sentinels are honoured directly on the row.
SENTINEL_COLUMNS = frozenset({"summary", "conclusion", "language"})
# Filters resolved through the junction tables.
LINK_COLUMNS = frozenset({"tags", "authors"})
# Columns the global search box looks at.
GLOBAL_SEARCH_COLUMNS = ("name", "summary", "conclusion", "title_name")
# Virtual columns that cannot be sorted server side.
UNSORTABLE_COLUMNS = frozenset({"tags", "authors", "authors_linked"})


class FilterMode(Enum):
    EMPTY = "empty"
    NONEMPTY = "nonempty"
    CONTAINS = "contains"
    EQUALS = "equals"


@dataclass(frozen=True)
class ColumnFilter:
    column: str
    value: Any

    @property
    def mode(self) -> FilterMode:
        if self.column == "id":
            return FilterMode.EQUALS
        if self.column in SENTINEL_COLUMNS | LINK_COLUMNS:
            if self.value == EMPTY_SENTINEL:
                return FilterMode.EMPTY
            if self.value == NONEMPTY_SENTINEL:
                return FilterMode.NONEMPTY
        if isinstance(self.value, str):
            return FilterMode.CONTAINS
        return FilterMode.EQUALS

    @property
    def is_link_filter(self) -> bool:
        return self.column in LINK_COLUMNS

    def matches(self, row_value: Any) -> bool:
        """Evaluate the filter against a single column value (non-link columns)."""
        mode = self.mode
        if mode is FilterMode.EMPTY:
            return row_value is None or row_value == ""
        if mode is FilterMode.NONEMPTY:
            return row_value is not None and row_value != ""
        if mode is FilterMode.CONTAINS:
            if row_value is None:
                return False
            return str(self.value).lower() in str(row_value).lower()
        if self.column == "id":
            try:
                return int(row_value) == int(self.value)
            except (TypeError, ValueError):
                return False
        return row_value == self.value


def parse_column_filters(raw: Optional[Mapping[str, Any]]) -> List[ColumnFilter]:
    """Drop empty values the way the table does when a filter box is cleared."""
    filters: List[ColumnFilter] = []
    for column, value in (raw or {}).items():
        if value is None or value == "":
            continue
        filters.append(ColumnFilter(column=column, value=value))
    return filters


@dataclass(frozen=True)
class RecordSort:
    column: str = "id"
    descending: bool = True

    @classmethod
    def from_params(cls, sort_by: Optional[str], sort_order: Optional[str]) -> "RecordSort":
        column = sort_by or "id"
        if column in UNSORTABLE_COLUMNS:
            column = "id"
        return cls(column=column, descending=(sort_order or "desc").lower() != "asc")


@dataclass(frozen=True)
class RecordSearchCriteria:
    """
    Fully resolved search handed to a RecordRepository.

    Link filters (tags/authors) and the email filter are turned into
    ``include_ids`` / ``exclude_ids`` by the application layer before this
    object is built, so repositories only deal with columns of ``records``.
    """
    filters: Tuple[ColumnFilter, ...] = ()
    global_filter: Optional[str] = None
    include_ids: Optional[FrozenSet[int]] = None
    exclude_ids: FrozenSet[int] = field(default_factory=frozenset)
    sort: RecordSort = field(default_factory=RecordSort)
    offset: int = 0
    limit: Optional[int] = None

    @staticmethod
    def intersect(current: Optional[FrozenSet[int]], ids: Iterable[int]) -> FrozenSet[int]:
        incoming = frozenset(int(value) for value in ids)
        return incoming if current is None else current & incoming
