"""Filters used by the tag and author management pages and their exports."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Optional

SORTABLE_CATALOG_COLUMNS = frozenset({"id", "name", "important", "created_at"})


class ImportantFilter:
    """Accepted values of the ``important`` query parameter."""
    TRUE = "true"
    FALSE = "false"
    NULL = "null"
    VALUES = (TRUE, FALSE, NULL)


@dataclass(frozen=True)
class CatalogListCriteria:
    search: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    important: Optional[str] = None
    sort_by: str = "created_at"
    descending: bool = True

    @classmethod
    def from_params(
        cls,
        search: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        important: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> "CatalogListCriteria":
        column = sort_by if sort_by in SORTABLE_CATALOG_COLUMNS else "created_at"
        return cls(
            search=(search or "").strip() or None,
            date_from=_parse_date(date_from),
            date_to=_parse_date(date_to),
            important=important if important in ImportantFilter.VALUES else None,
            sort_by=column,
            descending=(sort_order or "desc").lower() != "asc",
        )

    @property
    def created_after(self) -> Optional[datetime]:
        """Inclusive lower bound: start of ``date_from`` in UTC."""
        if self.date_from is None:
            return None
        return datetime.combine(self.date_from, time.min, tzinfo=timezone.utc)

    @property
    def created_before(self) -> Optional[datetime]:
        """Inclusive upper bound: last millisecond of ``date_to`` in UTC."""
        if self.date_to is None:
            return None
        return datetime.combine(self.date_to, time(23, 59, 59, 999000), tzinfo=timezone.utc)

    def matches(self, name: str, created_at: Optional[datetime], important: Any = None) -> bool:
        if self.search and self.search.lower() not in (name or "").lower():
            return False
        if self.created_after or self.created_before:
            if created_at is None:
                return False
            if self.created_after and created_at < self.created_after:
                return False
            if self.created_before and created_at > self.created_before:
                return False
        if self.important == ImportantFilter.TRUE and important is not True:
            return False
        if self.important == ImportantFilter.FALSE and important is not False:
            return False
        if self.important == ImportantFilter.NULL and important is not None:
            return False
        return True


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return date.fromisoformat(value[:10])
