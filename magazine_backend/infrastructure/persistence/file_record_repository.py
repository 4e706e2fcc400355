"""File-based implementation of RecordRepository."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from magazine_backend.domain.entities.record import RECORD_FIELDS, MagazineRecord
from magazine_backend.domain.exceptions import EntityNotFoundError, RepositoryError
from magazine_backend.domain.repositories.record_repository import RecordRepository
from magazine_backend.domain.value_objects.record_query import GLOBAL_SEARCH_COLUMNS, RecordSearchCriteria

from .json_table_store import JsonTableStore

logger = logging.getLogger(__name__)

TABLE = "records"


class FileRecordRepository(RecordRepository):
    """Persist records as rows of ``records.json``."""

    def __init__(self, store: JsonTableStore) -> None:
        self.store = store

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def add(self, record: MagazineRecord) -> MagazineRecord:
        with self.store.transaction(TABLE) as table:
            row = table.insert(record.to_dict())
        logger.debug("Inserted record %s", row["id"])
        return MagazineRecord.from_dict(row)

    def get(self, record_id: int) -> Optional[MagazineRecord]:
        for row in self.store.rows(TABLE):
            if row.get("id") == record_id:
                return MagazineRecord.from_dict(row)
        return None

    def update(self, record_id: int, changes: Dict[str, Any]) -> MagazineRecord:
        unknown = set(changes) - set(RECORD_FIELDS) - {"id"}
        if unknown:
            raise RepositoryError(f"Unknown record columns: {sorted(unknown)}")
        with self.store.transaction(TABLE) as table:
            for row in table.rows:
                if row.get("id") == record_id:
                    row.update(changes)
                    return MagazineRecord.from_dict(row)
        raise EntityNotFoundError("Record", record_id)

    def delete(self, record_id: int) -> bool:
        with self.store.transaction(TABLE) as table:
            before = len(table.rows)
            table.rows[:] = [row for row in table.rows if row.get("id") != record_id]
            return len(table.rows) < before

    def search(self, criteria: RecordSearchCriteria) -> Tuple[List[MagazineRecord], int]:
        rows = [row for row in self.store.rows(TABLE) if self._matches(row, criteria)]
        column = criteria.sort.column

        def sort_key(row: Dict[str, Any]) -> Any:
            value = row.get(column)
            return value if column == "id" else str(value)

        # Nulls sort last in both directions.
        present = [row for row in rows if row.get(column) is not None]
        missing = [row for row in rows if row.get(column) is None]
        present.sort(key=sort_key, reverse=criteria.sort.descending)
        ordered = present + missing

        total = len(ordered)
        end = None if criteria.limit is None else criteria.offset + criteria.limit
        page = ordered[criteria.offset:end]
        return [MagazineRecord.from_dict(row) for row in page], total

    def list_all(self) -> List[MagazineRecord]:
        rows = sorted(self.store.rows(TABLE), key=lambda row: row.get("id") or 0)
        return [MagazineRecord.from_dict(row) for row in rows]

    def list_by_ids(self, record_ids: Iterable[int]) -> List[MagazineRecord]:
        wanted = set(record_ids)
        rows = [row for row in self.store.rows(TABLE) if row.get("id") in wanted]
        rows.sort(key=lambda row: row.get("id") or 0, reverse=True)
        return [MagazineRecord.from_dict(row) for row in rows]

    def ids_matching_email(self, email: str) -> List[int]:
        return [row["id"] for row in self.store.rows(TABLE) if row.get("email") == email]

    def magazine_names(self, query: Optional[str], limit: int) -> List[str]:
        needle = (query or "").strip().lower()
        names = {
            row["name"]
            for row in self.store.rows(TABLE)
            if row.get("name") and needle in row["name"].lower()
        }
        return sorted(names)[:limit]

    def count(self) -> int:
        return len(self.store.rows(TABLE))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _matches(row: Dict[str, Any], criteria: RecordSearchCriteria) -> bool:
        record_id = row.get("id")
        if criteria.include_ids is not None and record_id not in criteria.include_ids:
            return False
        if record_id in criteria.exclude_ids:
            return False
        for column_filter in criteria.filters:
            if column_filter.is_link_filter:
                continue
            if not column_filter.matches(row.get(column_filter.column)):
                return False
        if criteria.global_filter:
            needle = criteria.global_filter.lower()
            if not any(needle in str(row.get(column) or "").lower() for column in GLOBAL_SEARCH_COLUMNS):
                return False
        return True
