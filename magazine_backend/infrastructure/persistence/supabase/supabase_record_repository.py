"""Supabase implementation of RecordRepository."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from magazine_backend.domain.entities.record import MagazineRecord
from magazine_backend.domain.exceptions import EntityNotFoundError
from magazine_backend.domain.repositories.record_repository import RecordRepository
from magazine_backend.domain.value_objects.record_query import (
    GLOBAL_SEARCH_COLUMNS,
    FilterMode,
    RecordSearchCriteria,
)

from .client import SupabaseTable, chunked

TABLE = "records"


def _or_safe(value: str) -> str:
    # Commas and parentheses delimit PostgREST ``or`` expressions.
    return value.replace(",", " ").replace("(", " ").replace(")", " ")


class SupabaseRecordRepository(SupabaseTable, RecordRepository):
    entity_type = "Record"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def add(self, record: MagazineRecord) -> MagazineRecord:
        row = record.to_dict()
        row.pop("id", None)
        response = self._execute(self.client.table(TABLE).insert(row), "insert record")
        return MagazineRecord.from_dict(response.data[0])

    def get(self, record_id: int) -> Optional[MagazineRecord]:
        response = self._execute(
            self.client.table(TABLE).select("*").eq("id", record_id).limit(1),
            f"fetch record {record_id}",
        )
        rows = response.data or []
        return MagazineRecord.from_dict(rows[0]) if rows else None

    def update(self, record_id: int, changes: Dict[str, Any]) -> MagazineRecord:
        response = self._execute(
            self.client.table(TABLE).update(changes).eq("id", record_id),
            f"update record {record_id}",
        )
        rows = response.data or []
        if not rows:
            raise EntityNotFoundError("Record", record_id)
        return MagazineRecord.from_dict(rows[0])

    def delete(self, record_id: int) -> bool:
        response = self._execute(
            self.client.table(TABLE).delete().eq("id", record_id),
            f"delete record {record_id}",
        )
        return bool(response.data)

    def search(self, criteria: RecordSearchCriteria) -> Tuple[List[MagazineRecord], int]:
        if criteria.include_ids is not None and not criteria.include_ids:
            return [], 0
        query = self._filtered(self.client.table(TABLE).select("*", count="exact"), criteria)
        query = query.order(criteria.sort.column, desc=criteria.sort.descending)
        if criteria.limit is not None:
            query = query.range(criteria.offset, criteria.offset + criteria.limit - 1)
        response = self._execute(query, "search records")
        records = [MagazineRecord.from_dict(row) for row in response.data or []]
        total = response.count if response.count is not None else len(records)
        return records, total

    def list_all(self) -> List[MagazineRecord]:
        rows = self._fetch_all(
            lambda: self.client.table(TABLE).select("*").order("id"),
            "list records",
        )
        return [MagazineRecord.from_dict(row) for row in rows]

    def list_by_ids(self, record_ids: Iterable[int]) -> List[MagazineRecord]:
        rows: List[Dict[str, Any]] = []
        for batch in chunked(sorted(set(record_ids))):
            response = self._execute(
                self.client.table(TABLE).select("*").in_("id", batch),
                "fetch records by id",
            )
            rows.extend(response.data or [])
        rows.sort(key=lambda row: row["id"], reverse=True)
        return [MagazineRecord.from_dict(row) for row in rows]

    def ids_matching_email(self, email: str) -> List[int]:
        rows = self._fetch_all(
            lambda: self.client.table(TABLE).select("id").eq("email", email).order("id"),
            "find records by email",
        )
        return [row["id"] for row in rows]

    def magazine_names(self, query: Optional[str], limit: int) -> List[str]:
        def make_query() -> Any:
            builder = self.client.table(TABLE).select("name").order("name")
            if query and query.strip():
                builder = builder.ilike("name", f"%{query.strip()}%")
            return builder

        rows = self._fetch_all(make_query, "list magazine names")
        names = sorted({row["name"] for row in rows if row.get("name")})
        return names[:limit]

    def count(self) -> int:
        response = self._execute(
            self.client.table(TABLE).select("id", count="exact").limit(1),
            "count records",
        )
        return response.count or 0

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _filtered(query: Any, criteria: RecordSearchCriteria) -> Any:
        if criteria.include_ids is not None:
            query = query.in_("id", sorted(criteria.include_ids))
        if criteria.exclude_ids:
            query = query.not_.in_("id", sorted(criteria.exclude_ids))
        for column_filter in criteria.filters:
            if column_filter.is_link_filter:
                continue
            column = column_filter.column
            mode = column_filter.mode
            if mode is FilterMode.EMPTY:
                query = query.or_(f"{column}.is.null,{column}.eq.")
            elif mode is FilterMode.NONEMPTY:
                query = query.not_.is_(column, "null").neq(column, "")
            elif mode is FilterMode.CONTAINS:
                query = query.ilike(column, f"%{column_filter.value}%")
            else:
                query = query.eq(column, column_filter.value)
        if criteria.global_filter:
            needle = _or_safe(criteria.global_filter)
            query = query.or_(",".join(f"{column}.ilike.%{needle}%" for column in GLOBAL_SEARCH_COLUMNS))
        return query
