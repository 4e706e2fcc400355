"""Supabase implementation of EditHistoryRepository."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Set

from magazine_backend.domain.entities.edit_entry import EditEntry, EditKind
from magazine_backend.domain.repositories.edit_history_repository import EditHistoryRepository

from .client import SupabaseTable, chunked


class SupabaseEditHistoryRepository(SupabaseTable, EditHistoryRepository):
    entity_type = "EditEntry"

    def add(self, entry: EditEntry) -> EditEntry:
        row = entry.to_row()
        row.pop("id", None)
        if row.get("created_at") is None:
            row.pop("created_at")
        response = self._execute(self.client.table(entry.kind.table).insert(row), f"insert {entry.kind.table}")
        return EditEntry.from_row(entry.kind, response.data[0])

    def list_for_record(self, kind: EditKind, record_id: int) -> List[EditEntry]:
        response = self._execute(
            self.client.table(kind.table).select("*").eq("record_id", record_id).order("created_at"),
            f"fetch {kind.table}",
        )
        return [EditEntry.from_row(kind, row) for row in response.data or []]

    def list_for_records(self, kind: EditKind, record_ids: Iterable[int]) -> List[EditEntry]:
        rows: List[Dict[str, Any]] = []
        for batch in chunked(sorted(set(record_ids))):
            response = self._execute(
                self.client.table(kind.table)
                .select("id, record_id, name, email, created_at")
                .in_("record_id", batch)
                .order("created_at"),
                f"fetch {kind.table}",
            )
            rows.extend(response.data or [])
        return [EditEntry.from_row(kind, row) for row in rows]

    def list_all(self, kind: EditKind) -> List[EditEntry]:
        rows = self._fetch_all(
            lambda: self.client.table(kind.table).select("*").order("created_at"),
            f"list {kind.table}",
        )
        return [EditEntry.from_row(kind, row) for row in rows]

    def record_ids_for_email(self, email: str) -> Set[int]:
        ids: Set[int] = set()
        for kind in EditKind:
            rows = self._fetch_all(
                lambda table=kind.table: self.client.table(table).select("record_id").eq("email", email).order("id"),
                f"find {kind.table} by email",
            )
            ids.update(row["record_id"] for row in rows if row.get("record_id") is not None)
        return ids

    def delete_for_record(self, kind: EditKind, record_id: int) -> int:
        response = self._execute(
            self.client.table(kind.table).delete().eq("record_id", record_id),
            f"delete {kind.table}",
        )
        return len(response.data or [])
