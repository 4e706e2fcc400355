"""File-based implementation of EditHistoryRepository."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Set

from magazine_backend.domain.entities.edit_entry import EditEntry, EditKind
from magazine_backend.domain.entities.timestamps import utc_now
from magazine_backend.domain.repositories.edit_history_repository import EditHistoryRepository

from .json_table_store import JsonTableStore


class FileEditHistoryRepository(EditHistoryRepository):
    """Keeps ``summaries.json`` and ``conclusions.json`` side by side."""

    def __init__(self, store: JsonTableStore) -> None:
        self.store = store

    def add(self, entry: EditEntry) -> EditEntry:
        if entry.created_at is None:
            entry = replace(entry, created_at=utc_now())
        with self.store.transaction(entry.kind.table) as table:
            row = table.insert(entry.to_row())
        return EditEntry.from_row(entry.kind, row)

    def list_for_record(self, kind: EditKind, record_id: int) -> List[EditEntry]:
        return self.list_for_records(kind, [record_id])

    def list_for_records(self, kind: EditKind, record_ids: Iterable[int]) -> List[EditEntry]:
        wanted = set(record_ids)
        return [entry for entry in self.list_all(kind) if entry.record_id in wanted]

    def list_all(self, kind: EditKind) -> List[EditEntry]:
        entries = [EditEntry.from_row(kind, row) for row in self.store.rows(kind.table)]
        entries.sort(key=lambda entry: (entry.created_at is None, entry.created_at or utc_now(), entry.id or 0))
        return entries

    def record_ids_for_email(self, email: str) -> Set[int]:
        ids: Set[int] = set()
        for kind in EditKind:
            ids.update(row["record_id"] for row in self.store.rows(kind.table) if row.get("email") == email)
        return ids

    def delete_for_record(self, kind: EditKind, record_id: int) -> int:
        with self.store.transaction(kind.table) as table:
            before = len(table.rows)
            table.rows[:] = [row for row in table.rows if row.get("record_id") != record_id]
            return before - len(table.rows)
