"""Query handler for the summary/conclusion history viewer."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from magazine_backend.application.dto.record_dto import HistoryEntryDTO
from magazine_backend.domain.entities.edit_entry import EditKind
from magazine_backend.domain.entities.timestamps import format_timestamp
from magazine_backend.domain.exceptions import EntityNotFoundError
from magazine_backend.domain.repositories import EditHistoryRepository, RecordRepository
from magazine_backend.domain.services.text_formatting import format_value
from magazine_backend.domain.services.word_diff import diff_lines, split_history_text


@dataclass(frozen=True)
class GetRecordHistoryQuery:
    record_id: int
    kind: EditKind = EditKind.SUMMARY


class GetRecordHistoryHandler:
    """
    Return superseded values newest first.

    Each entry carries the word diff from the value before it (the next
    entry in the returned list); the oldest entry has no diff.
    """

    def __init__(self, record_repository: RecordRepository, history_repository: EditHistoryRepository):
        self._records = record_repository
        self._history = history_repository

    def handle(self, query: GetRecordHistoryQuery) -> List[HistoryEntryDTO]:
        if self._records.get(query.record_id) is None:
            raise EntityNotFoundError("Record", query.record_id)

        entries = sorted(
            self._history.list_for_record(query.kind, query.record_id),
            key=lambda entry: (entry.created_at is not None, entry.created_at, entry.id or 0),
            reverse=True,
        )
        lines = [[format_value(line) for line in split_history_text(entry.text)] for entry in entries]

        result: List[HistoryEntryDTO] = []
        for index, entry in enumerate(entries):
            previous = lines[index + 1] if index + 1 < len(lines) else None
            current = lines[index]
            result.append(
                HistoryEntryDTO(
                    id=entry.id,
                    text="\n".join(current),
                    lines=current,
                    email=format_value(entry.email) or None,
                    name=format_value(entry.name) or None,
                    created_at=format_timestamp(entry.created_at),
                    diff=None if previous is None else diff_lines(previous, current),
                )
            )
        return result
