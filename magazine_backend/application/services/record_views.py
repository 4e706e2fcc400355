"""Builds the rows the records table shows from entities and their links."""
from __future__ import annotations

from typing import Dict, Iterable, List

from magazine_backend.application.dto.record_dto import RecordViewDTO
from magazine_backend.domain.entities.edit_entry import EditKind
from magazine_backend.domain.entities.record import MagazineRecord, RECORD_FIELDS
from magazine_backend.domain.repositories import AuthorRepository, EditHistoryRepository, TagRepository
from magazine_backend.domain.services.edit_history_builder import build_edit_history
from magazine_backend.domain.services.text_formatting import format_value
from magazine_backend.domain.value_objects.edit_history import EditHistorySummary

# The table never shows the full extracted text; it is fetched on demand.
RECORD_COLUMNS = tuple(name for name in RECORD_FIELDS if name != "extracted_text")


def format_record_fields(record: MagazineRecord, *, include_text: bool = False) -> Dict[str, object]:
    row = record.to_dict()
    columns = RECORD_FIELDS if include_text else RECORD_COLUMNS
    return {column: format_value(row.get(column)) for column in columns}


class RecordViewAssembler:
    """Attaches tags, linked authors and the summary edit history to records."""

    def __init__(
        self,
        tag_repository: TagRepository,
        author_repository: AuthorRepository,
        history_repository: EditHistoryRepository,
    ):
        self._tags = tag_repository
        self._authors = author_repository
        self._history = history_repository

    def assemble(self, records: Iterable[MagazineRecord], *, include_text: bool = False) -> List[RecordViewDTO]:
        records = list(records)
        ids = [record.id for record in records if record.id is not None]
        if not ids:
            return [RecordViewDTO(fields=format_record_fields(record, include_text=include_text)) for record in records]

        tags = self._tags.for_records(ids)
        authors = self._authors.for_records(ids)
        history = build_edit_history(self._history.list_for_records(EditKind.SUMMARY, ids))

        return [
            RecordViewDTO(
                fields=format_record_fields(record, include_text=include_text),
                tags=tags.get(record.id, []),
                authors_linked=authors.get(record.id, []),
                edit_history=history.get(record.id, EditHistorySummary.empty()),
            )
            for record in records
        ]
