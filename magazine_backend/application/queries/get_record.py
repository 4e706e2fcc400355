"""Query handler for a single record with its links."""
from __future__ import annotations

from dataclasses import dataclass

from magazine_backend.application.dto.record_dto import RecordViewDTO
from magazine_backend.application.services.record_views import RecordViewAssembler
from magazine_backend.domain.exceptions import EntityNotFoundError
from magazine_backend.domain.repositories import (
    AuthorRepository,
    EditHistoryRepository,
    RecordRepository,
    TagRepository,
)


@dataclass(frozen=True)
class GetRecordQuery:
    record_id: int
    include_text: bool = False


class GetRecordHandler:

    def __init__(
        self,
        record_repository: RecordRepository,
        tag_repository: TagRepository,
        author_repository: AuthorRepository,
        history_repository: EditHistoryRepository,
    ):
        self._records = record_repository
        self._views = RecordViewAssembler(tag_repository, author_repository, history_repository)

    def handle(self, query: GetRecordQuery) -> RecordViewDTO:
        record = self._records.get(query.record_id)
        if record is None:
            raise EntityNotFoundError("Record", query.record_id)
        return self._views.assemble([record], include_text=query.include_text)[0]
