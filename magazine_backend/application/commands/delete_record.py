"""DeleteRecord Commands - remove records and everything that hangs off them."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from magazine_backend.domain.entities.edit_entry import EditKind
from magazine_backend.domain.exceptions import DomainException, EntityNotFoundError, ExternalServiceError, RepositoryError
from magazine_backend.domain.repositories import (
    AuthorRepository,
    BlobStorage,
    EditHistoryRepository,
    RecordRepository,
    TagRepository,
)
from magazine_backend.infrastructure.cache.records_cache import RecordsCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteRecordCommand:
    record_id: int


@dataclass(frozen=True)
class BatchDeleteRecordsCommand:
    record_ids: Sequence[int]


class DeleteRecordHandler:
    """Deletes child rows first (conclusions, summaries, author and tag links), then the record."""

    def __init__(
        self,
        record_repository: RecordRepository,
        history_repository: EditHistoryRepository,
        tag_repository: TagRepository,
        author_repository: AuthorRepository,
        storage: BlobStorage,
        cache: RecordsCache,
    ):
        self._records = record_repository
        self._history = history_repository
        self._tags = tag_repository
        self._authors = author_repository
        self._storage = storage
        self._cache = cache

    def handle(self, command: DeleteRecordCommand) -> Dict[str, Any]:
        self._delete(command.record_id)
        self._cache.invalidate()
        return {
            "success": True,
            "message": "Record and all related data deleted successfully",
            "deletedRecordId": command.record_id,
        }

    def handle_batch(self, command: BatchDeleteRecordsCommand) -> Dict[str, List[Any]]:
        succeeded: List[int] = []
        failed: List[Dict[str, Any]] = []
        for record_id in command.record_ids:
            try:
                self._delete(record_id)
            except DomainException as exc:
                logger.warning("Failed to delete record %s: %s", record_id, exc)
                failed.append({"id": record_id, "error": str(exc)})
            else:
                succeeded.append(record_id)
        if succeeded:
            self._cache.invalidate()
        return {"success": succeeded, "failed": failed}

    def _delete(self, record_id: int) -> None:
        record = self._records.get(record_id)
        if record is None:
            raise EntityNotFoundError("Record", record_id)

        self._history.delete_for_record(EditKind.CONCLUSION, record_id)
        self._history.delete_for_record(EditKind.SUMMARY, record_id)
        self._authors.delete_links_for_record(record_id)
        self._tags.delete_links_for_record(record_id)
        if not self._records.delete(record_id):
            raise EntityNotFoundError("Record", record_id)

        if record.pdf_public_id:
            try:
                self._storage.delete(record.pdf_public_id)
            except (ExternalServiceError, RepositoryError) as exc:
                logger.warning("Record %s deleted but its PDF %s was not: %s", record_id, record.pdf_public_id, exc)
        logger.info("Deleted record %s", record_id)
