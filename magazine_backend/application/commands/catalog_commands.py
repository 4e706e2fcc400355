"""
Commands shared by the tag and author catalogs.

Both catalogs hang off records through a junction table, so deleting
entries and editing a record's links work the same way for either.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from magazine_backend.domain.exceptions import DomainValidationError, EntityNotFoundError
from magazine_backend.domain.repositories import CatalogRepository, RecordRepository
from magazine_backend.domain.services.catalog_rules import parse_positive_ids
from magazine_backend.infrastructure.cache.records_cache import RecordsCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteCatalogEntryCommand:
    entry_id: int


@dataclass(frozen=True)
class BulkDeleteCatalogEntriesCommand:
    ids: Any


class DeleteCatalogEntryHandler:
    """Removes an entry's record links, then the entry."""

    def __init__(self, catalog: CatalogRepository, cache: RecordsCache, *, entity_type: str):
        self._catalog = catalog
        self._cache = cache
        self._entity_type = entity_type

    def handle(self, command: DeleteCatalogEntryCommand) -> Dict[str, Any]:
        self._catalog.delete_links_for([command.entry_id])
        if not self._catalog.delete([command.entry_id]):
            raise EntityNotFoundError(
                self._entity_type, command.entry_id, message=f"{self._entity_type} not found"
            )
        self._cache.invalidate()
        logger.info("Deleted %s %s", self._entity_type.lower(), command.entry_id)
        return {"message": f"{self._entity_type} deleted successfully"}

    def handle_bulk(self, command: BulkDeleteCatalogEntriesCommand) -> Dict[str, Any]:
        ids = parse_positive_ids(command.ids)
        removed_links = self._catalog.delete_links_for(ids)
        deleted = self._catalog.delete(ids)
        self._cache.invalidate()
        label = self._entity_type.lower()
        return {
            "message": f"Successfully deleted {deleted} {label}(s) and {removed_links} record associations",
            f"deleted{self._entity_type}s": deleted,
            "deletedRecords": removed_links,
        }


@dataclass(frozen=True)
class ChangeRecordLinksCommand:
    record_id: Any
    entry_ids: Any


class RecordLinksHandler:
    """Assigns catalog entries to a record or removes them."""

    def __init__(
        self,
        catalog: CatalogRepository,
        record_repository: RecordRepository,
        cache: RecordsCache,
        *,
        entity_label: str,
    ):
        self._catalog = catalog
        self._records = record_repository
        self._cache = cache
        self._label = entity_label

    def link(self, command: ChangeRecordLinksCommand) -> Dict[str, Any]:
        record_id, entry_ids = self._validate(command)
        if self._records.get(record_id) is None:
            raise EntityNotFoundError("Record", record_id)
        linked = self._catalog.link(record_id, entry_ids)
        self._cache.invalidate()
        return {"message": f"{self._label.capitalize()} assigned successfully", "linked": linked}

    def unlink(self, command: ChangeRecordLinksCommand) -> Dict[str, Any]:
        record_id, entry_ids = self._validate(command)
        removed = self._catalog.unlink(record_id, entry_ids)
        self._cache.invalidate()
        return {"message": f"{self._label.capitalize()} removed successfully", "removed": removed}

    def list_for(self, record_id: Any) -> List[Any]:
        if not record_id:
            raise DomainValidationError("Record ID is required")
        return self._catalog.for_records([int(record_id)]).get(int(record_id), [])

    def _validate(self, command: ChangeRecordLinksCommand) -> tuple[int, List[int]]:
        ids: Sequence[Any] = command.entry_ids if isinstance(command.entry_ids, list) else []
        if not command.record_id or not ids:
            raise DomainValidationError(f"Record ID and {self._label[:-1]} IDs array are required")
        try:
            return int(command.record_id), [int(value) for value in ids]
        except (TypeError, ValueError) as exc:
            raise DomainValidationError(f"Record ID and {self._label[:-1]} IDs must be numbers") from exc
