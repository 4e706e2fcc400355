"""UpdateRecord Command - selective record update with edit history."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any, Dict, Mapping, Optional

from magazine_backend.domain.entities.edit_entry import EditEntry, EditKind
from magazine_backend.domain.exceptions import EntityNotFoundError, ExternalServiceError, RepositoryError
from magazine_backend.domain.repositories import BlobStorage, EditHistoryRepository, RecordRepository
from magazine_backend.domain.services.text_formatting import build_base_id, none_if_blank
from magazine_backend.infrastructure.cache.records_cache import RecordsCache

logger = logging.getLogger(__name__)

# Columns the edit form may change. Creator identity is fixed at creation.
UPDATABLE_FIELDS = (
    "name",
    "summary",
    "volume",
    "number",
    "title_name",
    "page_numbers",
    "authors",
    "language",
    "timestamp",
    "conclusion",
)


@dataclass(frozen=True)
class UpdateRecordCommand:
    """
    Fields absent from ``fields`` are left untouched; empty strings clear a
    column. ``editor_email``/``editor_name`` identify who made the change and
    are written to the history rows as sent by the form.
    """

    record_id: int
    fields: Mapping[str, Any]
    pdf: Optional[bytes] = None
    filename: Optional[str] = None
    editor_email: Optional[str] = None
    editor_name: Optional[str] = None


class UpdateRecordHandler:

    def __init__(
        self,
        record_repository: RecordRepository,
        history_repository: EditHistoryRepository,
        storage: BlobStorage,
        cache: RecordsCache,
        *,
        folder: str = "pdfs",
    ):
        self._records = record_repository
        self._history = history_repository
        self._storage = storage
        self._cache = cache
        self._folder = folder.strip("/")

    def handle(self, command: UpdateRecordCommand) -> Dict[str, Any]:
        existing = self._records.get(command.record_id)
        if existing is None:
            raise EntityNotFoundError("Record", command.record_id)

        changes: Dict[str, Any] = {
            name: none_if_blank(command.fields[name])
            for name in UPDATABLE_FIELDS
            if name in command.fields and command.fields[name] is not None
        }

        pdf_url = existing.pdf_url
        pdf_public_id = existing.pdf_public_id
        if command.pdf:
            title = (
                command.fields.get("title_name")
                or existing.title_name
                or command.fields.get("name")
                or existing.name
                or "untitled"
            )
            ext = PurePath(command.filename or "").suffix or ".pdf"
            key = f"{build_base_id(title)}{ext}"
            stored = self._storage.upload(command.pdf, f"{self._folder}/{key}" if self._folder else key)
            pdf_url, pdf_public_id = stored.url, stored.public_id
            changes.update(pdf_url=pdf_url, pdf_public_id=pdf_public_id, extracted_text=None)
            if existing.pdf_public_id and existing.pdf_public_id != pdf_public_id:
                self._delete_blob(existing.pdf_public_id)

        for kind, current in ((EditKind.SUMMARY, existing.summary), (EditKind.CONCLUSION, existing.conclusion)):
            new_value = command.fields.get(kind.value)
            if new_value is not None and current != new_value:
                self._history.add(
                    EditEntry(
                        id=None,
                        record_id=command.record_id,
                        kind=kind,
                        text=current,
                        email=command.editor_email,
                        name=command.editor_name,
                    )
                )

        if changes:
            self._records.update(command.record_id, changes)
        self._cache.invalidate()
        logger.info("Updated record %s (%s)", command.record_id, ", ".join(sorted(changes)) or "no changes")
        return {"id": command.record_id, "pdf_url": pdf_url, "pdf_public_id": pdf_public_id}

    def _delete_blob(self, public_id: str) -> None:
        try:
            self._storage.delete(public_id)
        except (ExternalServiceError, RepositoryError) as exc:
            logger.warning("Failed to delete old PDF %s: %s", public_id, exc)
