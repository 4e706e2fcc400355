"""CreateRecord Command - stores a new article record and its PDF."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, Dict, Mapping, Optional, Sequence

from magazine_backend.domain.entities.record import EDITABLE_RECORD_FIELDS, MagazineRecord
from magazine_backend.domain.entities.user import to_legacy_list
from magazine_backend.domain.exceptions import DomainValidationError
from magazine_backend.domain.repositories import AuthorRepository, BlobStorage, RecordRepository, TagRepository
from magazine_backend.domain.services.text_formatting import build_storage_key, none_if_blank
from magazine_backend.infrastructure.cache.records_cache import RecordsCache

logger = logging.getLogger(__name__)

# Creator identity is stored in the legacy ``["value"]`` format.
LEGACY_LIST_FIELDS = ("email", "creator_name")


@dataclass(frozen=True)
class CreateRecordCommand:
    fields: Mapping[str, Any]
    pdf: Optional[bytes] = None
    filename: Optional[str] = None
    tag_ids: Sequence[int] = field(default_factory=tuple)
    author_ids: Sequence[int] = field(default_factory=tuple)


class CreateRecordHandler:

    def __init__(
        self,
        record_repository: RecordRepository,
        storage: BlobStorage,
        tag_repository: TagRepository,
        author_repository: AuthorRepository,
        cache: RecordsCache,
        *,
        folder: str = "pdfs",
    ):
        self._records = record_repository
        self._storage = storage
        self._tags = tag_repository
        self._authors = author_repository
        self._cache = cache
        self._folder = folder.strip("/")

    def handle(self, command: CreateRecordCommand) -> MagazineRecord:
        values: Dict[str, Any] = {}
        for name in EDITABLE_RECORD_FIELDS:
            value = none_if_blank(command.fields.get(name))
            if value is not None and name in LEGACY_LIST_FIELDS:
                value = to_legacy_list(str(value))
            values[name] = value

        if not values.get("name"):
            raise DomainValidationError("Name is required")

        if command.pdf:
            key = build_storage_key(values.get("title_name") or values.get("name"))
            ext = PurePath(command.filename or "").suffix.lower()
            if ext and ext != ".pdf":
                key = key[: -len(".pdf")] + ext
            public_id = f"{self._folder}/{key}" if self._folder else key
            stored = self._storage.upload(command.pdf, public_id)
            values["pdf_public_id"] = stored.public_id
            values["pdf_url"] = stored.url

        record = self._records.add(MagazineRecord(id=None, **values))
        if command.tag_ids:
            self._tags.link(record.id, command.tag_ids)
        if command.author_ids:
            self._authors.link(record.id, command.author_ids)

        self._cache.invalidate()
        logger.info("Created record %s (%s)", record.id, record.name)
        return record
