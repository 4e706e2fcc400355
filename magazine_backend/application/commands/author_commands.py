"""Author Commands - create, edit and CSV import."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from magazine_backend.constants import (
    AUTHOR_NATIONAL_UPDATE_VALUES,
    AUTHOR_NATIONAL_VALUES,
    IMPORT_MAX_BYTES,
)
from magazine_backend.domain.entities.author import Author
from magazine_backend.domain.exceptions import DomainValidationError, DuplicateEntityError, EntityNotFoundError
from magazine_backend.domain.repositories import AuthorRepository
from magazine_backend.domain.services.catalog_rules import normalize_national
from magazine_backend.domain.services.text_formatting import none_if_blank
from magazine_backend.infrastructure.cache.records_cache import RecordsCache
from magazine_backend.infrastructure.export.tabular_writer import read_csv_rows

logger = logging.getLogger(__name__)


def _required_name(raw: Any) -> str:
    name = raw.strip() if isinstance(raw, str) else ""
    if not name:
        raise DomainValidationError("Name is required")
    return name


@dataclass(frozen=True)
class SaveAuthorCommand:
    """Form payload for creating (``author_id`` None) or editing an author."""

    values: Mapping[str, Any]
    author_id: Optional[int] = None


class CreateAuthorHandler:

    def __init__(self, author_repository: AuthorRepository, cache: RecordsCache):
        self._authors = author_repository
        self._cache = cache

    def handle(self, command: SaveAuthorCommand) -> Author:
        values = command.values
        name = _required_name(values.get("name"))
        if self._authors.get_by_name(name) is not None:
            raise DuplicateEntityError("Author", name, message="Author name already exists")
        author = self._authors.add(
            Author(
                id=None,
                name=name,
                description=none_if_blank(values.get("description")),
                cover_url=none_if_blank(values.get("cover_url")),
                national=normalize_national(values.get("national"), AUTHOR_NATIONAL_VALUES),
                designation=none_if_blank(values.get("designation")),
                short_name=none_if_blank(values.get("short_name")),
            )
        )
        self._cache.invalidate()
        return author


class UpdateAuthorHandler:

    def __init__(self, author_repository: AuthorRepository, cache: RecordsCache):
        self._authors = author_repository
        self._cache = cache

    def handle(self, command: SaveAuthorCommand) -> Author:
        values = command.values
        name = _required_name(values.get("name"))
        existing = self._authors.get(command.author_id) if command.author_id is not None else None
        if existing is None:
            raise EntityNotFoundError("Author", command.author_id, message="Author not found")
        clash = self._authors.get_by_name(name)
        if clash is not None and clash.id != existing.id:
            raise DuplicateEntityError("Author", name, message="Author name already exists")
        author = self._authors.update(
            existing.with_changes(
                name=name,
                description=values.get("description"),
                cover_url=values.get("cover_url"),
                national=normalize_national(values.get("national"), AUTHOR_NATIONAL_UPDATE_VALUES),
                designation=values.get("designation", existing.designation),
                short_name=values.get("short_name", existing.short_name),
            )
        )
        self._cache.invalidate()
        return author


@dataclass(frozen=True)
class ImportAuthorsCommand:
    filename: Optional[str]
    content: Optional[bytes]


class ImportAuthorsHandler:
    """Upsert authors by name from a CSV with a header row (any column order)."""

    def __init__(self, author_repository: AuthorRepository, cache: RecordsCache):
        self._authors = author_repository
        self._cache = cache

    def handle(self, command: ImportAuthorsCommand) -> Dict[str, Any]:
        if command.content is None:
            raise DomainValidationError("No file uploaded")
        if not (command.filename or "").endswith(".csv"):
            raise DomainValidationError("Only CSV files are allowed")
        if len(command.content) > IMPORT_MAX_BYTES:
            raise DomainValidationError("File size must be less than 10MB")

        rows = read_csv_rows(command.content.decode("utf-8-sig", errors="replace"))
        if len(rows) < 2:
            raise DomainValidationError("CSV file is empty")
        header = [column.strip().lower() for column in rows[0]]
        records: List[Dict[str, str]] = [dict(zip(header, row)) for row in rows[1:]]

        missing = [str(index + 1) for index, row in enumerate(records) if not (row.get("name") or "").strip()]
        if missing:
            raise DomainValidationError(
                "Invalid data found",
                details=[f"Rows with missing name field: {', '.join(missing)}"],
            )

        authors = [
            Author(
                id=None,
                name=row["name"].strip(),
                description=row.get("description") or None,
                cover_url=row.get("cover_url") or None,
                national=row.get("national") or None,
            )
            for row in records
        ]
        imported = self._authors.upsert_by_name(authors)
        self._cache.invalidate()
        logger.info("Imported %d author(s)", imported)
        return {
            "success": True,
            "message": f"Successfully processed {len(records)} authors",
            "imported": imported,
        }
