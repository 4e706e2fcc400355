"""Tag Commands - create, rename and CSV import."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

from magazine_backend.constants import IMPORT_MAX_BYTES
from magazine_backend.domain.entities.tag import Tag
from magazine_backend.domain.exceptions import (
    DomainException,
    DomainValidationError,
    DuplicateEntityError,
    EntityNotFoundError,
)
from magazine_backend.domain.repositories import TagRepository
from magazine_backend.domain.services.catalog_rules import parse_important, validate_tag_name
from magazine_backend.infrastructure.cache.records_cache import RecordsCache
from magazine_backend.infrastructure.export.tabular_writer import read_csv_rows

logger = logging.getLogger(__name__)

TAG_CSV_COLUMNS = ("id", "name", "important", "created_at")


@dataclass(frozen=True)
class CreateTagCommand:
    name: Any
    important: Any = None


@dataclass(frozen=True)
class UpdateTagCommand:
    tag_id: int
    name: Any
    important: Any = None


class CreateTagHandler:

    def __init__(self, tag_repository: TagRepository, cache: RecordsCache):
        self._tags = tag_repository
        self._cache = cache

    def handle(self, command: CreateTagCommand) -> Tag:
        name = validate_tag_name(command.name)
        if self._tags.get_by_name(name) is not None:
            raise DuplicateEntityError("Tag", name, message="Tag name already exists")
        tag = self._tags.add(Tag(id=None, name=name, important=parse_important(command.important)))
        self._cache.invalidate()
        return tag


class UpdateTagHandler:

    def __init__(self, tag_repository: TagRepository, cache: RecordsCache):
        self._tags = tag_repository
        self._cache = cache

    def handle(self, command: UpdateTagCommand) -> Tag:
        name = validate_tag_name(command.name, strict=True)
        existing = self._tags.get(command.tag_id)
        if existing is None:
            raise EntityNotFoundError("Tag", command.tag_id, message="Tag not found")
        clash = self._tags.get_by_name(name)
        if clash is not None and clash.id != existing.id:
            raise DuplicateEntityError("Tag", name, message="Tag name already exists")
        tag = self._tags.update(existing.renamed(name, parse_important(command.important)))
        self._cache.invalidate()
        return tag


@dataclass(frozen=True)
class ImportTagsCommand:
    filename: Optional[str]
    content: Optional[bytes]


class ImportTagsHandler:
    """
    Import ``id,name,important,created_at`` rows.

    Rows without an id are inserted (any duplicate name rejects the whole
    file); rows with an id update that tag, and name clashes are skipped.
    """

    def __init__(self, tag_repository: TagRepository, cache: RecordsCache):
        self._tags = tag_repository
        self._cache = cache

    def handle(self, command: ImportTagsCommand) -> Dict[str, Any]:
        if command.content is None:
            raise DomainValidationError("No file uploaded")
        if not (command.filename or "").lower().endswith(".csv"):
            raise DomainValidationError("Only CSV files are allowed")
        if len(command.content) > IMPORT_MAX_BYTES:
            raise DomainValidationError("File size must be less than 10MB")

        rows = self._parse(command.content.decode("utf-8-sig", errors="replace"))
        if not rows:
            raise DomainValidationError(
                "No valid tag data found in CSV",
                details=["Expected format: id,name,important,created_at"],
            )

        valid, errors = self._validate(rows)
        if errors:
            raise DomainValidationError("Validation errors found in CSV", details=errors)

        new_tags = [tag for tag in valid if tag.id is None]
        updates = [tag for tag in valid if tag.id is not None]

        seen: Set[str] = set()
        for tag in new_tags:
            if tag.name in seen or self._tags.get_by_name(tag.name) is not None:
                raise DomainValidationError(
                    "Duplicate tag names found",
                    details=["One or more tag names already exist in the database"],
                )
            seen.add(tag.name)
        for tag in new_tags:
            self._tags.add(tag)

        updated = skipped = 0
        for tag in updates:
            try:
                self._tags.update(tag)
            except DomainException as exc:
                logger.warning("Skipped tag %s during import: %s", tag.id, exc)
                skipped += 1
            else:
                updated += 1

        self._cache.invalidate()
        message = f"Import completed: {len(new_tags)} created, {updated} updated"
        if skipped:
            message += f", {skipped} skipped"
        return {
            "message": message,
            "inserted": len(new_tags),
            "updated": updated,
            "skipped": skipped,
            "total": len(valid),
        }

    @staticmethod
    def _parse(text: str) -> List[Dict[str, str]]:
        parsed = []
        for row in read_csv_rows(text):
            values = dict(zip(TAG_CSV_COLUMNS, (cell.strip() for cell in row)))
            name = values.get("name", "")
            # Header rows repeat the column names.
            if name and name.lower() != "name":
                parsed.append(values)
        return parsed

    @staticmethod
    def _validate(rows: List[Dict[str, str]]) -> tuple[List[Tag], List[str]]:
        valid: List[Tag] = []
        errors: List[str] = []
        for index, row in enumerate(rows):
            line = index + 2
            try:
                name = validate_tag_name(row.get("name"), strict=True)
                important = parse_important(row.get("important"))
            except DomainValidationError as exc:
                errors.append(f"Line {line}: {exc}")
                continue
            raw_id = row.get("id") or ""
            tag_id = None
            if raw_id:
                try:
                    tag_id = int(raw_id)
                except ValueError:
                    errors.append(f"Line {line}: ID must be a number or empty for new tags")
                    continue
            valid.append(Tag(id=tag_id, name=name, important=important))
        return valid, errors
