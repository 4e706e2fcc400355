"""File-based catalog repositories (tags, authors) and their record links."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Set, TypeVar

from magazine_backend.domain.entities.author import Author
from magazine_backend.domain.entities.tag import Tag
from magazine_backend.domain.entities.timestamps import format_timestamp, utc_now
from magazine_backend.domain.exceptions import DuplicateEntityError, EntityNotFoundError
from magazine_backend.domain.repositories.author_repository import UPSERT_COLUMNS, AuthorRepository
from magazine_backend.domain.repositories.tag_repository import TagRepository
from magazine_backend.domain.services.catalog_rules import author_search_pattern, like_to_regex
from magazine_backend.domain.value_objects.catalog_query import CatalogListCriteria

from .json_table_store import JsonTableStore

logger = logging.getLogger(__name__)

T = TypeVar("T", Tag, Author)


class _FileCatalogRepository(Generic[T]):
    table: str = ""
    link_table: str = ""
    link_column: str = ""
    entity_type: str = ""

    def __init__(self, store: JsonTableStore, factory: Callable[[Dict[str, Any]], T]) -> None:
        self.store = store
        self._factory = factory

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------
    def add(self, entry: T) -> T:
        with self.store.transaction(self.table) as table:
            if any(row.get("name") == entry.name for row in table.rows):
                raise DuplicateEntityError(self.entity_type, entry.name)
            row = entry.to_dict()
            row["created_at"] = row.get("created_at") or format_timestamp(utc_now())
            stored = table.insert(row)
        logger.debug("Inserted %s %s", self.entity_type, stored["id"])
        return self._factory(stored)

    def get(self, entry_id: int) -> Optional[T]:
        for row in self.store.rows(self.table):
            if row.get("id") == entry_id:
                return self._factory(row)
        return None

    def get_by_name(self, name: str) -> Optional[T]:
        for row in self.store.rows(self.table):
            if row.get("name") == name:
                return self._factory(row)
        return None

    def update(self, entry: T) -> T:
        with self.store.transaction(self.table) as table:
            if any(row.get("name") == entry.name and row.get("id") != entry.id for row in table.rows):
                raise DuplicateEntityError(self.entity_type, entry.name)
            for row in table.rows:
                if row.get("id") == entry.id:
                    created_at = row.get("created_at")
                    row.update(entry.to_dict())
                    row["created_at"] = row.get("created_at") or created_at
                    return self._factory(row)
        raise EntityNotFoundError(self.entity_type, entry.id)

    def delete(self, entry_ids: Iterable[int]) -> int:
        doomed = set(entry_ids)
        with self.store.transaction(self.table) as table:
            before = len(table.rows)
            table.rows[:] = [row for row in table.rows if row.get("id") not in doomed]
            return before - len(table.rows)

    def list(self, criteria: CatalogListCriteria) -> List[T]:
        entries = [
            self._factory(row)
            for row in self.store.rows(self.table)
        ]
        matching = [
            entry for entry in entries
            if criteria.matches(entry.name, entry.created_at, getattr(entry, "important", None))
        ]
        present = [entry for entry in matching if getattr(entry, criteria.sort_by, None) is not None]
        missing = [entry for entry in matching if getattr(entry, criteria.sort_by, None) is None]
        present.sort(key=lambda entry: getattr(entry, criteria.sort_by), reverse=criteria.descending)
        return present + missing

    def list_all(self) -> List[T]:
        return [self._factory(row) for row in self._sorted_rows()]

    def ids_matching_name(self, fragment: str) -> List[int]:
        needle = fragment.lower()
        return [
            row["id"]
            for row in self.store.rows(self.table)
            if needle in str(row.get("name") or "").lower()
        ]

    # ------------------------------------------------------------------
    # Record links
    # ------------------------------------------------------------------
    def for_records(self, record_ids: Iterable[int]) -> Dict[int, List[T]]:
        wanted = set(record_ids)
        by_id = {row["id"]: self._factory(row) for row in self.store.rows(self.table)}
        linked: Dict[int, List[T]] = {record_id: [] for record_id in wanted}
        for link in self.store.rows(self.link_table):
            record_id = link.get("record_id")
            entry = by_id.get(link.get(self.link_column))
            if record_id in wanted and entry is not None:
                linked[record_id].append(entry)
        return linked

    def link(self, record_id: int, entry_ids: Iterable[int]) -> int:
        added = 0
        with self.store.transaction(self.link_table) as table:
            existing = {
                row.get(self.link_column)
                for row in table.rows
                if row.get("record_id") == record_id
            }
            for entry_id in entry_ids:
                if entry_id in existing:
                    continue
                table.insert({"record_id": record_id, self.link_column: entry_id})
                existing.add(entry_id)
                added += 1
        return added

    def unlink(self, record_id: int, entry_ids: Iterable[int]) -> int:
        doomed = set(entry_ids)
        return self._delete_links(
            lambda row: row.get("record_id") == record_id and row.get(self.link_column) in doomed
        )

    def record_ids_for(self, entry_ids: Iterable[int]) -> List[int]:
        wanted = set(entry_ids)
        ids = {
            row["record_id"]
            for row in self.store.rows(self.link_table)
            if row.get(self.link_column) in wanted
        }
        return sorted(ids)

    def linked_record_ids(self) -> Set[int]:
        return {row["record_id"] for row in self.store.rows(self.link_table)}

    def linked_entry_ids(self) -> Set[int]:
        return {row[self.link_column] for row in self.store.rows(self.link_table)}

    def delete_links_for(self, entry_ids: Iterable[int]) -> int:
        doomed = set(entry_ids)
        return self._delete_links(lambda row: row.get(self.link_column) in doomed)

    def delete_links_for_record(self, record_id: int) -> int:
        return self._delete_links(lambda row: row.get("record_id") == record_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _sorted_rows(self) -> List[Dict[str, Any]]:
        return sorted(self.store.rows(self.table), key=lambda row: row.get("id") or 0)

    def _delete_links(self, predicate: Callable[[Dict[str, Any]], bool]) -> int:
        with self.store.transaction(self.link_table) as table:
            before = len(table.rows)
            table.rows[:] = [row for row in table.rows if not predicate(row)]
            return before - len(table.rows)


class FileTagRepository(_FileCatalogRepository[Tag], TagRepository):
    table = "tags"
    link_table = "record_tags"
    link_column = "tag_id"
    entity_type = "Tag"

    def __init__(self, store: JsonTableStore) -> None:
        super().__init__(store, Tag.from_dict)

    def search(self, query: Optional[str], limit: int) -> List[Tag]:
        needle = (query or "").strip().lower()
        rows = [row for row in self.store.rows(self.table) if needle in str(row.get("name") or "").lower()]
        rows.sort(key=lambda row: str(row.get("name") or ""))
        return [Tag.from_dict(row) for row in rows[:limit]]


class FileAuthorRepository(_FileCatalogRepository[Author], AuthorRepository):
    table = "authors"
    link_table = "record_authors"
    link_column = "author_id"
    entity_type = "Author"

    def __init__(self, store: JsonTableStore) -> None:
        super().__init__(store, Author.from_dict)

    def search(self, query: Optional[str], limit: int) -> List[Author]:
        pattern = author_search_pattern(query or "")
        rows = self._sorted_rows()
        if pattern is not None:
            regex = like_to_regex(pattern)
            rows = [
                row for row in rows
                if regex.match(str(row.get("name") or "")) or regex.match(str(row.get("short_name") or ""))
            ]
        return [Author.from_dict(row) for row in rows[:limit]]

    def upsert_by_name(self, authors: Iterable[Author]) -> int:
        written = 0
        with self.store.transaction(self.table) as table:
            by_name = {row.get("name"): row for row in table.rows}
            for author in authors:
                row = by_name.get(author.name)
                values = {column: getattr(author, column) for column in UPSERT_COLUMNS}
                if row is None:
                    row = author.to_dict()
                    row.update(values, created_at=format_timestamp(utc_now()))
                    table.insert(row)
                    by_name[author.name] = table.rows[-1]
                else:
                    row.update(values)
                written += 1
        return written

