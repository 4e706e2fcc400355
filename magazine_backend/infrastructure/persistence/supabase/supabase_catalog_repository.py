"""Supabase implementations of the tag and author repositories."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Set, TypeVar

from magazine_backend.domain.entities.author import Author
from magazine_backend.domain.entities.tag import Tag
from magazine_backend.domain.exceptions import EntityNotFoundError
from magazine_backend.domain.repositories.author_repository import UPSERT_COLUMNS, AuthorRepository
from magazine_backend.domain.repositories.tag_repository import TagRepository
from magazine_backend.domain.services.catalog_rules import author_search_pattern
from magazine_backend.domain.value_objects.catalog_query import CatalogListCriteria, ImportantFilter

from .client import SupabaseTable, chunked

logger = logging.getLogger(__name__)

T = TypeVar("T", Tag, Author)


class _SupabaseCatalogRepository(SupabaseTable, Generic[T]):
    table = ""
    link_table = ""
    link_column = ""
    columns = "*"

    def __init__(self, client: Any, factory: Callable[[Dict[str, Any]], T]) -> None:
        super().__init__(client)
        self._factory = factory

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------
    def add(self, entry: T) -> T:
        row = self._row(entry)
        response = self._execute(self.client.table(self.table).insert(row), f"insert {self.table}", key=entry.name)
        return self._factory(response.data[0])

    def get(self, entry_id: int) -> Optional[T]:
        response = self._execute(
            self.client.table(self.table).select(self.columns).eq("id", entry_id).limit(1),
            f"fetch {self.table}",
        )
        rows = response.data or []
        return self._factory(rows[0]) if rows else None

    def get_by_name(self, name: str) -> Optional[T]:
        response = self._execute(
            self.client.table(self.table).select(self.columns).eq("name", name).limit(1),
            f"fetch {self.table} by name",
        )
        rows = response.data or []
        return self._factory(rows[0]) if rows else None

    def update(self, entry: T) -> T:
        response = self._execute(
            self.client.table(self.table).update(self._row(entry)).eq("id", entry.id),
            f"update {self.table}",
            key=entry.name,
        )
        rows = response.data or []
        if not rows:
            raise EntityNotFoundError(self.entity_type, entry.id)
        return self._factory(rows[0])

    def delete(self, entry_ids: Iterable[int]) -> int:
        removed = 0
        for batch in chunked(sorted(set(entry_ids))):
            response = self._execute(self.client.table(self.table).delete().in_("id", batch), f"delete {self.table}")
            removed += len(response.data or [])
        return removed

    def list(self, criteria: CatalogListCriteria) -> List[T]:
        def make_query() -> Any:
            query = self.client.table(self.table).select(self.columns)
            if criteria.search:
                query = query.ilike("name", f"%{criteria.search}%")
            if criteria.created_after:
                query = query.gte("created_at", criteria.created_after.isoformat())
            if criteria.created_before:
                query = query.lte("created_at", criteria.created_before.isoformat())
            if criteria.important == ImportantFilter.TRUE:
                query = query.eq("important", True)
            elif criteria.important == ImportantFilter.FALSE:
                query = query.eq("important", False)
            elif criteria.important == ImportantFilter.NULL:
                query = query.is_("important", "null")
            return query.order(criteria.sort_by, desc=criteria.descending)

        return [self._factory(row) for row in self._fetch_all(make_query, f"list {self.table}")]

    def list_all(self) -> List[T]:
        rows = self._fetch_all(
            lambda: self.client.table(self.table).select(self.columns).order("id"),
            f"list {self.table}",
        )
        return [self._factory(row) for row in rows]

    def ids_matching_name(self, fragment: str) -> List[int]:
        rows = self._fetch_all(
            lambda: self.client.table(self.table).select("id").ilike("name", f"%{fragment}%").order("id"),
            f"match {self.table} names",
        )
        return [row["id"] for row in rows]

    # ------------------------------------------------------------------
    # Record links
    # ------------------------------------------------------------------
    def for_records(self, record_ids: Iterable[int]) -> Dict[int, List[T]]:
        wanted = sorted(set(record_ids))
        linked: Dict[int, List[T]] = {record_id: [] for record_id in wanted}
        embed = f"record_id, {self.table}({self.columns})"
        for batch in chunked(wanted):
            response = self._execute(
                self.client.table(self.link_table).select(embed).in_("record_id", batch),
                f"fetch {self.link_table}",
            )
            for row in response.data or []:
                target = row.get(self.table)
                if target:
                    linked.setdefault(row["record_id"], []).append(self._factory(target))
        return linked

    def link(self, record_id: int, entry_ids: Iterable[int]) -> int:
        existing = {
            row[self.link_column]
            for row in self._link_rows(lambda q: q.eq("record_id", record_id))
        }
        fresh = [entry_id for entry_id in dict.fromkeys(entry_ids) if entry_id not in existing]
        if not fresh:
            return 0
        rows = [{"record_id": record_id, self.link_column: entry_id} for entry_id in fresh]
        self._execute(self.client.table(self.link_table).insert(rows), f"link {self.link_table}")
        return len(fresh)

    def unlink(self, record_id: int, entry_ids: Iterable[int]) -> int:
        ids = sorted(set(entry_ids))
        if not ids:
            return 0
        response = self._execute(
            self.client.table(self.link_table).delete().eq("record_id", record_id).in_(self.link_column, ids),
            f"unlink {self.link_table}",
        )
        return len(response.data or [])

    def record_ids_for(self, entry_ids: Iterable[int]) -> List[int]:
        ids: Set[int] = set()
        for batch in chunked(sorted(set(entry_ids))):
            ids.update(row["record_id"] for row in self._link_rows(lambda q, b=batch: q.in_(self.link_column, b)))
        return sorted(ids)

    def linked_record_ids(self) -> Set[int]:
        return {row["record_id"] for row in self._link_rows(lambda q: q)}

    def linked_entry_ids(self) -> Set[int]:
        return {row[self.link_column] for row in self._link_rows(lambda q: q)}

    def delete_links_for(self, entry_ids: Iterable[int]) -> int:
        removed = 0
        for batch in chunked(sorted(set(entry_ids))):
            response = self._execute(
                self.client.table(self.link_table).delete().in_(self.link_column, batch),
                f"delete {self.link_table}",
            )
            removed += len(response.data or [])
        return removed

    def delete_links_for_record(self, record_id: int) -> int:
        response = self._execute(
            self.client.table(self.link_table).delete().eq("record_id", record_id),
            f"delete {self.link_table} for record",
        )
        return len(response.data or [])

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _row(self, entry: T) -> Dict[str, Any]:
        row = entry.to_dict()
        row.pop("id", None)
        if row.get("created_at") is None:
            row.pop("created_at", None)
        return row

    def _link_rows(self, narrow: Callable[[Any], Any]) -> List[Dict[str, Any]]:
        return self._fetch_all(
            lambda: narrow(
                self.client.table(self.link_table).select(f"record_id, {self.link_column}")
            ).order("record_id"),
            f"read {self.link_table}",
        )


class SupabaseTagRepository(_SupabaseCatalogRepository[Tag], TagRepository):
    table = "tags"
    link_table = "record_tags"
    link_column = "tag_id"
    entity_type = "Tag"
    columns = "id, name, important, created_at"

    def __init__(self, client: Any) -> None:
        super().__init__(client, Tag.from_dict)

    def search(self, query: Optional[str], limit: int) -> List[Tag]:
        builder = self.client.table(self.table).select(self.columns)
        if query and query.strip():
            builder = builder.ilike("name", f"%{query.strip()}%")
        response = self._execute(builder.order("name").limit(limit), "search tags")
        return [Tag.from_dict(row) for row in response.data or []]


class SupabaseAuthorRepository(_SupabaseCatalogRepository[Author], AuthorRepository):
    table = "authors"
    link_table = "record_authors"
    link_column = "author_id"
    entity_type = "Author"

    def __init__(self, client: Any) -> None:
        super().__init__(client, Author.from_dict)

    def search(self, query: Optional[str], limit: int) -> List[Author]:
        builder = self.client.table(self.table).select("id, name, designation, short_name")
        pattern = author_search_pattern(query or "")
        if pattern is not None:
            builder = builder.or_(f"name.ilike.{pattern},short_name.ilike.{pattern}")
        response = self._execute(builder.limit(limit), "search authors")
        return [Author.from_dict(row) for row in response.data or []]

    def upsert_by_name(self, authors: Iterable[Author]) -> int:
        rows = [{column: getattr(author, column) for column in UPSERT_COLUMNS} for author in authors]
        if not rows:
            return 0
        response = self._execute(
            self.client.table(self.table).upsert(rows, on_conflict="name"),
            "upsert authors",
        )
        logger.info("Upserted %d authors", len(rows))
        return len(response.data or rows)
