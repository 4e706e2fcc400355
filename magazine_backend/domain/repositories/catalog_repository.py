"""
Shared interface for catalog entries linked to records (tags and authors).

Both catalogs own a junction table (``record_tags`` / ``record_authors``)
keyed by ``record_id`` and the catalog id, so link maintenance lives next to
the catalog itself.
"""

from abc import ABC, abstractmethod
from typing import Dict, Generic, Iterable, List, Optional, Set, TypeVar

from magazine_backend.domain.value_objects.catalog_query import CatalogListCriteria

T = TypeVar("T")


class CatalogRepository(ABC, Generic[T]):

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------
    @abstractmethod
    def add(self, entry: T) -> T:
        """Insert; raise DuplicateEntityError when the name is taken."""

    @abstractmethod
    def get(self, entry_id: int) -> Optional[T]:
        """Return the entry with the given id, if any."""

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[T]:
        """Exact (case-sensitive) name lookup."""

    @abstractmethod
    def update(self, entry: T) -> T:
        """Persist changes; raise EntityNotFoundError or DuplicateEntityError."""

    @abstractmethod
    def delete(self, entry_ids: Iterable[int]) -> int:
        """Delete entries; return the number removed."""

    @abstractmethod
    def search(self, query: Optional[str], limit: int) -> List[T]:
        """Return up to ``limit`` entries matching the quick-search box."""

    @abstractmethod
    def list(self, criteria: CatalogListCriteria) -> List[T]:
        """Return every entry matching the management-page filters."""

    @abstractmethod
    def list_all(self) -> List[T]:
        """Return every entry ordered by id ascending."""

    @abstractmethod
    def ids_matching_name(self, fragment: str) -> List[int]:
        """Ids of entries whose name contains ``fragment`` (case-insensitive)."""

    # ------------------------------------------------------------------
    # Record links
    # ------------------------------------------------------------------
    @abstractmethod
    def for_records(self, record_ids: Iterable[int]) -> Dict[int, List[T]]:
        """Map each record id to its linked entries."""

    @abstractmethod
    def link(self, record_id: int, entry_ids: Iterable[int]) -> int:
        """Link entries to a record, skipping existing links; return new links."""

    @abstractmethod
    def unlink(self, record_id: int, entry_ids: Iterable[int]) -> int:
        """Remove links between a record and entries; return links removed."""

    @abstractmethod
    def record_ids_for(self, entry_ids: Iterable[int]) -> List[int]:
        """Distinct record ids linked to any of the entries."""

    @abstractmethod
    def linked_record_ids(self) -> Set[int]:
        """Every record id that has at least one link."""

    @abstractmethod
    def linked_entry_ids(self) -> Set[int]:
        """Every entry id used by at least one record."""

    @abstractmethod
    def delete_links_for(self, entry_ids: Iterable[int]) -> int:
        """Remove all links to the entries; return links removed."""

    @abstractmethod
    def delete_links_for_record(self, record_id: int) -> int:
        """Remove all links of a record; return links removed."""
