"""Record repository interface (Abstract Base Class)."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Tuple

from magazine_backend.domain.entities.record import MagazineRecord
from magazine_backend.domain.value_objects.record_query import RecordSearchCriteria


class RecordRepository(ABC):
    """Abstract repository for rows of the ``records`` table."""

    @abstractmethod
    def add(self, record: MagazineRecord) -> MagazineRecord:
        """Insert the record and return it with its assigned id."""

    @abstractmethod
    def get(self, record_id: int) -> Optional[MagazineRecord]:
        """Return the record with the provided identifier, if it exists."""

    @abstractmethod
    def update(self, record_id: int, changes: Dict[str, Any]) -> MagazineRecord:
        """Apply column changes; raise EntityNotFoundError when missing."""

    @abstractmethod
    def delete(self, record_id: int) -> bool:
        """Delete the record row; return True if removed."""

    @abstractmethod
    def search(self, criteria: RecordSearchCriteria) -> Tuple[List[MagazineRecord], int]:
        """Return one page of matching records and the total match count."""

    @abstractmethod
    def list_all(self) -> List[MagazineRecord]:
        """Return every record ordered by id ascending."""

    @abstractmethod
    def list_by_ids(self, record_ids: Iterable[int]) -> List[MagazineRecord]:
        """Return the records with the given ids ordered by id descending."""

    @abstractmethod
    def ids_matching_email(self, email: str) -> List[int]:
        """Return ids of records whose ``email`` column equals the value."""

    @abstractmethod
    def magazine_names(self, query: Optional[str], limit: int) -> List[str]:
        """Return distinct record names (substring ``query``) sorted alphabetically."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of records."""
