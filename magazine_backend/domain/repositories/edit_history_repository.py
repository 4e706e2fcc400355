"""Edit history repository interface (``summaries`` and ``conclusions`` tables)."""

from abc import ABC, abstractmethod
from typing import Iterable, List, Set

from magazine_backend.domain.entities.edit_entry import EditEntry, EditKind


class EditHistoryRepository(ABC):

    @abstractmethod
    def add(self, entry: EditEntry) -> EditEntry:
        """Append a history row and return it with id and created_at set."""

    @abstractmethod
    def list_for_record(self, kind: EditKind, record_id: int) -> List[EditEntry]:
        """History rows for one record ordered by created_at ascending."""

    @abstractmethod
    def list_for_records(self, kind: EditKind, record_ids: Iterable[int]) -> List[EditEntry]:
        """History rows for several records."""

    @abstractmethod
    def list_all(self, kind: EditKind) -> List[EditEntry]:
        """Every history row of the given kind."""

    @abstractmethod
    def record_ids_for_email(self, email: str) -> Set[int]:
        """Record ids edited (in either table) by the given email."""

    @abstractmethod
    def delete_for_record(self, kind: EditKind, record_id: int) -> int:
        """Remove a record's history rows of one kind; return rows removed."""
