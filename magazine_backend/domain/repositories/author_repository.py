"""Author repository interface."""

from abc import abstractmethod
from typing import Iterable

from magazine_backend.domain.entities.author import Author

from .catalog_repository import CatalogRepository

# Columns written by a name-keyed upsert; other columns keep their values.
UPSERT_COLUMNS = ("name", "description", "cover_url", "national")


class AuthorRepository(CatalogRepository[Author]):
    """
    Authors and the ``record_authors`` junction table.

    ``search`` is fuzzy: the query is turned into ``%c%h%a%r%`` and matched
    against both ``name`` and ``short_name``.
    """

    @abstractmethod
    def upsert_by_name(self, authors: Iterable[Author]) -> int:
        """Insert or update ``UPSERT_COLUMNS`` keyed on name; return rows written."""
