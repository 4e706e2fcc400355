"""Tag repository interface."""

from magazine_backend.domain.entities.tag import Tag

from .catalog_repository import CatalogRepository


class TagRepository(CatalogRepository[Tag]):
    """Tags and the ``record_tags`` junction table."""
