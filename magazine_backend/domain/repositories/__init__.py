"""Domain repository interfaces."""

from .author_repository import AuthorRepository
from .blob_storage import BlobStorage, StoredBlob
from .catalog_repository import CatalogRepository
from .edit_history_repository import EditHistoryRepository
from .record_repository import RecordRepository
from .tag_repository import TagRepository
from .user_repository import UserRepository

__all__ = [
    "AuthorRepository",
    "BlobStorage",
    "CatalogRepository",
    "EditHistoryRepository",
    "RecordRepository",
    "StoredBlob",
    "TagRepository",
    "UserRepository",
]
