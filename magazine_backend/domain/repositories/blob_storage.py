"""Blob storage interface for record PDFs."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StoredBlob:
    public_id: str
    url: str
    version: Optional[str] = None
    bytes: Optional[int] = None


class BlobStorage(ABC):

    @abstractmethod
    def upload(self, data: bytes, public_id: str) -> StoredBlob:
        """Store ``data`` under ``public_id`` (overwriting); raise StorageSizeLimitError when rejected for size."""

    @abstractmethod
    def download(self, public_id: str) -> bytes:
        """Return the stored bytes; raise EntityNotFoundError when missing."""

    @abstractmethod
    def delete(self, public_id: str) -> bool:
        """Delete the blob; return True if something was removed."""

    @abstractmethod
    def source_url(self, public_id: str) -> str:
        """URL the blob can be fetched from (signed where the backend requires it)."""
