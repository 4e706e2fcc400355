"""Directory-backed blob storage for local development and tests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from magazine_backend.domain.exceptions import EntityNotFoundError, RepositoryError, StorageSizeLimitError
from magazine_backend.domain.repositories.blob_storage import BlobStorage, StoredBlob
from magazine_backend.domain.services.text_formatting import build_viewer_url

logger = logging.getLogger(__name__)


class LocalBlobStorage(BlobStorage):
    """
    Store blobs as files below ``base_dir``.

    ``max_bytes`` mimics a hosted plan's upload limit so the compression
    fallback can be exercised without a cloud account.
    """

    def __init__(self, base_dir: str = "backend_data/blobs", max_bytes: Optional[int] = None) -> None:
        self.base_dir = Path(base_dir)
        self.max_bytes = max_bytes
        self._versions: dict[str, int] = {}
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:  # pragma: no cover - disk failure
            raise RepositoryError(f"Failed to create blob directory {self.base_dir}", exc)

    def upload(self, data: bytes, public_id: str) -> StoredBlob:
        if self.max_bytes is not None and len(data) > self.max_bytes:
            raise StorageSizeLimitError(
                "local",
                f"File size too large. Got {len(data)}. Maximum is {self.max_bytes}.",
                status_code=400,
            )
        path = self._path(public_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            tmp_path.write_bytes(data)
            tmp_path.replace(path)
        except OSError as exc:
            raise RepositoryError(f"Failed to store blob {public_id}", exc)
        finally:
            if tmp_path.exists():
                tmp_path.unlink(missing_ok=True)
        version = self._versions.get(public_id, 0) + 1
        self._versions[public_id] = version
        logger.debug("Stored blob %s (%d bytes)", public_id, len(data))
        return StoredBlob(
            public_id=public_id,
            url=build_viewer_url(public_id, version),
            version=str(version),
            bytes=len(data),
        )

    def download(self, public_id: str) -> bytes:
        path = self._path(public_id)
        if not path.is_file():
            raise EntityNotFoundError("Blob", public_id)
        return path.read_bytes()

    def delete(self, public_id: str) -> bool:
        path = self._path(public_id)
        if not path.is_file():
            return False
        path.unlink()
        self._versions.pop(public_id, None)
        return True

    def source_url(self, public_id: str) -> str:
        return self._path(public_id).resolve().as_uri()

    def _path(self, public_id: str) -> Path:
        root = self.base_dir.resolve()
        path = (root / public_id).resolve()
        if root not in path.parents:
            raise EntityNotFoundError("Blob", public_id)
        return path
