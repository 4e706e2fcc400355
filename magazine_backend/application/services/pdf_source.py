"""Locates and downloads the PDF behind a record."""
from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urljoin

import requests

from magazine_backend.domain.entities.record import MagazineRecord
from magazine_backend.domain.exceptions import DomainValidationError, ExternalServiceError
from magazine_backend.domain.repositories.blob_storage import BlobStorage

logger = logging.getLogger(__name__)


class PdfSourceResolver:
    """
    Resolve a record's PDF to a fetchable URL and its bytes.

    Records with a ``pdf_public_id`` are read through blob storage. Older
    records only carry ``pdf_url``, which may be site-relative (the viewer
    route) and is made absolute against ``site_url``.
    """

    def __init__(
        self,
        storage: BlobStorage,
        site_url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 120.0,
    ):
        self._storage = storage
        self._site_url = site_url.rstrip("/") + "/"
        self._session = session or requests.Session()
        self._timeout = timeout

    def source_url(self, record: MagazineRecord) -> str:
        if record.pdf_public_id:
            return self._storage.source_url(record.pdf_public_id)
        if record.pdf_url:
            return self.absolute(record.pdf_url)
        raise DomainValidationError("Record is missing a PDF source (pdf_public_id or pdf_url).")

    def absolute(self, url: str) -> str:
        if url.startswith("http://") or url.startswith("https://"):
            return url
        return urljoin(self._site_url, url.lstrip("/"))

    def fetch(self, record: MagazineRecord) -> bytes:
        if record.pdf_public_id:
            return self._storage.download(record.pdf_public_id)
        return self.fetch_url(self.source_url(record))

    def fetch_url(self, url: str) -> bytes:
        try:
            response = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise ExternalServiceError("PDF download", f"Failed to download PDF: {exc}") from exc
        if not response.ok:
            raise ExternalServiceError(
                "PDF download",
                f"Failed to download PDF ({response.status_code})",
                status_code=response.status_code,
            )
        logger.debug("Downloaded %d bytes from %s", len(response.content), url)
        return response.content
