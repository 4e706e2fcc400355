"""Query handlers for the PDF viewer and manual page-text files."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urlparse

from magazine_backend.application.services.pdf_source import PdfSourceResolver
from magazine_backend.constants import PDF_PROXY_ALLOWED_HOSTS
from magazine_backend.domain.exceptions import DomainValidationError
from magazine_backend.domain.repositories import BlobStorage
from magazine_backend.domain.services.page_text_parser import parse_page_text_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewPdfQuery:
    public_id: Optional[str] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class PdfContent:
    filename: str
    data: bytes


def is_allowed_host(url: str) -> bool:
    host = (urlparse(url).hostname or "").lower()
    return any(host == allowed or host.endswith(f".{allowed}") for allowed in PDF_PROXY_ALLOWED_HOSTS)


class ViewPdfHandler:
    """
    Serve PDF bytes for the inline viewer.

    ``public_id`` is read from blob storage. ``url`` is proxied only for the
    hosts that have ever held record PDFs.
    """

    def __init__(self, storage: BlobStorage, source_resolver: PdfSourceResolver):
        self._storage = storage
        self._sources = source_resolver

    def handle(self, query: ViewPdfQuery) -> PdfContent:
        if query.public_id:
            name = query.public_id.rsplit("/", 1)[-1]
            return PdfContent(filename=name, data=self._storage.download(query.public_id))
        if query.url:
            if not is_allowed_host(query.url):
                logger.warning("Refusing to proxy PDF from %s", urlparse(query.url).hostname)
                raise DomainValidationError("URL host is not allowed")
            name = urlparse(query.url).path.rsplit("/", 1)[-1] or "document.pdf"
            return PdfContent(filename=name, data=self._sources.fetch_url(query.url))
        raise DomainValidationError("Missing id or url parameter")


class ParsePageTextHandler:

    def handle(self, raw: Optional[str]) -> Dict[int, str]:
        if not raw or not raw.strip():
            raise DomainValidationError("Text file is empty")
        pages = parse_page_text_file(raw)
        if not pages:
            raise DomainValidationError("No page markers found. Use lines like 'Page 1' to start each page.")
        return pages
