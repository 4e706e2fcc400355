"""
Cloudinary raw-file storage over the REST API.

PDFs are uploaded as ``raw`` resources under their full public id (extension
included) and delivered through signed URLs, matching how existing records
reference them.
"""

from __future__ import annotations

import base64
import hashlib
import logging
import time
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from magazine_backend.domain.exceptions import (
    EntityNotFoundError,
    ExternalServiceError,
    StorageSizeLimitError,
)
from magazine_backend.domain.repositories.blob_storage import BlobStorage, StoredBlob
from magazine_backend.domain.services.text_formatting import build_viewer_url

logger = logging.getLogger(__name__)

API_BASE = "https://api.cloudinary.com/v1_1"
DELIVERY_BASE = "https://res.cloudinary.com"
SIZE_ERROR_MARKERS = ("file size too large", "too large", "resource size", "entity too large", "413")


def is_size_error(message: str) -> bool:
    lowered = (message or "").lower()
    return any(marker in lowered for marker in SIZE_ERROR_MARKERS)


def sign_params(params: Dict[str, Any], api_secret: str) -> str:
    """SHA-1 signature over the sorted ``key=value`` pairs followed by the secret."""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, ""))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryStorage(BlobStorage):

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 120.0,
    ) -> None:
        if not cloud_name or not api_key or not api_secret:
            raise ExternalServiceError(
                "Cloudinary",
                "Missing Cloudinary configuration (CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET).",
            )
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def upload(self, data: bytes, public_id: str) -> StoredBlob:
        params = {
            "public_id": public_id,
            "overwrite": "true",
            "invalidate": "true",
            "access_mode": "public",
            "timestamp": str(int(time.time())),
        }
        payload = self._call("upload", params, files={"file": (public_id.rsplit("/", 1)[-1], data, "application/pdf")})
        version = str(payload.get("version")) if payload.get("version") is not None else None
        stored_id = payload.get("public_id") or public_id
        logger.info("Uploaded %s to Cloudinary (v%s, %d bytes)", stored_id, version, len(data))
        return StoredBlob(
            public_id=stored_id,
            url=build_viewer_url(stored_id, version),
            version=version,
            bytes=payload.get("bytes", len(data)),
        )

    def download(self, public_id: str) -> bytes:
        url = self.source_url(public_id)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ExternalServiceError("Cloudinary", f"Failed to download {public_id}: {exc}") from exc
        if response.status_code == 404:
            raise EntityNotFoundError("Blob", public_id)
        if not response.ok:
            raise ExternalServiceError(
                "Cloudinary",
                f"Failed to download PDF ({response.status_code}): {response.text or url}",
                status_code=response.status_code,
            )
        return response.content

    def delete(self, public_id: str) -> bool:
        params = {"public_id": public_id, "invalidate": "true", "timestamp": str(int(time.time()))}
        payload = self._call("destroy", params)
        return payload.get("result") == "ok"

    def source_url(self, public_id: str) -> str:
        digest = hashlib.sha1(f"{public_id}{self.api_secret}".encode("utf-8")).digest()
        signature = base64.urlsafe_b64encode(digest).decode("ascii")[:8]
        return f"{DELIVERY_BASE}/{self.cloud_name}/raw/upload/s--{signature}--/{quote(public_id)}"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _call(self, action: str, params: Dict[str, Any], files: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        body = dict(params)
        body["signature"] = sign_params(params, self.api_secret)
        body["api_key"] = self.api_key
        url = f"{API_BASE}/{self.cloud_name}/raw/{action}"
        try:
            response = self.session.post(url, data=body, files=files, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ExternalServiceError("Cloudinary", f"{action} failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if response.ok and "error" not in payload:
            return payload

        error = payload.get("error") if isinstance(payload, dict) else None
        message = (error or {}).get("message") if isinstance(error, dict) else None
        message = message or response.text or f"HTTP {response.status_code}"
        if response.status_code == 413 or is_size_error(message):
            raise StorageSizeLimitError("Cloudinary", message, status_code=response.status_code)
        raise ExternalServiceError("Cloudinary", f"{action} failed: {message}", status_code=response.status_code)
