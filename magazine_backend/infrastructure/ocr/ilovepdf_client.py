"""
iLovePDF REST client.

Every tool follows the same task lifecycle: authenticate with the project
keys, start a task on a regional server, upload the file, process it with
tool specific options and download the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from magazine_backend.domain.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

API_BASE = "https://api.ilovepdf.com/v1"
SERVICE = "iLovePDF"


@dataclass(frozen=True)
class IloveTask:
    token: str
    server: str
    task: str


class IlovePdfClient:

    def __init__(
        self,
        public_key: Optional[str],
        secret_key: Optional[str],
        *,
        region: str = "us",
        session: Optional[requests.Session] = None,
        timeout: float = 300.0,
    ) -> None:
        self.public_key = public_key
        self.secret_key = secret_key
        self.region = region or "us"
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def ocr(self, pdf: bytes, filename: str, *, languages: List[str], output_filename: str) -> bytes:
        """Add a text layer to a scanned PDF."""
        return self._run(
            "pdfocr",
            pdf,
            filename,
            {
                "ocr_languages": languages or ["eng"],
                "ignore_errors": True,
                "try_pdf_repair": True,
                "try_image_repair": True,
                "output_filename": output_filename,
            },
        )

    def compress(self, pdf: bytes, filename: str, level: str) -> bytes:
        """Compress a PDF (``extreme``, ``recommended`` or ``low``)."""
        return self._run(
            "compress",
            pdf,
            filename,
            {
                "compression_level": level,
                "ignore_errors": True,
                "try_pdf_repair": True,
                "output_filename": f"compressed-{filename or 'file.pdf'}",
            },
        )

    # ------------------------------------------------------------------
    # Task lifecycle
    # ------------------------------------------------------------------
    def authenticate(self) -> str:
        if not self.public_key or not self.secret_key:
            raise ExternalServiceError(SERVICE, "Missing ILOVEPDF_PUBLIC_KEY or ILOVEPDF_SECRET_KEY.")
        response = self._request(
            "post",
            f"{API_BASE}/auth",
            json={"public_key": self.public_key, "secret_key": self.secret_key},
        )
        data = self._json(response)
        if not response.ok or not data.get("token"):
            raise self._error("auth", response, data, "no token")
        return data["token"]

    def start(self, token: str, tool: str) -> IloveTask:
        response = self._request(
            "get",
            f"{API_BASE}/start/{tool}/{self.region}",
            headers=self._auth(token),
        )
        data = self._json(response)
        if not response.ok or not data.get("server") or not data.get("task"):
            raise self._error("start", response, data, "missing server/task")
        return IloveTask(token=token, server=data["server"], task=data["task"])

    def upload(self, task: IloveTask, pdf: bytes, filename: str) -> str:
        response = self._request(
            "post",
            f"https://{task.server}/v1/upload",
            headers=self._auth(task.token),
            data={"task": task.task},
            files={"file": (filename or "file.pdf", pdf, "application/pdf")},
        )
        data = self._json(response)
        if not response.ok or not data.get("server_filename"):
            raise self._error("upload", response, data, "no server_filename")
        return data["server_filename"]

    def process(self, task: IloveTask, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = self._request(
            "post",
            f"https://{task.server}/v1/process",
            headers=self._auth(task.token),
            json=payload,
        )
        data = self._json(response)
        if not response.ok:
            raise self._error("process", response, data, "unknown error")
        return data

    def download(self, task: IloveTask) -> bytes:
        response = self._request(
            "get",
            f"https://{task.server}/v1/download/{task.task}",
            headers=self._auth(task.token),
        )
        if not response.ok:
            raise ExternalServiceError(
                SERVICE,
                f"download failed ({response.status_code}): {response.text or 'no body'}",
                status_code=response.status_code,
            )
        return response.content

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _run(self, tool: str, pdf: bytes, filename: str, options: Dict[str, Any]) -> bytes:
        token = self.authenticate()
        task = self.start(token, tool)
        logger.info("Started iLovePDF task %s on %s (%s)", task.task, task.server, tool)
        server_filename = self.upload(task, pdf, filename)
        payload = {
            "task": task.task,
            "tool": tool,
            "files": [{"server_filename": server_filename, "filename": filename or server_filename}],
        }
        payload.update(options)
        self.process(task, payload)
        result = self.download(task)
        logger.info("Downloaded iLovePDF %s result (%d bytes)", tool, len(result))
        return result

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise ExternalServiceError(SERVICE, f"request to {url} failed: {exc}") from exc

    @staticmethod
    def _auth(token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    @staticmethod
    def _json(response: requests.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _error(step: str, response: requests.Response, data: Dict[str, Any], fallback: str) -> ExternalServiceError:
        detail = data.get("error") or data.get("message") or fallback
        if isinstance(detail, dict):
            detail = detail.get("message") or fallback
        return ExternalServiceError(
            SERVICE,
            f"{step} failed ({response.status_code}): {detail}",
            status_code=response.status_code,
        )
