"""
Formatting helpers for values coming out of the records tables.

Older rows were written by a form that wrapped every value in a JSON array
(``["value"]``) and escaped newlines, so values are normalized before they are
shown or exported.
"""
from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import urlencode

_ESCAPED_NEWLINE = re.compile(r"\\r\\n|\\n|\\r")
_SLUG_INVALID = re.compile(r"[^a-z0-9]+")
_BASE_ID_INVALID = re.compile(r"[^a-z0-9\-_.]+")


def _unescape(text: str) -> str:
    text = _ESCAPED_NEWLINE.sub("\n", text)
    text = text.replace('\\"', '"').replace("\\'", "'").replace("\\\\", "\\")
    return text.strip()


def format_value(value: Any) -> Any:
    if not isinstance(value, str):
        if isinstance(value, list) and len(value) == 1 and isinstance(value[0], str):
            return format_value(value[0])
        return "" if value is None else value

    if "[" not in value and "{" not in value and '"' not in value:
        return value.strip()

    parsed: Any = value
    if (value.startswith("[") and value.endswith("]")) or (value.startswith("{") and value.endswith("}")):
        try:
            decoded = json.loads(value)
        except ValueError:
            decoded = None
        if isinstance(decoded, list) and len(decoded) == 1 and isinstance(decoded[0], str):
            parsed = decoded[0]
        elif isinstance(decoded, str):
            parsed = decoded

    if isinstance(parsed, str):
        parsed = _unescape(parsed)
        if len(parsed) > 1 and parsed[0] == '"' and parsed[-1] == '"':
            parsed = parsed[1:-1]
    return parsed


def time_from_now(moment: datetime, now: Optional[datetime] = None) -> str:
    current = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    seconds = int((current - moment).total_seconds())
    if seconds < 60:
        return f"{seconds}s ago"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def slugify(text: Optional[str]) -> str:
    slug = _SLUG_INVALID.sub("_", (text or "").lower())
    slug = re.sub(r"_+", "_", slug).strip("_")
    return slug or "untitled"


def _millis(now: Optional[datetime]) -> int:
    moment = now or datetime.now(timezone.utc)
    return int(moment.timestamp() * 1000)


def build_storage_key(name: Optional[str], now: Optional[datetime] = None) -> str:
    """Blob key for a freshly uploaded record PDF."""
    return f"{slugify(name)}-{_millis(now)}.pdf"


def build_base_id(name: Optional[str], now: Optional[datetime] = None) -> str:
    base = _BASE_ID_INVALID.sub("-", (name or "").lower())
    base = re.sub(r"-+", "-", base).strip("-") or "file"
    return f"{base}-{_millis(now)}"


def split_public_id(public_id: Optional[str]) -> tuple[Optional[str], str]:
    if not public_id:
        return None, ".pdf"
    dot = public_id.rfind(".")
    if dot == -1:
        return public_id, ".pdf"
    return (public_id[:dot] or None), (public_id[dot:] or ".pdf")


def derive_ocr_public_id(public_id: Optional[str], record_id: Any, folder: str = "pdfs") -> str:
    """Public id for the OCR'd copy of a record's PDF (``<base>-ocr<ext>``)."""
    fallback = f"{folder}/record-{record_id or 'file'}"
    base, ext = split_public_id(public_id or f"{fallback}.pdf")
    base = base or fallback
    if not base.endswith("-ocr"):
        base = f"{base}-ocr"
    return f"{base}{ext or '.pdf'}"


def build_viewer_url(public_id: str, version: Optional[Any] = None) -> str:
    params = {"id": public_id}
    if version:
        params["v"] = str(version)
    return f"/api/pdf/view?{urlencode(params)}"


def none_if_blank(value: Any) -> Any:
    """Forms send empty strings for untouched inputs; store those as null."""
    if isinstance(value, str) and value.strip() == "":
        return None
    return value
