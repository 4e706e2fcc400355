"""Validation rules for tags and authors shared by commands and CSV imports."""
from __future__ import annotations

import re
from typing import Any, List, Optional, Sequence

from magazine_backend.constants import (
    AUTHOR_MANY_RECORDS_THRESHOLD,
    TAG_NAME_MAX_LENGTH,
    TAG_NAME_PATTERN,
)
from magazine_backend.domain.exceptions import DomainValidationError

_TAG_NAME_RE = re.compile(TAG_NAME_PATTERN)


def validate_tag_name(name: Any, *, strict: bool = False) -> str:
    """Return the trimmed name or raise ``DomainValidationError``."""
    if name is None or not isinstance(name, str):
        raise DomainValidationError("Tag name is required")
    trimmed = name.strip()
    if not trimmed:
        raise DomainValidationError("Tag name cannot be empty")
    if len(trimmed) > TAG_NAME_MAX_LENGTH:
        raise DomainValidationError(f"Tag name must be less than {TAG_NAME_MAX_LENGTH} characters")
    if strict and not _TAG_NAME_RE.match(trimmed):
        raise DomainValidationError(
            "Tag name can only contain letters, numbers, spaces, hyphens, and underscores"
        )
    return trimmed


def parse_important(raw: Any) -> Optional[bool]:
    """Accept booleans and the CSV spellings true/1/false/0/empty/null."""
    if raw is None or isinstance(raw, bool):
        return raw
    lowered = str(raw).strip().lower()
    if lowered in ("true", "1"):
        return True
    if lowered in ("false", "0"):
        return False
    if lowered in ("", "null"):
        return None
    raise DomainValidationError("Important field must be true, false, 1, 0, or empty")


def normalize_national(value: Any, allowed: Sequence[str]) -> Optional[str]:
    """Values outside ``allowed`` (including "null" and blanks) are stored as null."""
    return value if value in allowed else None


def author_search_pattern(query: str) -> Optional[str]:
    """
    Fuzzy LIKE pattern: "J. Smith" becomes ``%j%s%m%i%t%h%``.

    Returns None when the query holds no letters or digits.
    """
    cleaned = re.sub(r"[^a-zA-Z0-9]", "", query or "").lower()
    if not cleaned:
        return None
    return "%" + "%".join(cleaned) + "%"


def like_to_regex(pattern: str) -> re.Pattern:
    """Translate a SQL LIKE pattern (``%`` and ``_``) to a case-insensitive regex."""
    parts = []
    for char in pattern:
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("^" + "".join(parts) + "$", re.IGNORECASE | re.DOTALL)


def author_deletion_warnings(related_records: int) -> List[str]:
    warnings: List[str] = []
    if related_records > 0:
        warnings.append(f"This will unlink {related_records} related record(s)")
    if related_records > AUTHOR_MANY_RECORDS_THRESHOLD:
        warnings.append("This author has many related records. Consider archiving instead of deleting.")
    return warnings


def parse_positive_ids(raw: Any) -> List[int]:
    """Validate a bulk-delete payload: a non-empty list of positive integers."""
    if not isinstance(raw, list) or not raw:
        raise DomainValidationError("ids must be a non-empty array")
    ids: List[int] = []
    for value in raw:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise DomainValidationError("All ids must be positive integers")
        ids.append(value)
    return ids
