"""Supabase client construction and shared query helpers."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from postgrest.exceptions import APIError
from supabase import Client, create_client

from magazine_backend.config import Settings
from magazine_backend.domain.exceptions import DuplicateEntityError, RepositoryError

logger = logging.getLogger(__name__)

# PostgREST caps a single response at 1000 rows by default.
PAGE_SIZE = 1000
UNIQUE_VIOLATION = "23505"


def create_supabase_client(settings: Settings) -> Client:
    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise RepositoryError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set for the supabase backend")
    return create_client(settings.supabase_url, settings.supabase_service_role_key)


class SupabaseTable:
    """Base class wrapping PostgREST errors into repository errors."""

    entity_type = "Row"

    def __init__(self, client: Client) -> None:
        self.client = client

    def _execute(self, builder: Any, action: str, *, key: Optional[str] = None) -> Any:
        try:
            return builder.execute()
        except APIError as exc:
            if getattr(exc, "code", None) == UNIQUE_VIOLATION:
                raise DuplicateEntityError(self.entity_type, key or "") from exc
            logger.error("Supabase %s failed: %s", action, getattr(exc, "message", exc))
            raise RepositoryError(f"Failed to {action}", exc) from exc

    def _fetch_all(self, make_query: Callable[[], Any], action: str) -> List[Dict[str, Any]]:
        """Page through a query ``PAGE_SIZE`` rows at a time."""
        rows: List[Dict[str, Any]] = []
        start = 0
        while True:
            response = self._execute(make_query().range(start, start + PAGE_SIZE - 1), action)
            batch = response.data or []
            rows.extend(batch)
            if len(batch) < PAGE_SIZE:
                return rows
            start += PAGE_SIZE


def chunked(values: List[Any], size: int = 200) -> List[List[Any]]:
    """Split long ``in`` filters so URLs stay under PostgREST limits."""
    return [values[index:index + size] for index in range(0, len(values), size)]
