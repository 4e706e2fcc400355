"""Dashboard analytics API routes for v1 endpoints."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from magazine_backend.api.errors import to_http_exception
from magazine_backend.api.v1.dependencies import (
    get_insights_handler,
    get_magazine_names_handler,
    get_user_activity_handler,
)
from magazine_backend.application.queries.dashboard import (
    GetInsightsHandler,
    GetInsightsQuery,
    GetUserActivityHandler,
    GetUserActivityQuery,
    ListMagazineNamesHandler,
    ListMagazineNamesQuery,
)
from magazine_backend.constants import MAGAZINE_NAMES_LIMIT
from magazine_backend.domain.exceptions import DomainException

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/insights")
def get_insights(
    top: int = Query(5, ge=1, le=50),
    handler: GetInsightsHandler = Depends(get_insights_handler),
) -> Dict[str, List[Dict[str, Any]]]:
    try:
        return handler.handle(GetInsightsQuery(top=top))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.get("/user-activity")
def get_user_activity(
    email: Optional[str] = Query(None),
    handler: GetUserActivityHandler = Depends(get_user_activity_handler),
) -> List[Dict[str, Any]]:
    try:
        return handler.handle(GetUserActivityQuery(email=email))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.get("/magazine-names")
def list_magazine_names(
    q: Optional[str] = Query(None),
    limit: int = Query(MAGAZINE_NAMES_LIMIT, ge=1, le=500),
    handler: ListMagazineNamesHandler = Depends(get_magazine_names_handler),
) -> List[str]:
    try:
        return handler.handle(ListMagazineNamesQuery(query=q, limit=limit))
    except DomainException as exc:
        raise to_http_exception(exc) from exc
