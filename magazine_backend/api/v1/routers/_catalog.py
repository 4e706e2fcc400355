"""Helpers shared by the tag and author routers."""
from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Query
from fastapi.responses import Response

from magazine_backend.domain.value_objects.catalog_query import CatalogListCriteria


def catalog_criteria(
    search: Optional[str] = Query(None),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    important: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
) -> CatalogListCriteria:
    try:
        return CatalogListCriteria.from_params(search, date_from, date_to, important, sort_by, sort_order)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid date filter: {exc}") from exc


def csv_download(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
