"""Author management API routes for v1 endpoints."""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import Response

from magazine_backend.api.errors import to_http_exception
from magazine_backend.api.schemas import AuthorPayloadSchema, AuthorSchema, BulkDeleteSchema, RecordLinksSchema
from magazine_backend.api.v1.dependencies import (
    get_author_records_handler,
    get_author_stats_handler,
    get_create_author_handler,
    get_delete_author_handler,
    get_export_authors_handler,
    get_import_authors_handler,
    get_list_authors_handler,
    get_record_authors_handler,
    get_search_authors_handler,
    get_update_author_handler,
    get_validate_author_deletion_handler,
)
from magazine_backend.api.v1.routers._catalog import catalog_criteria, csv_download
from magazine_backend.application.commands.author_commands import (
    CreateAuthorHandler,
    ImportAuthorsCommand,
    ImportAuthorsHandler,
    SaveAuthorCommand,
    UpdateAuthorHandler,
)
from magazine_backend.application.commands.catalog_commands import (
    BulkDeleteCatalogEntriesCommand,
    ChangeRecordLinksCommand,
    DeleteCatalogEntryCommand,
    DeleteCatalogEntryHandler,
    RecordLinksHandler,
)
from magazine_backend.application.queries.catalog_queries import (
    AuthorStatsHandler,
    ExportCatalogHandler,
    LinkedRecordsHandler,
    LinkedRecordsQuery,
    ListCatalogHandler,
    SearchCatalogHandler,
    SearchCatalogQuery,
    ValidateAuthorDeletionHandler,
)
from magazine_backend.constants import SEARCH_LIMIT
from magazine_backend.domain.exceptions import DomainException
from magazine_backend.domain.value_objects.catalog_query import CatalogListCriteria

router = APIRouter(prefix="/authors", tags=["authors"])


@router.get("/search", response_model=List[AuthorSchema])
def search_authors(
    q: str = Query(""),
    handler: SearchCatalogHandler = Depends(get_search_authors_handler),
) -> List[AuthorSchema]:
    try:
        authors = handler.handle(SearchCatalogQuery(query=q))
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return [AuthorSchema(**author.to_dict()) for author in authors]


@router.get("", response_model=List[AuthorSchema])
def list_authors(
    criteria: CatalogListCriteria = Depends(catalog_criteria),
    handler: ListCatalogHandler = Depends(get_list_authors_handler),
) -> List[AuthorSchema]:
    try:
        authors = handler.handle(criteria)
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return [AuthorSchema(**author.to_dict()) for author in authors]


@router.get("/stats")
def author_stats(handler: AuthorStatsHandler = Depends(get_author_stats_handler)) -> Dict[str, Any]:
    try:
        return handler.handle()
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.get("/export")
def export_authors(
    criteria: CatalogListCriteria = Depends(catalog_criteria),
    handler: ExportCatalogHandler = Depends(get_export_authors_handler),
) -> Response:
    try:
        content = handler.handle(criteria)
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return csv_download(content, f"authors-export-{date.today().isoformat()}.csv")


@router.post("/import")
async def import_authors(
    file: UploadFile = File(...),
    handler: ImportAuthorsHandler = Depends(get_import_authors_handler),
) -> Dict[str, Any]:
    content = await file.read()
    try:
        return handler.handle(ImportAuthorsCommand(filename=file.filename, content=content))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.post("", response_model=AuthorSchema, status_code=201)
def create_author(
    payload: AuthorPayloadSchema,
    handler: CreateAuthorHandler = Depends(get_create_author_handler),
) -> AuthorSchema:
    try:
        author = handler.handle(SaveAuthorCommand(values=payload.model_dump(exclude_unset=True)))
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return AuthorSchema(**author.to_dict())


@router.post("/bulk-delete")
def bulk_delete_authors(
    payload: BulkDeleteSchema,
    handler: DeleteCatalogEntryHandler = Depends(get_delete_author_handler),
) -> Dict[str, Any]:
    try:
        return handler.handle_bulk(BulkDeleteCatalogEntriesCommand(ids=payload.ids))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.get("/record/{record_id}", response_model=List[AuthorSchema])
def record_authors(
    record_id: int,
    handler: RecordLinksHandler = Depends(get_record_authors_handler),
) -> List[AuthorSchema]:
    try:
        authors = handler.list_for(record_id)
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return [AuthorSchema(**author.to_dict()) for author in authors]


@router.post("/assign")
def assign_authors(
    payload: RecordLinksSchema,
    handler: RecordLinksHandler = Depends(get_record_authors_handler),
) -> Dict[str, Any]:
    try:
        return handler.link(ChangeRecordLinksCommand(record_id=payload.recordId, entry_ids=payload.ids))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.post("/unassign")
def unassign_authors(
    payload: RecordLinksSchema,
    handler: RecordLinksHandler = Depends(get_record_authors_handler),
) -> Dict[str, Any]:
    try:
        return handler.unlink(ChangeRecordLinksCommand(record_id=payload.recordId, entry_ids=payload.ids))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.put("/{author_id}", response_model=AuthorSchema)
def update_author(
    author_id: int,
    payload: AuthorPayloadSchema,
    handler: UpdateAuthorHandler = Depends(get_update_author_handler),
) -> AuthorSchema:
    try:
        author = handler.handle(SaveAuthorCommand(values=payload.model_dump(exclude_unset=True), author_id=author_id))
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return AuthorSchema(**author.to_dict())


@router.delete("/{author_id}")
def delete_author(
    author_id: int,
    handler: DeleteCatalogEntryHandler = Depends(get_delete_author_handler),
) -> Dict[str, Any]:
    try:
        return handler.handle(DeleteCatalogEntryCommand(entry_id=author_id))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.get("/{author_id}/validate-deletion")
def validate_author_deletion(
    author_id: int,
    handler: ValidateAuthorDeletionHandler = Depends(get_validate_author_deletion_handler),
) -> Dict[str, Any]:
    try:
        return handler.handle(author_id)
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.get("/{author_id}/records")
def author_records(
    author_id: int,
    offset: int = Query(0, ge=0),
    limit: int = Query(SEARCH_LIMIT, ge=1, le=200),
    handler: LinkedRecordsHandler = Depends(get_author_records_handler),
) -> Dict[str, Any]:
    try:
        return handler.handle(LinkedRecordsQuery(entry_id=author_id, offset=offset, limit=limit))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.get("/{author_id}/records/count")
def author_records_count(
    author_id: int,
    handler: LinkedRecordsHandler = Depends(get_author_records_handler),
) -> Dict[str, int]:
    try:
        return handler.count(author_id)
    except DomainException as exc:
        raise to_http_exception(exc) from exc
