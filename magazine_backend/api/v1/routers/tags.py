"""Tag management API routes for v1 endpoints."""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import Response

from magazine_backend.api.errors import to_http_exception
from magazine_backend.api.schemas import BulkDeleteSchema, RecordLinksSchema, TagPayloadSchema, TagSchema
from magazine_backend.api.v1.dependencies import (
    get_create_tag_handler,
    get_delete_tag_handler,
    get_export_tags_handler,
    get_import_tags_handler,
    get_list_tags_handler,
    get_record_tags_handler,
    get_search_tags_handler,
    get_tag_records_handler,
    get_tag_stats_handler,
    get_update_tag_handler,
)
from magazine_backend.api.v1.routers._catalog import catalog_criteria, csv_download
from magazine_backend.application.commands.catalog_commands import (
    BulkDeleteCatalogEntriesCommand,
    ChangeRecordLinksCommand,
    DeleteCatalogEntryCommand,
    DeleteCatalogEntryHandler,
    RecordLinksHandler,
)
from magazine_backend.application.commands.tag_commands import (
    CreateTagCommand,
    CreateTagHandler,
    ImportTagsCommand,
    ImportTagsHandler,
    UpdateTagCommand,
    UpdateTagHandler,
)
from magazine_backend.application.queries.catalog_queries import (
    ExportCatalogHandler,
    LinkedRecordsHandler,
    LinkedRecordsQuery,
    ListCatalogHandler,
    SearchCatalogHandler,
    SearchCatalogQuery,
    TagStatsHandler,
)
from magazine_backend.constants import SEARCH_LIMIT
from magazine_backend.domain.exceptions import DomainException
from magazine_backend.domain.value_objects.catalog_query import CatalogListCriteria

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("/search", response_model=List[TagSchema])
def search_tags(
    q: str = Query(""),
    handler: SearchCatalogHandler = Depends(get_search_tags_handler),
) -> List[TagSchema]:
    try:
        tags = handler.handle(SearchCatalogQuery(query=q))
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return [TagSchema(**tag.to_dict()) for tag in tags]


@router.get("", response_model=List[TagSchema])
def list_tags(
    criteria: CatalogListCriteria = Depends(catalog_criteria),
    handler: ListCatalogHandler = Depends(get_list_tags_handler),
) -> List[TagSchema]:
    try:
        tags = handler.handle(criteria)
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return [TagSchema(**tag.to_dict()) for tag in tags]


@router.get("/stats")
def tag_stats(handler: TagStatsHandler = Depends(get_tag_stats_handler)) -> Dict[str, int]:
    try:
        return handler.handle()
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.get("/export")
def export_tags(
    criteria: CatalogListCriteria = Depends(catalog_criteria),
    handler: ExportCatalogHandler = Depends(get_export_tags_handler),
) -> Response:
    try:
        content = handler.handle(criteria)
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return csv_download(content, f"tags-export-{date.today().isoformat()}.csv")


@router.post("/import")
async def import_tags(
    file: UploadFile = File(...),
    handler: ImportTagsHandler = Depends(get_import_tags_handler),
) -> Dict[str, Any]:
    content = await file.read()
    try:
        return handler.handle(ImportTagsCommand(filename=file.filename, content=content))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.post("", response_model=TagSchema, status_code=201)
def create_tag(
    payload: TagPayloadSchema,
    handler: CreateTagHandler = Depends(get_create_tag_handler),
) -> TagSchema:
    try:
        tag = handler.handle(CreateTagCommand(name=payload.name, important=payload.important))
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return TagSchema(**tag.to_dict())


@router.post("/bulk-delete")
def bulk_delete_tags(
    payload: BulkDeleteSchema,
    handler: DeleteCatalogEntryHandler = Depends(get_delete_tag_handler),
) -> Dict[str, Any]:
    try:
        return handler.handle_bulk(BulkDeleteCatalogEntriesCommand(ids=payload.ids))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.get("/record/{record_id}", response_model=List[TagSchema])
def record_tags(
    record_id: int,
    handler: RecordLinksHandler = Depends(get_record_tags_handler),
) -> List[TagSchema]:
    try:
        tags = handler.list_for(record_id)
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return [TagSchema(**tag.to_dict()) for tag in tags]


@router.post("/assign")
def assign_tags(
    payload: RecordLinksSchema,
    handler: RecordLinksHandler = Depends(get_record_tags_handler),
) -> Dict[str, Any]:
    try:
        return handler.link(ChangeRecordLinksCommand(record_id=payload.recordId, entry_ids=payload.ids))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.post("/unassign")
def unassign_tags(
    payload: RecordLinksSchema,
    handler: RecordLinksHandler = Depends(get_record_tags_handler),
) -> Dict[str, Any]:
    try:
        return handler.unlink(ChangeRecordLinksCommand(record_id=payload.recordId, entry_ids=payload.ids))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.put("/{tag_id}", response_model=TagSchema)
def update_tag(
    tag_id: int,
    payload: TagPayloadSchema,
    handler: UpdateTagHandler = Depends(get_update_tag_handler),
) -> TagSchema:
    try:
        tag = handler.handle(UpdateTagCommand(tag_id=tag_id, name=payload.name, important=payload.important))
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return TagSchema(**tag.to_dict())


@router.delete("/{tag_id}")
def delete_tag(
    tag_id: int,
    handler: DeleteCatalogEntryHandler = Depends(get_delete_tag_handler),
) -> Dict[str, Any]:
    try:
        return handler.handle(DeleteCatalogEntryCommand(entry_id=tag_id))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.get("/{tag_id}/records")
def tag_records(
    tag_id: int,
    offset: int = Query(0, ge=0),
    limit: int = Query(SEARCH_LIMIT, ge=1, le=200),
    handler: LinkedRecordsHandler = Depends(get_tag_records_handler),
) -> Dict[str, Any]:
    try:
        return handler.handle(LinkedRecordsQuery(entry_id=tag_id, offset=offset, limit=limit))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.get("/{tag_id}/records/count")
def tag_records_count(
    tag_id: int,
    handler: LinkedRecordsHandler = Depends(get_tag_records_handler),
) -> Dict[str, int]:
    try:
        return handler.count(tag_id)
    except DomainException as exc:
        raise to_http_exception(exc) from exc
