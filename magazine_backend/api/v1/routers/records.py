"""Record-related API routes for v1 endpoints."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from fastapi import APIRouter, Depends, File, Header, HTTPException, Query, Request, UploadFile
from fastapi.responses import Response
from starlette.datastructures import UploadFile as StarletteUploadFile

from magazine_backend.api.errors import to_http_exception
from magazine_backend.api.schemas import (
    BatchDeleteRecordsSchema,
    ExportRecordsSchema,
    ExtractionResultSchema,
    HistoryEntrySchema,
    RecordPageSchema,
)
from magazine_backend.api.v1.dependencies import (
    get_backfill_handler,
    get_create_record_handler,
    get_cron_secret,
    get_delete_record_handler,
    get_export_records_handler,
    get_extract_record_text_handler,
    get_extract_upload_text_handler,
    get_list_records_handler,
    get_record_handler,
    get_record_history_handler,
    get_run_record_ocr_handler,
    get_update_record_handler,
)
from magazine_backend.application.commands.create_record import CreateRecordCommand, CreateRecordHandler
from magazine_backend.application.commands.delete_record import (
    BatchDeleteRecordsCommand,
    DeleteRecordCommand,
    DeleteRecordHandler,
)
from magazine_backend.application.commands.extract_record_text import (
    ExtractRecordTextCommand,
    ExtractRecordTextHandler,
    ExtractTextFromUploadCommand,
    ExtractTextFromUploadHandler,
)
from magazine_backend.application.commands.generate_text import BackfillSummariesCommand, BackfillSummariesHandler
from magazine_backend.application.commands.run_record_ocr import RunRecordOcrCommand, RunRecordOcrHandler
from magazine_backend.application.commands.update_record import (
    UPDATABLE_FIELDS,
    UpdateRecordCommand,
    UpdateRecordHandler,
)
from magazine_backend.application.queries.export_records import ExportRecordsHandler, ExportRecordsQuery
from magazine_backend.application.queries.get_record import GetRecordHandler, GetRecordQuery
from magazine_backend.application.queries.get_record_history import GetRecordHistoryHandler, GetRecordHistoryQuery
from magazine_backend.application.queries.list_records import ListRecordsHandler, ListRecordsQuery
from magazine_backend.constants import RECORDS_PAGE_SIZE
from magazine_backend.domain.entities.edit_entry import EditKind
from magazine_backend.domain.entities.record import EDITABLE_RECORD_FIELDS
from magazine_backend.domain.exceptions import DomainException

router = APIRouter(prefix="/records", tags=["records"])


@router.get("", response_model=RecordPageSchema)
def list_records(
    page: int = Query(0, ge=0),
    page_size: int = Query(RECORDS_PAGE_SIZE, alias="pageSize", ge=1, le=500),
    sort_by: Optional[str] = Query("id", alias="sortBy"),
    sort_order: Optional[str] = Query("desc", alias="sortOrder"),
    filters: Optional[str] = Query(None),
    global_filter: Optional[str] = Query(None, alias="globalFilter"),
    email: Optional[str] = Query(None),
    no_cache: bool = Query(False, alias="noCache"),
    handler: ListRecordsHandler = Depends(get_list_records_handler),
) -> RecordPageSchema:
    query = ListRecordsQuery(
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_order=sort_order,
        filters=_parse_filters(filters),
        global_filter=global_filter,
        email=email,
        no_cache=no_cache,
    )
    try:
        result = handler.handle(query)
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return RecordPageSchema(**result.to_dict())


@router.post("", status_code=201)
async def create_record(
    request: Request,
    handler: CreateRecordHandler = Depends(get_create_record_handler),
) -> Dict[str, Any]:
    form = await request.form()
    pdf, filename = await _form_pdf(form)
    command = CreateRecordCommand(
        fields=_form_fields(form, EDITABLE_RECORD_FIELDS),
        pdf=pdf,
        filename=filename,
        tag_ids=_form_ids(form.get("tagIds")),
        author_ids=_form_ids(form.get("authorIds")),
    )
    try:
        record = handler.handle(command)
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return _public_record(record.to_dict())


@router.post("/export")
def export_records(
    payload: ExportRecordsSchema,
    handler: ExportRecordsHandler = Depends(get_export_records_handler),
) -> Response:
    try:
        export = handler.handle(
            ExportRecordsQuery(columns=payload.columns, format=payload.format, record_ids=payload.ids)
        )
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.post("/batch-delete")
def batch_delete_records(
    payload: BatchDeleteRecordsSchema,
    handler: DeleteRecordHandler = Depends(get_delete_record_handler),
) -> Dict[str, Any]:
    if not payload.ids:
        raise HTTPException(status_code=400, detail="Record IDs are required")
    return handler.handle_batch(BatchDeleteRecordsCommand(record_ids=payload.ids))


@router.post("/extract-text", response_model=ExtractionResultSchema)
async def extract_text_from_upload(
    file: UploadFile = File(...),
    language: Optional[str] = Query(None),
    handler: ExtractTextFromUploadHandler = Depends(get_extract_upload_text_handler),
) -> ExtractionResultSchema:
    data = await file.read()
    try:
        result = handler.handle(ExtractTextFromUploadCommand(pdf=data, language=language))
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return ExtractionResultSchema(**result.to_dict())


@router.post("/backfill-summaries")
def backfill_summaries(
    limit: int = Query(5),
    authorization: Optional[str] = Header(None),
    cron_secret: Optional[str] = Depends(get_cron_secret),
    handler: BackfillSummariesHandler = Depends(get_backfill_handler),
) -> Dict[str, Any]:
    if cron_secret and authorization != f"Bearer {cron_secret}":
        raise HTTPException(status_code=401, detail="Unauthorized")
    try:
        return handler.handle(BackfillSummariesCommand(limit=limit))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.get("/{record_id}")
def get_record(
    record_id: int,
    include_text: bool = Query(False, alias="includeText"),
    handler: GetRecordHandler = Depends(get_record_handler),
) -> Dict[str, Any]:
    try:
        view = handler.handle(GetRecordQuery(record_id=record_id, include_text=include_text))
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return view.to_dict()


@router.put("/{record_id}")
async def update_record(
    record_id: int,
    request: Request,
    handler: UpdateRecordHandler = Depends(get_update_record_handler),
) -> Dict[str, Any]:
    form = await request.form()
    pdf, filename = await _form_pdf(form)
    command = UpdateRecordCommand(
        record_id=record_id,
        fields=_form_fields(form, UPDATABLE_FIELDS),
        pdf=pdf,
        filename=filename,
        editor_email=_form_text(form.get("email")),
        editor_name=_form_text(form.get("creator_name")),
    )
    try:
        return handler.handle(command)
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.delete("/{record_id}")
def delete_record(
    record_id: int,
    handler: DeleteRecordHandler = Depends(get_delete_record_handler),
) -> Dict[str, Any]:
    try:
        return handler.handle(DeleteRecordCommand(record_id=record_id))
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.get("/{record_id}/history", response_model=List[HistoryEntrySchema])
def get_record_history(
    record_id: int,
    kind: str = Query("summary"),
    handler: GetRecordHistoryHandler = Depends(get_record_history_handler),
) -> List[HistoryEntrySchema]:
    edit_kind = EditKind.CONCLUSION if kind == "conclusion" else EditKind.SUMMARY
    try:
        entries = handler.handle(GetRecordHistoryQuery(record_id=record_id, kind=edit_kind))
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return [HistoryEntrySchema(**entry.to_dict()) for entry in entries]


@router.post("/{record_id}/ocr")
def run_record_ocr(
    record_id: int,
    delete_old_asset: bool = Query(False, alias="deleteOldAsset"),
    reset_extracted_text: bool = Query(True, alias="resetExtractedText"),
    handler: RunRecordOcrHandler = Depends(get_run_record_ocr_handler),
) -> Dict[str, Any]:
    command = RunRecordOcrCommand(
        record_id=record_id,
        delete_old_asset=delete_old_asset,
        reset_extracted_text=reset_extracted_text,
    )
    try:
        result = handler.handle(command)
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return {"success": True, **result.to_dict()}


@router.post("/{record_id}/extract-text", response_model=ExtractionResultSchema)
def extract_record_text(
    record_id: int,
    force: bool = Query(False),
    handler: ExtractRecordTextHandler = Depends(get_extract_record_text_handler),
) -> ExtractionResultSchema:
    try:
        result = handler.handle(ExtractRecordTextCommand(record_id=record_id, force=force))
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return ExtractionResultSchema(**result.to_dict())


# ------------------------------------------------------------------
# Internal helpers
# ------------------------------------------------------------------
def _parse_filters(raw: Optional[str]) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise HTTPException(status_code=400, detail="filters must be a JSON object") from exc
    if not isinstance(parsed, dict):
        raise HTTPException(status_code=400, detail="filters must be a JSON object")
    return parsed


def _form_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _form_fields(form: Any, allowed: Sequence[str]) -> Dict[str, Any]:
    return {name: form.get(name) for name in allowed if isinstance(form.get(name), str)}


def _form_ids(value: Any) -> List[int]:
    """Accepts a JSON array or a comma separated list of ids."""
    if not isinstance(value, str) or not value.strip():
        return []
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value.split(",")
    if not isinstance(parsed, list):
        parsed = [parsed]
    try:
        return [int(item) for item in parsed if str(item).strip()]
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail="Invalid id list") from exc


async def _form_pdf(form: Any) -> tuple[Optional[bytes], Optional[str]]:
    upload = form.get("pdf")
    if not isinstance(upload, StarletteUploadFile) or not upload.filename:
        return None, None
    data = await upload.read()
    return (data or None), upload.filename


def _public_record(row: Dict[str, Any]) -> Dict[str, Any]:
    row.pop("extracted_text", None)
    return row
