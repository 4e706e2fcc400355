"""PDF splitting, layout editing and viewer routes for v1 endpoints."""
from __future__ import annotations

import base64
import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import Response

from magazine_backend.api.errors import to_http_exception
from magazine_backend.api.schemas import LayoutEditSchema
from magazine_backend.api.v1.dependencies import (
    get_edit_layout_handler,
    get_parse_page_text_handler,
    get_split_pdf_handler,
    get_view_pdf_handler,
)
from magazine_backend.application.commands.split_pdf import (
    EditSplitLayoutCommand,
    EditSplitLayoutHandler,
    SplitPdfCommand,
    SplitPdfHandler,
)
from magazine_backend.application.queries.pdf_queries import ParsePageTextHandler, ViewPdfHandler, ViewPdfQuery
from magazine_backend.domain.exceptions import DomainException

router = APIRouter(prefix="/pdf", tags=["pdf"])


@router.post("/split")
async def split_pdf(
    file: UploadFile = File(...),
    layout: Optional[str] = Form(None),
    page_text: Optional[UploadFile] = File(None, alias="pageText"),
    as_zip: bool = Query(False, alias="zip"),
    handler: SplitPdfHandler = Depends(get_split_pdf_handler),
):
    data = await file.read()
    raw_text = (await page_text.read()).decode("utf-8", errors="replace") if page_text else None
    command = SplitPdfCommand(
        pdf=data,
        filename=file.filename or "split.pdf",
        layout=_parse_layout(layout),
        page_text_file=raw_text,
    )
    try:
        result = handler.handle(command)
    except DomainException as exc:
        raise to_http_exception(exc) from exc

    if as_zip:
        name, archive = handler.archive(result, command.filename)
        return Response(
            content=archive,
            media_type="application/zip",
            headers={"Content-Disposition": f'attachment; filename="{name}"'},
        )

    payload = result.to_dict()
    for entry, split in zip(payload["files"], result.files):
        entry["data"] = base64.b64encode(split.data).decode("ascii")
    return payload


@router.post("/layout")
def edit_layout(
    payload: LayoutEditSchema,
    handler: EditSplitLayoutHandler = Depends(get_edit_layout_handler),
) -> Dict[str, Any]:
    command = EditSplitLayoutCommand(
        layout=payload.layout,
        page_count=payload.pageCount,
        action=payload.action,
        position=payload.position,
        source_index=payload.sourceIndex,
        direction=payload.direction,
        crop=payload.crop,
    )
    try:
        return handler.handle(command)
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.post("/page-text")
async def parse_page_text(
    file: UploadFile = File(...),
    handler: ParsePageTextHandler = Depends(get_parse_page_text_handler),
) -> Dict[str, Any]:
    raw = (await file.read()).decode("utf-8", errors="replace")
    try:
        pages = handler.handle(raw)
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    return {"pages": {str(page): text for page, text in sorted(pages.items())}}


@router.get("/view")
def view_pdf(
    public_id: Optional[str] = Query(None, alias="id"),
    url: Optional[str] = Query(None),
    handler: ViewPdfHandler = Depends(get_view_pdf_handler),
) -> Response:
    try:
        content = handler.handle(ViewPdfQuery(public_id=public_id, url=url))
    except DomainException as exc:
        raise to_http_exception(exc) from exc
    filename = content.filename if content.filename.lower().endswith(".pdf") else f"{content.filename}.pdf"
    return Response(
        content=content.data,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'inline; filename="{filename}"',
            "Cache-Control": "public, max-age=3600",
        },
    )


def _parse_layout(raw: Optional[str]) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise HTTPException(status_code=400, detail="layout must be a JSON object") from exc
    if not isinstance(parsed, dict):
        raise HTTPException(status_code=400, detail="layout must be a JSON object")
    return parsed
