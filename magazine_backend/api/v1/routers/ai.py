"""AI-assisted metadata API routes for v1 endpoints."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from magazine_backend.api.errors import to_http_exception
from magazine_backend.api.schemas import DraftSplitFieldSchema, GenerateFieldSchema
from magazine_backend.api.v1.dependencies import (
    get_draft_split_field_handler,
    get_generate_record_field_handler,
)
from magazine_backend.application.commands.generate_text import (
    DraftSplitFieldCommand,
    DraftSplitFieldHandler,
    GenerateRecordFieldCommand,
    GenerateRecordFieldHandler,
)
from magazine_backend.domain.exceptions import DomainException

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/generate")
def generate_record_field(
    payload: GenerateFieldSchema,
    handler: GenerateRecordFieldHandler = Depends(get_generate_record_field_handler),
) -> Dict[str, Any]:
    command = GenerateRecordFieldCommand(record_id=payload.recordId, mode=payload.mode, variant=payload.variant)
    try:
        return handler.handle(command)
    except DomainException as exc:
        raise to_http_exception(exc) from exc


@router.post("/split-field")
def draft_split_field(
    payload: DraftSplitFieldSchema,
    handler: DraftSplitFieldHandler = Depends(get_draft_split_field_handler),
) -> Dict[str, Any]:
    command = DraftSplitFieldCommand(
        text=payload.text,
        field=payload.field,
        label=payload.label,
        variant=payload.variant,
    )
    try:
        return handler.handle(command)
    except DomainException as exc:
        raise to_http_exception(exc) from exc
