"""Query handler for the records CSV/XLSX export."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from magazine_backend.application.dto.record_dto import RecordViewDTO
from magazine_backend.application.services.record_views import RecordViewAssembler
from magazine_backend.constants import EXPORTABLE_RECORD_COLUMNS
from magazine_backend.domain.exceptions import DomainValidationError
from magazine_backend.domain.repositories import (
    AuthorRepository,
    EditHistoryRepository,
    RecordRepository,
    TagRepository,
)
from magazine_backend.infrastructure.export.tabular_writer import (
    CSV_MEDIA_TYPE,
    XLSX_MEDIA_TYPE,
    write_csv,
    write_xlsx,
)

EXPORT_FORMATS = ("csv", "xlsx")


@dataclass(frozen=True)
class ExportRecordsQuery:
    columns: Sequence[str] = field(default_factory=tuple)
    format: str = "csv"
    record_ids: Optional[Sequence[int]] = None


@dataclass(frozen=True)
class ExportFile:
    filename: str
    media_type: str
    content: bytes


class ExportRecordsHandler:

    def __init__(
        self,
        record_repository: RecordRepository,
        tag_repository: TagRepository,
        author_repository: AuthorRepository,
        history_repository: EditHistoryRepository,
    ):
        self._records = record_repository
        self._views = RecordViewAssembler(tag_repository, author_repository, history_repository)

    def handle(self, query: ExportRecordsQuery) -> ExportFile:
        fmt = (query.format or "csv").lower()
        if fmt not in EXPORT_FORMATS:
            raise DomainValidationError(f"Unsupported export format: {query.format}")
        columns = self._columns(query.columns)

        if query.record_ids:
            records = self._records.list_by_ids(query.record_ids)
        else:
            records = self._records.list_all()
        rows = [self._row(view, columns) for view in self._views.assemble(records)]

        stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
        if fmt == "xlsx":
            return ExportFile(
                filename=f"records-{stamp}.xlsx",
                media_type=XLSX_MEDIA_TYPE,
                content=write_xlsx(columns, rows, sheet_title="Records"),
            )
        return ExportFile(
            filename=f"records-{stamp}.csv",
            media_type=CSV_MEDIA_TYPE,
            content=write_csv(columns, rows).encode("utf-8"),
        )

    @staticmethod
    def _columns(requested: Sequence[str]) -> List[str]:
        if not requested:
            return list(EXPORTABLE_RECORD_COLUMNS)
        unknown = [column for column in requested if column not in EXPORTABLE_RECORD_COLUMNS]
        if unknown:
            raise DomainValidationError(f"Unknown export columns: {', '.join(unknown)}")
        return list(requested)

    @staticmethod
    def _row(view: RecordViewDTO, columns: Sequence[str]) -> List[Any]:
        values: Dict[str, Any] = dict(view.fields)
        values["tags"] = ", ".join(tag.name for tag in view.tags)
        values["authors_linked"] = ", ".join(author.name for author in view.authors_linked)
        return [values.get(column) for column in columns]
