"""SplitPdf Commands - cut an uploaded issue into article PDFs and edit layouts."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from magazine_backend.domain.exceptions import DomainValidationError
from magazine_backend.domain.services.page_text_parser import parse_page_text_file, text_for_pages
from magazine_backend.domain.value_objects.crop_rect import CropRect
from magazine_backend.domain.value_objects.split_layout import SplitLayout
from magazine_backend.infrastructure.pdf.pdf_splitter import PdfSplitter, SplitFile
from magazine_backend.infrastructure.pdf.pdf_text_extractor import PdfTextExtractor

logger = logging.getLogger(__name__)

LAYOUT_ACTIONS = ("rotate", "duplicate", "delete", "toggle_split", "crop")


def _layout(raw: Optional[Mapping[str, Any]], page_count: int) -> SplitLayout:
    try:
        return SplitLayout.from_dict(raw or {}, page_count)
    except (TypeError, ValueError) as exc:
        raise DomainValidationError(f"Invalid split layout: {exc}") from exc


@dataclass(frozen=True)
class SplitPdfCommand:
    pdf: bytes
    filename: str
    layout: Mapping[str, Any] = field(default_factory=dict)
    page_text_file: Optional[str] = None


@dataclass(frozen=True)
class SplitPdfResult:
    files: List[SplitFile]
    page_texts: Dict[int, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files": [
                {
                    "sectionIndex": split.section_index,
                    "fileName": split.file_name,
                    "pages": list(split.pages),
                    "pageRange": split.page_range,
                    "hasCroppedPages": split.has_cropped_pages,
                    "size": len(split.data),
                    "extractedText": self.page_texts.get(split.section_index),
                }
                for split in self.files
            ]
        }


class SplitPdfHandler:
    """
    Produce one PDF per active section of the layout.

    When a page-text file is supplied, each split also gets the manual text
    of its source pages.
    """

    def __init__(self, splitter: Optional[PdfSplitter] = None, extractor: Optional[PdfTextExtractor] = None):
        self._splitter = splitter or PdfSplitter()
        self._extractor = extractor or PdfTextExtractor()

    def handle(self, command: SplitPdfCommand) -> SplitPdfResult:
        page_count = self._extractor.page_count(command.pdf)
        layout = _layout(command.layout, page_count)
        files = self._splitter.split(command.pdf, layout, command.filename or "split.pdf")
        if not files:
            raise DomainValidationError("No sections selected for export")

        page_texts: Dict[int, str] = {}
        if command.page_text_file:
            parsed = parse_page_text_file(command.page_text_file)
            for split in files:
                text = text_for_pages(parsed, list(split.pages))
                if text:
                    page_texts[split.section_index] = text
        logger.info("Split %s into %d file(s)", command.filename, len(files))
        return SplitPdfResult(files=files, page_texts=page_texts)

    def archive(self, result: SplitPdfResult, filename: str) -> Tuple[str, bytes]:
        return self._splitter.build_zip(result.files, filename or "split.pdf")


@dataclass(frozen=True)
class EditSplitLayoutCommand:
    layout: Mapping[str, Any]
    page_count: int
    action: str
    position: Optional[int] = None
    source_index: Optional[int] = None
    direction: Optional[str] = None
    crop: Optional[Mapping[str, Any]] = None


class EditSplitLayoutHandler:
    """Applies one page operation to a layout and returns the new layout with its sections."""

    def handle(self, command: EditSplitLayoutCommand) -> Dict[str, Any]:
        if command.action not in LAYOUT_ACTIONS:
            raise DomainValidationError(f"Unsupported layout action: {command.action}")
        layout = _layout(command.layout, command.page_count)

        if command.action == "rotate":
            if command.source_index is None or command.direction not in ("left", "right"):
                raise DomainValidationError("rotate needs sourceIndex and direction left|right")
            layout = layout.rotate(command.source_index, command.direction)
        else:
            position = self._position(command.position, layout)
            if command.action == "duplicate":
                layout = layout.duplicate(position)
            elif command.action == "delete":
                layout = layout.delete(position)
            elif command.action == "toggle_split":
                layout = layout.toggle_split(position)
            else:
                layout = layout.with_crop(position, CropRect.from_dict(command.crop) if command.crop else None)

        return {
            "layout": layout.to_dict(),
            "sections": [
                {
                    "index": section.index,
                    "start": section.start,
                    "end": section.end,
                    "pages": [page + 1 for page in section.pages],
                    "skipped": section.index in layout.skipped_sections,
                }
                for section in layout.sections()
            ],
        }

    @staticmethod
    def _position(position: Optional[int], layout: SplitLayout) -> int:
        if position is None or position < 0 or position >= len(layout.page_order):
            raise DomainValidationError("position is outside the page order")
        return position
