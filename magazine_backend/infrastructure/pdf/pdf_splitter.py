"""
Split an uploaded issue into per-section PDFs.

Pages are copied in layout order. Crops are applied by painting white
rectangles over everything outside the crop box, so the original page content
stays intact underneath (the same approach the browser uses for previews).
"""
from __future__ import annotations

import io
import logging
import zipfile
from dataclasses import dataclass
from typing import List, Tuple

import fitz  # type: ignore

from magazine_backend.domain.value_objects.crop_rect import CropRect, crop_to_pdf_box, normalize_rotation
from magazine_backend.domain.value_objects.split_layout import Section, SplitLayout, page_range_label

from .pdf_text_extractor import open_pdf

logger = logging.getLogger(__name__)

WHITE = (1, 1, 1)


@dataclass(frozen=True)
class SplitFile:
    section_index: int
    file_name: str
    pages: Tuple[int, ...]
    has_cropped_pages: bool
    data: bytes

    @property
    def page_range(self) -> str:
        return page_range_label(self.pages)


def split_file_name(base_name: str, number: int) -> str:
    return f"{base_name}_split_{number:03d}.pdf"


def base_name_for(filename: str) -> str:
    stem = filename[:-4] if filename.lower().endswith(".pdf") else filename
    return stem or "split"


class PdfSplitter:

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def split(self, data: bytes, layout: SplitLayout, filename: str) -> List[SplitFile]:
        base_name = base_name_for(filename)
        files: List[SplitFile] = []
        with open_pdf(data) as source:
            for section in layout.active_sections():
                number = len(files) + 1
                pdf_bytes, cropped = self._build_section(source, layout, section)
                files.append(
                    SplitFile(
                        section_index=number,
                        file_name=split_file_name(base_name, number),
                        pages=tuple(index + 1 for index in section.pages),
                        has_cropped_pages=cropped,
                        data=pdf_bytes,
                    )
                )
        logger.info("Split %s into %d file(s)", filename, len(files))
        return files

    @staticmethod
    def build_zip(files: List[SplitFile], filename: str) -> Tuple[str, bytes]:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            for split in files:
                archive.writestr(split.file_name, split.data)
        return f"{base_name_for(filename)}_splits.zip", buffer.getvalue()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _build_section(self, source: "fitz.Document", layout: SplitLayout, section: Section) -> Tuple[bytes, bool]:
        cropped = False
        with fitz.open() as output:
            for offset, source_index in enumerate(section.pages):
                output.insert_pdf(source, from_page=source_index, to_page=source_index)
                page = output[-1]
                user_rotation = normalize_rotation(layout.rotation_for(source_index))
                rotation = user_rotation or page.rotation
                crop = layout.crop_for(section.start + offset).visual()
                if crop is not None:
                    page.set_rotation(0)
                    self._mask_outside(page, crop, rotation)
                    cropped = True
                page.set_rotation(rotation)
            return output.tobytes(deflate=True), cropped

    @staticmethod
    def _mask_outside(page: "fitz.Page", crop: CropRect, rotation: int) -> None:
        width = page.rect.width
        height = page.rect.height
        box = crop_to_pdf_box(width, height, rotation, crop)
        # PDF space grows upwards, PyMuPDF page space grows downwards.
        top = height - box.top
        bottom = height - box.bottom
        regions = []
        if box.bottom > 0:
            regions.append(fitz.Rect(0, bottom, width, height))
        if box.top < height:
            regions.append(fitz.Rect(0, 0, width, top))
        if box.left > 0:
            regions.append(fitz.Rect(0, 0, box.left, height))
        if box.right < width:
            regions.append(fitz.Rect(box.right, 0, width, height))
        for rect in regions:
            page.draw_rect(rect, color=WHITE, fill=WHITE, width=0, overlay=True)
