"""
SplitLayout value object.

Describes how an uploaded magazine issue is cut into article PDFs: the order
of source pages (pages may be duplicated or removed), the positions after
which a new section starts, per-source-page rotation, per-position crop
rectangles and the sections the user chose to skip.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from .crop_rect import CropRect


@dataclass(frozen=True)
class Section:
    index: int
    start: int
    pages: Tuple[int, ...]

    @property
    def end(self) -> int:
        return self.start + max(len(self.pages) - 1, 0)


@dataclass(frozen=True)
class SplitLayout:
    page_order: Tuple[int, ...]
    split_positions: FrozenSet[int] = frozenset()
    rotations: Mapping[int, int] = field(default_factory=dict)
    crops: Mapping[int, CropRect] = field(default_factory=dict)
    skipped_sections: FrozenSet[int] = frozenset()
    auto_split_interval: Optional[int] = None

    @classmethod
    def for_page_count(cls, page_count: int) -> "SplitLayout":
        return cls(page_order=tuple(range(page_count)))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], page_count: int) -> "SplitLayout":
        order = data.get("pageOrder")
        page_order = tuple(int(idx) for idx in order) if order else tuple(range(page_count))
        for idx in page_order:
            if idx < 0 or idx >= page_count:
                raise ValueError(f"Page index {idx} is outside the document (0..{page_count - 1})")
        crops = {
            int(position): CropRect.from_dict(rect)
            for position, rect in (data.get("crops") or {}).items()
        }
        interval = data.get("autoSplitInterval")
        return cls(
            page_order=page_order,
            split_positions=frozenset(int(pos) for pos in data.get("splitPositions") or []),
            rotations={int(idx): int(deg) for idx, deg in (data.get("rotations") or {}).items()},
            crops=crops,
            skipped_sections=frozenset(int(idx) for idx in data.get("skippedSections") or []),
            auto_split_interval=int(interval) if interval else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pageOrder": list(self.page_order),
            "splitPositions": sorted(self.split_positions),
            "rotations": {str(idx): deg for idx, deg in sorted(self.rotations.items())},
            "crops": {str(pos): rect.to_dict() for pos, rect in sorted(self.crops.items())},
            "skippedSections": sorted(self.skipped_sections),
            "autoSplitInterval": self.auto_split_interval,
        }

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------
    def sections(self) -> List[Section]:
        if not self.page_order:
            return []
        chunks: List[Tuple[int, ...]] = []
        if self.auto_split_interval and self.auto_split_interval > 0:
            step = self.auto_split_interval
            chunks = [self.page_order[i:i + step] for i in range(0, len(self.page_order), step)]
        else:
            start = 0
            last = len(self.page_order) - 1
            for pos in sorted(self.split_positions):
                end = min(pos, last)
                if end >= start:
                    chunks.append(self.page_order[start:end + 1])
                    start = end + 1
            chunks.append(self.page_order[start:])

        sections: List[Section] = []
        cursor = 0
        for index, pages in enumerate(chunks):
            sections.append(Section(index=index, start=cursor, pages=tuple(pages)))
            cursor += len(pages)
        return sections

    def active_sections(self) -> List[Section]:
        return [
            section for section in self.sections()
            if section.index not in self.skipped_sections and section.pages
        ]

    def rotation_for(self, source_index: int) -> int:
        return self.rotations.get(source_index, 0)

    def crop_for(self, position: int) -> CropRect:
        return self.crops.get(position, CropRect.full_page()).normalize()

    # ------------------------------------------------------------------
    # Page operations (each returns a new layout)
    # ------------------------------------------------------------------
    def rotate(self, source_index: int, direction: str) -> "SplitLayout":
        delta = -90 if direction == "left" else 90
        rotations = dict(self.rotations)
        rotations[source_index] = (rotations.get(source_index, 0) + delta + 360) % 360
        return replace(self, rotations=rotations)

    def duplicate(self, position: int) -> "SplitLayout":
        order = list(self.page_order)
        order.insert(position + 1, order[position])
        crops: Dict[int, CropRect] = {}
        for pos, rect in self.crops.items():
            crops[pos + 1 if pos >= position + 1 else pos] = rect
        if position in self.crops:
            crops[position + 1] = self.crops[position]
        return replace(self, page_order=tuple(order), crops=crops, skipped_sections=frozenset())

    def delete(self, position: int) -> "SplitLayout":
        if position < 0 or position >= len(self.page_order):
            return self
        order = list(self.page_order)
        del order[position]
        max_pos = max(0, len(order) - 1)
        splits = set()
        for pos in self.split_positions:
            if pos < position and pos <= max_pos:
                splits.add(pos)
            elif pos > position and pos - 1 <= max_pos:
                splits.add(pos - 1)
        crops = {
            (pos - 1 if pos > position else pos): rect
            for pos, rect in self.crops.items()
            if pos != position
        }
        return replace(
            self,
            page_order=tuple(order),
            split_positions=frozenset(splits),
            crops=crops,
            skipped_sections=frozenset(),
        )

    def toggle_split(self, position: int) -> "SplitLayout":
        splits = set(self.split_positions)
        if position in splits:
            splits.remove(position)
        else:
            splits.add(position)
        return replace(self, split_positions=frozenset(splits), skipped_sections=frozenset())

    def with_crop(self, position: int, crop: Optional[CropRect]) -> "SplitLayout":
        crops = dict(self.crops)
        if crop is None or not crop.is_meaningful():
            crops.pop(position, None)
        else:
            crops[position] = crop.normalize()
        return replace(self, crops=crops)


def page_range_label(pages: Tuple[int, ...] | List[int]) -> str:
    """``"3-7"`` for several 1-based pages, ``"3"`` for one, ``""`` for none."""
    if not pages:
        return ""
    if len(pages) > 1:
        return f"{pages[0]}-{pages[-1]}"
    return str(pages[0])
