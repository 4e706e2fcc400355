"""
CropRect value object and page geometry helpers.

Crop rectangles are expressed in normalized coordinates of the page *as it is
displayed* (after the user's rotation), origin at the top-left corner. PDF
user space has its origin at the bottom-left corner of the unrotated page, so
splitting needs to map between the two.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from magazine_backend.constants import CROP_EPSILON, MIN_CROP_RATIO


def _clamp(value: float, lower: float, upper: float) -> float:
    return min(upper, max(lower, value))


@dataclass(frozen=True)
class CropRect:
    """
    Normalized crop rectangle.

    ``enabled=False`` always means "full page" regardless of the stored
    coordinates.
    """
    x: float = 0.0
    y: float = 0.0
    width: float = 1.0
    height: float = 1.0
    enabled: bool = False

    @classmethod
    def full_page(cls) -> "CropRect":
        return cls(0.0, 0.0, 1.0, 1.0, False)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "CropRect":
        if not data:
            return cls.full_page()
        return cls(
            x=float(data.get("x", 0) or 0),
            y=float(data.get("y", 0) or 0),
            width=float(data.get("width", 1) if data.get("width") is not None else 1),
            height=float(data.get("height", 1) if data.get("height") is not None else 1),
            enabled=bool(data.get("enabled", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "enabled": self.enabled,
        }

    def normalize(self) -> "CropRect":
        """Clamp into the page, keeping at least ``MIN_CROP_RATIO`` of each side."""
        if not self.enabled:
            return CropRect.full_page()
        x = _clamp(self.x, 0.0, 1.0)
        y = _clamp(self.y, 0.0, 1.0)
        # The max bound wins when 1 - x drops below the minimum ratio.
        width = min(1.0 - x, max(MIN_CROP_RATIO, self.width))
        height = min(1.0 - y, max(MIN_CROP_RATIO, self.height))
        return CropRect(x, y, width, height, True)

    def is_meaningful(self) -> bool:
        normalized = self.normalize()
        if not normalized.enabled:
            return False
        return (
            normalized.x > CROP_EPSILON
            or normalized.y > CROP_EPSILON
            or abs(normalized.width - 1) > CROP_EPSILON
            or abs(normalized.height - 1) > CROP_EPSILON
        )

    def visual(self) -> Optional["CropRect"]:
        """Normalized rect when it actually crops something, else None."""
        normalized = self.normalize()
        return normalized if normalized.is_meaningful() else None

    def mask_percentages(self) -> Dict[str, float]:
        """Percentages of the page hidden on each side of the crop."""
        return {
            "top": self.y * 100,
            "left": self.x * 100,
            "right": (1 - (self.x + self.width)) * 100,
            "bottom": (1 - (self.y + self.height)) * 100,
        }


@dataclass(frozen=True)
class PdfBox:
    """Rectangle in PDF user space (origin bottom-left)."""
    left: float
    bottom: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def top(self) -> float:
        return self.bottom + self.height


def normalize_rotation(rotation: float) -> int:
    """Snap to the nearest quarter turn and wrap into 0, 90, 180 or 270."""
    quarter = int(round(rotation / 90.0)) * 90
    return ((quarter % 360) + 360) % 360


def display_point_to_pdf_point(
    x_from_left: float,
    y_from_top: float,
    display_height: float,
    page_width: float,
    page_height: float,
    rotation: float,
) -> Tuple[float, float]:
    y_from_bottom = display_height - y_from_top
    quarter = normalize_rotation(rotation)
    if quarter == 90:
        return page_width - y_from_bottom, x_from_left
    if quarter == 180:
        return page_width - x_from_left, page_height - y_from_bottom
    if quarter == 270:
        return y_from_bottom, page_height - x_from_left
    return x_from_left, y_from_bottom


def crop_to_pdf_box(page_width: float, page_height: float, rotation: float, crop: CropRect) -> PdfBox:
    """Map a display-space crop onto the unrotated page's PDF coordinates."""
    quarter = normalize_rotation(rotation)
    upright = quarter % 180 == 0
    display_width = page_width if upright else page_height
    display_height = page_height if upright else page_width

    left = crop.x * display_width
    top = crop.y * display_height
    right = (crop.x + crop.width) * display_width
    bottom = (crop.y + crop.height) * display_height

    corners = [
        display_point_to_pdf_point(px, py, display_height, page_width, page_height, quarter)
        for px, py in ((left, top), (right, top), (left, bottom), (right, bottom))
    ]
    xs = [point[0] for point in corners]
    ys = [point[1] for point in corners]
    box_left = _clamp(min(xs), 0, page_width)
    box_right = _clamp(max(xs), 0, page_width)
    box_bottom = _clamp(min(ys), 0, page_height)
    box_top = _clamp(max(ys), 0, page_height)
    return PdfBox(
        left=box_left,
        bottom=box_bottom,
        width=max(1.0, box_right - box_left),
        height=max(1.0, box_top - box_bottom),
    )
