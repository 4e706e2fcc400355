"""
Domain Value Objects

Immutable value objects that encapsulate domain concepts with validation.
"""
from .split_layout import Section, SplitLayout, page_range_label
from .catalog_query import CatalogListCriteria, ImportantFilter
from .crop_rect import CropRect, PdfBox, crop_to_pdf_box, display_point_to_pdf_point, normalize_rotation
from .edit_history import EditHistorySummary, LatestEditor
from .language import LANGUAGE_ALIASES, resolve_language_hint, sanitize_language
from .record_query import (
    ColumnFilter,
    FilterMode,
    RecordSearchCriteria,
    RecordSort,
    parse_column_filters,
)

__all__ = [
    'Section',
    'SplitLayout',
    'page_range_label',
    'CatalogListCriteria',
    'ImportantFilter',
    'CropRect',
    'PdfBox',
    'crop_to_pdf_box',
    'display_point_to_pdf_point',
    'normalize_rotation',
    'EditHistorySummary',
    'LatestEditor',
    'LANGUAGE_ALIASES',
    'resolve_language_hint',
    'sanitize_language',
    'ColumnFilter',
    'FilterMode',
    'RecordSearchCriteria',
    'RecordSort',
    'parse_column_filters',
]
