"""
API Schemas - organized by area
"""
from .catalog_schemas import (
    AuthorPayloadSchema,
    AuthorSchema,
    BulkDeleteSchema,
    RecordLinksSchema,
    TagPayloadSchema,
    TagSchema,
)
from .common_schemas import MessageSchema
from .record_schemas import (
    BatchDeleteRecordsSchema,
    ExportRecordsSchema,
    ExtractionResultSchema,
    HistoryEntrySchema,
    RecordPageSchema,
)
from .tool_schemas import (
    DraftSplitFieldSchema,
    GenerateFieldSchema,
    LayoutEditSchema,
    UserCredentialsSchema,
)

__all__ = [
    # Common
    "MessageSchema",
    # Records
    "BatchDeleteRecordsSchema",
    "ExportRecordsSchema",
    "ExtractionResultSchema",
    "HistoryEntrySchema",
    "RecordPageSchema",
    # Tags and authors
    "AuthorPayloadSchema",
    "AuthorSchema",
    "BulkDeleteSchema",
    "RecordLinksSchema",
    "TagPayloadSchema",
    "TagSchema",
    # Users, AI and PDF tools
    "DraftSplitFieldSchema",
    "GenerateFieldSchema",
    "LayoutEditSchema",
    "UserCredentialsSchema",
]
