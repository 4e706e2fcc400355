from __future__ import annotations

# Single source of truth for static constants.

STORE_VERSION = 1

# Crop geometry.
MIN_CROP_RATIO = 0.05
CROP_EPSILON = 0.0001

# Column filter sentinels sent by the records table.
EMPTY_SENTINEL = "__EMPTY__"
NONEMPTY_SENTINEL = "__NONEMPTY__"

RECORDS_PAGE_SIZE = 20
SEARCH_LIMIT = 20
MAGAZINE_NAMES_LIMIT = 50
RECENT_WINDOW_DAYS = 30

# Text extraction.
MIN_VALID_LETTER_COUNT = 40
OCR_PAGE_LIMIT = 50
OCR_RENDER_SCALE = 2
DEFAULT_OCR_LANGUAGE = "eng"
LANGUAGE_DETECTION_MIN_CHARS = 30

# Tag and author management.
TAG_NAME_MAX_LENGTH = 100
TAG_NAME_PATTERN = r"^[a-zA-Z0-9\s\-_]+$"
IMPORT_MAX_BYTES = 10 * 1024 * 1024
AUTHOR_NATIONAL_VALUES = ("national", "international", "jainmonk", "jainnun")
AUTHOR_NATIONAL_UPDATE_VALUES = ("national", "international")
AUTHOR_MANY_RECORDS_THRESHOLD = 10

# Hosts the PDF viewer proxy is allowed to fetch from.
PDF_PROXY_ALLOWED_HOSTS = ("utfs.io", "ufs.sh", "uploadthing.com", "res.cloudinary.com")

# Columns available to the records export.
EXPORTABLE_RECORD_COLUMNS = (
    "id",
    "name",
    "timestamp",
    "volume",
    "number",
    "title_name",
    "page_numbers",
    "authors",
    "authors_linked",
    "language",
    "tags",
    "summary",
    "conclusion",
    "pdf_url",
    "creator_name",
    "email",
)
