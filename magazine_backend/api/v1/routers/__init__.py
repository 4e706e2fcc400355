"""API v1 routers package."""

from . import ai, authors, dashboard, pdf, records, tags, users

__all__ = [
    "ai",
    "authors",
    "dashboard",
    "pdf",
    "records",
    "tags",
    "users",
]
