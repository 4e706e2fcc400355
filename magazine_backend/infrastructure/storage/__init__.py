"""Blob storage backends for record PDFs."""

from .cloudinary_storage import CloudinaryStorage
from .local_storage import LocalBlobStorage

__all__ = ["CloudinaryStorage", "LocalBlobStorage"]
