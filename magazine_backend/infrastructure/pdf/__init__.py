"""PDF infrastructure utilities."""

from .pdf_splitter import PdfSplitter, SplitFile
from .pdf_text_extractor import PdfTextExtractor

__all__ = ["PdfSplitter", "PdfTextExtractor", "SplitFile"]
