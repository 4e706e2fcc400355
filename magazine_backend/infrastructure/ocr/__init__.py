"""OCR and compression providers."""

from .ilovepdf_client import IlovePdfClient
from .tesseract_ocr import TesseractOcr

__all__ = ["IlovePdfClient", "TesseractOcr"]
