"""Pytest configuration for backend tests.

Ensures the project root is on sys.path so ``magazine_backend.*`` imports
resolve when the suite runs from a checkout without an editable install.
"""
from __future__ import annotations

import sys
from pathlib import Path

import fitz  # type: ignore
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def build_pdf(page_count: int = 3, width: float = 200, height: float = 300, text: str | None = None) -> bytes:
    """Small in-memory PDF; each page carries ``Page N`` (or ``text``) so pages can be told apart."""
    with fitz.open() as document:
        for index in range(page_count):
            page = document.new_page(width=width, height=height)
            page.insert_text((20, 40), text or f"Page {index + 1}")
        return document.tobytes()


@pytest.fixture
def pdf_factory():
    return build_pdf
