"""Parses manually supplied extracted-text files split by ``Page N`` markers."""
from __future__ import annotations

import re
from typing import Dict, List

PAGE_MARKER_RE = re.compile(r"^\s*-*\s*Page\s+(\d+)\s*-*\s*$", re.IGNORECASE)


def parse_page_text_file(raw: str) -> Dict[int, str]:
    normalized = raw.lstrip("\ufeff").replace("\r\n", "\n")
    by_page: Dict[int, List[str]] = {}
    current_page = None

    for line in normalized.split("\n"):
        match = PAGE_MARKER_RE.match(line)
        if match:
            page_number = int(match.group(1))
            if page_number > 0:
                current_page = page_number
                by_page.setdefault(current_page, [])
            else:
                current_page = None
            continue
        if current_page is not None:
            by_page[current_page].append(line)

    return {page: "\n".join(lines).strip() for page, lines in by_page.items()}


def text_for_pages(page_text: Dict[int, str], pages: List[int]) -> str:
    """Join the text of the given 1-based pages, skipping pages without text."""
    chunks = [page_text[page] for page in pages if page_text.get(page)]
    return "\n\n".join(chunks)
