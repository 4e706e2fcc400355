"""Prompt construction for record and split metadata generation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from magazine_backend.domain.services.text_quality import collapse_whitespace

RECORD_MODES = ("summary", "conclusion", "tags")
SPLIT_FIELDS = (
    "name",
    "volume",
    "number",
    "timestamp",
    "title_name",
    "page_numbers",
    "summary",
    "conclusion",
    "tags",
)

EDITOR_INSTRUCTION = (
    "You are an expert editor for academic PDF content. Use only the provided extracted text. "
    "Do not make up facts, add disclaimers, or include pre/post text. Keep output concise and accurate."
)
METADATA_INSTRUCTION = (
    "You are an expert metadata extractor for magazine PDFs. Use only the provided extracted text. "
    "Do not invent facts, add disclaimers, or include any labels. Return clean plain text only."
)

SUMMARY_PROMPT = (
    "Create a short accurate summary (~300 words) of all details mentioned in {label}. Ensure no details are "
    "false, inaccurate, or hallucinated. After generating, review the summary against the PDF content to correct "
    "any mistakes, inaccuracies, or discrepancies. Use appropriate language for regular readers and research "
    "scholars - keep it sharp and concise without extra words. You may add relevant post-publication updates in "
    "brackets if applicable. Verify all information carefully before summarizing. Avoid bullet points and "
    'introductions like "Sure" or "Summary:".'
)
CONCLUSION_PROMPT = (
    "Write a short, unique and distinctive conclusion (110-140 words) from {label}. Focus on key implications, "
    "outcomes, and significance rather than repeating summary content. Ensure the conclusion is specific to this "
    "document's findings and contributions. Output only the conclusion paragraph."
)
TAGS_PROMPT = (
    "Generate exactly 8 three-word tags that best capture the essence of {label}. Each tag must be exactly 3 "
    "words, Title Case, and directly relevant to the PDF content only. Avoid generic words (article, pdf, "
    "document). For each tag, briefly explain which specific content/paragraph it relates to so the relevance "
    'is clear. Format as: "Tag Name - relates to [brief explanation]". Return only the tags with explanations.'
)
RECORD_REGEN_NOTES = {
    "summary": "Rewrite with different wording and emphasis (avoid repeating prior phrasing). ",
    "conclusion": "Provide a fresh take (avoid repeating prior wording) and keep focus on implications. ",
    "tags": "Generate an alternate set (avoid generic or previously suggested words). ",
}

SPLIT_PROMPTS = {
    "name": (
        "Identify the magazine or publication name {subject}. Output only the most likely magazine title "
        '(max 60 characters). If nothing is clear, return "Unknown".'
    ),
    "volume": (
        'Extract the volume identifier {subject}. Prefer formats like "Volume 12" or "Vol. XII". Output only one '
        'value. If not found, return "Unknown".'
    ),
    "number": (
        'Extract the issue/number/edition label {subject}. Prefer forms such as "Issue 3", "No. 3", or '
        '"Number 3". Output only one value. If not found, return "Unknown".'
    ),
    "timestamp": (
        'Return the publication date {subject} as "MMM YYYY" (e.g., Jan 2024). If only a year is present, return '
        'the year. Use English month abbreviations. If unclear, return "Unknown".'
    ),
    "title_name": (
        "Provide the best short article title {subject}. Keep it under 12 words, clear, and specific. Avoid "
        "publication names and filler words. If unclear, propose a precise 6-12 word title based only on the text."
    ),
    "page_numbers": (
        'Report the page range covered by this split as numbers only. Use "start-end" (e.g., "112-118"). If it\'s '
        'a single page, return that number. If no range is clear, return "Unknown".'
    ),
    "summary": (
        "Write a concise, factual summary (250-320 words) of this PDF content. Do not add introductions or "
        "bullets. Review against the text to avoid inaccuracies."
    ),
    "conclusion": (
        "Write a short conclusion paragraph (110-140 words) focused on implications and outcomes specific to "
        "this document. Output only the paragraph."
    ),
    "tags": (
        "Generate exactly 5 tags that capture this content. Each tag must be 2-3 words, Title Case, no "
        "punctuation or special characters. One tag per line; no extra text."
    ),
}
SPLIT_REGEN_NOTES = {
    "title_name": "Provide a fresh alternate wording. ",
    "summary": "Use different phrasing from prior attempts. ",
    "conclusion": "Offer a distinct perspective (no repeated phrasing). ",
    "tags": "Suggest an alternate set without repeating prior wording. ",
}


@dataclass(frozen=True)
class PromptBundle:
    """Chat messages plus the sampling parameters that go with them."""

    messages: List[Dict[str, str]]
    temperature: float
    max_tokens: int
    top_p: float = 0.9


def _messages(system: str, prompt: str, text: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": f"{prompt}\n\nExtracted text:\n{text}"},
    ]


class RecordPromptBuilder:
    """Summary, conclusion and tag prompts for a stored record."""

    def build(
        self,
        mode: str,
        text: str,
        *,
        title: Optional[str] = None,
        name: Optional[str] = None,
        variant: str = "primary",
        max_chars: Optional[int] = None,
    ) -> PromptBundle:
        if mode not in RECORD_MODES:
            raise ValueError(f"Unsupported mode: {mode}")
        label = title or name or "the article"
        template = {"summary": SUMMARY_PROMPT, "conclusion": CONCLUSION_PROMPT, "tags": TAGS_PROMPT}[mode]
        note = RECORD_REGEN_NOTES[mode] if variant == "regen" else ""
        context = text[:max_chars] if max_chars else text
        return PromptBundle(
            messages=_messages(EDITOR_INSTRUCTION, note + template.format(label=label), context),
            temperature=0.1 if mode == "tags" else 0.25,
            max_tokens=96 if mode == "tags" else 360,
        )


class SplitFieldPromptBuilder:
    """Per-field metadata prompts for a freshly split PDF."""

    def build(self, field: str, text: str, *, label: Optional[str] = None, variant: str = "primary") -> PromptBundle:
        if field not in SPLIT_FIELDS:
            raise ValueError(f"Unsupported field: {field}")
        long_form = field in ("summary", "conclusion")
        context = collapse_whitespace(text, 12000 if long_form else 8000)
        subject = f"for {label}" if label else "for this PDF split"
        note = SPLIT_REGEN_NOTES.get(field, "") if variant == "regen" else ""
        prompt = note + SPLIT_PROMPTS[field].format(subject=subject)
        if field == "tags":
            temperature = 0.1
        elif long_form:
            temperature = 0.25
        else:
            temperature = 0.15
        max_tokens = {"summary": 420, "conclusion": 200, "tags": 96}.get(field, 80)
        return PromptBundle(
            messages=_messages(METADATA_INSTRUCTION, prompt, context),
            temperature=temperature,
            max_tokens=max_tokens,
        )
