import io
import zipfile

import fitz  # type: ignore
import pytest

from magazine_backend.domain.exceptions import DomainValidationError
from magazine_backend.domain.value_objects.crop_rect import CropRect
from magazine_backend.domain.value_objects.split_layout import SplitLayout
from magazine_backend.infrastructure.pdf.pdf_splitter import PdfSplitter, base_name_for, split_file_name
from magazine_backend.infrastructure.pdf.pdf_text_extractor import PdfTextExtractor


def _page_texts(data: bytes):
    with fitz.open(stream=data, filetype="pdf") as document:
        return [page.get_text("text").strip() for page in document]


def test_split_follows_layout_order(pdf_factory):
    layout = SplitLayout(page_order=(2, 0, 1), split_positions=frozenset({0}))

    files = PdfSplitter().split(pdf_factory(3), layout, "issue.pdf")

    assert [split.file_name for split in files] == ["issue_split_001.pdf", "issue_split_002.pdf"]
    assert files[0].pages == (3,)
    assert files[1].page_range == "1-2"
    assert _page_texts(files[0].data) == ["Page 3"]
    assert _page_texts(files[1].data) == ["Page 1", "Page 2"]
    assert not any(split.has_cropped_pages for split in files)


def test_skipped_sections_are_not_exported(pdf_factory):
    layout = SplitLayout(
        page_order=(0, 1, 2),
        split_positions=frozenset({0, 1}),
        skipped_sections=frozenset({1}),
    )

    files = PdfSplitter().split(pdf_factory(3), layout, "issue.PDF")

    assert [split.pages for split in files] == [(1,), (3,)]
    # Numbering stays contiguous across skipped sections.
    assert [split.section_index for split in files] == [1, 2]


def test_rotation_and_crop(pdf_factory):
    layout = SplitLayout(
        page_order=(0,),
        rotations={0: 90},
        crops={0: CropRect(0.1, 0.1, 0.5, 0.5, enabled=True)},
    )

    files = PdfSplitter().split(pdf_factory(1), layout, "issue.pdf")

    assert files[0].has_cropped_pages
    with fitz.open(stream=files[0].data, filetype="pdf") as document:
        assert document[0].rotation == 90


def test_build_zip(pdf_factory):
    files = PdfSplitter().split(pdf_factory(2), SplitLayout(page_order=(0, 1), split_positions=frozenset({0})), "a.pdf")

    name, data = PdfSplitter.build_zip(files, "a.pdf")

    assert name == "a_splits.zip"
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        assert archive.namelist() == ["a_split_001.pdf", "a_split_002.pdf"]


def test_names():
    assert base_name_for("Issue 5.pdf") == "Issue 5"
    assert base_name_for(".pdf") == "split"
    assert split_file_name("x", 12) == "x_split_012.pdf"


class TestPdfTextExtractor:

    def test_extract_and_limit(self, pdf_factory):
        extractor = PdfTextExtractor()
        data = pdf_factory(3)

        assert extractor.page_count(data) == 3
        assert extractor.extract(data) == "Page 1\n\nPage 2\n\nPage 3"
        assert extractor.extract(data, max_pages=0) == "Page 1"

    @pytest.mark.parametrize("data", [b"", b"not a pdf"])
    def test_invalid_input(self, data):
        with pytest.raises(DomainValidationError):
            PdfTextExtractor().page_count(data)
