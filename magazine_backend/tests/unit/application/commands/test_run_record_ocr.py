"""
Unit tests for the record OCR pipeline and its compression fallback.
"""
from unittest.mock import Mock

import pytest

from magazine_backend.application.commands.run_record_ocr import (
    OcrPipelineOptions,
    RunRecordOcrCommand,
    RunRecordOcrHandler,
    build_compression_plan,
)
from magazine_backend.domain.entities.record import MagazineRecord
from magazine_backend.domain.exceptions import (
    EntityNotFoundError,
    ExternalServiceError,
    OcrPipelineError,
    StorageSizeLimitError,
)
from magazine_backend.domain.repositories.blob_storage import StoredBlob

RECORD = MagazineRecord(id=4, name="Jain Digest", pdf_public_id="pdfs/issue-4.pdf", pdf_url="https://cdn/pdfs/issue-4.pdf")


def _stored(data, public_id):
    return StoredBlob(public_id=public_id, url=f"https://cdn/{public_id}", version="7")


@pytest.fixture
def records():
    repo = Mock()
    repo.get = Mock(return_value=RECORD)
    return repo


@pytest.fixture
def storage():
    mock = Mock()
    mock.upload = Mock(side_effect=_stored)
    return mock


@pytest.fixture
def ilovepdf():
    client = Mock()
    client.ocr = Mock(return_value=b"x" * 1000)
    client.compress = Mock(side_effect=lambda data, filename, level: data[: len(data) // 2])
    return client


@pytest.fixture
def sources():
    resolver = Mock()
    resolver.source_url = Mock(return_value="https://cdn/pdfs/issue-4.pdf")
    resolver.fetch = Mock(return_value=b"%PDF-original")
    return resolver


@pytest.fixture
def extractor():
    mock = Mock()
    mock.extract = Mock(return_value="Readable text from the scanned issue, long enough to keep.")
    return mock


@pytest.fixture
def handler(records, storage, ilovepdf, sources, extractor):
    return RunRecordOcrHandler(
        records,
        storage,
        ilovepdf,
        sources,
        Mock(),
        options=OcrPipelineOptions(languages=("hin", "eng")),
        text_extractor=extractor,
    )


@pytest.mark.parametrize(
    "primary,fallback,attempts,expected",
    [
        ("recommended", "extreme", 3, ["recommended", "extreme", "extreme"]),
        ("extreme", "extreme", 2, ["extreme", "extreme"]),
        (None, None, 2, ["extreme", "extreme"]),
        ("low", "extreme", 1, ["low"]),
    ],
)
def test_compression_plan(primary, fallback, attempts, expected):
    assert build_compression_plan(primary, fallback, attempts) == expected


class TestRunRecordOcr:

    def test_missing_record(self, handler, records):
        records.get.return_value = None
        with pytest.raises(EntityNotFoundError):
            handler.handle(RunRecordOcrCommand(record_id=4))

    def test_uploads_ocr_copy_and_stores_text(self, handler, records, storage, ilovepdf):
        result = handler.handle(RunRecordOcrCommand(record_id=4, delete_old_asset=True))

        kwargs = ilovepdf.ocr.call_args.kwargs
        assert ilovepdf.ocr.call_args.args[1] == "issue-4.pdf"
        assert kwargs["languages"] == ["hin", "eng"]
        assert storage.upload.call_args.args[1] == "pdfs/issue-4-ocr.pdf"
        changes = records.update.call_args.args[1]
        assert changes["pdf_public_id"] == "pdfs/issue-4-ocr.pdf"
        assert changes["extracted_text"].startswith("Readable text")
        storage.delete.assert_called_once_with("pdfs/issue-4.pdf")

        payload = result.to_dict()
        assert payload["recordId"] == 4
        assert payload["storage_version"] == "7"
        assert "compression_events" not in payload

    def test_meaningless_text_resets_column(self, handler, records, extractor):
        extractor.extract.return_value = "   "

        result = handler.handle(RunRecordOcrCommand(record_id=4))

        assert records.update.call_args.args[1]["extracted_text"] is None
        assert result.extracted_text is None

    def test_size_rejection_triggers_compression(self, handler, storage, ilovepdf):
        storage.upload.side_effect = [StorageSizeLimitError("Cloudinary", "File size too large"), _stored(None, "pdfs/issue-4-ocr.pdf")]

        result = handler.handle(RunRecordOcrCommand(record_id=4))

        ilovepdf.compress.assert_called_once_with(b"x" * 1000, "issue-4.pdf", "recommended")
        types = [event["type"] for event in result.compression_events]
        assert types == ["cloudinary-upload", "compression-start", "compression-complete", "cloudinary-upload"]
        assert result.compression_events[-1]["from_compression"] is True
        assert result.compression_events[-1]["bytes"] == 500

    def test_gives_up_after_plan(self, handler, storage, ilovepdf):
        storage.upload.side_effect = StorageSizeLimitError("Cloudinary", "File size too large")

        with pytest.raises(OcrPipelineError) as excinfo:
            handler.handle(RunRecordOcrCommand(record_id=4))

        assert ilovepdf.compress.call_count == 3
        uploads = [event for event in excinfo.value.compression_events if event["type"] == "cloudinary-upload"]
        assert len(uploads) == 4

    def test_compression_failure_keeps_events(self, handler, storage, ilovepdf):
        storage.upload.side_effect = StorageSizeLimitError("Cloudinary", "File size too large")
        ilovepdf.compress.side_effect = ExternalServiceError("iLovePDF", "process failed")

        with pytest.raises(OcrPipelineError) as excinfo:
            handler.handle(RunRecordOcrCommand(record_id=4))

        assert [event["type"] for event in excinfo.value.compression_events] == ["cloudinary-upload", "compression-start"]

    def test_other_storage_errors_are_not_compressed(self, handler, storage, ilovepdf, records):
        storage.upload.side_effect = ExternalServiceError("Cloudinary", "upload failed: Invalid Signature")

        with pytest.raises(OcrPipelineError, match="Invalid Signature") as excinfo:
            handler.handle(RunRecordOcrCommand(record_id=4))

        ilovepdf.compress.assert_not_called()
        assert excinfo.value.compression_events == []
        records.update.assert_not_called()

    def test_storage_error_after_compression_keeps_events(self, handler, storage, ilovepdf):
        storage.upload.side_effect = [
            StorageSizeLimitError("Cloudinary", "File size too large"),
            ExternalServiceError("Cloudinary", "upload failed: timeout"),
        ]

        with pytest.raises(OcrPipelineError) as excinfo:
            handler.handle(RunRecordOcrCommand(record_id=4))

        assert ilovepdf.compress.call_count == 1
        assert [event["type"] for event in excinfo.value.compression_events] == [
            "cloudinary-upload",
            "compression-start",
            "compression-complete",
        ]

    @pytest.mark.parametrize(
        "error",
        [RuntimeError("cannot load page 2"), ExternalServiceError("PyMuPDF", "Invalid PDF")],
    )
    def test_extraction_failure_is_reported_not_raised(self, handler, records, extractor, error):
        extractor.extract.side_effect = error

        result = handler.handle(RunRecordOcrCommand(record_id=4))

        assert result.text_extraction_error == str(error)
        assert result.to_dict()["text_extraction_error"] == str(error)
        changes = records.update.call_args.args[1]
        assert changes["pdf_public_id"] == "pdfs/issue-4-ocr.pdf"
        assert changes["extracted_text"] is None
