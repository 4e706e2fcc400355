"""
Unit tests for the create, update and delete record handlers.

Repositories and storage are mocks; the tests check what gets written where.
"""
from unittest.mock import Mock

import pytest

from magazine_backend.application.commands.create_record import CreateRecordCommand, CreateRecordHandler
from magazine_backend.application.commands.delete_record import (
    BatchDeleteRecordsCommand,
    DeleteRecordCommand,
    DeleteRecordHandler,
)
from magazine_backend.application.commands.update_record import UpdateRecordCommand, UpdateRecordHandler
from magazine_backend.domain.entities.edit_entry import EditKind
from magazine_backend.domain.entities.record import MagazineRecord
from magazine_backend.domain.exceptions import DomainValidationError, EntityNotFoundError, ExternalServiceError
from magazine_backend.domain.repositories.blob_storage import StoredBlob


@pytest.fixture
def record_repository():
    repo = Mock()
    repo.add = Mock(side_effect=lambda record: record.with_id(11))
    repo.get = Mock(return_value=None)
    repo.delete = Mock(return_value=True)
    return repo


@pytest.fixture
def storage():
    mock = Mock()
    mock.upload = Mock(side_effect=lambda data, public_id: StoredBlob(public_id=public_id, url=f"https://cdn/{public_id}"))
    return mock


@pytest.fixture
def cache():
    return Mock()


@pytest.fixture
def history_repository():
    return Mock()


@pytest.fixture
def tag_repository():
    return Mock()


@pytest.fixture
def author_repository():
    return Mock()


@pytest.fixture
def existing_record():
    return MagazineRecord(
        id=5,
        name="Jain Digest",
        summary="Old summary",
        conclusion="Old conclusion",
        title_name="Ahimsa",
        pdf_public_id="pdfs/ahimsa-1.pdf",
        pdf_url="https://cdn/pdfs/ahimsa-1.pdf",
        email='["asha@example.com"]',
        creator_name='["Asha"]',
    )


class TestCreateRecord:

    @pytest.fixture
    def handler(self, record_repository, storage, tag_repository, author_repository, cache):
        return CreateRecordHandler(record_repository, storage, tag_repository, author_repository, cache)

    def test_name_is_required(self, handler, record_repository):
        with pytest.raises(DomainValidationError, match="Name is required"):
            handler.handle(CreateRecordCommand(fields={"name": "  "}))
        record_repository.add.assert_not_called()

    def test_creates_record_with_pdf_and_links(self, handler, record_repository, storage, tag_repository, author_repository, cache):
        command = CreateRecordCommand(
            fields={"name": "Jain Digest", "title_name": "Ahimsa Today", "summary": "", "email": "asha@example.com"},
            pdf=b"%PDF",
            filename="scan.pdf",
            tag_ids=[1, 2],
            author_ids=[3],
        )

        record = handler.handle(command)

        assert record.id == 11
        assert record.summary is None
        assert record.email == '["asha@example.com"]'
        public_id = storage.upload.call_args.args[1]
        assert public_id.startswith("pdfs/ahimsa_today-")
        assert public_id.endswith(".pdf")
        assert record.pdf_url == f"https://cdn/{public_id}"
        tag_repository.link.assert_called_once_with(11, [1, 2])
        author_repository.link.assert_called_once_with(11, [3])
        cache.invalidate.assert_called_once()

    def test_without_pdf_skips_upload(self, handler, storage, tag_repository):
        record = handler.handle(CreateRecordCommand(fields={"name": "Jain Digest"}))
        assert record.pdf_url is None
        storage.upload.assert_not_called()
        tag_repository.link.assert_not_called()


class TestUpdateRecord:

    @pytest.fixture
    def handler(self, record_repository, history_repository, storage, cache):
        return UpdateRecordHandler(record_repository, history_repository, storage, cache)

    def test_missing_record(self, handler):
        with pytest.raises(EntityNotFoundError):
            handler.handle(UpdateRecordCommand(record_id=5, fields={"name": "x"}))

    def test_summary_change_writes_history(self, handler, record_repository, history_repository, existing_record, cache):
        record_repository.get.return_value = existing_record

        result = handler.handle(
            UpdateRecordCommand(
                record_id=5,
                fields={"summary": "New summary", "conclusion": "Old conclusion", "volume": ""},
                editor_email="ravi@example.com",
                editor_name="Ravi",
            )
        )

        assert result == {"id": 5, "pdf_url": existing_record.pdf_url, "pdf_public_id": existing_record.pdf_public_id}
        entry = history_repository.add.call_args.args[0]
        assert history_repository.add.call_count == 1
        assert entry.kind is EditKind.SUMMARY
        assert entry.text == "Old summary"
        assert entry.email == "ravi@example.com"
        changes = record_repository.update.call_args.args[1]
        assert changes == {"summary": "New summary", "conclusion": "Old conclusion", "volume": None}
        cache.invalidate.assert_called_once()

    def test_new_pdf_replaces_blob_and_clears_text(self, handler, record_repository, storage, existing_record):
        record_repository.get.return_value = existing_record
        storage.delete.side_effect = ExternalServiceError("Cloudinary", "down")

        result = handler.handle(UpdateRecordCommand(record_id=5, fields={}, pdf=b"%PDF", filename="new.pdf"))

        assert result["pdf_public_id"].startswith("pdfs/ahimsa-")
        changes = record_repository.update.call_args.args[1]
        assert changes["extracted_text"] is None
        storage.delete.assert_called_once_with("pdfs/ahimsa-1.pdf")


class TestDeleteRecord:

    @pytest.fixture
    def handler(self, record_repository, history_repository, tag_repository, author_repository, storage, cache):
        return DeleteRecordHandler(record_repository, history_repository, tag_repository, author_repository, storage, cache)

    def test_deletes_children_then_record(self, handler, record_repository, history_repository, tag_repository, author_repository, storage, existing_record):
        record_repository.get.return_value = existing_record

        result = handler.handle(DeleteRecordCommand(record_id=5))

        assert result["deletedRecordId"] == 5
        history_repository.delete_for_record.assert_any_call(EditKind.CONCLUSION, 5)
        history_repository.delete_for_record.assert_any_call(EditKind.SUMMARY, 5)
        author_repository.delete_links_for_record.assert_called_once_with(5)
        tag_repository.delete_links_for_record.assert_called_once_with(5)
        record_repository.delete.assert_called_once_with(5)
        storage.delete.assert_called_once_with("pdfs/ahimsa-1.pdf")

    def test_missing_record(self, handler, cache):
        with pytest.raises(EntityNotFoundError):
            handler.handle(DeleteRecordCommand(record_id=5))
        cache.invalidate.assert_not_called()

    def test_batch_reports_failures(self, handler, record_repository, existing_record, cache):
        record_repository.get.side_effect = lambda record_id: existing_record if record_id == 5 else None

        result = handler.handle_batch(BatchDeleteRecordsCommand(record_ids=[5, 6]))

        assert result["success"] == [5]
        assert result["failed"] == [{"id": 6, "error": "Record not found: 6"}]
        cache.invalidate.assert_called_once()
