"""
Unit tests for tag and author commands.

These run against the JSON-file repositories in a temporary directory so
duplicate checks and imports exercise real lookups.
"""
from unittest.mock import Mock

import pytest

from magazine_backend.application.commands.author_commands import (
    CreateAuthorHandler,
    ImportAuthorsCommand,
    ImportAuthorsHandler,
    SaveAuthorCommand,
    UpdateAuthorHandler,
)
from magazine_backend.application.commands.catalog_commands import (
    BulkDeleteCatalogEntriesCommand,
    ChangeRecordLinksCommand,
    DeleteCatalogEntryCommand,
    DeleteCatalogEntryHandler,
    RecordLinksHandler,
)
from magazine_backend.application.commands.tag_commands import (
    CreateTagCommand,
    CreateTagHandler,
    ImportTagsCommand,
    ImportTagsHandler,
    UpdateTagCommand,
    UpdateTagHandler,
)
from magazine_backend.domain.entities.record import MagazineRecord
from magazine_backend.domain.exceptions import DomainValidationError, DuplicateEntityError, EntityNotFoundError
from magazine_backend.infrastructure.persistence.file_catalog_repository import (
    FileAuthorRepository,
    FileTagRepository,
)
from magazine_backend.infrastructure.persistence.json_table_store import JsonTableStore


@pytest.fixture
def store(tmp_path):
    return JsonTableStore(str(tmp_path))


@pytest.fixture
def tags(store):
    return FileTagRepository(store)


@pytest.fixture
def authors(store):
    return FileAuthorRepository(store)


@pytest.fixture
def cache():
    return Mock()


class TestTagCommands:

    def test_create_and_duplicate(self, tags, cache):
        handler = CreateTagHandler(tags, cache)
        tag = handler.handle(CreateTagCommand(name=" Ahimsa ", important="true"))
        assert tag.name == "Ahimsa"
        assert tag.important is True
        with pytest.raises(DuplicateEntityError, match="Tag name already exists"):
            handler.handle(CreateTagCommand(name="Ahimsa"))
        cache.invalidate.assert_called_once()

    def test_update_uses_strict_names(self, tags, cache):
        created = CreateTagHandler(tags, cache).handle(CreateTagCommand(name="Ahimsa"))
        CreateTagHandler(tags, cache).handle(CreateTagCommand(name="Karma"))
        handler = UpdateTagHandler(tags, cache)

        with pytest.raises(DomainValidationError):
            handler.handle(UpdateTagCommand(tag_id=created.id, name="Ahimsa & Karma"))
        with pytest.raises(DuplicateEntityError):
            handler.handle(UpdateTagCommand(tag_id=created.id, name="Karma"))
        with pytest.raises(EntityNotFoundError, match="Tag not found"):
            handler.handle(UpdateTagCommand(tag_id=99, name="Other"))

        updated = handler.handle(UpdateTagCommand(tag_id=created.id, name="Non-violence", important="0"))
        assert updated.name == "Non-violence"
        assert updated.important is False

    def test_import_inserts_and_updates(self, tags, cache):
        CreateTagHandler(tags, cache).handle(CreateTagCommand(name="Ahimsa"))
        content = b"id,name,important,created_at\n,Karma,true,\n1,Ahimsa Renamed,,\n"

        result = ImportTagsHandler(tags, cache).handle(ImportTagsCommand(filename="tags.CSV", content=content))

        assert result["inserted"] == 1
        assert result["updated"] == 1
        assert result["message"] == "Import completed: 1 created, 1 updated"
        assert tags.get(1).name == "Ahimsa Renamed"
        assert tags.get_by_name("Karma").important is True

    def test_import_reports_line_errors(self, tags, cache):
        content = b"id,name,important\nabc,Karma,\n,Bad!Name,\n,Fine,maybe\n"

        with pytest.raises(DomainValidationError) as excinfo:
            ImportTagsHandler(tags, cache).handle(ImportTagsCommand(filename="tags.csv", content=content))

        assert excinfo.value.details[0] == "Line 2: ID must be a number or empty for new tags"
        assert excinfo.value.details[1].startswith("Line 3: Tag name can only contain")
        assert excinfo.value.details[2].startswith("Line 4: Important field")

    def test_import_rejects_duplicate_new_names(self, tags, cache):
        content = b",Karma,\n,Karma,\n"
        with pytest.raises(DomainValidationError, match="Duplicate tag names found"):
            ImportTagsHandler(tags, cache).handle(ImportTagsCommand(filename="tags.csv", content=content))
        assert tags.list_all() == []

    @pytest.mark.parametrize(
        "filename,content,message",
        [
            ("tags.csv", None, "No file uploaded"),
            ("tags.txt", b"x", "Only CSV files are allowed"),
            ("tags.csv", b"name\n", "No valid tag data found in CSV"),
        ],
    )
    def test_import_rejects_bad_files(self, tags, cache, filename, content, message):
        with pytest.raises(DomainValidationError, match=message):
            ImportTagsHandler(tags, cache).handle(ImportTagsCommand(filename=filename, content=content))


class TestAuthorCommands:

    def test_create_normalizes_values(self, authors, cache):
        author = CreateAuthorHandler(authors, cache).handle(
            SaveAuthorCommand(values={"name": "Muni Shri", "national": "jainmonk", "description": " ", "short_name": "M. S."})
        )
        assert author.national == "jainmonk"
        assert author.description is None
        assert author.short_name == "M. S."

    def test_create_requires_name(self, authors, cache):
        with pytest.raises(DomainValidationError, match="Name is required"):
            CreateAuthorHandler(authors, cache).handle(SaveAuthorCommand(values={"name": ""}))

    def test_update_keeps_unsent_fields(self, authors, cache):
        created = CreateAuthorHandler(authors, cache).handle(
            SaveAuthorCommand(values={"name": "Muni Shri", "designation": "Acharya", "national": "jainmonk"})
        )

        updated = UpdateAuthorHandler(authors, cache).handle(
            SaveAuthorCommand(values={"name": "Muni Shri Ji", "national": "jainmonk"}, author_id=created.id)
        )

        assert updated.name == "Muni Shri Ji"
        assert updated.designation == "Acharya"
        # Monastic values are only accepted at creation.
        assert updated.national is None

    def test_import_upserts_by_name(self, authors, cache):
        CreateAuthorHandler(authors, cache).handle(SaveAuthorCommand(values={"name": "A. Shah"}))
        content = b"description,name,national\nWriter,A. Shah,national\n,B. Mehta,\n"

        result = ImportAuthorsHandler(authors, cache).handle(ImportAuthorsCommand(filename="a.csv", content=content))

        assert result["imported"] == 2
        assert authors.get_by_name("A. Shah").description == "Writer"
        assert authors.get_by_name("B. Mehta") is not None

    def test_import_reports_missing_names(self, authors, cache):
        content = b"name,description\n,nameless\nOk,\n"
        with pytest.raises(DomainValidationError) as excinfo:
            ImportAuthorsHandler(authors, cache).handle(ImportAuthorsCommand(filename="a.csv", content=content))
        assert excinfo.value.details == ["Rows with missing name field: 1"]


class TestCatalogCommands:

    def test_delete_removes_links_first(self, tags, cache):
        tag = CreateTagHandler(tags, cache).handle(CreateTagCommand(name="Ahimsa"))
        tags.link(3, [tag.id])
        handler = DeleteCatalogEntryHandler(tags, cache, entity_type="Tag")

        assert handler.handle(DeleteCatalogEntryCommand(entry_id=tag.id)) == {"message": "Tag deleted successfully"}
        assert tags.linked_entry_ids() == set()
        with pytest.raises(EntityNotFoundError, match="Tag not found"):
            handler.handle(DeleteCatalogEntryCommand(entry_id=tag.id))

    def test_bulk_delete(self, authors, cache):
        first = CreateAuthorHandler(authors, cache).handle(SaveAuthorCommand(values={"name": "A"}))
        second = CreateAuthorHandler(authors, cache).handle(SaveAuthorCommand(values={"name": "B"}))
        authors.link(1, [first.id, second.id])
        handler = DeleteCatalogEntryHandler(authors, cache, entity_type="Author")

        result = handler.handle_bulk(BulkDeleteCatalogEntriesCommand(ids=[first.id, second.id]))

        assert result["deletedAuthors"] == 2
        assert result["deletedRecords"] == 2
        with pytest.raises(DomainValidationError):
            handler.handle_bulk(BulkDeleteCatalogEntriesCommand(ids=[]))

    def test_record_links(self, tags, cache):
        records = Mock()
        records.get = Mock(side_effect=lambda record_id: MagazineRecord(id=record_id, name="x") if record_id == 1 else None)
        tag = CreateTagHandler(tags, cache).handle(CreateTagCommand(name="Ahimsa"))
        handler = RecordLinksHandler(tags, records, cache, entity_label="tags")

        assert handler.link(ChangeRecordLinksCommand(record_id=1, entry_ids=[tag.id]))["linked"] == 1
        assert [t.name for t in handler.list_for(1)] == ["Ahimsa"]
        with pytest.raises(EntityNotFoundError):
            handler.link(ChangeRecordLinksCommand(record_id=2, entry_ids=[tag.id]))
        with pytest.raises(DomainValidationError, match="Record ID and tag IDs array are required"):
            handler.unlink(ChangeRecordLinksCommand(record_id=1, entry_ids="1"))
        assert handler.unlink(ChangeRecordLinksCommand(record_id="1", entry_ids=[str(tag.id)]))["removed"] == 1
