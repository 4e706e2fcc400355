"""Unit tests for the JSON-file repositories."""

import json
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from magazine_backend.domain.entities.author import Author
from magazine_backend.domain.entities.edit_entry import EditEntry, EditKind
from magazine_backend.domain.entities.record import MagazineRecord
from magazine_backend.domain.entities.tag import Tag
from magazine_backend.domain.entities.user import User
from magazine_backend.domain.exceptions import DuplicateEntityError, EntityNotFoundError, RepositoryError
from magazine_backend.domain.value_objects.catalog_query import CatalogListCriteria
from magazine_backend.domain.value_objects.record_query import (
    ColumnFilter,
    RecordSearchCriteria,
    RecordSort,
)
from magazine_backend.infrastructure.persistence.file_catalog_repository import (
    FileAuthorRepository,
    FileTagRepository,
)
from magazine_backend.infrastructure.persistence.file_edit_history_repository import FileEditHistoryRepository
from magazine_backend.infrastructure.persistence.file_record_repository import FileRecordRepository
from magazine_backend.infrastructure.persistence.file_user_repository import FileUserRepository
from magazine_backend.infrastructure.persistence.json_table_store import JsonTableStore


@pytest.fixture
def temp_dir():
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    if temp_path.exists():
        shutil.rmtree(temp_path)


@pytest.fixture
def store(temp_dir):
    return JsonTableStore(str(temp_dir))


class TestJsonTableStore:

    def test_transaction_persists_and_assigns_ids(self, store, temp_dir):
        with store.transaction("tags") as table:
            first = table.insert({"name": "a"})
            second = table.insert({"id": 10, "name": "b"})
            third = table.insert({"name": "c"})

        assert (first["id"], second["id"], third["id"]) == (1, 10, 11)
        payload = json.loads((temp_dir / "tags.json").read_text(encoding="utf-8"))
        assert payload["next_id"] == 12
        assert [row["name"] for row in payload["rows"]] == ["a", "b", "c"]
        assert not (temp_dir / "tags.tmp").exists()

    def test_failed_transaction_is_not_saved(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction("tags") as table:
                table.insert({"name": "a"})
                raise RuntimeError("boom")
        assert store.rows("tags") == []

    def test_corrupted_table(self, store, temp_dir):
        (temp_dir / "tags.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(RepositoryError):
            store.rows("tags")


class TestFileRecordRepository:

    @pytest.fixture
    def repository(self, store):
        repo = FileRecordRepository(store)
        repo.add(MagazineRecord(id=None, name="Jain Digest", volume="1", summary="About ahimsa", email="a@x.com"))
        repo.add(MagazineRecord(id=None, name="Tirth Darshan", volume="2", summary=None, email="b@x.com"))
        repo.add(MagazineRecord(id=None, name="Jain Digest", volume=None, title_name="Karma"))
        return repo

    def test_add_and_get(self, repository):
        record = repository.get(2)
        assert record.name == "Tirth Darshan"
        assert repository.get(99) is None
        assert repository.count() == 3

    def test_search_filters_sorts_and_pages(self, repository):
        criteria = RecordSearchCriteria(
            filters=(ColumnFilter("name", "jain"),),
            sort=RecordSort(column="volume", descending=True),
            offset=0,
            limit=1,
        )
        records, total = repository.search(criteria)
        assert total == 2
        # Nulls sort last even when descending.
        assert [record.id for record in records] == [1]

    def test_search_sentinel_and_ids(self, repository):
        empty_summary = RecordSearchCriteria(filters=(ColumnFilter("summary", "__EMPTY__"),))
        records, _ = repository.search(empty_summary)
        assert sorted(record.id for record in records) == [2, 3]

        restricted = RecordSearchCriteria(include_ids=frozenset({1, 2}), exclude_ids=frozenset({2}))
        records, total = repository.search(restricted)
        assert total == 1 and records[0].id == 1

    def test_global_filter(self, repository):
        records, _ = repository.search(RecordSearchCriteria(global_filter="karma"))
        assert [record.id for record in records] == [3]

    def test_update_and_delete(self, repository):
        updated = repository.update(1, {"summary": "New"})
        assert updated.summary == "New"
        with pytest.raises(RepositoryError):
            repository.update(1, {"colour": "red"})
        with pytest.raises(EntityNotFoundError):
            repository.update(42, {"summary": "x"})
        assert repository.delete(1) is True
        assert repository.delete(1) is False

    def test_magazine_names_and_email(self, repository):
        assert repository.magazine_names("jain", 10) == ["Jain Digest"]
        assert repository.magazine_names(None, 1) == ["Jain Digest"]
        assert repository.ids_matching_email("b@x.com") == [2]
        assert [record.id for record in repository.list_by_ids([1, 3])] == [3, 1]


class TestFileCatalogRepositories:

    def test_tag_crud_and_duplicates(self, store):
        repo = FileTagRepository(store)
        tag = repo.add(Tag(id=None, name="Ahimsa", important=True))
        assert tag.id == 1
        assert tag.created_at is not None
        with pytest.raises(DuplicateEntityError):
            repo.add(Tag(id=None, name="Ahimsa"))

        other = repo.add(Tag(id=None, name="Karma"))
        with pytest.raises(DuplicateEntityError):
            repo.update(other.renamed("Ahimsa", None))
        renamed = repo.update(other.renamed("Karma Yoga", False))
        assert renamed.name == "Karma Yoga"
        assert renamed.created_at == other.created_at

        assert [t.name for t in repo.search("ka", 5)] == ["Karma Yoga"]
        assert repo.delete([1, 2, 3]) == 2

    def test_list_filters_important(self, store):
        repo = FileTagRepository(store)
        repo.add(Tag(id=None, name="Ahimsa", important=True))
        repo.add(Tag(id=None, name="Karma", important=None))

        criteria = CatalogListCriteria.from_params(important="null", sort_by="name", sort_order="asc")
        assert [t.name for t in repo.list(criteria)] == ["Karma"]

    def test_links(self, store):
        repo = FileTagRepository(store)
        repo.add(Tag(id=None, name="Ahimsa"))
        repo.add(Tag(id=None, name="Karma"))

        assert repo.link(7, [1, 2, 1]) == 2
        assert repo.link(7, [1]) == 0
        assert repo.link(8, [2]) == 1
        linked = repo.for_records([7, 9])
        assert [t.name for t in linked[7]] == ["Ahimsa", "Karma"]
        assert linked[9] == []
        assert repo.record_ids_for([2]) == [7, 8]
        assert repo.unlink(7, [2]) == 1
        assert repo.delete_links_for([2]) == 1
        assert repo.linked_record_ids() == {7}
        assert repo.delete_links_for_record(7) == 1

    def test_author_fuzzy_search_and_upsert(self, store):
        repo = FileAuthorRepository(store)
        repo.add(Author(id=None, name="John Smith", short_name="J. Smith"))
        repo.add(Author(id=None, name="Mary Jones"))

        assert [a.name for a in repo.search("jsmth", 10)] == ["John Smith"]
        assert len(repo.search("", 10)) == 2

        written = repo.upsert_by_name([
            Author(id=None, name="Mary Jones", description="Writer"),
            Author(id=None, name="New Author", national="national"),
        ])
        assert written == 2
        assert repo.get_by_name("Mary Jones").description == "Writer"
        assert repo.get_by_name("New Author").national == "national"


class TestFileUserAndHistoryRepositories:

    def test_users(self, store):
        repo = FileUserRepository(store)
        user = repo.add(User.register("Asha", "asha@example.com"))
        assert user.id == 1
        assert repo.find('["Asha"]', '["asha@example.com"]') is not None
        confirmed = repo.set_confirmed('["Asha"]', '["asha@example.com"]')
        assert confirmed.confirmed is True
        assert repo.set_confirmed("nobody", "none") is None

    def test_history(self, store):
        repo = FileEditHistoryRepository(store)
        older = datetime(2024, 1, 1, tzinfo=timezone.utc)
        newer = datetime(2024, 2, 1, tzinfo=timezone.utc)
        repo.add(EditEntry(id=None, record_id=1, kind=EditKind.SUMMARY, text="v2", email="b@x.com", created_at=newer))
        repo.add(EditEntry(id=None, record_id=1, kind=EditKind.SUMMARY, text="v1", email="a@x.com", created_at=older))
        repo.add(EditEntry(id=None, record_id=2, kind=EditKind.CONCLUSION, text="c", email="a@x.com"))

        entries = repo.list_for_record(EditKind.SUMMARY, 1)
        assert [entry.text for entry in entries] == ["v1", "v2"]
        assert repo.record_ids_for_email("a@x.com") == {1, 2}
        assert repo.delete_for_record(EditKind.SUMMARY, 1) == 2
        assert repo.list_all(EditKind.SUMMARY) == []
