import io

from openpyxl import load_workbook

from magazine_backend.infrastructure.cache.records_cache import RecordsCache
from magazine_backend.infrastructure.export.tabular_writer import read_csv_rows, write_csv, write_xlsx


class FakeClock:

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestRecordsCache:

    def test_entries_expire(self):
        clock = FakeClock()
        cache = RecordsCache(ttl_seconds=10, clock=clock)
        key = cache.key_for({"page": 0})
        cache.set(key, {"data": []})

        clock.now = 9.9
        assert cache.get(key) == {"data": []}
        clock.now = 10.0
        assert cache.get(key) is None

    def test_writes_sweep_expired_entries(self):
        clock = FakeClock()
        cache = RecordsCache(ttl_seconds=10, clock=clock)
        for page in range(1000):
            cache.set(cache.key_for({"page": page}), {"data": [page]})
        assert len(cache) == 1000

        clock.now = 100.0
        fresh = cache.key_for({"page": 0, "search": "ahimsa"})
        cache.set(fresh, {"data": []})

        assert len(cache) == 1
        assert cache.get(fresh) == {"data": []}

    def test_invalidate_changes_keys(self):
        cache = RecordsCache()
        key = cache.key_for({"page": 0, "sortBy": "id"})
        cache.set(key, "cached")

        cache.invalidate()

        assert cache.get(key) is None
        assert cache.key_for({"sortBy": "id", "page": 0}) != key
        assert cache.version == 1


class TestTabularWriter:

    def test_csv_quotes_and_blanks(self):
        text = write_csv(["id", "name"], [[1, 'Jain, "Digest"'], [2, None]])
        assert text == 'id,name\n1,"Jain, ""Digest"""\n2,\n'

    def test_read_csv_rows_skips_blank_lines(self):
        rows = read_csv_rows("\ufeffname,important\nAhimsa,true\n,\n\nKarma,\n")
        assert rows == [["name", "important"], ["Ahimsa", "true"], ["Karma", ""]]

    def test_xlsx(self):
        data = write_xlsx(["id", "summary"], [[1, "x" * 40000]], sheet_title="Records")
        sheet = load_workbook(io.BytesIO(data)).active
        assert sheet.title == "Records"
        assert sheet["A1"].value == "id"
        assert len(sheet["B2"].value) == 32767
