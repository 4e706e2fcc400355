"""
Unit tests for edit history summaries and dashboard aggregations
"""
from datetime import datetime, timedelta, timezone

from magazine_backend.domain.entities.edit_entry import EditEntry, EditKind
from magazine_backend.domain.entities.record import MagazineRecord
from magazine_backend.domain.services.activity_aggregator import (
    build_insights,
    build_user_activity,
    split_author_line,
)
from magazine_backend.domain.services.edit_history_builder import build_edit_history

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _entry(record_id, name, email, minutes_ago, kind=EditKind.SUMMARY):
    return EditEntry(
        id=None,
        record_id=record_id,
        kind=kind,
        text="old text",
        email=email,
        name=name,
        created_at=NOW - timedelta(minutes=minutes_ago),
    )


class TestBuildEditHistory:

    def test_counts_editors_and_latest(self):
        entries = [
            _entry(1, '["Asha"]', '["asha@example.com"]', 90),
            _entry(1, "Ravi", "ravi@example.com", 5),
            _entry(1, "Asha", "asha@example.com", 30),
            _entry(2, "Ravi", None, 200),
        ]

        summaries = build_edit_history(entries, now=NOW)

        first = summaries[1]
        assert first.count == 3
        assert first.editors == ["Asha", "Ravi"]
        assert first.editor_counts == {"Asha": 2, "Ravi": 1}
        assert first.latest_editor.name == "Ravi"
        assert first.latest_editor.time_from_now == "5m ago"

        second = summaries[2]
        assert second.count == 1
        # Editors without an email are counted but not listed.
        assert second.editors == []
        assert second.editor_counts == {"Ravi": 1}
        assert second.to_dict()["latestEditor"]["timeFromNow"] == "3h ago"

    def test_no_entries(self):
        assert build_edit_history([], now=NOW) == {}


class TestInsights:

    def test_top_counts(self):
        records = [
            MagazineRecord(id=1, name="Jain Digest", authors="A. Shah, B. Mehta", title_name="Ahimsa", creator_name="Asha"),
            MagazineRecord(id=2, name="Jain Digest", authors="A. Shah", title_name="Ahimsa", creator_name="Ravi"),
            MagazineRecord(id=3, name="Tirth", authors=None, title_name="Karma", creator_name="Asha"),
        ]

        insights = build_insights(records, n=2)

        assert insights["topAuthors"] == [{"name": "A. Shah", "count": 2}, {"name": "B. Mehta", "count": 1}]
        assert insights["topTitles"][0] == {"name": "Ahimsa", "count": 2}
        assert insights["topCreators"] == [{"name": "Asha", "count": 2}, {"name": "Ravi", "count": 1}]

    def test_split_author_line(self):
        assert split_author_line(" A , ,B ") == ["A", "B"]
        assert split_author_line(None) == []


class TestUserActivity:

    def test_groups_by_user_and_magazine(self):
        records = [
            MagazineRecord(id=1, name="Jain Digest", volume="1", email="asha@example.com", creator_name="Asha"),
            MagazineRecord(id=2, name="Jain Digest", volume="2", email="asha@example.com", creator_name="Asha"),
            MagazineRecord(id=3, name="Tirth", email=None, creator_name="Ghost"),
        ]
        summaries = [_entry(3, "Ravi", "ravi@example.com", 1), _entry(99, "Ravi", "ravi@example.com", 1)]
        conclusions = [_entry(1, "Asha", "asha@example.com", 1, kind=EditKind.CONCLUSION)]

        activity = build_user_activity(records, summaries, conclusions)

        assert [user["userName"] for user in activity] == ["Asha", "Ravi"]
        asha = activity[0]
        assert asha["totalActivity"] == 3
        created = asha["recordsCreated"][0]
        assert created["magazineName"] == "Jain Digest"
        assert created["count"] == 2
        assert created["volumes"] == ["1", "2"]
        assert asha["conclusionsEdited"][0]["recordIds"] == [1]

        ravi = activity[1]
        assert ravi["totalActivity"] == 1
        assert ravi["summariesEdited"][0]["magazineName"] == "Tirth"
