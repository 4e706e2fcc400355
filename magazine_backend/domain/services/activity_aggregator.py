"""
Dashboard aggregations over records and edit history.

Both functions work on plain entities so they can run against any repository
implementation.
"""
from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from magazine_backend.domain.entities.edit_entry import EditEntry
from magazine_backend.domain.entities.record import MagazineRecord


def split_author_line(authors: Optional[str]) -> List[str]:
    if not authors:
        return []
    return [name.strip() for name in authors.split(",") if name.strip()]


def top_counts(counter: Mapping[str, int], n: int = 5) -> List[Dict[str, Any]]:
    # Stable sort keeps first-seen order among ties.
    ranked = sorted(counter.items(), key=lambda item: item[1], reverse=True)
    return [{"name": name, "count": count} for name, count in ranked[:n]]


def build_insights(records: Iterable[MagazineRecord], n: int = 5) -> Dict[str, List[Dict[str, Any]]]:
    authors: Counter = Counter()
    titles: Counter = Counter()
    creators: Counter = Counter()
    for record in records:
        for author in split_author_line(record.authors):
            authors[author] += 1
        if record.title_name:
            titles[record.title_name] += 1
        if record.creator_name:
            creators[record.creator_name] += 1
    return {
        "topAuthors": top_counts(authors, n),
        "topTitles": top_counts(titles, n),
        "topCreators": top_counts(creators, n),
    }


def _add_unique(values: List[str], value: Optional[str]) -> None:
    cleaned = (value or "").strip()
    if cleaned and cleaned not in values:
        values.append(cleaned)


def _new_user(name: str, email: str) -> Dict[str, Any]:
    return {
        "userName": name,
        "userEmail": email,
        "recordsCreated": [],
        "summariesEdited": [],
        "conclusionsEdited": [],
        "totalActivity": 0,
    }


def _bucket(buckets: List[Dict[str, Any]], magazine: str, extra_keys: Tuple[str, ...]) -> Dict[str, Any]:
    for bucket in buckets:
        if bucket["magazineName"] == magazine:
            return bucket
    bucket: Dict[str, Any] = {"magazineName": magazine, "count": 0, "volumes": [], "titles": [], "pageNumbers": []}
    for key in extra_keys:
        bucket[key] = []
    buckets.append(bucket)
    return bucket


def build_user_activity(
    records: Iterable[MagazineRecord],
    summaries: Iterable[EditEntry],
    conclusions: Iterable[EditEntry],
) -> List[Dict[str, Any]]:
    by_user: Dict[Tuple[str, str], Dict[str, Any]] = {}
    records_by_id: Dict[int, MagazineRecord] = {}

    for record in records:
        if record.id is not None:
            records_by_id[record.id] = record
        if not record.creator_name or not record.email:
            continue
        user = by_user.setdefault((record.creator_name, record.email), _new_user(record.creator_name, record.email))
        bucket = _bucket(user["recordsCreated"], record.name, ("authors", "languages"))
        bucket["count"] += 1
        _add_unique(bucket["volumes"], record.volume)
        _add_unique(bucket["titles"], record.title_name)
        _add_unique(bucket["pageNumbers"], record.page_numbers)
        _add_unique(bucket["languages"], record.language)
        for author in split_author_line(record.authors):
            _add_unique(bucket["authors"], author)
        user["totalActivity"] += 1

    for key, entries in (("summariesEdited", summaries), ("conclusionsEdited", conclusions)):
        for entry in entries:
            if not entry.name or not entry.email or not entry.record_id:
                continue
            record = records_by_id.get(entry.record_id)
            if record is None:
                continue
            user = by_user.setdefault((entry.name, entry.email), _new_user(entry.name, entry.email))
            bucket = _bucket(user[key], record.name, ("recordIds",))
            bucket["count"] += 1
            _add_unique(bucket["volumes"], record.volume)
            _add_unique(bucket["titles"], record.title_name)
            _add_unique(bucket["pageNumbers"], record.page_numbers)
            if record.id not in bucket["recordIds"]:
                bucket["recordIds"].append(record.id)
            user["totalActivity"] += 1

    return sorted(by_user.values(), key=lambda user: user["totalActivity"], reverse=True)
