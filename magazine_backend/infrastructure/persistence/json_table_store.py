"""
JSON table store used by the file-based repositories.

Each table is one JSON document ``<base_dir>/<table>.json`` holding
``{"version", "next_id", "rows"}``. Writes go to a temporary file that then
replaces the table so a crash never leaves a half-written table behind.
"""

from __future__ import annotations

import json
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List

from magazine_backend.constants import STORE_VERSION
from magazine_backend.domain.entities.timestamps import format_timestamp, utc_now
from magazine_backend.domain.exceptions import RepositoryError

logger = logging.getLogger(__name__)


@dataclass
class TableState:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    next_id: int = 1

    def insert(self, row: Dict[str, Any]) -> Dict[str, Any]:
        stored = dict(row)
        if stored.get("id") is None:
            stored["id"] = self.next_id
        self.next_id = max(self.next_id, int(stored["id"]) + 1)
        if "created_at" in stored and stored["created_at"] is None:
            stored["created_at"] = format_timestamp(utc_now())
        self.rows.append(stored)
        return dict(stored)


class JsonTableStore:
    """Thread-safe access to JSON tables on disk."""

    def __init__(self, base_dir: str = "backend_data") -> None:
        self.base_dir = Path(base_dir)
        self._lock = threading.RLock()
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:  # pragma: no cover - disk failure
            raise RepositoryError(f"Failed to create base directory {self.base_dir}", exc)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def rows(self, table: str) -> List[Dict[str, Any]]:
        """Return a copy of every row in the table."""
        with self._lock:
            return [dict(row) for row in self._load(table).rows]

    @contextmanager
    def transaction(self, table: str) -> Iterator[TableState]:
        """Load the table, let the caller mutate it, then save it atomically."""
        with self._lock:
            state = self._load(table)
            yield state
            self._save(table, state)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _path(self, table: str) -> Path:
        return self.base_dir / f"{table}.json"

    def _load(self, table: str) -> TableState:
        path = self._path(table)
        if not path.exists():
            return TableState()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise RepositoryError(f"Corrupted table {table}", exc)
        except OSError as exc:  # pragma: no cover - disk failure
            raise RepositoryError(f"Failed to read table {table}", exc)
        rows = data.get("rows") if isinstance(data, dict) else None
        if not isinstance(rows, list):
            raise RepositoryError(f"Table {table} has no rows list")
        next_id = data.get("next_id") or (max((int(row.get("id") or 0) for row in rows), default=0) + 1)
        return TableState(rows=rows, next_id=int(next_id))

    def _save(self, table: str, state: TableState) -> None:
        path = self._path(table)
        tmp_path = path.with_suffix(".tmp")
        payload = {"version": STORE_VERSION, "next_id": state.next_id, "rows": state.rows}
        try:
            tmp_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
            tmp_path.replace(path)
            logger.debug("Saved table %s (%d rows)", table, len(state.rows))
        except (OSError, TypeError, ValueError) as exc:
            raise RepositoryError(f"Failed to save table {table}", exc)
        finally:
            if tmp_path.exists():
                tmp_path.unlink(missing_ok=True)
