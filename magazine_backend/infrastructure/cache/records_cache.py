"""
In-process TTL cache for paginated records responses.

Entries are keyed by the current version plus the request parameters, so
``invalidate()`` bumps the version and drops every stored page. Expired
entries are dropped when read and swept on every write, so keys that are
never requested again do not accumulate.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class RecordsCache:

    def __init__(self, ttl_seconds: float = 300.0, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._version = 0
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    @property
    def version(self) -> int:
        return self._version

    def key_for(self, params: Dict[str, Any]) -> str:
        return f"v{self._version}:" + json.dumps(params, sort_keys=True, default=str)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            now = self._clock()
            expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
            for k in expired:
                del self._entries[k]
            self._entries[key] = (now + self.ttl_seconds, value)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def invalidate(self) -> None:
        with self._lock:
            self._version += 1
            self._entries.clear()
        logger.debug("Records cache invalidated (version %d)", self._version)
