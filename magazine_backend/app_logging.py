from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Optional

# Attributes every LogRecord carries; anything else was passed via ``extra``.
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}

# Client libraries that log every request at INFO.
_QUIET_LOGGERS = {
  "uvicorn.access": logging.WARNING,
  "httpx": logging.WARNING,
  "httpcore": logging.WARNING,
  "hpack": logging.WARNING,
  "urllib3": logging.WARNING,
  "postgrest": logging.WARNING,
  "supabase": logging.WARNING,
  "PIL": logging.WARNING,
  "openai": logging.INFO,
}

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
  """One JSON object per line; scalar ``extra`` values (record_id, stage, ...) become keys."""

  def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
    payload: dict[str, Any] = {
      "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
      "level": record.levelname,
      "logger": record.name,
      "message": record.getMessage(),
    }
    if record.exc_info:
      payload["exc_info"] = self.formatException(record.exc_info)
    for key, value in record.__dict__.items():
      if key.startswith("_") or key in _RESERVED_ATTRS or key in payload:
        continue
      if isinstance(value, (str, int, float, bool)) or value is None:
        payload[key] = value
    return json.dumps(payload, ensure_ascii=False)


def _log_level() -> str:
  return os.getenv("LOG_LEVEL", "INFO").upper()


def _structured_default() -> bool:
  return os.getenv("LOG_FORMAT", "json").strip().lower() != "plain"


def configure_logging(structured: Optional[bool] = None) -> None:
  """Install a single stdout handler on the root logger.

  ``structured`` defaults to ``LOG_FORMAT`` (``json`` unless set to ``plain``).
  """
  if structured is None:
    structured = _structured_default()

  root = logging.getLogger()
  for handler in list(root.handlers):
    root.removeHandler(handler)

  root.setLevel(_log_level())
  stream_handler = logging.StreamHandler(sys.stdout)
  stream_handler.setFormatter(JsonFormatter() if structured else logging.Formatter(PLAIN_FORMAT))
  root.addHandler(stream_handler)

  for name, level in _QUIET_LOGGERS.items():
    logging.getLogger(name).setLevel(level)
