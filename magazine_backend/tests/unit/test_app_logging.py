"""
Unit tests for the JSON log formatter and logging setup
"""
import json
import logging

from magazine_backend.app_logging import JsonFormatter, configure_logging


def _record(**extra):
    record = logging.makeLogRecord({"name": "magazine_backend.ocr", "levelname": "INFO", "levelno": logging.INFO,
                                    "msg": "Uploaded %s", "args": ("pdfs/a.pdf",)})
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_scalar_extras():
    payload = json.loads(JsonFormatter().format(_record(record_id=7, stage="upload", blob=object())))

    assert payload["message"] == "Uploaded pdfs/a.pdf"
    assert payload["logger"] == "magazine_backend.ocr"
    assert payload["record_id"] == 7
    assert payload["stage"] == "upload"
    assert "blob" not in payload
    assert "levelno" not in payload
    assert payload["ts"].endswith("Z")


def test_configure_logging_plain_format(monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "plain")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    root = logging.getLogger()
    previous = (list(root.handlers), root.level)
    try:
        configure_logging()

        assert len(root.handlers) == 1
        assert not isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.DEBUG
        assert logging.getLogger("postgrest").level == logging.WARNING
    finally:
        root.handlers[:] = previous[0]
        root.setLevel(previous[1])
