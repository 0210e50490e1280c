import json
import logging
import sys

from campusvault.core.logger import JSONFormatter


class CollectingHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def test_json_formatter_keeps_extra_fields():
    record = logging.makeLogRecord({
        "name": "campusvault.main",
        "levelname": "INFO",
        "levelno": logging.INFO,
        "msg": "GET %s 200",
        "args": ("/api/healthcheck",),
        "method": "GET",
        "status": 200,
    })
    entry = json.loads(JSONFormatter().format(record))

    assert entry["message"] == "GET /api/healthcheck 200"
    assert entry["logger"] == "campusvault.main"
    assert entry["method"] == "GET"
    assert entry["status"] == 200
    assert "args" not in entry
    assert "pathname" not in entry


def test_json_formatter_includes_exception():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.getLogger("campusvault.test").makeRecord(
            "campusvault.test", logging.ERROR, __file__, 1, "failed", (), exc_info=sys.exc_info()
        )
    entry = json.loads(JSONFormatter().format(record))
    assert entry["level"] == "ERROR"
    assert "RuntimeError: boom" in entry["exception"]


def test_request_log_carries_request_fields(client):
    handler = CollectingHandler()
    logger = logging.getLogger("campusvault.main")
    logger.addHandler(handler)
    try:
        client.get("/api/healthcheck")
    finally:
        logger.removeHandler(handler)

    records = [r for r in handler.records if getattr(r, "path", None) == "/api/healthcheck"]
    assert len(records) == 1
    assert records[0].method == "GET"
    assert records[0].status == 200
    assert records[0].duration_ms >= 0
