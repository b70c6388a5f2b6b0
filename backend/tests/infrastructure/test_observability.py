"""Structured logging — JSON formatter fields, handler setup and access log."""

import json
import logging

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from userdesk.infrastructure.observability import (
    JSONFormatter, log_requests, setup_logging,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "userdesk.test", logging.INFO, __file__, 1, "hello %s", ("world",), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_base_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "userdesk.test"
    assert payload["message"] == "hello world"
    assert "timestamp" in payload


def test_json_formatter_surfaces_known_extras_only():
    payload = json.loads(JSONFormatter().format(
        _record(status_code=201, path="/api/users", unrelated="x"),
    ))
    assert payload["status_code"] == 201
    assert payload["path"] == "/api/users"
    assert "unrelated" not in payload


def test_setup_logging_replaces_handlers():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging("DEBUG", "json")
        setup_logging("WARNING", "text")
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)


def _access_logged_app() -> FastAPI:
    app = FastAPI()
    app.middleware("http")(log_requests)

    @app.get("/ok")
    async def ok():
        return {"ok": True}

    @app.get("/boom")
    async def boom():
        raise RuntimeError("unhandled")

    return app


def _access_records(caplog) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.name == "userdesk.access"]


async def test_access_log_one_line_per_request(caplog):
    transport = ASGITransport(app=_access_logged_app())
    with caplog.at_level(logging.INFO, logger="userdesk.access"):
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            res = await c.get("/ok")
    assert res.status_code == 200
    [record] = _access_records(caplog)
    assert record.method == "GET"
    assert record.path == "/ok"
    assert record.status_code == 200
    assert record.duration_ms >= 0


async def test_access_log_written_when_handler_raises(caplog):
    transport = ASGITransport(app=_access_logged_app(), raise_app_exceptions=False)
    with caplog.at_level(logging.INFO, logger="userdesk.access"):
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            res = await c.get("/boom")
    assert res.status_code == 500
    [record] = _access_records(caplog)
    assert record.path == "/boom"
    assert record.status_code == 500
