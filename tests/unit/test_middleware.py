"""Unit tests for request ID and security header middleware and the rate limit helper."""

import logging
from unittest.mock import patch

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from httpx import ASGITransport, AsyncClient

from app.core import limiter as limiter_module
from app.core.limiter import (
    AUTH_PER_IDENTIFIER_LIMIT,
    check_auth_rate_per_identifier,
    limiter,
    tracked_identifier_count,
)
from app.middleware import RequestIDMiddleware, SecurityHeadersMiddleware
from app.middleware.request_id import sanitize_request_id
from app.middleware.security_headers import API_CSP, HTML_CSP
from app.shared.context import get_request_id
from app.shared.logging import RequestIdFilter


def _app() -> FastAPI:
    app = FastAPI()
    seen: dict[str, str | None] = {}

    @app.get("/json")
    async def json_route():
        seen["request_id"] = get_request_id()
        return {"ok": True}

    @app.get("/page", response_class=HTMLResponse)
    async def page():
        return HTMLResponse("<p>hi</p>")

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware, header_name="X-Request-ID")
    app.state.seen = seen
    return app


@pytest.fixture
async def mw_client():
    app = _app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield app, ac


def test_sanitize_request_id() -> None:
    assert sanitize_request_id("abc-123_X") == "abc-123_X"
    generated = sanitize_request_id("bad\nvalue")
    assert len(generated) == 32 and generated.isalnum()
    assert sanitize_request_id(None) != sanitize_request_id(None)
    assert len(sanitize_request_id("a" * 65)) == 32


async def test_request_id_forwarded_and_visible_to_handlers(mw_client) -> None:
    app, client = mw_client
    response = await client.get("/json", headers={"X-Request-ID": "req-42"})
    assert response.headers["x-request-id"] == "req-42"
    assert app.state.seen["request_id"] == "req-42"
    assert get_request_id() is None


async def test_request_id_generated_when_unsafe(mw_client) -> None:
    _, client = mw_client
    response = await client.get("/json", headers={"X-Request-ID": "<script>"})
    assert response.headers["x-request-id"] != "<script>"
    assert len(response.headers["x-request-id"]) == 32


async def test_csp_depends_on_content_type(mw_client) -> None:
    _, client = mw_client
    api = await client.get("/json")
    page = await client.get("/page")
    assert api.headers["content-security-policy"] == API_CSP
    assert page.headers["content-security-policy"] == HTML_CSP
    for response in (api, page):
        assert response.headers["x-frame-options"] == "DENY"
        assert response.headers["referrer-policy"] == "no-referrer"
        assert "max-age" in response.headers["strict-transport-security"]


async def test_docs_have_no_csp(mw_client) -> None:
    _, client = mw_client
    response = await client.get("/docs")
    assert response.status_code == 200
    assert "content-security-policy" not in response.headers


def test_log_records_get_request_id() -> None:
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    assert RequestIdFilter().filter(record)
    assert record.request_id == "-"


def test_per_identifier_limit() -> None:
    limiter.enabled = True
    for _ in range(AUTH_PER_IDENTIFIER_LIMIT):
        check_auth_rate_per_identifier("Jane@Acme.test")
    with pytest.raises(HTTPException) as exc_info:
        check_auth_rate_per_identifier(" jane@acme.test ")
    assert exc_info.value.status_code == 429
    check_auth_rate_per_identifier("someone-else")


def test_per_identifier_limit_disabled_with_limiter() -> None:
    limiter.enabled = False
    for _ in range(AUTH_PER_IDENTIFIER_LIMIT + 5):
        check_auth_rate_per_identifier("jane@acme.test")


def test_idle_identifiers_are_forgotten() -> None:
    limiter.enabled = True
    clock = {"now": 1_000.0}
    with patch.object(limiter_module.time, "monotonic", lambda: clock["now"]):
        for n in range(50):
            check_auth_rate_per_identifier(f"user{n}@acme.test")
        assert tracked_identifier_count() == 50

        clock["now"] += limiter_module.AUTH_PER_IDENTIFIER_WINDOW_SEC + 1
        check_auth_rate_per_identifier("fresh@acme.test")
        assert tracked_identifier_count() == 1
