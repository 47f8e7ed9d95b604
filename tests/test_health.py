"""Smoke tests for health and app wiring."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data.get("status") == "ok"


async def test_root_returns_html(client: AsyncClient) -> None:
    """GET / returns HTML landing page."""
    response = await client.get("/")
    assert response.status_code == 200
    assert "text/html" in response.headers.get("content-type", "")


async def test_readiness_without_database_returns_503(client: AsyncClient) -> None:
    """GET /api/v1/health/ready is 503 when no DATABASE_URL is configured."""
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "not_ready"
    assert data["database"] == "not_configured"


async def test_readiness_reflects_database_probe(app, client: AsyncClient) -> None:
    """GET /api/v1/health/ready follows DataAccessLayer.is_healthy()."""

    class _Probe:
        healthy = True

        async def is_healthy(self) -> bool:
            return self.healthy

    probe = _Probe()
    app.state.data_access = probe
    ok = await client.get("/api/v1/health/ready")
    assert ok.status_code == 200
    assert ok.json() == {"status": "ok", "database": "ok"}

    probe.healthy = False
    down = await client.get("/api/v1/health/ready")
    assert down.status_code == 503
    assert down.json()["database"] == "unreachable"


async def test_responses_carry_request_id_and_security_headers(client: AsyncClient) -> None:
    """Every response echoes the request ID and carries the security headers."""
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["x-request-id"] == "abc-123"
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["content-security-policy"].startswith("default-src 'none'")


async def test_unconfigured_database_returns_503_on_data_endpoints() -> None:
    """Without a unit of work override, endpoints that need storage return 503."""
    from httpx import ASGITransport

    from app.main import create_app

    application = create_app()
    transport = ASGITransport(app=application)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.post(
            "/api/v1/auth/login", json={"identifier": "someone", "password": "password123"}
        )
    assert response.status_code == 503
    assert response.json()["error"] == "SERVICE_UNAVAILABLE"
    assert response.headers["retry-after"] == "5"
