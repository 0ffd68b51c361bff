"""Health endpoints and the middleware headers added to every response."""

from unittest.mock import AsyncMock

from sqlalchemy.exc import OperationalError

from engage.infrastructure.persistence.database import get_db


async def test_health_returns_ok(client) -> None:
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_request_id_is_minted_or_echoed(client) -> None:
    minted = await client.get("/api/v1/health")
    assert minted.headers["x-request-id"]

    echoed = await client.get("/api/v1/health", headers={"X-Request-ID": "abc-123"})
    assert echoed.headers["x-request-id"] == "abc-123"

    unsafe = await client.get("/api/v1/health", headers={"X-Request-ID": "bad id\r\n"})
    assert unsafe.headers["x-request-id"] != "bad id"


async def test_security_headers_present(client) -> None:
    response = await client.get("/api/v1/health")
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"


async def test_oversized_body_rejected(client) -> None:
    response = await client.post(
        "/api/v1/auth/login",
        content=b"x" * (11 * 1024 * 1024),
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 413
    assert response.json()["error"] == "PAYLOAD_TOO_LARGE"


async def test_readiness_reports_unreachable_database(client, overrides) -> None:
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))

    async def broken_db():
        yield session

    overrides[get_db] = broken_db
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    assert response.json() == {"status": "not_ready", "database": "unreachable"}
