"""Probes and cross-cutting middleware behaviour"""

import json

from fastapi import HTTPException
from starlette.requests import Request

from core.config import settings
from core.database import DatabaseHealthCheck
from main import http_exception_handler


async def test_root_and_probes(client):
    root = await client.get("/")
    assert root.json()["service"] == "RecipeShare Backend Service"

    health = await client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "healthy"

    ready = await client.get("/api/v1/health/ready")
    assert ready.status_code == 200
    assert ready.json()["database"] == "connected"

    live = await client.get("/api/v1/health/live")
    assert live.json() == {"status": "alive"}


async def test_detailed_health_is_development_only(client):
    response = await client.get("/api/v1/health/detailed")

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


async def test_security_headers_are_added(client):
    response = await client.get("/api/v1/health/version")

    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["x-permitted-cross-domain-policies"] == "none"
    assert response.headers["cache-control"].startswith("no-store")
    assert "strict-transport-security" not in response.headers
    assert "x-process-time" in response.headers


async def test_request_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Request-ID": "trace-123"})

    assert response.headers["x-request-id"] == "trace-123"


async def test_oversized_body_is_rejected(client, alice):
    body = "x" * (settings.MAX_REQUEST_SIZE + 1)

    response = await client.post(
        "/api/v1/recipes/",
        content=body,
        headers={**alice["headers"], "Content-Type": "application/json"},
    )

    assert response.status_code == 413
    assert response.json()["error"] == "payload_too_large"


async def test_path_traversal_is_rejected(client):
    response = await client.get("/api/v1/recipes/..%2f..%2fetc")

    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


async def test_unknown_route_uses_error_envelope(client):
    response = await client.get("/api/v1/nowhere")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "not_found"


async def test_structured_http_errors_keep_the_envelope(client, monkeypatch):
    async def database_down():
        return False

    monkeypatch.setattr(DatabaseHealthCheck, "check_connection", staticmethod(database_down))

    response = await client.get("/api/v1/health/ready", headers={"X-Request-ID": "ready-1"})

    assert response.status_code == 503
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "service_unavailable"
    assert body["request_id"] == "ready-1"
    assert body["details"] == {"status": "not_ready", "database": "disconnected"}


async def test_structured_http_errors_keep_headers():
    request = Request({"type": "http", "method": "GET", "path": "/", "headers": [], "query_string": b""})
    request.state.request_id = "auth-1"
    exc = HTTPException(
        status_code=401, detail={"reason": "expired"}, headers={"WWW-Authenticate": "Bearer"}
    )

    response = await http_exception_handler(request, exc)

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    body = json.loads(response.body)
    assert body["request_id"] == "auth-1"
    assert body["details"] == {"reason": "expired"}
