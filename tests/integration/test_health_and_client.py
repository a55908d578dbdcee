"""End-to-end checks: health endpoints and the client stack against the app."""

import pytest
from httpx import ASGITransport, AsyncClient

from greyn.client import AuthApiClient, ClientSessionManager, MemorySessionStorage, RouteGuard
from greyn.domain.entities import UserRole


@pytest.mark.asyncio
async def test_health_endpoints(client: AsyncClient):
    health = await client.get("/health")
    live = await client.get("/live")

    assert health.status_code == 200
    assert health.json()["status"] == "healthy"
    assert live.json()["status"] == "alive"
    assert "X-Correlation-ID" in health.headers


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client: AsyncClient):
    res = await client.get("/health", headers={"X-Correlation-ID": "cid_from_client"})
    assert res.headers["X-Correlation-ID"] == "cid_from_client"


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client: AsyncClient):
    res = await client.get("/api/auth/nowhere")

    assert res.status_code == 404
    assert res.json()["success"] is False


@pytest.mark.asyncio
async def test_unhandled_error_returns_generic_message(client: AsyncClient):
    from greyn.infrastructure.api.app import app
    from greyn.infrastructure.persistence.database import get_db_session

    def broken_session():
        raise RuntimeError("connection pool exhausted")

    app.dependency_overrides[get_db_session] = broken_session
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as raw:
        res = await raw.post(
            "/api/auth/login/ngo",
            json={"email": "ngo@example.com", "password": "password123"},
            headers={"X-Correlation-ID": "cid_unhandled"},
        )

    assert res.status_code == 500
    assert res.json() == {"success": False, "message": "Server error", "error": "cid_unhandled"}


@pytest.fixture
def manager(client):
    from greyn.infrastructure.api.app import app

    api = AuthApiClient(base_url="http://test/api", transport=ASGITransport(app=app))
    return ClientSessionManager(api, MemorySessionStorage())


@pytest.mark.asyncio
async def test_client_session_lifecycle(manager: ClientSessionManager):
    manager.hydrate()
    guard = RouteGuard(manager, required_role=UserRole.CORPORATE)
    assert guard.decide("/corporate/dashboard").target == "/auth"

    signup = await manager.signup(
        UserRole.CORPORATE,
        {
            "email": "corp@example.com",
            "password": "password123",
            "confirmPassword": "password123",
            "companyName": "Acme Corp",
            "taxId": "TAX-9",
            "contactPerson": "Alex Acme",
        },
    )
    assert signup.success and signup.logged_in
    assert manager.is_corporate
    assert guard.decide("/corporate/dashboard").permitted
    assert guard.decide("/ngo/dashboard").target == "/corporate/dashboard"

    changed = await manager.change_password("password123", "newpass456", "newpass456")
    assert changed.success

    wrong = await manager.delete_account("password123")
    assert not wrong.success
    assert wrong.message == "Password is incorrect"
    assert manager.is_authenticated

    deleted = await manager.delete_account("newpass456")
    assert deleted.success
    assert not manager.is_authenticated

    login = await manager.login(
        UserRole.CORPORATE, {"email": "corp@example.com", "password": "newpass456"}
    )
    assert not login.success
    assert login.message == "Invalid email or password"
