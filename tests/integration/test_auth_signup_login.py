import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from greyn.domain.entities import UserRole
from greyn.infrastructure.auth import SessionTokenCodec
from greyn.infrastructure.persistence.models import CorporateModel, NGOModel

SIGNUP_PAYLOADS = {
    "simple-user": {"name": "Sam Investor"},
    "ngo": {
        "organizationName": "Green Earth",
        "registrationNumber": "NGO-777",
        "contactPerson": "Robin Green",
        "location": "Nairobi",
    },
    "corporate": {"companyName": "Acme Corp", "taxId": "TAX-777", "contactPerson": "Alex Acme"},
    "carbon": {"name": "Casey Carbon"},
    "admin": {"name": "Ada Admin", "adminCode": "test-admin-code-1234"},
}


def _signup_payload(role: str, email: str | None = None, **overrides) -> dict:
    return {
        "email": email or f"{role}@example.com",
        "password": "password123",
        "confirmPassword": "password123",
        **SIGNUP_PAYLOADS[role],
        **overrides,
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("role", list(SIGNUP_PAYLOADS))
async def test_signup_then_login(client: AsyncClient, test_settings, role: str):
    """Test full flow for each role: Signup -> Login -> Token carries the role."""

    res = await client.post(f"/api/auth/signup/{role}", json=_signup_payload(role))
    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    user = body["data"]["user"]
    assert user["role"] == role
    assert "passwordHash" not in user and "password_hash" not in user

    login_payload = {"email": f"{role}@example.com", "password": "password123"}
    if role == "admin":
        login_payload["adminCode"] = "test-admin-code-1234"

    login_res = await client.post(f"/api/auth/login/{role}", json=login_payload)
    assert login_res.status_code == 200
    data = login_res.json()
    assert data["message"] == "Login successful!"
    assert data["data"]["user"]["id"] == user["id"]

    claims = SessionTokenCodec.from_settings(test_settings).claims(data["data"]["token"])
    assert claims.user_id == user["id"]
    assert claims.role.value == role


@pytest.mark.asyncio
async def test_ngo_signup_stores_organization(client: AsyncClient, db_session: AsyncSession):
    res = await client.post("/api/auth/signup/ngo", json=_signup_payload("ngo"))
    assert res.status_code == 201
    assert res.json()["message"] == "NGO registration successful! You can now login."
    assert res.json()["data"]["user"]["organizationName"] == "Green Earth"

    ngo = (
        await db_session.execute(select(NGOModel).where(NGOModel.email == "ngo@example.com"))
    ).scalar_one()
    assert ngo.registration_number == "NGO-777"
    assert ngo.location == "Nairobi"
    assert ngo.password_hash.startswith("$argon2id$")


@pytest.mark.asyncio
async def test_duplicate_corporate_tax_id(client: AsyncClient, db_session: AsyncSession):
    await client.post("/api/auth/signup/corporate", json=_signup_payload("corporate"))

    res = await client.post(
        "/api/auth/signup/corporate",
        json=_signup_payload("corporate", email="other@example.com"),
    )

    assert res.status_code == 400
    assert res.json() == {
        "success": False,
        "message": "Corporate with this email or tax ID already exists",
    }
    rows = (await db_session.execute(select(CorporateModel))).scalars().all()
    assert len(rows) == 1


@pytest.mark.asyncio
async def test_signup_validation_errors(client: AsyncClient):
    res = await client.post(
        "/api/auth/signup/simple-user",
        json={"email": "sam@example.com", "password": "abc", "confirmPassword": "abd", "name": ""},
    )

    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Validation failed"
    assert [e["field"] for e in body["errors"]] == ["name", "password", "confirmPassword"]


@pytest.mark.asyncio
async def test_signup_invalid_email(client: AsyncClient):
    res = await client.post("/api/auth/signup/carbon", json=_signup_payload("carbon", email="nope"))

    assert res.status_code == 400
    assert res.json()["errors"][0] == {
        "field": "email",
        "msg": "Valid email is required",
        "code": "value_error",
    }


@pytest.mark.asyncio
async def test_admin_signup_with_wrong_code(client: AsyncClient):
    res = await client.post(
        "/api/auth/signup/admin", json=_signup_payload("admin", adminCode="guess")
    )

    assert res.status_code == 403
    assert res.json()["message"] == "Invalid admin code"


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/api/auth/signup/superuser", "/api/auth/login/superuser"])
async def test_unknown_role(client: AsyncClient, path: str):
    res = await client.post(path, json={"email": "x@example.com", "password": "password123"})

    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "Invalid user role"}


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, make_account):
    await make_account(UserRole.CARBON)

    res = await client.post(
        "/api/auth/login/carbon", json={"email": "carbon@example.com", "password": "wrong-pass"}
    )

    assert res.status_code == 401
    assert res.json()["message"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_login_is_scoped_to_role(client: AsyncClient, make_account):
    await make_account(UserRole.NGO, email="org@example.com")

    res = await client.post(
        "/api/auth/login/corporate", json={"email": "org@example.com", "password": "password123"}
    )

    assert res.status_code == 401


@pytest.mark.asyncio
async def test_pending_organization_without_token(client: AsyncClient, test_settings):
    test_settings.organization_approval_required = True

    res = await client.post("/api/auth/signup/corporate", json=_signup_payload("corporate"))

    assert res.status_code == 201
    body = res.json()
    assert "token" not in body["data"]
    assert body["data"]["user"]["status"] == "pending"

    login_res = await client.post(
        "/api/auth/login/corporate",
        json={"email": "corporate@example.com", "password": "password123"},
    )
    assert login_res.status_code == 403
    assert login_res.json()["message"] == "Account is pending approval. Please contact support."
