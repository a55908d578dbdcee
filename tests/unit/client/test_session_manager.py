"""Unit tests for ClientSessionManager."""

import json
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from greyn.client.api_client import ApiResponse, AuthApiClient
from greyn.client.session_manager import ClientSessionManager, NullNavigator, SessionState
from greyn.client.storage import TOKEN_KEY, USER_DATA_KEY, MemorySessionStorage
from greyn.domain.entities import UserRole
from greyn.infrastructure.auth import SessionTokenCodec

codec = SessionTokenCodec(secret_key="client-test-secret-with-more-than-32-chars")


def _token(role: UserRole = UserRole.NGO, user_id: str = "user-1", **kwargs) -> str:
    return codec.issue(user_id, role, **kwargs)


def _auth_response(role: UserRole, token: str | None, message: str = "Login successful!") -> ApiResponse:
    data = {"user": {"id": "user-1", "email": "org@example.com", "role": role.value}}
    if token is not None:
        data["token"] = token
    return ApiResponse(success=True, message=message, data=data, status_code=200)


@pytest.fixture
def api():
    return AsyncMock(spec=AuthApiClient)


@pytest.fixture
def storage():
    return MemorySessionStorage()


@pytest.fixture
def navigator():
    return NullNavigator()


@pytest.fixture
def manager(api, storage, navigator):
    return ClientSessionManager(api, storage, navigator)


class TestHydrate:

    def test_starts_loading_and_unknown(self, manager):
        assert manager.is_loading
        assert manager.state is SessionState.UNKNOWN
        assert not manager.is_authenticated

    def test_empty_storage_is_anonymous(self, manager):
        manager.hydrate()

        assert not manager.is_loading
        assert manager.state is SessionState.ANONYMOUS
        assert manager.session is None

    def test_restores_stored_session(self, manager, storage):
        token = _token(UserRole.CORPORATE)
        storage.save(token, {"email": "corp@example.com", "companyName": "Acme Corp"})

        manager.hydrate()

        assert manager.is_authenticated
        assert manager.is_corporate
        assert manager.session.id == "user-1"
        assert manager.session.token == token
        assert manager.session.name == "Acme Corp"

    def test_role_comes_from_token_not_profile(self, manager, storage):
        storage.save(_token(UserRole.SIMPLE_USER), {"email": "a@example.com", "role": "admin"})

        manager.hydrate()

        assert manager.role is UserRole.SIMPLE_USER
        assert not manager.is_admin

    def test_expired_token_clears_storage(self, manager, storage):
        storage.save(_token(expires_delta=timedelta(seconds=-10)), {"email": "a@example.com"})

        manager.hydrate()

        assert manager.state is SessionState.ANONYMOUS
        assert TOKEN_KEY not in storage.values
        assert USER_DATA_KEY not in storage.values

    def test_malformed_token_clears_storage(self, manager, storage):
        storage.values.update({TOKEN_KEY: "garbage", USER_DATA_KEY: json.dumps({"id": "1"})})

        manager.hydrate()

        assert not manager.is_authenticated
        assert storage.values == {}

    def test_missing_profile_clears_storage(self, manager, storage):
        storage.values[TOKEN_KEY] = _token()

        manager.hydrate()

        assert not manager.is_authenticated
        assert storage.get_token() is None


class TestLogin:

    @pytest.mark.asyncio
    async def test_success_starts_session(self, manager, api, storage):
        token = _token(UserRole.NGO)
        api.login.return_value = _auth_response(UserRole.NGO, token)

        result = await manager.login("ngo", {"email": "org@example.com", "password": "password123"})

        assert result.success and result.logged_in
        assert result.message == "Login successful!"
        assert manager.is_ngo
        assert storage.get_token() == token
        assert storage.get_profile()["role"] == "ngo"
        api.login.assert_awaited_once_with(
            UserRole.NGO, {"email": "org@example.com", "password": "password123"}
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", list(UserRole))
    async def test_every_role_can_log_in(self, manager, api, role):
        api.login.return_value = _auth_response(role, _token(role))

        result = await manager.login(role, {"email": "x@example.com", "password": "password123"})

        assert result.success
        assert manager.role is role

    @pytest.mark.asyncio
    async def test_failure_keeps_current_session(self, manager, api, storage):
        existing = _token(UserRole.CARBON)
        storage.save(existing, {"email": "c@example.com"})
        manager.hydrate()
        api.login.return_value = ApiResponse(
            success=False, message="Invalid email or password", status_code=401
        )

        result = await manager.login(UserRole.NGO, {"email": "org@example.com", "password": "nope"})

        assert not result.success
        assert result.message == "Invalid email or password"
        assert manager.is_carbon
        assert storage.get_token() == existing

    @pytest.mark.asyncio
    async def test_invalid_role_makes_no_request(self, manager, api):
        result = await manager.login("superuser", {})

        assert not result.success
        assert result.message == "Invalid role"
        api.login.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unreadable_token_is_a_failure(self, manager, api, storage):
        api.login.return_value = _auth_response(UserRole.NGO, "garbage")

        result = await manager.login(UserRole.NGO, {})

        assert not result.success
        assert storage.get_token() is None

    @pytest.mark.asyncio
    async def test_unexpected_error_is_reported(self, manager, api):
        api.login.side_effect = RuntimeError("boom")

        result = await manager.login(UserRole.NGO, {})

        assert not result.success
        assert result.message == "An error occurred during login"
        assert not manager.is_loading


class TestSignup:

    @pytest.mark.asyncio
    async def test_signup_with_token_logs_in(self, manager, api):
        api.signup.return_value = _auth_response(
            UserRole.CORPORATE, _token(UserRole.CORPORATE), "Corporate registration successful!"
        )

        result = await manager.signup(UserRole.CORPORATE, {"email": "corp@example.com"})

        assert result.success and result.logged_in
        assert result.message == "Corporate registration successful!"
        assert manager.is_corporate

    @pytest.mark.asyncio
    async def test_signup_without_token_stays_anonymous(self, manager, api, storage):
        manager.hydrate()
        api.signup.return_value = _auth_response(
            UserRole.NGO, None, "Registration received. Your account is pending approval."
        )

        result = await manager.signup(UserRole.NGO, {"email": "org@example.com"})

        assert result.success
        assert not result.logged_in
        assert not manager.is_authenticated
        assert storage.get_token() is None

    @pytest.mark.asyncio
    async def test_field_errors_are_joined(self, manager, api):
        api.signup.return_value = ApiResponse(
            success=False,
            message="Validation failed",
            errors=[
                {"field": "password", "msg": "Password must be at least 6 characters"},
                {"field": "confirmPassword", "msg": "Passwords do not match"},
            ],
            status_code=400,
        )

        result = await manager.signup(UserRole.SIMPLE_USER, {})

        assert result.message == "Password must be at least 6 characters, Passwords do not match"


class TestLogoutAndMutations:

    @pytest.fixture
    def signed_in(self, manager, storage):
        storage.save(_token(UserRole.SIMPLE_USER), {"email": "sam@example.com", "name": "Sam"})
        manager.hydrate()
        return manager

    def test_logout_clears_and_navigates(self, signed_in, storage, navigator):
        signed_in.logout()

        assert signed_in.state is SessionState.ANONYMOUS
        assert storage.values == {}
        assert navigator.last_path == "/auth"

    @pytest.mark.asyncio
    async def test_change_password_sends_token(self, signed_in, api):
        api.change_password.return_value = ApiResponse(
            success=True, message="Password changed successfully!", status_code=200
        )

        result = await signed_in.change_password("password123", "newpass456", "newpass456")

        assert result.success
        assert signed_in.is_authenticated
        api.change_password.assert_awaited_once_with(
            signed_in.session.token, "password123", "newpass456", "newpass456"
        )

    @pytest.mark.asyncio
    async def test_change_password_failure_keeps_session(self, signed_in, api):
        api.change_password.return_value = ApiResponse(
            success=False, message="Current password is incorrect", status_code=401
        )

        result = await signed_in.change_password("wrong", "newpass456", "newpass456")

        assert not result.success
        assert result.message == "Current password is incorrect"
        assert signed_in.is_authenticated

    @pytest.mark.asyncio
    async def test_delete_account_logs_out(self, signed_in, api, storage, navigator):
        api.delete_account.return_value = ApiResponse(
            success=True, message="Account deleted successfully", status_code=200
        )

        result = await signed_in.delete_account("password123")

        assert result.success
        assert not signed_in.is_authenticated
        assert storage.get_token() is None
        assert navigator.last_path == "/auth"

    @pytest.mark.asyncio
    async def test_delete_account_failure_keeps_session(self, signed_in, api):
        api.delete_account.return_value = ApiResponse(
            success=False, message="Password is incorrect", status_code=401
        )

        result = await signed_in.delete_account("wrong")

        assert not result.success
        assert signed_in.is_authenticated

    @pytest.mark.asyncio
    async def test_mutations_need_a_session(self, manager, api):
        manager.hydrate()

        change = await manager.change_password("a", "b", "b")
        delete = await manager.delete_account("a")

        assert change.message == delete.message == "Not authenticated"
        api.change_password.assert_not_awaited()
        api.delete_account.assert_not_awaited()


def test_subscribers_are_notified(manager):
    states = []
    unsubscribe = manager.subscribe(lambda m: states.append((m.state, m.is_loading)))

    manager.hydrate()
    unsubscribe()
    manager.logout()

    assert states[-1] == (SessionState.ANONYMOUS, False)
    assert all(state is not SessionState.AUTHENTICATED for state, _ in states)
    count = len(states)
    manager.hydrate()
    assert len(states) == count
