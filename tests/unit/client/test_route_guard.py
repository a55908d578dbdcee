"""Unit tests for RouteGuard."""

from unittest.mock import AsyncMock

import pytest

from greyn.client.api_client import AuthApiClient
from greyn.client.route_guard import GuardOutcome, RouteGuard
from greyn.client.session_manager import ClientSessionManager
from greyn.client.storage import MemorySessionStorage
from greyn.domain.entities import UserRole
from greyn.domain.exceptions import InvalidRoleError
from greyn.infrastructure.auth import SessionTokenCodec

codec = SessionTokenCodec(secret_key="guard-test-secret-with-more-than-32-chars")


def _manager(role: UserRole | None) -> ClientSessionManager:
    storage = MemorySessionStorage()
    if role is not None:
        storage.save(codec.issue("user-1", role), {"email": "someone@example.com"})
    manager = ClientSessionManager(AsyncMock(spec=AuthApiClient), storage)
    manager.hydrate()
    return manager


def test_waits_while_session_is_unknown():
    manager = ClientSessionManager(AsyncMock(spec=AuthApiClient), MemorySessionStorage())

    decision = RouteGuard(manager).decide("/dashboard")

    assert decision.outcome is GuardOutcome.WAIT
    assert not decision.permitted


def test_anonymous_visitor_goes_to_login():
    decision = RouteGuard(_manager(None)).decide("/dashboard")

    assert decision.outcome is GuardOutcome.REDIRECT
    assert decision.target == "/auth"


def test_required_role_match():
    guard = RouteGuard(_manager(UserRole.CORPORATE), required_role="corporate")
    assert guard.decide("/corporate/dashboard").permitted


def test_simple_user_denied_corporate_view():
    guard = RouteGuard(_manager(UserRole.SIMPLE_USER), required_role=UserRole.CORPORATE)

    decision = guard.decide("/corporate/dashboard")

    assert decision.outcome is GuardOutcome.REDIRECT
    assert not decision.permitted
    assert decision.target == "/dashboard"


def test_corporate_sent_home_from_simple_user_view():
    guard = RouteGuard(_manager(UserRole.CORPORATE), required_role=UserRole.SIMPLE_USER)

    decision = guard.decide("/dashboard")

    assert decision.outcome is GuardOutcome.REDIRECT
    assert decision.target == "/corporate/dashboard"


def test_other_portal_namespace_redirects_to_own_dashboard():
    decision = RouteGuard(_manager(UserRole.NGO)).decide("/admin/overview")

    assert decision.target == "/ngo/dashboard"


def test_allowed_roles():
    guard = RouteGuard(_manager(UserRole.CARBON), allowed_roles=["ngo", "corporate"])

    decision = guard.decide("/projects")

    assert decision.outcome is GuardOutcome.REDIRECT
    assert decision.target == "/carbon/marketplace"
    assert RouteGuard(_manager(UserRole.NGO), allowed_roles=["ngo", "corporate"]).decide("/projects").permitted


def test_unknown_required_role():
    with pytest.raises(InvalidRoleError):
        RouteGuard(_manager(None), required_role="superuser")


def test_watch_follows_session_changes():
    manager = _manager(UserRole.ADMIN)
    guard = RouteGuard(manager, required_role=UserRole.ADMIN)
    decisions = []

    stop = guard.watch("/admin/overview", decisions.append)
    manager.logout()
    stop()

    assert decisions[0].permitted
    assert decisions[-1].target == "/auth"
