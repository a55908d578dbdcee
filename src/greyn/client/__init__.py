"""Client side of Greyn authentication.

The session manager keeps who is logged in, the route guard gates views
by role, and the API client talks to the server.
"""

from greyn.client.api_client import ApiResponse, AuthApiClient
from greyn.client.route_guard import GuardDecision, GuardOutcome, RouteGuard
from greyn.client.routing import can_access_route, get_nav_links, get_role_namespace, get_role_route
from greyn.client.session_manager import (
    AuthResult,
    ClientSession,
    ClientSessionManager,
    Navigator,
    NullNavigator,
    SessionState,
)
from greyn.client.storage import FileSessionStorage, MemorySessionStorage, SessionStorage

__all__ = [
    "ApiResponse",
    "AuthApiClient",
    "AuthResult",
    "ClientSession",
    "ClientSessionManager",
    "FileSessionStorage",
    "GuardDecision",
    "GuardOutcome",
    "MemorySessionStorage",
    "Navigator",
    "NullNavigator",
    "RouteGuard",
    "SessionState",
    "SessionStorage",
    "can_access_route",
    "get_nav_links",
    "get_role_namespace",
    "get_role_route",
]
