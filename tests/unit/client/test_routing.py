"""Unit tests for role-aware routing."""

import pytest

from greyn.client.routing import (
    can_access_route,
    get_nav_links,
    get_role_namespace,
    get_role_route,
    is_route_in_namespace,
)
from greyn.domain.entities import UserRole


class TestRoleRoutes:

    @pytest.mark.parametrize(
        "role, expected",
        [
            (UserRole.ADMIN, "/admin/overview"),
            (UserRole.NGO, "/ngo/dashboard"),
            (UserRole.CORPORATE, "/corporate/dashboard"),
            (UserRole.CARBON, "/carbon/marketplace"),
            (UserRole.SIMPLE_USER, "/dashboard"),
        ],
    )
    def test_dashboard_route(self, role, expected):
        assert get_role_route("dashboard", role) == expected

    def test_anonymous_dashboard_goes_to_login(self):
        assert get_role_route("dashboard", None) == "/auth"

    def test_unknown_route_key(self):
        assert get_role_route("nowhere", UserRole.NGO) == "/"
        assert get_role_route("nowhere", None) == "/"

    def test_namespaces(self):
        assert get_role_namespace(UserRole.SIMPLE_USER) == "/investor"
        assert get_role_namespace(None) == ""

    def test_namespace_matching_respects_segments(self):
        assert is_route_in_namespace("/ngo/launch", UserRole.NGO)
        assert is_route_in_namespace("/ngo", UserRole.NGO)
        assert not is_route_in_namespace("/ngo-partners", UserRole.NGO)
        assert not is_route_in_namespace("/ngo/launch", None)

    def test_nav_links_follow_role(self):
        links = get_nav_links(UserRole.CARBON)

        assert [link["label"] for link in links] == ["Home", "Projects", "Products", "Dashboard"]
        assert links[1]["href"] == "/carbon/projects"


class TestCanAccessRoute:

    @pytest.mark.parametrize("path", ["/", "/home", "/auth", "/projects", "/projects/42", "/about"])
    def test_anonymous_public_pages(self, path):
        assert can_access_route(path, None)

    @pytest.mark.parametrize("path", ["/dashboard", "/wallet", "/admin/overview", "/ngo/launch", "/profile"])
    def test_anonymous_protected_pages(self, path):
        assert not can_access_route(path, None)

    def test_anonymous_unknown_page(self):
        assert not can_access_route("/settings", None)

    def test_own_namespace(self):
        assert can_access_route("/corporate/dashboard", UserRole.CORPORATE)

    @pytest.mark.parametrize(
        "path",
        ["/ngo/dashboard", "/admin/overview", "/carbon/marketplace", "/investor/portfolio"],
    )
    def test_other_namespaces_blocked(self, path):
        assert not can_access_route(path, UserRole.CORPORATE)

    def test_shared_pages_for_every_role(self):
        for role in UserRole:
            assert can_access_route("/products", role)

    def test_pages_outside_every_namespace(self):
        assert can_access_route("/wallet", UserRole.SIMPLE_USER)
        assert can_access_route("/ngo-partners", UserRole.CORPORATE)
