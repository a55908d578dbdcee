"""Role-aware routing.

Maps each role to its portal namespace and to the concrete path behind
route keys such as ``dashboard``, and decides whether a role may open a
path. Other portals' namespaces are always blocked.
"""

from typing import Literal

from greyn.domain.entities import UserRole

RouteKey = Literal["home", "projects", "products", "dashboard"]

ROLE_NAMESPACES: dict[UserRole, str] = {
    UserRole.ADMIN: "/admin",
    UserRole.NGO: "/ngo",
    UserRole.CORPORATE: "/corporate",
    UserRole.CARBON: "/carbon",
    UserRole.SIMPLE_USER: "/investor",
}

ROUTE_MAP: dict[str, dict[UserRole, str]] = {
    "home": {
        UserRole.ADMIN: "/admin/overview",
        UserRole.NGO: "/ngo/dashboard",
        UserRole.CORPORATE: "/corporate/dashboard",
        UserRole.CARBON: "/carbon/marketplace",
        UserRole.SIMPLE_USER: "/home",
    },
    "projects": {
        UserRole.ADMIN: "/admin/projects",
        UserRole.NGO: "/ngo/launch",
        UserRole.CORPORATE: "/projects",
        UserRole.CARBON: "/carbon/projects",
        UserRole.SIMPLE_USER: "/projects",
    },
    "products": {
        UserRole.ADMIN: "/admin/overview",
        UserRole.NGO: "/products",
        UserRole.CORPORATE: "/products",
        UserRole.CARBON: "/carbon/marketplace",
        UserRole.SIMPLE_USER: "/products",
    },
    "dashboard": {
        UserRole.ADMIN: "/admin/overview",
        UserRole.NGO: "/ngo/dashboard",
        UserRole.CORPORATE: "/corporate/dashboard",
        UserRole.CARBON: "/carbon/marketplace",
        UserRole.SIMPLE_USER: "/dashboard",
    },
}

ANONYMOUS_ROUTES: dict[str, str] = {
    "home": "/home",
    "projects": "/projects",
    "products": "/products",
    "dashboard": "/auth",
}

LOGIN_PATH = "/auth"

# Never reachable without a session
PROTECTED_PREFIXES = (
    "/dashboard",
    "/activities",
    "/wallet",
    "/profile",
    "/admin",
    "/ngo",
    "/corporate",
    "/carbon",
)

SHARED_ROUTES = ("/home", "/auth", "/projects", "/products", "/about", "/how-it-works", "/contact")

PUBLIC_ROUTES = SHARED_ROUTES + ("/",)

NAV_LABELS: tuple[tuple[str, RouteKey], ...] = (
    ("Home", "home"),
    ("Projects", "projects"),
    ("Products", "products"),
    ("Dashboard", "dashboard"),
)


def _under(path: str, prefix: str) -> bool:
    """Whether ``path`` is ``prefix`` or one of its sub-paths."""
    if prefix == "/":
        return path == "/"
    return path == prefix or path.startswith(f"{prefix}/")


def get_role_namespace(role: UserRole | None) -> str:
    """Portal namespace of a role, empty for anonymous visitors."""
    if role is None:
        return ""
    return ROLE_NAMESPACES[role]


def get_role_route(route_key: str, role: UserRole | None) -> str:
    """Concrete path behind a route key for a role.

    Anonymous visitors get the public pages, and ``/auth`` for the dashboard.
    """
    if role is None:
        return ANONYMOUS_ROUTES.get(route_key, "/")
    return ROUTE_MAP.get(route_key, {}).get(role, "/")


def is_route_in_namespace(path: str, role: UserRole | None) -> bool:
    """Whether a path lies inside the role's own portal."""
    if role is None:
        return False
    return _under(path, get_role_namespace(role))


def get_nav_links(role: UserRole | None) -> list[dict[str, str]]:
    """Primary navigation links for a role."""
    return [{"label": label, "href": get_role_route(key, role)} for label, key in NAV_LABELS]


def can_access_route(path: str, role: UserRole | None) -> bool:
    """Decide whether a role may open a path.

    Anonymous visitors are kept out of protected prefixes and let onto
    public pages only. Signed-in users may use their own portal, the
    shared pages and anything outside every portal namespace.

    Args:
        path: Requested path, without query string.
        role: Current role, or None when nobody is signed in.

    Returns:
        True if the path may be rendered.
    """
    if role is None:
        if any(_under(path, prefix) for prefix in PROTECTED_PREFIXES):
            return False
        return any(_under(path, route) for route in PUBLIC_ROUTES)

    if is_route_in_namespace(path, role):
        return True

    if any(_under(path, route) for route in SHARED_ROUTES):
        return True

    own = ROLE_NAMESPACES[role]
    return not any(_under(path, ns) for ns in ROLE_NAMESPACES.values() if ns != own)
