"""Route guard for protected views.

Reads the session manager and decides whether a view may render, must
wait for the session to settle, or has to send the visitor elsewhere.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from greyn.client.routing import LOGIN_PATH, can_access_route, get_role_route
from greyn.client.session_manager import ClientSessionManager, SessionState
from greyn.domain.entities import UserRole


class GuardOutcome(str, Enum):
    """What the view should do."""

    WAIT = "wait"
    PERMIT = "permit"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class GuardDecision:
    """Outcome plus the redirect target, when there is one."""

    outcome: GuardOutcome
    target: str | None = None

    @property
    def permitted(self) -> bool:
        return self.outcome is GuardOutcome.PERMIT


WAIT = GuardDecision(GuardOutcome.WAIT)
PERMIT = GuardDecision(GuardOutcome.PERMIT)


def redirect(target: str) -> GuardDecision:
    return GuardDecision(GuardOutcome.REDIRECT, target)


class RouteGuard:
    """Gates a view by authentication and role.

    Checks run in order: still loading, not signed in, path outside the
    role's reach, wrong required role, role outside the allowed set. The
    first failing check picks the redirect.
    """

    def __init__(
        self,
        manager: ClientSessionManager,
        required_role: UserRole | str | None = None,
        allowed_roles: Iterable[UserRole | str] | None = None,
    ) -> None:
        """Initialize the guard.

        Args:
            manager: Session manager to read from.
            required_role: The only role allowed to see the view.
            allowed_roles: Roles allowed to see the view.

        Raises:
            InvalidRoleError: If a role string is not enumerated.
        """
        self.manager = manager
        self.required_role = UserRole.parse(required_role) if required_role is not None else None
        self.allowed_roles = (
            frozenset(UserRole.parse(role) for role in allowed_roles)
            if allowed_roles is not None
            else None
        )

    def decide(self, path: str) -> GuardDecision:
        """Decide what to do with a visit to ``path``."""
        manager = self.manager
        if manager.is_loading or manager.state is SessionState.UNKNOWN:
            return WAIT

        role = manager.role
        if not manager.is_authenticated or role is None:
            return redirect(LOGIN_PATH)

        dashboard = get_role_route("dashboard", role)
        if not can_access_route(path, role):
            return redirect(dashboard)
        if self.required_role is not None and role is not self.required_role:
            return redirect(dashboard)
        if self.allowed_roles is not None and role not in self.allowed_roles:
            return redirect(dashboard)
        return PERMIT

    def watch(self, path: str, callback: Callable[[GuardDecision], None]) -> Callable[[], None]:
        """Report a decision now and after every session change.

        Returns:
            A callable that stops watching.
        """
        callback(self.decide(path))
        return self.manager.subscribe(lambda _manager: callback(self.decide(path)))
