"""Client session manager.

Owns the client's idea of who is logged in. The session is rebuilt from
storage on startup, replaced by login and signup, and dropped by logout.
Storage is written only from here.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from greyn.client.api_client import ApiResponse, AuthApiClient
from greyn.client.routing import LOGIN_PATH
from greyn.client.storage import MemorySessionStorage, SessionStorage
from greyn.core.logging import get_logger
from greyn.domain.entities import SessionClaims, UserRole
from greyn.domain.exceptions import InvalidRoleError
from greyn.infrastructure.auth.session_token_codec import read_unverified_claims

logger = get_logger(__name__)

TokenReader = Callable[[str | None], SessionClaims | None]
Listener = Callable[["ClientSessionManager"], None]


class SessionState(str, Enum):
    """Where the manager is in its lifecycle."""

    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class Navigator(Protocol):
    """Performs hard navigations that reset the client."""

    def replace(self, path: str) -> None: ...


class NullNavigator:
    """Navigator for headless clients; records the last target."""

    def __init__(self) -> None:
        self.last_path: str | None = None

    def replace(self, path: str) -> None:
        self.last_path = path
        logger.info("Navigation requested", path=path)


@dataclass(frozen=True)
class ClientSession:
    """The signed-in user as the client sees it.

    ``id`` and ``role`` come from the token; the other fields come from
    the stored profile and are for display only.
    """

    id: str
    role: UserRole
    email: str
    token: str
    name: str | None = None
    organization_name: str | None = None
    company_name: str | None = None
    contact_person: str | None = None

    @classmethod
    def build(cls, token: str, claims: SessionClaims, profile: dict[str, Any]) -> "ClientSession":
        """Merge token claims with a profile blob."""
        return cls(
            id=claims.user_id,
            role=claims.role,
            email=profile.get("email", ""),
            token=token,
            name=(
                profile.get("name")
                or profile.get("organizationName")
                or profile.get("companyName")
                or profile.get("contactPerson")
            ),
            organization_name=profile.get("organizationName"),
            company_name=profile.get("companyName"),
            contact_person=profile.get("contactPerson"),
        )


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a session operation, safe to show to the user.

    ``logged_in`` is True when the call started a new session.
    """

    success: bool
    message: str
    logged_in: bool = False


def _failure_message(response: ApiResponse, fallback: str) -> str:
    """One message for a failed response, field errors joined with commas."""
    messages = response.error_messages()
    if messages:
        return ", ".join(messages)
    return response.message or fallback


class ClientSessionManager:
    """Holds the current session and the operations that change it.

    Example:
        manager = ClientSessionManager(AuthApiClient(), FileSessionStorage(path))
        manager.hydrate()
        result = await manager.login("ngo", {"email": email, "password": password})
    """

    def __init__(
        self,
        api: AuthApiClient,
        storage: SessionStorage | None = None,
        navigator: Navigator | None = None,
        token_reader: TokenReader = read_unverified_claims,
    ) -> None:
        """Initialize the manager.

        Args:
            api: Client for the authentication API.
            storage: Where the session persists. Defaults to process memory.
            navigator: Performs the hard redirect on logout.
            token_reader: Reads claims from a stored token, None when unusable.
        """
        self.api = api
        self.storage = storage if storage is not None else MemorySessionStorage()
        self.navigator = navigator or NullNavigator()
        self.token_reader = token_reader
        self._session: ClientSession | None = None
        self._state = SessionState.UNKNOWN
        self._is_loading = True
        self._listeners: list[Listener] = []

    # State

    @property
    def session(self) -> ClientSession | None:
        return self._session

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def role(self) -> UserRole | None:
        return self._session.role if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._state is SessionState.AUTHENTICATED

    @property
    def is_simple_user(self) -> bool:
        return self.role is UserRole.SIMPLE_USER

    @property
    def is_ngo(self) -> bool:
        return self.role is UserRole.NGO

    @property
    def is_corporate(self) -> bool:
        return self.role is UserRole.CORPORATE

    @property
    def is_carbon(self) -> bool:
        return self.role is UserRole.CARBON

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every state or loading change.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _set_loading(self, value: bool) -> None:
        self._is_loading = value
        self._notify()

    def _authenticate(self, session: ClientSession) -> None:
        self._session = session
        self._state = SessionState.AUTHENTICATED
        self._notify()

    def _reset(self) -> None:
        self.storage.clear()
        self._session = None
        self._state = SessionState.ANONYMOUS
        self._notify()

    # Operations

    def hydrate(self) -> None:
        """Rebuild the session from storage.

        A missing, malformed or expired token, or a missing profile, clears
        storage and leaves the manager anonymous.
        """
        self._set_loading(True)
        try:
            token = self.storage.get_token()
            claims = self.token_reader(token)
            profile = self.storage.get_profile() if claims is not None else None
            if token is None or claims is None or profile is None:
                if token is not None:
                    logger.info("Discarding stored session", has_claims=claims is not None)
                self._reset()
                return
            self._authenticate(ClientSession.build(token, claims, profile))
        finally:
            self._set_loading(False)

    def _start_session(self, response: ApiResponse, role: UserRole) -> bool:
        """Persist and adopt the session carried by a response.

        Returns:
            False if the response carries no usable token.
        """
        data = response.data or {}
        token = data.get("token")
        claims = self.token_reader(token)
        if not token or claims is None:
            return False
        profile = dict(data.get("user") or {})
        profile.setdefault("role", role.value)
        self.storage.save(token, profile)
        self._authenticate(ClientSession.build(token, claims, profile))
        return True

    async def login(self, role: UserRole | str, credentials: dict[str, Any]) -> AuthResult:
        """Log in and, on success, replace the current session.

        Never raises; failures come back as an unsuccessful result and leave
        the current session untouched.
        """
        try:
            user_role = UserRole.parse(role)
        except InvalidRoleError:
            return AuthResult(success=False, message="Invalid role")

        self._set_loading(True)
        try:
            response = await self.api.login(user_role, credentials)
            if not response.success:
                return AuthResult(
                    success=False,
                    message=response.message or "Login failed. Please check your credentials.",
                )
            if not self._start_session(response, user_role):
                logger.warning("Login response carried no usable token", role=user_role.value)
                return AuthResult(success=False, message="Login failed. Invalid session token.")
            return AuthResult(
                success=True,
                message=response.message or "Login successful!",
                logged_in=True,
            )
        except Exception as e:
            logger.error("Login error", role=user_role.value, error=str(e), exc_info=e)
            return AuthResult(success=False, message="An error occurred during login")
        finally:
            self._set_loading(False)

    async def signup(self, role: UserRole | str, data: dict[str, Any]) -> AuthResult:
        """Sign up and, when the server issues a token, log in.

        Returns:
            ``logged_in`` is True only when a session was started. Accounts
            awaiting approval get a successful result without a session.
        """
        try:
            user_role = UserRole.parse(role)
        except InvalidRoleError:
            return AuthResult(success=False, message="Invalid role")

        self._set_loading(True)
        try:
            response = await self.api.signup(user_role, data)
            if not response.success:
                return AuthResult(
                    success=False,
                    message=_failure_message(response, "Registration failed"),
                )
            message = response.message or "Registration successful!"
            if (response.data or {}).get("token"):
                if not self._start_session(response, user_role):
                    return AuthResult(success=False, message="Registration failed. Invalid session token.")
                return AuthResult(success=True, message=message, logged_in=True)
            return AuthResult(success=True, message=message, logged_in=False)
        except Exception as e:
            logger.error("Signup error", role=user_role.value, error=str(e), exc_info=e)
            return AuthResult(success=False, message="An error occurred during registration")
        finally:
            self._set_loading(False)

    def logout(self) -> None:
        """Drop the session and force a fresh start on the login page."""
        self._reset()
        self.navigator.replace(LOGIN_PATH)

    async def change_password(
        self,
        current_password: str,
        new_password: str,
        confirm_new_password: str,
    ) -> AuthResult:
        """Change the signed-in user's password. The session stays as it is."""
        if self._session is None:
            return AuthResult(success=False, message="Not authenticated")

        self._set_loading(True)
        try:
            response = await self.api.change_password(
                self._session.token, current_password, new_password, confirm_new_password
            )
            if not response.success:
                return AuthResult(
                    success=False,
                    message=_failure_message(response, "Failed to change password"),
                )
            return AuthResult(
                success=True,
                message=response.message or "Password changed successfully!",
            )
        except Exception as e:
            logger.error("Change password error", error=str(e), exc_info=e)
            return AuthResult(success=False, message="An error occurred while changing password")
        finally:
            self._set_loading(False)

    async def delete_account(self, password: str) -> AuthResult:
        """Delete the signed-in user's account and log out."""
        if self._session is None:
            return AuthResult(success=False, message="Not authenticated")

        self._set_loading(True)
        try:
            response = await self.api.delete_account(self._session.token, password)
            if not response.success:
                return AuthResult(
                    success=False,
                    message=_failure_message(response, "Failed to delete account"),
                )
        except Exception as e:
            logger.error("Delete account error", error=str(e), exc_info=e)
            return AuthResult(success=False, message="An error occurred while deleting account")
        finally:
            self._set_loading(False)

        self.logout()
        return AuthResult(success=True, message=response.message or "Account deleted successfully")
