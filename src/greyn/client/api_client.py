"""HTTP client for the Greyn authentication API.

Every call returns an ApiResponse. Transport failures, timeouts and error
statuses are reported in the response instead of being raised, so callers
only ever branch on ``success``.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any

import httpx

from greyn.core.logging import get_logger
from greyn.domain.entities import UserRole

logger = get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000/api"
DEFAULT_TIMEOUT_SECONDS = 30.0
TIMEOUT_MESSAGE = "Request timeout. The server took too long to respond."


@dataclass
class ApiResponse:
    """Normalized result of an API call.

    Attributes:
        success: Whether the server accepted the request.
        message: Human-readable outcome.
        data: Response payload on success.
        errors: Field errors reported by the server.
        error: Short error label or reference.
        status_code: HTTP status, None when no response arrived.
    """

    success: bool
    message: str = ""
    data: dict[str, Any] | None = None
    errors: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None
    status_code: int | None = None

    def error_messages(self) -> list[str]:
        """Messages of the field errors, in server order."""
        return [
            str(item.get("msg") or item.get("message"))
            for item in self.errors
            if item.get("msg") or item.get("message")
        ]


def _parse_body(response: httpx.Response) -> dict[str, Any]:
    """Read a JSON or plain-text body into a dict."""
    content_type = response.headers.get("content-type", "")
    try:
        if "application/json" in content_type:
            body = response.json()
            return body if isinstance(body, dict) else {"data": body}
        text = response.text
    except ValueError:
        return {"message": f"Failed to parse server response (Status: {response.status_code})"}
    return {"message": text or f"HTTP Error: {response.status_code}"}


def _default_error_message(status_code: int) -> tuple[str, str]:
    if status_code == 404:
        return "Resource not found", "Not Found"
    if status_code >= 500:
        return "Server error. Please try again later.", "Internal Server Error"
    return f"HTTP Error: {status_code}", f"HTTP {status_code}"


def _to_api_response(response: httpx.Response) -> ApiResponse:
    body = _parse_body(response)
    errors = body.get("errors") or []
    if response.is_success:
        return ApiResponse(
            success=bool(body.get("success", True)),
            message=body.get("message", ""),
            data=body.get("data"),
            errors=errors,
            status_code=response.status_code,
        )
    default_message, default_error = _default_error_message(response.status_code)
    return ApiResponse(
        success=False,
        message=body.get("message") or default_message,
        errors=errors,
        error=body.get("error") or default_error,
        status_code=response.status_code,
    )


class AuthApiClient:
    """Async client for the ``/auth`` endpoints.

    Connection failures are retried with a linearly growing pause before
    giving up. Timeouts are not retried.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = 3,
        backoff_seconds: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API root, including the API prefix.
            timeout: Per-request timeout in seconds.
            max_retries: Extra attempts after a connection failure.
            backoff_seconds: Pause before retry ``n`` is ``backoff_seconds * n``.
            transport: Optional httpx transport (used to call an app in-process).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self._transport = transport

    @property
    def server_url(self) -> str:
        """Server root shown in connection error messages."""
        return self.base_url.removesuffix("/api")

    async def request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        token: str | None = None,
    ) -> ApiResponse:
        """Send a request and normalize the outcome.

        Args:
            method: HTTP method.
            path: Path below the base URL, e.g. ``/auth/login/ngo``.
            json: Optional JSON body.
            token: Optional bearer token.

        Returns:
            ApiResponse describing the outcome. Never raises for transport errors.
        """
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        attempt = 0
        while True:
            try:
                async with httpx.AsyncClient(
                    base_url=self.base_url,
                    timeout=self.timeout,
                    transport=self._transport,
                ) as client:
                    response = await client.request(method, path, json=json, headers=headers)
                return _to_api_response(response)
            except httpx.TimeoutException:
                logger.warning("API request timed out", method=method, path=path)
                return ApiResponse(success=False, message=TIMEOUT_MESSAGE, error="Timeout")
            except httpx.TransportError as e:
                if attempt < self.max_retries:
                    attempt += 1
                    logger.warning(
                        "Retrying API request",
                        method=method,
                        path=path,
                        attempt=attempt,
                        max_retries=self.max_retries,
                        error=str(e),
                    )
                    await asyncio.sleep(self.backoff_seconds * attempt)
                    continue
                message = (
                    f"Unable to connect to backend server at {self.server_url}. "
                    "Please ensure the backend is running."
                )
                logger.error("Backend connection failed", base_url=self.base_url, error=str(e))
                return ApiResponse(success=False, message=message, error="Network connection failed")

    async def signup(self, role: UserRole, data: dict[str, Any]) -> ApiResponse:
        """POST /auth/signup/{role}."""
        return await self.request("POST", f"/auth/signup/{role.value}", json=data)

    async def login(self, role: UserRole, credentials: dict[str, Any]) -> ApiResponse:
        """POST /auth/login/{role}."""
        return await self.request("POST", f"/auth/login/{role.value}", json=credentials)

    async def change_password(
        self,
        token: str,
        current_password: str,
        new_password: str,
        confirm_new_password: str,
    ) -> ApiResponse:
        """POST /auth/change-password."""
        return await self.request(
            "POST",
            "/auth/change-password",
            json={
                "currentPassword": current_password,
                "newPassword": new_password,
                "confirmNewPassword": confirm_new_password,
            },
            token=token,
        )

    async def delete_account(self, token: str, password: str) -> ApiResponse:
        """DELETE /auth/delete-account."""
        return await self.request(
            "DELETE",
            "/auth/delete-account",
            json={"password": password},
            token=token,
        )
