"""
Core HTTP client for the PhotoShelter API.

Handles authentication, request/response, and error handling for both the
v3 and v4 APIs. The two versions share one pipeline and differ only in the
ApiVersion they are built with.
"""

import json
import logging
import os
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, NoReturn

from photoshelter.core.types import ApiVersion, LoginResult, Session

# Configuration
DEFAULT_BASE_URL = "https://www.photoshelter.com"
DEFAULT_TIMEOUT = 60

AUTH_TOKEN_HEADER = "X-PS-Auth-Token"
API_KEY_HEADER = "X-PS-API-Key"
LOGIN_API_KEY_HEADER = "X-PS-Api-Key"

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
HTTP_NOT_FOUND = 404

logger = logging.getLogger(__name__)


class PhotoShelterError(Exception):
    """Base error class for client errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class APIError(PhotoShelterError):
    """API error with status code, request location and server messages."""

    def __init__(
        self,
        message: str,
        status: int = 0,
        location: str | None = None,
        messages: list[str] | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.status = status
        self.location = location
        self.messages = messages or []

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        if self.status:
            result["status"] = self.status
        if self.location:
            result["location"] = self.location
        if self.messages:
            result["messages"] = self.messages
        return result


class UnauthenticatedError(APIError):
    """No session token; raised before any network call is made."""


class NotFoundError(APIError):
    """The server answered 404."""


class RequestFailedError(APIError):
    """The server answered with any other non-success status."""


class ValidationError(PhotoShelterError):
    """Validation error for local input issues (not API errors)."""


# =============================================================================
# Parameter encoding
# =============================================================================


def encode_query(params: dict[str, Any] | None) -> str:
    """
    Encode query-string parameters for an authenticated call.

    Values are percent-encoded. ``None`` means "not supplied" and is skipped,
    but empty strings are sent as ``key=``. Lists and tuples become repeated
    keys.
    """
    if not params:
        return ""
    pairs = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _stringify(item)) for item in value)
        else:
            pairs.append((key, _stringify(value)))
    return urllib.parse.urlencode(pairs)


def encode_form(fields: dict[str, Any]) -> str:
    """
    Encode a login form body.

    Unlike encode_query, every falsy value (None, empty string) is dropped so
    an omitted organization id produces no ``org_id`` key at all.
    """
    return urllib.parse.urlencode({k: _stringify(v) for k, v in fields.items() if v})


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# =============================================================================
# Response handling
# =============================================================================


def _parse_json(body: bytes) -> Any:
    """Parse a JSON body, raising ValueError when it is not JSON."""
    return json.loads(body.decode("utf-8"))


def unwrap_raw(body: bytes) -> Any:
    """Return the parsed JSON body, or the raw bytes when it is not JSON."""
    try:
        return _parse_json(body)
    except ValueError:
        return body


def unwrap_data(body: bytes) -> Any:
    """Return the ``data`` field of a JSON envelope, or the raw bytes when it is not JSON."""
    try:
        parsed = _parse_json(body)
    except ValueError:
        return body
    if isinstance(parsed, dict):
        return parsed.get("data")
    return parsed


def error_messages(payload: Any) -> list[str]:
    """Collect the human-readable messages of an error payload, in order."""
    if not isinstance(payload, dict):
        return []
    errors = payload.get("errors")
    if isinstance(errors, list):
        return [str(e["title"]) for e in errors if isinstance(e, dict) and e.get("title")]
    # v3 reports a single {"error": {"message": ...}} or a top-level message
    error_field = payload.get("error")
    if isinstance(error_field, dict) and error_field.get("message"):
        return [str(error_field["message"])]
    if isinstance(error_field, str) and error_field:
        return [error_field]
    if payload.get("message"):
        return [str(payload["message"])]
    return []


def classify_error(status: int, reason: str, body: bytes, location: str) -> NoReturn:
    """
    Turn a failed response into one descriptive error and raise it.

    Args:
        status: HTTP status code
        reason: HTTP status text
        body: Raw response body
        location: Method and URL of the failed request

    Raises:
        NotFoundError: On 404, built from the status text only
        RequestFailedError: On any other status, built from the server's
            error titles, or from the status text when the body has none

    """
    if status == HTTP_NOT_FOUND:
        raise NotFoundError(
            f"Not found: {location} ({reason})",
            status=status,
            location=location,
        )

    try:
        payload = _parse_json(body) if body else None
    except ValueError:
        payload = None

    messages = error_messages(payload)
    if messages:
        summary = " | ".join(messages)
    else:
        summary = f"HTTP {status} {reason}".strip()

    raise RequestFailedError(
        f"Request failed for {location}. Request Response: {summary}",
        status=status,
        location=location,
        messages=messages,
        details=payload if isinstance(payload, dict) else {},
    )


# =============================================================================
# Login response readers
# =============================================================================


def read_login_v4(payload: Any, organization_id: str | None) -> LoginResult:
    """Read token, organization and two-factor flag from a v4 login response."""
    data = payload if isinstance(payload, dict) else {}
    if isinstance(data.get("data"), dict):
        data = data["data"]
    return LoginResult(
        token=data.get("token"),
        organization_id=data.get("org_id") or data.get("organization_id") or organization_id,
        two_factor_required=data.get("two_factor_required"),
    )


def read_login_v3(payload: Any, organization_id: str | None) -> LoginResult:
    """Read the token from a v3 ``{"status": "ok", "data": {...}}`` login response."""
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        data = {}
    return LoginResult(token=data.get("token"), organization_id=organization_id)


API_V4 = ApiVersion(
    name="v4",
    base_path="/psapi/v4.0",
    login_path="/authenticate",
    logout_path=None,
    unwrap=unwrap_raw,
    read_login=read_login_v4,
)

API_V3 = ApiVersion(
    name="v3",
    base_path="/psapi/v3",
    login_path="/mem/authenticate",
    logout_path="/mem/user/session",
    unwrap=unwrap_data,
    read_login=read_login_v3,
)


# =============================================================================
# Client
# =============================================================================


class APIClient:
    """
    Low-level HTTP client for one version of the PhotoShelter API.

    Handles:
    - Token login and the per-instance session
    - Authentication headers on every call
    - Query-string and JSON body encoding
    - Error classification and response unwrapping
    """

    def __init__(
        self,
        version: ApiVersion,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the API client.

        Args:
            version: API_V3 or API_V4
            api_key: PhotoShelter API key (or PHOTOSHELTER_API_KEY env var)
            base_url: Service root URL (or PHOTOSHELTER_BASE_URL env var)
            timeout: Request timeout in seconds

        """
        self.version = version
        self.api_key = api_key or os.environ.get("PHOTOSHELTER_API_KEY")
        env_base_url = os.environ.get("PHOTOSHELTER_BASE_URL", DEFAULT_BASE_URL)
        self.base_url = (base_url or env_base_url).rstrip("/")
        self.timeout = timeout
        self.session = Session()

    def _ensure_api_key(self) -> str:
        """Ensure API key is configured."""
        if not self.api_key:
            raise ValidationError("API key not set. Pass api_key or set PHOTOSHELTER_API_KEY")
        return self.api_key

    def build_url(self, path: str, params: dict[str, Any] | None = None) -> str:
        """Build the full URL for a version-relative path and its query parameters."""
        url = f"{self.base_url}{self.version.base_path}{path}"
        query_string = encode_query(params)
        if query_string:
            separator = "&" if "?" in path else "?"
            url = f"{url}{separator}{query_string}"
        return url

    def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        data: bytes | None,
        timeout: float | None,
    ) -> bytes:
        """
        Perform one HTTP round trip and return the body of a successful response.

        Transport errors (URLError, TimeoutError) propagate unchanged.
        """
        location = f"{method} {url}"
        req = urllib.request.Request(url, data=data, headers=headers, method=method)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout if timeout is None else timeout) as response:
                status, reason, body = response.status, response.reason, response.read()
        except urllib.error.HTTPError as e:
            try:
                status, reason, body = e.code, e.reason, e.read()
            finally:
                e.close()

        logger.debug("%s -> %s", location, status)
        if not 200 <= status < 300:
            classify_error(status, str(reason or ""), body, location)
        return body

    # =========================================================================
    # Authentication
    # =========================================================================

    def login(self, email: str, password: str, organization_id: str | None = None) -> Session:
        """
        Log in with email and password and store the returned token.

        Args:
            email: Account email
            password: Account password
            organization_id: Organization to log into (optional)

        Returns:
            The updated session

        Raises:
            APIError: When the server rejects the login; the session is left
                unchanged

        """
        api_key = self._ensure_api_key()
        form = encode_form(
            {
                "email": email,
                "password": password,
                "mode": "token",
                "org_id": organization_id,
            }
        )
        headers = {
            LOGIN_API_KEY_HEADER: api_key,
            "Content-Type": "application/x-www-form-urlencoded",
        }
        url = self.build_url(self.version.login_path)

        with self.session.lock:
            body = self._send("POST", url, headers, form.encode("utf-8"), None)
            try:
                payload = _parse_json(body)
            except ValueError:
                payload = None

            result = self.version.read_login(payload, organization_id)
            if not result.token:
                raise RequestFailedError(
                    f"Login response from POST {url} did not contain a token",
                    status=200,
                    location=f"POST {url}",
                )

            self.session.update(
                result.token,
                organization_id=result.organization_id,
                two_factor_required=result.two_factor_required,
                email=email,
            )
        logger.info("Logged in to PhotoShelter %s as %s", self.version.name, email)
        return self.session

    def use_token(self, token: str, organization_id: str | None = None) -> Session:
        """Adopt a token obtained elsewhere (for example through OAuth)."""
        if not token:
            raise ValidationError("Token must not be empty")
        with self.session.lock:
            self.session.update(token, organization_id=organization_id)
        return self.session

    def logout(self) -> None:
        """
        End the remote session and clear the local one.

        The local session is cleared even when the remote call fails; the
        failure still propagates.
        """
        with self.session.lock:
            try:
                if self.session.token and self.version.logout_path:
                    self.call(self.version.logout_path, method="DELETE")
            finally:
                self.session.clear()
        logger.info("Logged out of PhotoShelter %s", self.version.name)

    # =========================================================================
    # Request pipeline
    # =========================================================================

    def call(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: Any = None,
        timeout: float | None = None,
    ) -> Any:
        """
        Make an authenticated request to the API.

        Args:
            path: Version-relative API path (e.g., /media/{id})
            params: Query-string parameters
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            headers: Extra headers, overriding the defaults
            body: JSON-serializable request body
            timeout: Request timeout override in seconds

        Returns:
            The unwrapped response (parsed JSON, or raw bytes for binary payloads)

        Raises:
            UnauthenticatedError: No token; nothing is sent
            NotFoundError: On 404
            RequestFailedError: On any other non-success status

        """
        token = self.session.token
        if not token:
            raise UnauthenticatedError("No auth token. Make sure to call auth.login() first")
        api_key = self._ensure_api_key()

        method = method.upper()
        if method not in HTTP_METHODS:
            raise ValidationError(f"Unsupported HTTP method: {method}")

        request_headers = {
            AUTH_TOKEN_HEADER: token,
            API_KEY_HEADER: api_key,
            "Content-Type": "application/json",
        }
        if headers:
            request_headers.update(headers)

        data = json.dumps(body).encode("utf-8") if body is not None else None
        url = self.build_url(path, params)
        response_body = self._send(method, url, request_headers, data, timeout)
        return self.version.unwrap(response_body)
