"""
PhotoShelter SDK - High-level clients with nice ergonomics.

This layer turns the endpoint catalogue into attribute-style operation
groups bound to the core APIClient, one client class per API version.
"""

import urllib.parse
from typing import Any

from photoshelter.core.catalog import V3_ENDPOINTS, V4_ENDPOINTS, groups
from photoshelter.core.client import API_V3, API_V4, DEFAULT_TIMEOUT, APIClient, ValidationError
from photoshelter.core.types import ApiVersion, Endpoint, Session


class PhotoShelterClient:
    """
    Base class for the versioned PhotoShelter clients.

    Subclasses set ``api_version`` and ``endpoints``; one OperationGroup is
    created per catalogue group and exposed as an attribute.
    """

    api_version: ApiVersion
    endpoints: tuple[Endpoint, ...] = ()

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the client.

        Args:
            api_key: PhotoShelter API key (or PHOTOSHELTER_API_KEY env var)
            base_url: Service root URL (or PHOTOSHELTER_BASE_URL env var)
            timeout: Request timeout in seconds

        """
        self._client = APIClient(
            self.api_version,
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
        )

        self.auth = AuthOperations(self._client)
        self.authenticate = self.auth

        self._groups: dict[str, OperationGroup] = {}
        for name, rows in groups(self.endpoints).items():
            group = OperationGroup(self._client, name, rows)
            self._groups[name] = group
            setattr(self, name, group)

    @property
    def group_names(self) -> list[str]:
        """Names of the operation groups, in catalogue order."""
        return list(self._groups)

    def describe(self) -> list[dict[str, Any]]:
        """Describe every catalogued endpoint."""
        return [endpoint.to_dict() for endpoint in self.endpoints]

    def call(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: Any = None,
        timeout: float | None = None,
    ) -> Any:
        """Call a path that is not in the catalogue. See APIClient.call."""
        return self._client.call(path, params, method=method, headers=headers, body=body, timeout=timeout)


class PhotoShelterV4(PhotoShelterClient):
    """
    PhotoShelter API v4.0 client.

    Responses are returned as parsed JSON, or raw bytes for binary payloads.

    Example:
        client = PhotoShelterV4("my-api-key")
        client.auth.login("me@example.com", "secret")

        galleries = client.galleries.get_all(page=1, per_page=20)
        item = client.media.get_by_id("M0000abc")
        client.contacts.create(name="Ada", email="ada@example.com")

    """

    api_version = API_V4
    endpoints = V4_ENDPOINTS


class PhotoShelterV3(PhotoShelterClient):
    """
    PhotoShelter API v3 client.

    Responses are unwrapped from the ``{"status": ..., "data": ...}``
    envelope; only ``data`` is returned.

    Example:
        client = PhotoShelterV3("my-api-key")
        client.auth.login("me@example.com", "secret", organization_id="O0000xyz")

        gallery = client.galleries.get_by_id("G0000abc")
        original = client.images.download("I0000def")

    """

    api_version = API_V3
    endpoints = V3_ENDPOINTS


# =============================================================================
# Authentication
# =============================================================================


class AuthOperations:
    """Login, logout and session access."""

    def __init__(self, client: APIClient):
        self._client = client

    @property
    def session(self) -> Session:
        """The client's current session."""
        return self._client.session

    @property
    def is_authenticated(self) -> bool:
        return self._client.session.is_authenticated

    def login(self, email: str, password: str, organization_id: str | None = None) -> Session:
        """
        Authenticate and store the session token.

        Args:
            email: Account email
            password: Account password
            organization_id: Organization to log into (optional)

        Returns:
            The updated Session

        """
        return self._client.login(email, password, organization_id)

    def logout(self) -> None:
        """End the remote session and forget the local token."""
        self._client.logout()

    def use_token(self, token: str, organization_id: str | None = None) -> Session:
        """Use a token obtained outside of login(), e.g. from the OAuth endpoints."""
        return self._client.use_token(token, organization_id)


# =============================================================================
# Catalogue operations
# =============================================================================


class Operation:
    """
    One catalogued endpoint bound to a client.

    Positional arguments fill the path placeholders in order; placeholders
    may also be given by keyword. Remaining keyword arguments are merged
    into ``params``, which travel in the query string for every method.

    ``params``, ``method``, ``headers`` and ``timeout`` are keywords of the
    call itself. An API parameter with one of those names has to be passed
    inside ``params={...}``. JSON bodies are only sent through
    ``client.call(..., body=...)``.
    """

    def __init__(self, client: APIClient, endpoint: Endpoint):
        self._client = client
        self.endpoint = endpoint
        self.__doc__ = endpoint.description or f"{endpoint.method} {endpoint.path}"

    def __repr__(self) -> str:
        return f"<Operation {self.endpoint.group}.{self.endpoint.name} {self.endpoint.method} {self.endpoint.path}>"

    def _render_path(self, path_args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
        fields = self.endpoint.path_fields
        if len(path_args) > len(fields):
            raise ValidationError(
                f"{self.endpoint.group}.{self.endpoint.name} takes {len(fields)} path argument(s), got {len(path_args)}"
            )

        values = dict(zip(fields, path_args))
        for name in fields[len(path_args) :]:
            if name not in kwargs:
                raise ValidationError(f"{self.endpoint.group}.{self.endpoint.name} requires '{name}'")
            values[name] = kwargs.pop(name)

        quoted = {name: urllib.parse.quote(str(value), safe="") for name, value in values.items()}
        return self.endpoint.path.format(**quoted)

    def __call__(
        self,
        *path_args: Any,
        params: dict[str, Any] | None = None,
        method: str | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> Any:
        path = self._render_path(path_args, kwargs)

        merged = dict(params or {})
        merged.update(kwargs)

        http_method = method or self.endpoint.method
        return self._client.call(path, merged, method=http_method, headers=headers, timeout=timeout)


class OperationGroup:
    """A named set of operations, e.g. ``client.media``."""

    def __init__(self, client: APIClient, name: str, endpoints: tuple[Endpoint, ...]):
        self.name = name
        self._operations = {endpoint.name: Operation(client, endpoint) for endpoint in endpoints}
        for op_name, operation in self._operations.items():
            setattr(self, op_name, operation)

    def __repr__(self) -> str:
        return f"<OperationGroup {self.name}: {', '.join(self._operations)}>"

    def __contains__(self, op_name: str) -> bool:
        return op_name in self._operations

    def describe(self) -> list[dict[str, Any]]:
        """Describe the endpoints of this group."""
        return [operation.endpoint.to_dict() for operation in self._operations.values()]
