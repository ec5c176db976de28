"""
Core types for the PhotoShelter API client.

These dataclasses describe the session, the endpoint catalogue, and the
per-version configuration of the request pipeline.
"""

import string
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

# =============================================================================
# Session
# =============================================================================


@dataclass
class Session:
    """
    Authentication state for one client instance.

    Created empty, overwritten by every successful login and cleared by
    logout. Login and logout hold ``lock`` while they run; ordinary calls
    read ``token`` without locking.
    """

    token: str | None = None
    organization_id: str | None = None
    two_factor_required: bool | None = None
    email: str | None = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def is_authenticated(self) -> bool:
        """Check if a session token is present."""
        return bool(self.token)

    def update(
        self,
        token: str,
        organization_id: str | None = None,
        two_factor_required: bool | None = None,
        email: str | None = None,
    ) -> None:
        """Overwrite the session with the result of a login."""
        self.token = token
        self.organization_id = organization_id
        self.two_factor_required = two_factor_required
        self.email = email

    def clear(self) -> None:
        """Forget the token and every fact that came with it."""
        self.token = None
        self.organization_id = None
        self.two_factor_required = None
        self.email = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output. The token itself is never included."""
        return {
            "authenticated": self.is_authenticated,
            "organization_id": self.organization_id,
            "two_factor_required": self.two_factor_required,
            "email": self.email,
        }


@dataclass(frozen=True)
class LoginResult:
    """Facts extracted from a successful login response."""

    token: str | None
    organization_id: str | None = None
    two_factor_required: bool | None = None


# =============================================================================
# Endpoint catalogue
# =============================================================================


@dataclass(frozen=True)
class Param:
    """A documented query or body parameter of an endpoint."""

    name: str
    required: bool = False


@dataclass(frozen=True)
class Endpoint:
    """Static description of one remote operation."""

    group: str
    name: str
    method: str
    path: str
    params: tuple[Param, ...] = ()
    description: str = ""

    @property
    def path_fields(self) -> tuple[str, ...]:
        """Names of the placeholders in the path template, in order."""
        return tuple(name for _, name, _, _ in string.Formatter().parse(self.path) if name)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        return {
            "group": self.group,
            "name": self.name,
            "method": self.method,
            "path": self.path,
            "params": {p.name: "required" if p.required else "optional" for p in self.params},
            "description": self.description,
        }


# =============================================================================
# API versions
# =============================================================================


@dataclass(frozen=True)
class ApiVersion:
    """
    Everything that differs between the v3 and v4 pipelines.

    Attributes:
        name: Short version label ("v3", "v4")
        base_path: Path prefix every endpoint path is relative to
        login_path: Path of the token login endpoint
        logout_path: Path that ends the remote session (DELETE), if any
        unwrap: Turns a successful response body into the caller's result
        read_login: Extracts a LoginResult from the parsed login response
            and the organization id the caller asked for

    """

    name: str
    base_path: str
    login_path: str
    logout_path: str | None
    unwrap: Callable[[bytes], Any]
    read_login: Callable[[Any, str | None], LoginResult]
