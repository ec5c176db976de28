"""
Core layer - Request pipeline, types and endpoint catalogue.

This layer provides:
- Session and endpoint descriptor dataclasses
- Low-level HTTP client with auth, error classification and unwrapping
- The declarative v3 / v4 endpoint tables
"""

from photoshelter.core.catalog import V3_ENDPOINTS, V4_ENDPOINTS
from photoshelter.core.client import (
    API_V3,
    API_V4,
    APIClient,
    APIError,
    NotFoundError,
    PhotoShelterError,
    RequestFailedError,
    UnauthenticatedError,
    ValidationError,
    classify_error,
    encode_form,
    encode_query,
    unwrap_data,
    unwrap_raw,
)
from photoshelter.core.types import ApiVersion, Endpoint, LoginResult, Param, Session

__all__ = [
    "API_V3",
    "API_V4",
    "APIClient",
    "APIError",
    "ApiVersion",
    "Endpoint",
    "LoginResult",
    "NotFoundError",
    "Param",
    "PhotoShelterError",
    "RequestFailedError",
    "Session",
    "UnauthenticatedError",
    "V3_ENDPOINTS",
    "V4_ENDPOINTS",
    "ValidationError",
    "classify_error",
    "encode_form",
    "encode_query",
    "unwrap_data",
    "unwrap_raw",
]
