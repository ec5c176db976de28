"""
PhotoShelter - Two-layer client for the PhotoShelter API.

Layers:
- core: Request pipeline, session, errors and the endpoint catalogue
- sdk: PhotoShelterV3 / PhotoShelterV4 clients with operation groups
"""

from photoshelter.core.client import (
    APIError,
    NotFoundError,
    PhotoShelterError,
    RequestFailedError,
    UnauthenticatedError,
    ValidationError,
)
from photoshelter.sdk import PhotoShelterV3, PhotoShelterV4

__version__ = "0.1.0"
__all__ = [
    "APIError",
    "NotFoundError",
    "PhotoShelterError",
    "PhotoShelterV3",
    "PhotoShelterV4",
    "RequestFailedError",
    "UnauthenticatedError",
    "ValidationError",
]
