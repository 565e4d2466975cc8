"""
Bookstore API portal — convention-based dispatch of model operations.

Provides:
- ModelRegistry: URI -> factory mapping, built once at startup
- ApiPortal: turns ``<api_url><model-uri>/<method>`` requests into model calls
"""
from core.portal.api_portal import (
    ApiPortal,
    LookupBody,
    PortalRequest,
    UpdateBody,
    derive_filter,
    resolve_method,
    to_cto,
)
from core.portal.errors import (
    DuplicateModelUriError,
    InvalidMethodError,
    InvalidMethodMapError,
    InvalidRequestBodyError,
    InvalidTypeError,
    InvalidUrlError,
    MissingModelUriError,
    PortalError,
    RegistrationError,
)
from core.portal.registry import ModelRegistry, RegistryEntry, is_exposed

__all__ = [
    # Dispatcher
    "ApiPortal",
    "LookupBody",
    "PortalRequest",
    "UpdateBody",
    "derive_filter",
    "resolve_method",
    "to_cto",
    # Registry
    "ModelRegistry",
    "RegistryEntry",
    "is_exposed",
    # Errors
    "DuplicateModelUriError",
    "InvalidMethodError",
    "InvalidMethodMapError",
    "InvalidRequestBodyError",
    "InvalidTypeError",
    "InvalidUrlError",
    "MissingModelUriError",
    "PortalError",
    "RegistrationError",
]
