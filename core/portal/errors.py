"""Errors raised by the API portal itself.

Request errors reject a single request. Registration errors are raised
while the registry is built and abort startup.
"""


class PortalError(Exception):
    """Base class for request-scoped portal failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidUrlError(PortalError):
    def __init__(self, url: str):
        super().__init__(f"Invalid API URL: {url}")
        self.url = url


class InvalidTypeError(PortalError):
    def __init__(self, model_uri: str):
        super().__init__(f"Invalid type: {model_uri}")
        self.model_uri = model_uri


class InvalidMethodError(PortalError):
    def __init__(self, method: str):
        super().__init__(f"Invalid method: {method}")
        self.method = method


class InvalidRequestBodyError(PortalError):
    def __init__(self, method: str, reason: str):
        super().__init__(f"Invalid request body for {method}: {reason}")
        self.method = method
        self.reason = reason


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------

class RegistrationError(Exception):
    """A model factory cannot be registered."""


class MissingModelUriError(RegistrationError):
    def __init__(self, source: str):
        super().__init__(f"Missing model URI: {source}")
        self.source = source


class DuplicateModelUriError(RegistrationError):
    def __init__(self, model_uri: str):
        super().__init__(f"Duplicate model URI: {model_uri}")
        self.model_uri = model_uri


class InvalidMethodMapError(RegistrationError):
    def __init__(self, model_uri: str, alias: str, target: str):
        super().__init__(
            f"Method map of {model_uri} maps {alias!r} to missing method {target!r}"
        )
        self.model_uri = model_uri
        self.alias = alias
        self.target = target
