"""Exceptions raised by business objects.

These are the "upstream" errors of the API portal: the portal never
reinterprets them, the HTTP layer maps each class to a status code.
"""

from __future__ import annotations

from typing import Any


class ModelError(Exception):
    """Base class for all business-object failures."""


class AuthorizationError(ModelError):
    """The current user is not allowed to perform an action."""

    def __init__(self, action: str, model_name: str, message: str):
        super().__init__(message)
        self.action = action
        self.model_name = model_name
        self.message = message


class ValidationFailedError(ModelError):
    """Deserialized data broke one or more validation rules."""

    def __init__(self, model_name: str, broken_rules: list[Any]):
        super().__init__(
            f"{model_name} is invalid: {len(broken_rules)} broken rule(s)"
        )
        self.model_name = model_name
        self.broken_rules = broken_rules

    def to_dict(self) -> dict[str, Any]:
        return {
            "model": self.model_name,
            "brokenRules": [rule.to_dict() for rule in self.broken_rules],
        }


class ModelNotFoundError(ModelError):
    """A fetch returned no data for the given filter."""

    def __init__(self, model_name: str, filter: Any = None):
        super().__init__(f"{model_name} not found: {filter!r}")
        self.model_name = model_name
        self.filter = filter


class DataAccessError(ModelError):
    """The data layer rejected an operation."""


class ModelStateError(ModelError):
    """Illegal lifecycle transition of a business object."""

    def __init__(self, from_state: str, to_state: str, allowed: list[str]):
        super().__init__(
            f"Cannot transition from {from_state} to {to_state}. "
            f"Allowed: {allowed}"
        )
        self.from_state = from_state
        self.to_state = to_state
        self.allowed = allowed
