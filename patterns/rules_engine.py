"""Pure-function rules engine for business objects.

Rules are stateless functions: (user, argument) -> RuleResult.
No database, no side effects. Authorization rules bind such a function to
an action of a model (fetch, create, call a command method, read a
property); validation failures coming from pydantic are normalized into
broken rules so callers get one shape for every rejected DTO.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from pydantic import ValidationError

from core.business.user import UserInfo


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class RuleResult:
    """Outcome of a single rule evaluation."""

    passed: bool
    rule_name: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class RuleSetResult:
    """Aggregate outcome of multiple rules."""

    all_passed: bool
    results: list[RuleResult]
    failed: list[RuleResult] = field(default_factory=list)

    def __post_init__(self):
        self.failed = [r for r in self.results if not r.passed]
        self.all_passed = len(self.failed) == 0


class RuleSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"


@dataclass
class BrokenRule:
    """A validation rule the data of a model failed."""

    property: str
    message: str
    rule_name: str = "validation"
    severity: RuleSeverity = RuleSeverity.ERROR

    def to_dict(self) -> dict[str, Any]:
        return {
            "property": self.property,
            "message": self.message,
            "ruleName": self.rule_name,
            "severity": self.severity.value,
        }


# ---------------------------------------------------------------------------
# Role rules
# ---------------------------------------------------------------------------

def is_in_role(user: UserInfo, role: str) -> RuleResult:
    """The user must be a member of ``role``."""
    passed = user.is_in_role(role)
    return RuleResult(
        passed=passed,
        rule_name="is_in_role",
        message=f"User is {'' if passed else 'not '}in role {role}",
        details={"user": user.user_code, "role": role},
    )


def is_in_any_role(user: UserInfo, roles: list[str]) -> RuleResult:
    """The user must be a member of at least one of ``roles``."""
    passed = user.is_in_some_role(roles)
    return RuleResult(
        passed=passed,
        rule_name="is_in_any_role",
        message=f"User is {'' if passed else 'not '}in any of {roles}",
        details={"user": user.user_code, "roles": list(roles)},
    )


def is_in_all_roles(user: UserInfo, roles: list[str]) -> RuleResult:
    """The user must be a member of every role in ``roles``."""
    passed = user.is_in_every_role(roles)
    return RuleResult(
        passed=passed,
        rule_name="is_in_all_roles",
        message=f"User is {'' if passed else 'not '}in all of {roles}",
        details={"user": user.user_code, "roles": list(roles)},
    )


def is_not_in_role(user: UserInfo, role: str) -> RuleResult:
    """The user must not be a member of ``role``."""
    passed = not user.is_in_role(role)
    return RuleResult(
        passed=passed,
        rule_name="is_not_in_role",
        message=f"User is {'not ' if passed else ''}in role {role}",
        details={"user": user.user_code, "role": role},
    )


# ---------------------------------------------------------------------------
# Authorization rules
# ---------------------------------------------------------------------------

class AuthorizationAction(str, Enum):
    FETCH = "fetch"
    CREATE = "create"
    UPDATE = "update"
    REMOVE = "remove"
    EXECUTE = "execute"
    CALL = "call"
    READ_PROPERTY = "read_property"


RoleCheck = Callable[[UserInfo, Any], RuleResult]


@dataclass(frozen=True)
class AuthorizationRule:
    """Binds a role check to one action of a model.

    ``target`` names the command method (CALL) or the property
    (READ_PROPERTY) the rule guards; it is ignored for other actions.
    """

    action: AuthorizationAction
    check: RoleCheck
    argument: Any
    message: str
    target: str | None = None

    def applies_to(self, action: AuthorizationAction, target: str | None = None) -> bool:
        if self.action is not action:
            return False
        return self.target is None or self.target == target

    def evaluate(self, user: UserInfo) -> RuleResult:
        result = self.check(user, self.argument)
        if not result.passed:
            result.message = self.message
        return result


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def broken_rules_from_validation(exc: ValidationError) -> list[BrokenRule]:
    """Convert a pydantic ValidationError into broken rules."""
    broken = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        broken.append(
            BrokenRule(
                property=location or "__root__",
                message=error.get("msg", "Invalid value"),
                rule_name=error.get("type", "validation"),
            )
        )
    return broken


# ---------------------------------------------------------------------------
# Rule composition
# ---------------------------------------------------------------------------

def evaluate_rules(*rules: RuleResult) -> RuleSetResult:
    """Compose multiple rule results into a single aggregate.

    Example::

        result = evaluate_rules(
            is_in_role(user, "developers"),
            is_not_in_role(user, "guests"),
        )
        if not result.all_passed:
            raise AuthorizationError(...)
    """
    return RuleSetResult(
        all_passed=all(r.passed for r in rules),
        results=list(rules),
    )
