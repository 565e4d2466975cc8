"""Identity of the user a request runs for."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UserInfo:
    """Immutable user identity with role membership checks."""

    user_code: str
    user_name: str = ""
    email: str = ""
    roles: tuple[str, ...] = field(default_factory=tuple)

    def is_in_role(self, role: str) -> bool:
        return role in self.roles

    def is_in_some_role(self, roles: list[str] | tuple[str, ...]) -> bool:
        return any(role in self.roles for role in roles)

    def is_in_every_role(self, roles: list[str] | tuple[str, ...]) -> bool:
        return all(role in self.roles for role in roles)


ANONYMOUS = UserInfo(user_code="anonymous", user_name="Anonymous")
