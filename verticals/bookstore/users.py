"""Demo users of the bookstore.

The demo runs without authentication: every request is made by the user
the configured reader returns, ``jimmy-jump`` unless a test or an
embedding application supplies another reader.
"""

from dataclasses import dataclass

from core.business.user import UserInfo


@dataclass(frozen=True)
class User(UserInfo):
    """Bookstore user."""


DEMO_USER = User(
    user_code="jimmy-jump",
    user_name="Jimmy Jump",
    email="jimmy.jump@mail.net",
    roles=("administrators", "developers", "designers"),
)

GUEST_USER = User(user_code="guest", user_name="Guest", roles=())


def get_user() -> User:
    """User reader of the demo application."""
    return DEMO_USER
