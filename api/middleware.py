"""Current-user middleware using ContextVar.

Runs the configured user reader once per request and stores the result in
a ContextVar so that the portal endpoint (and anything it calls) can ask
for get_current_user() without explicit parameter passing.
"""

from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from core.business.user import ANONYMOUS, UserInfo
from patterns.domain_config import UserReader

# ---------------------------------------------------------------------------
# Context variable — task-safe user state
# ---------------------------------------------------------------------------

_current_user: ContextVar[UserInfo] = ContextVar("current_user", default=ANONYMOUS)


def get_current_user() -> UserInfo:
    """Return the user of the current request.

    Safe to call from any async context within the request lifecycle::

        user = get_current_user()
        if user.is_in_role("administrators"):
            ...
    """
    return _current_user.get()


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

class UserMiddleware(BaseHTTPMiddleware):
    """Resolve the request user with the configured reader."""

    def __init__(self, app: ASGIApp, user_reader: UserReader):
        super().__init__(app)
        self.user_reader = user_reader

    async def dispatch(self, request: Request, call_next) -> Response:
        token = _current_user.set(self.user_reader())
        try:
            response = await call_next(request)
            return response
        finally:
            _current_user.reset(token)
