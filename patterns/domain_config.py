"""Dataclass-based application configuration.

The portal, the data layer and the web layer read their settings from one
frozen dataclass that is built at startup and passed around explicitly.
There is no module-level configuration singleton: tests and embedding
applications construct their own instance.

Readers are plain callables so that the identity of the caller and the
locale can come from anywhere (a fixed demo user, a header, a session).
"""

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Callable

from core.business.user import ANONYMOUS, UserInfo


class NoAccessBehavior(str, Enum):
    """What a business object does when an authorization rule fails."""

    THROW_ERROR = "throw_error"
    SHOW_WARNING = "show_warning"


UserReader = Callable[[], UserInfo]
LocaleReader = Callable[[], str]


def _anonymous_user() -> UserInfo:
    return ANONYMOUS


def _default_locale() -> str:
    return "en"


@dataclass(frozen=True)
class AppConfig:
    """Complete configuration of the application.

    Usage::

        config = AppConfig.default()
        portal = ApiPortal(config, registry, database)
    """

    api_url: str = "/api/"
    database_url: str = "sqlite+aiosqlite:///:memory:"
    echo_sql: bool = False
    views_dir: Path | None = None
    static_dir: Path | None = None
    user_reader: UserReader = _anonymous_user
    locale_reader: LocaleReader = _default_locale
    no_access_behavior: NoAccessBehavior = NoAccessBehavior.THROW_ERROR
    seed_data: bool = True
    debug: bool = False
    cors_origins: tuple[str, ...] = field(
        default_factory=lambda: ("http://localhost:3000",)
    )

    def __post_init__(self):
        # The portal compares request paths against a prefix ending in "/".
        api_url = self.api_url or "/"
        if not api_url.endswith("/"):
            object.__setattr__(self, "api_url", api_url + "/")

    @classmethod
    def default(cls, **overrides) -> "AppConfig":
        """Create config with all defaults."""
        return cls(**overrides)

    @classmethod
    def from_env(cls, prefix: str = "BOOKSTORE_", **overrides) -> "AppConfig":
        """Create config from environment variables.

        Example: BOOKSTORE_API_URL=/services/ BOOKSTORE_DEBUG=true
        """
        values = {}
        api_url = os.getenv(f"{prefix}API_URL")
        if api_url:
            values["api_url"] = api_url
        database_url = os.getenv(f"{prefix}DATABASE_URL")
        if database_url:
            values["database_url"] = database_url
        echo = os.getenv(f"{prefix}DB_ECHO")
        if echo:
            values["echo_sql"] = echo.lower() == "true"
        behavior = os.getenv(f"{prefix}NO_ACCESS_BEHAVIOR")
        if behavior:
            values["no_access_behavior"] = NoAccessBehavior(behavior)
        debug = os.getenv(f"{prefix}DEBUG")
        if debug:
            values["debug"] = debug.lower() == "true"
        origins = os.getenv(f"{prefix}CORS_ORIGINS")
        if origins:
            values["cors_origins"] = tuple(o.strip() for o in origins.split(",") if o.strip())

        values.update(overrides)
        return cls(**values)

    def with_overrides(self, **overrides) -> "AppConfig":
        return replace(self, **overrides)
