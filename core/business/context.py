"""Per-request context handed to every business-object operation."""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from core.business.user import UserInfo
from patterns.domain_config import NoAccessBehavior


@dataclass(frozen=True)
class ModelContext:
    """Who runs the operation and where the data lives.

    Built by the API portal for each request from AppConfig readers and the
    request's database session; models keep a reference for save().
    """

    user: UserInfo
    session: AsyncSession
    locale: str = "en"
    no_access_behavior: NoAccessBehavior = NoAccessBehavior.THROW_ERROR
