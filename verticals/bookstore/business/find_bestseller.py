"""FindBestseller — command searching the first book matching year and tags."""

from core.business.factory import CommandFactory
from core.business.model import CommandObject
from patterns.rules_engine import AuthorizationAction as A
from patterns.rules_engine import AuthorizationRule, is_in_role
from verticals.bookstore.models.schemas import FindBestsellerDto
from verticals.bookstore.repository import FindBestsellerDao


class FindBestseller(CommandObject):
    schema = FindBestsellerDto
    dao = FindBestsellerDao
    rules = (
        AuthorizationRule(
            A.CALL, is_in_role, "administrators",
            "You are not authorized to execute the command.",
            target="in_year_by_tags",
        ),
    )

    async def in_year_by_tags(self):
        return await self.call("in_year_by_tags")


class FindBestsellerFactory(CommandFactory):
    model = FindBestseller

    def __init__(self):
        super().__init__("find-bestseller", {"in-year-by-tags": "in_year_by_tags"})


factory = FindBestsellerFactory()
