"""BookView — read-only book details; the price is shown to sales staff only."""

from core.business.factory import QueryFactory
from core.business.model import ReadOnlyRootObject
from patterns.rules_engine import AuthorizationAction as A
from patterns.rules_engine import AuthorizationRule, is_in_any_role, is_in_role
from verticals.bookstore.models.schemas import BookViewDto
from verticals.bookstore.repository import BookDao


class BookView(ReadOnlyRootObject):
    schema = BookViewDto
    dao = BookDao
    key = "book_key"
    rules = (
        AuthorizationRule(
            A.READ_PROPERTY, is_in_any_role, ["salesmen", "administrators"],
            "You are not authorized to view the price of the book.",
            target="price",
        ),
        AuthorizationRule(A.FETCH, is_in_role, "designers", "You are not authorized to retrieve book view."),
    )


class BookViewFactory(QueryFactory):

    def __init__(self):
        super().__init__("book-view", {"get-by-title": "get_by_title"})

    async def get(self, context, filter):
        return await BookView.fetch(context, filter)

    async def get_by_title(self, context, filter):
        return await BookView.fetch(context, filter, "fetch_by_title")


factory = BookViewFactory()
