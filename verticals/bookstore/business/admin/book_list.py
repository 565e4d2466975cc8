"""Administrators' book list: every book with price and condition."""

from core.business.factory import QueryFactory
from core.business.model import ReadOnlyRootCollection
from patterns.rules_engine import AuthorizationAction as A
from patterns.rules_engine import AuthorizationRule, is_in_role
from verticals.bookstore.models.schemas import AdminBookListItemDto
from verticals.bookstore.repository import AdminBookListDao


class AdminBookList(ReadOnlyRootCollection):
    model_name = "admin/BookList"
    schema = AdminBookListItemDto
    dao = AdminBookListDao
    key = "book_key"
    rules = (
        AuthorizationRule(A.FETCH, is_in_role, "administrators", "You are not authorized to retrieve the book list."),
    )


class AdminBookListFactory(QueryFactory):

    def __init__(self):
        super().__init__("admin/book-list", {"get-all": "get_all"})

    async def get_all(self, context, filter=None):
        return await AdminBookList.fetch(context)


factory = AdminBookListFactory()
