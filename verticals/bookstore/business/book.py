"""Book — editable root object with tags, restricted to developers."""

from core.business.factory import QueryFactory
from core.business.model import EditableRootObject
from patterns.rules_engine import AuthorizationAction as A
from patterns.rules_engine import AuthorizationRule, is_in_role
from verticals.bookstore.models.schemas import BookDto
from verticals.bookstore.repository import BookDao


class Book(EditableRootObject):
    schema = BookDto
    dao = BookDao
    key = "book_key"
    read_only = frozenset({"book_key"})
    rules = (
        AuthorizationRule(A.FETCH, is_in_role, "developers", "You are not authorized to retrieve book."),
        AuthorizationRule(A.CREATE, is_in_role, "developers", "You are not authorized to create book."),
        AuthorizationRule(A.UPDATE, is_in_role, "developers", "You are not authorized to modify book."),
        AuthorizationRule(A.REMOVE, is_in_role, "developers", "You are not authorized to delete book."),
    )


class BookFactory(QueryFactory):

    def __init__(self):
        super().__init__("book", {"get-by-title": "get_by_title"})

    async def create(self, context, filter=None):
        return await Book.create(context)

    async def get(self, context, filter):
        return await Book.fetch(context, filter)

    async def get_by_title(self, context, filter):
        return await Book.fetch(context, filter, "fetch_by_title")


factory = BookFactory()
