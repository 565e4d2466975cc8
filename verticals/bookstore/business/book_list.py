"""BookList — read-only list of every book for the catalog page."""

from core.business.factory import QueryFactory
from core.business.model import ReadOnlyRootCollection
from verticals.bookstore.models.schemas import BookListItemDto
from verticals.bookstore.repository import BookListDao


class BookList(ReadOnlyRootCollection):
    schema = BookListItemDto
    dao = BookListDao
    key = "book_key"


class BookListFactory(QueryFactory):

    def __init__(self):
        super().__init__("book-list", {"get-all": "get_all"})

    async def get_all(self, context, filter=None):
        return await BookList.fetch(context)


factory = BookListFactory()
