"""Books — the catalog as a resource.

Inserting, updating and removing work on single Book objects; the list
methods return the Books editable root collection.
"""

from core.business.factory import QueryFactory
from core.business.model import EditableRootCollection
from verticals.bookstore.business.book import Book
from verticals.bookstore.models.schemas import BookItemDto
from verticals.bookstore.repository import BooksDao


class Books(EditableRootCollection):
    schema = BookItemDto
    dao = BooksDao
    key = "book_key"
    read_only = frozenset({"book_key"})


class BooksFactory(QueryFactory):

    def __init__(self):
        super().__init__("books", {
            "get-all": "get_all",
            "get-from-to": "get_from_to",
            "get-by-title": "get_by_title",
        })

    async def create(self, context, filter=None):
        return await Book.create(context)

    async def get(self, context, filter):
        return await Book.fetch(context, filter)

    async def get_by_title(self, context, filter):
        return await Book.fetch(context, filter, "fetch_by_title")

    async def get_all(self, context, filter=None):
        return await Books.fetch(context)

    async def get_from_to(self, context, filter):
        return await Books.fetch(context, filter or {}, "fetch_from_to")


factory = BooksFactory()
