"""Bookstore DAOs — async database access for the business objects.

Extends BaseDao with bookstore-specific queries: fetch by title, key
ranges, tag maintenance, the book lists and the bestseller search.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, extract, select

from patterns.repository import BaseDao
from verticals.bookstore.models.db_models import Book, BookTag


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------

class BookTagDao(BaseDao[BookTag]):
    """Tags are child data of a book; they are saved together with it."""

    model = BookTag
    key_column = "book_tag_key"

    async def fetch_for_book(self, book_key: int) -> list[dict]:
        stmt = (
            select(BookTag)
            .where(BookTag.book_key == book_key)
            .order_by(BookTag.book_tag_key)
        )
        result = await self.session.execute(stmt)
        return [row.to_dict() for row in result.scalars().all()]

    async def replace_for_book(self, book_key: int, tags: list[dict]) -> list[dict]:
        """Make the tags of a book equal to ``tags``.

        Tags with a known key are updated, tags without one are inserted,
        stored tags missing from the list are deleted.
        """
        stmt = select(BookTag).where(BookTag.book_key == book_key)
        result = await self.session.execute(stmt)
        existing = {row.book_tag_key: row for row in result.scalars().all()}

        for tag in tags:
            row = existing.pop(tag.get("book_tag_key"), None)
            if row is None:
                self.session.add(BookTag(book_key=book_key, tag=tag["tag"]))
            else:
                row.tag = tag["tag"]
        for row in existing.values():
            await self.session.delete(row)

        await self.session.flush()
        return await self.fetch_for_book(book_key)

    async def remove_for_book(self, book_key: int) -> None:
        await self.session.execute(delete(BookTag).where(BookTag.book_key == book_key))


# ---------------------------------------------------------------------------
# Books
# ---------------------------------------------------------------------------

class BookDao(BaseDao[Book]):
    """DAO of the Book editable root object and the BookView."""

    model = Book
    key_column = "book_key"

    def _tags(self) -> BookTagDao:
        return BookTagDao(self.session)

    async def load_children(self, data: dict[str, Any]) -> dict[str, Any]:
        data["tags"] = await self._tags().fetch_for_book(data["book_key"])
        return data

    async def create(self) -> dict[str, Any]:
        return {"publish_date": datetime.now(timezone.utc), "used": False, "tags": []}

    async def fetch_by_title(self, filter: str) -> dict[str, Any] | None:
        stmt = select(Book).where(Book.title == filter).order_by(Book.book_key)
        result = await self.session.execute(stmt)
        row = result.scalars().first()
        return await self._row_data(row) if row else None

    async def insert(self, data: dict[str, Any]) -> dict[str, Any]:
        inserted = await super().insert(data)
        inserted["tags"] = await self._tags().replace_for_book(
            inserted["book_key"], data.get("tags") or []
        )
        return inserted

    async def update(self, data: dict[str, Any]) -> dict[str, Any]:
        updated = await super().update(data)
        if "tags" in data:
            updated["tags"] = await self._tags().replace_for_book(
                updated["book_key"], data["tags"] or []
            )
        return updated

    async def remove(self, key: Any) -> None:
        await self._tags().remove_for_book(key)
        await super().remove(key)


class BooksDao(BookDao):
    """DAO of the Books editable root collection."""

    async def fetch_from_to(self, filter: dict[str, Any]) -> list[dict[str, Any]]:
        """Books whose key lies in ``[from, to]``; either bound may be missing."""
        stmt = select(Book).order_by(Book.book_key)
        lower = filter.get("from") if isinstance(filter, dict) else None
        upper = filter.get("to") if isinstance(filter, dict) else None
        if lower is not None:
            stmt = stmt.where(Book.book_key >= lower)
        if upper is not None:
            stmt = stmt.where(Book.book_key <= upper)
        result = await self.session.execute(stmt)
        return [await self._row_data(row) for row in result.scalars().all()]


# ---------------------------------------------------------------------------
# Book lists
# ---------------------------------------------------------------------------

class BookListDao(BaseDao[Book]):
    """Read-only list of books: key, author and title."""

    model = Book
    key_column = "book_key"

    def to_data(self, row: Book) -> dict[str, Any]:
        return {"book_key": row.book_key, "author": row.author, "title": row.title}

    async def fetch_all(self) -> tuple[list[dict], int]:
        stmt = select(Book).order_by(Book.author, Book.book_key)
        result = await self.session.execute(stmt)
        items = [self.to_data(row) for row in result.scalars().all()]
        return items, await self.count()


class AdminBookListDao(BookListDao):
    """Book list for administrators: adds price and condition."""

    def to_data(self, row: Book) -> dict[str, Any]:
        data = super().to_data(row)
        data.update(price=row.price, used=row.used)
        return data


# ---------------------------------------------------------------------------
# Bestseller search
# ---------------------------------------------------------------------------

class FindBestsellerDao(BookDao):
    """Command DAO: every method takes and returns the command data."""

    async def _find(self, tags: list[str], year: int | None = None) -> dict[str, Any] | None:
        stmt = select(Book).order_by(Book.book_key)
        if tags:
            tagged = select(BookTag.book_key).where(BookTag.tag.in_(tags))
            stmt = stmt.where(Book.book_key.in_(tagged))
        if year:
            stmt = stmt.where(extract("year", Book.publish_date) == year)
        result = await self.session.execute(stmt)
        row = result.scalars().first()
        return await self._row_data(row) if row else None

    @staticmethod
    def _tags_of(data: dict[str, Any]) -> list[str]:
        return [t for t in (data.get("tag1"), data.get("tag2"), data.get("tag3")) if t]

    async def execute(self, data: dict[str, Any]) -> dict[str, Any]:
        data["result"] = await self._find(self._tags_of(data))
        return data

    async def in_year_by_tags(self, data: dict[str, Any]) -> dict[str, Any]:
        data["result"] = await self._find(self._tags_of(data), data.get("publish_year"))
        return data
