"""Demo data loaded into the in-memory database at startup."""

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from verticals.bookstore.models.db_models import Book, BookTag

logger = logging.getLogger("bookstore.seed")

SAMPLE_BOOKS = [
    {"author": "Tom Wood", "title": "The Enemy", "year": 2012, "price": 9.99,
     "used": False, "tags": ["thriller", "action"]},
    {"author": "China Mieville", "title": "Kraken", "year": 2010, "price": 12.5,
     "used": False, "tags": ["fantasy", "adventure"]},
    {"author": "James Clavell", "title": "Shogun", "year": 1975, "price": 34.5,
     "used": False, "tags": ["adventure", "history"]},
    {"author": "John Steinbeck", "title": "East of Eden", "year": 1952, "price": 15.0,
     "used": True, "tags": ["classic", "drama"]},
    {"author": "Mario Vargas Llosa", "title": "El hablador", "year": 1987, "price": 11.2,
     "used": False, "tags": ["novel", "culture"]},
    {"author": "Joseph Heller", "title": "Catch-22", "year": 1961, "price": 13.75,
     "used": True, "tags": ["satire", "war"]},
]


async def seed(session: AsyncSession) -> int:
    """Insert the sample books with their tags. Returns the number of books."""
    for sample in SAMPLE_BOOKS:
        book = Book(
            author=sample["author"],
            title=sample["title"],
            publish_date=datetime(sample["year"], 1, 1, tzinfo=timezone.utc),
            price=sample["price"],
            used=sample["used"],
        )
        session.add(book)
        await session.flush()
        for tag in sample["tags"]:
            session.add(BookTag(book_key=book.book_key, tag=tag))
    await session.flush()
    logger.info("Seeded %d books", len(SAMPLE_BOOKS))
    return len(SAMPLE_BOOKS)
