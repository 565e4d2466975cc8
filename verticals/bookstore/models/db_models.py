"""SQLAlchemy tables for the bookstore vertical.

Each table inherits from Base and uses TimestampMixin for audit columns.
The to_dict() method provides the plain-data interface used by the DAOs;
tags are attached by the book DAO with an explicit query so that no lazy
relationship loading happens inside async sessions.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from core.models.base import Base, TimestampMixin


class Book(TimestampMixin, Base):
    """A book in the catalog."""

    __tablename__ = "books"

    book_key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author: Mapped[str | None] = mapped_column(String(200), nullable=True, index=True)
    title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    publish_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    price: Mapped[float | None] = mapped_column(Float, nullable=True)
    used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def to_dict(self) -> dict:
        return {
            "book_key": self.book_key,
            "author": self.author,
            "title": self.title,
            "publish_date": self.publish_date,
            "price": self.price,
            "used": self.used,
        }


class BookTag(TimestampMixin, Base):
    """A tag attached to a book."""

    __tablename__ = "book_tags"

    book_tag_key: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    book_key: Mapped[int] = mapped_column(
        Integer, ForeignKey("books.book_key", ondelete="CASCADE"), nullable=False, index=True
    )
    tag: Mapped[str] = mapped_column(String(100), nullable=False)

    def to_dict(self) -> dict:
        return {
            "book_tag_key": self.book_tag_key,
            "book_key": self.book_key,
            "tag": self.tag,
        }
