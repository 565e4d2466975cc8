"""Pydantic DTO schemas of the bookstore business objects.

Field names are snake_case in Python and camelCase on the wire
(``bookKey``, ``publishDate``); both spellings are accepted on input.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DtoModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------

class BookTagDto(DtoModel):
    book_tag_key: Optional[int] = None
    book_key: Optional[int] = None
    tag: str = Field(..., min_length=1, max_length=100)


# ---------------------------------------------------------------------------
# Books
# ---------------------------------------------------------------------------

class BookDto(DtoModel):
    book_key: Optional[int] = None
    author: Optional[str] = Field(None, max_length=200)
    title: Optional[str] = Field(None, max_length=500)
    publish_date: Optional[datetime] = None
    price: Optional[float] = Field(None, ge=0)
    used: bool = False
    tags: list[BookTagDto] = Field(default_factory=list)


class BookItemDto(BookDto):
    """Element of the editable books collection: author and title required."""

    author: str = Field(..., min_length=1, max_length=200)
    title: str = Field(..., min_length=1, max_length=500)


class BookViewDto(DtoModel):
    book_key: Optional[int] = None
    author: Optional[str] = None
    title: Optional[str] = None
    publish_date: Optional[datetime] = None
    price: Optional[float] = None
    used: bool = False
    tags: list[BookTagDto] = Field(default_factory=list)


class BookListItemDto(DtoModel):
    book_key: int
    author: Optional[str] = None
    title: Optional[str] = None


class AdminBookListItemDto(BookListItemDto):
    price: Optional[float] = None
    used: bool = False


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class FindBestsellerDto(DtoModel):
    publish_year: Optional[int] = Field(None, ge=1000, le=9999)
    tag1: Optional[str] = None
    tag2: Optional[str] = None
    tag3: Optional[str] = None
    result: Optional[BookViewDto] = None
