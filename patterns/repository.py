"""Async data-access object pattern.

Provides a generic base DAO with the operations business objects run
against the data layer: create defaults, fetch by key, fetch all, insert,
update and remove. Verticals subclass this to add domain-specific fetch
methods (fetch_by_title, fetch_from_to, ...) that models call by name.

Data crosses this boundary as plain dicts keyed by column name.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.business.errors import DataAccessError
from core.models.base import Base

# ---------------------------------------------------------------------------
# Type variable for table classes
# ---------------------------------------------------------------------------

ModelT = TypeVar("ModelT", bound=Base)


# ---------------------------------------------------------------------------
# Base DAO
# ---------------------------------------------------------------------------

class BaseDao(Generic[ModelT]):
    """Generic async DAO with CRUD operations.

    Subclass and set `model` and `key_column`::

        class BookDao(BaseDao[Book]):
            model = Book
            key_column = "book_key"

            async def fetch_by_title(self, filter):
                stmt = select(Book).where(Book.title == filter)
                result = await self.session.execute(stmt)
                row = result.scalars().first()
                return self.to_data(row) if row else None
    """

    model: type[ModelT]
    key_column: str = "id"

    def __init__(self, session: AsyncSession):
        self.session = session

    # -- Row conversion --

    def to_data(self, row: ModelT) -> dict[str, Any]:
        """Convert a row into a plain dict."""
        return row.to_dict()

    @property
    def _key(self):
        return getattr(self.model, self.key_column)

    async def _get_row(self, key: Any) -> ModelT | None:
        stmt = select(self.model).where(self._key == key)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    # -- Create (defaults for a new instance) --

    async def create(self) -> dict[str, Any]:
        """Return initial data for a blank instance."""
        return {}

    # -- Fetch --

    async def fetch(self, filter: Any) -> dict[str, Any] | None:
        """Fetch a single item by key."""
        row = await self._get_row(filter)
        return await self._row_data(row) if row else None

    async def fetch_all(self) -> list[dict[str, Any]]:
        """Fetch every item ordered by key."""
        stmt = select(self.model).order_by(self._key)
        result = await self.session.execute(stmt)
        return [await self._row_data(row) for row in result.scalars().all()]

    async def count(self) -> int:
        stmt = select(func.count()).select_from(self.model)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    # -- Insert --

    async def insert(self, data: dict[str, Any]) -> dict[str, Any]:
        """Insert a new item and return its data including the generated key."""
        values = {k: v for k, v in data.items() if hasattr(self.model, k)}
        values.pop(self.key_column, None)
        item = self.model(**values)
        self.session.add(item)
        await self.session.flush()
        return await self._row_data(item)

    # -- Update --

    async def update(self, data: dict[str, Any]) -> dict[str, Any]:
        """Update an existing item. Raises DataAccessError if not found."""
        key = data.get(self.key_column)
        item = await self._get_row(key)
        if item is None:
            raise DataAccessError(f"{self.model.__name__} {key!r} does not exist")

        for name, value in data.items():
            if name == self.key_column or name in ("created_at", "updated_at"):
                continue
            if hasattr(item, name):
                setattr(item, name, value)

        await self.session.flush()
        return await self._row_data(item)

    # -- Remove --

    async def remove(self, key: Any) -> None:
        """Delete an item. Raises DataAccessError if not found."""
        item = await self._get_row(key)
        if item is None:
            raise DataAccessError(f"{self.model.__name__} {key!r} does not exist")

        await self.session.delete(item)
        await self.session.flush()

    async def load_children(self, data: dict[str, Any]) -> dict[str, Any]:
        """Attach child data (e.g. tags of a book). Override in subclasses."""
        return data

    async def _row_data(self, row: ModelT) -> dict[str, Any]:
        return await self.load_children(self.to_data(row))
