"""Model factories: the objects the API portal registers and calls.

A factory names its model with a URI (``books``, ``admin/book-list``) and
may map URL-friendly method names (``get-by-title``) to its own methods
(``get_by_title``). Query factories expose fetch-style methods taking
``(context, filter)``; command factories create a command object whose
methods are then resolved on the instance.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Mapping

from core.business.context import ModelContext
from core.business.model import CommandObject


class ModelKind(str, Enum):
    """Closed variant the portal dispatches on."""

    QUERY = "query"
    COMMAND = "command"


class FactoryBase:
    """Common part of every model factory."""

    kind: ClassVar[ModelKind]
    reserved_members: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, model_uri: str, method_map: Mapping[str, str] | None = None):
        self.model_uri = model_uri
        self.method_map: Mapping[str, str] = MappingProxyType(dict(method_map or {}))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.model_uri!r})"


class QueryFactory(FactoryBase):
    """Factory of root objects and collections.

    Example::

        class BookFactory(QueryFactory):
            def __init__(self):
                super().__init__("book", {"get-by-title": "get_by_title"})

            async def get_by_title(self, context, filter):
                return await Book.fetch(context, filter, "fetch_by_title")
    """

    kind = ModelKind.QUERY


class CommandFactory(FactoryBase):
    """Factory of a command object class."""

    kind = ModelKind.COMMAND
    model: ClassVar[type[CommandObject]]

    async def create(self, context: ModelContext, filter: Any = None) -> CommandObject:
        return await self.model.create(context)
