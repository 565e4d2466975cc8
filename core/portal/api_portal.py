"""API portal — one generic endpoint for every registered model.

Requests arrive as ``<api_url><model-uri>/<method>`` with a JSON body. The
portal looks the model up in the registry and turns the request into
exactly one model operation:

- ``insert``: create a blank instance, deserialize the body, save
- ``update``: look up ``body.method(body.filter)``, deserialize ``body.dto``, save
- ``remove``: look up ``body.method(body.filter)``, mark removed, save -> None
- anything else on a command model: create, deserialize the body, call the
  named method on the command
- anything else on a query model: call the named factory method with the
  filter derived from the body

Method names resolve to an exact public method first and to the factory's
method map second (``get-by-title`` -> ``get_by_title``). Errors of the
model framework propagate unchanged.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, Field, ValidationError

from core.business.context import ModelContext
from core.business.factory import FactoryBase, ModelKind
from core.business.model import (
    EditableRootCollection,
    EditableRootObject,
    ModelType,
    ReadOnlyRootCollection,
)
from core.business.user import UserInfo
from core.database import Database
from core.portal.errors import (
    InvalidMethodError,
    InvalidRequestBodyError,
    InvalidTypeError,
    InvalidUrlError,
)
from core.portal.registry import ModelRegistry, RegistryEntry, is_exposed
from patterns.domain_config import AppConfig

logger = logging.getLogger("bookstore.portal")


# ---------------------------------------------------------------------------
# Request types
# ---------------------------------------------------------------------------

@dataclass
class PortalRequest:
    """Transport-agnostic request: a URL path and a parsed JSON body."""

    url: str
    body: Any = None
    user: UserInfo | None = None


class LookupBody(BaseModel):
    """Body of ``remove``: which factory method finds the instance."""

    method: str = Field(..., min_length=1)
    filter: Any = None


class UpdateBody(LookupBody):
    """Body of ``update``: lookup plus the DTO to apply."""

    dto: Any = Field(...)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def derive_filter(body: Any) -> Any:
    """Filter of a query request.

    ``{"$isEmpty": true}`` means no filter, ``{"$filter": x}`` means ``x``,
    anything else is the filter itself.
    """
    if isinstance(body, dict):
        if body.get("$isEmpty"):
            return None
        if "$filter" in body:
            return body["$filter"]
    return body


def resolve_method(target: Any, factory: FactoryBase, name: str) -> str:
    """Name of the method of ``target`` that ``name`` refers to.

    An exact public method wins; otherwise the factory's method map is
    consulted. Raises InvalidMethodError when neither yields a callable.
    """
    if is_exposed(target, name):
        return name
    mapped = factory.method_map.get(name)
    if mapped and is_exposed(target, mapped):
        return mapped
    raise InvalidMethodError(name)


async def _invoke(func: Callable, *args: Any) -> Any:
    """Call a sync or async method and return its result."""
    result = func(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def _require_editable(instance: Any, verb: str) -> None:
    if not isinstance(instance, (EditableRootObject, EditableRootCollection)):
        raise InvalidMethodError(verb)


def to_cto(result: Any) -> Any:
    """Serialize a model operation result for the response."""
    if isinstance(result, ReadOnlyRootCollection):
        return {
            "modelType": ModelType.READ_ONLY_ROOT_COLLECTION.value,
            "collection": result.to_cto(),
            "totalItems": result.total_items,
        }
    serializer = getattr(result, "to_cto", None)
    if callable(serializer):
        return serializer()
    return result


# ---------------------------------------------------------------------------
# Portal
# ---------------------------------------------------------------------------

class ApiPortal:
    """Dispatches portal requests to the models of a registry.

    Usage::

        portal = ApiPortal(config, registry, database)
        dto = await portal.process(PortalRequest(url="/api/books/get-all", body={}))
    """

    def __init__(self, config: AppConfig, registry: ModelRegistry, database: Database):
        self.config = config
        self.api_url = config.api_url
        self.registry = registry
        self.database = database

    # -- URL --

    def parse_url(self, url: str) -> tuple[str, str]:
        """Split a request path into (model URI, method)."""
        if not url.startswith(self.api_url):
            raise InvalidUrlError(url)
        path = url[len(self.api_url):]
        pos = path.rfind("/")
        if pos < 1 or pos == len(path) - 1:
            raise InvalidUrlError(url)
        return path[:pos], path[pos + 1:]

    # -- Request processing --

    async def process(self, request: PortalRequest) -> Any:
        """Run one request and return its JSON-ready result."""
        model_uri, method = self.parse_url(request.url)
        entry = self.registry.get(model_uri)
        if entry is None:
            raise InvalidTypeError(model_uri)

        body = request.body if request.body is not None else {}
        user = request.user or self.config.user_reader()
        logger.debug("%s %s/%s", user.user_code, model_uri, method)

        async with self.database.session() as session:
            context = ModelContext(
                user=user,
                session=session,
                locale=self.config.locale_reader(),
                no_access_behavior=self.config.no_access_behavior,
            )
            return await self.dispatch(entry, method, body, context)

    async def dispatch(
        self, entry: RegistryEntry, method: str, body: Any, context: ModelContext
    ) -> Any:
        """Run ``method`` of a registered model inside an open context."""
        if method == "insert":
            return await self._insert(entry, body, context)
        if method == "update":
            return await self._update(entry, body, context)
        if method == "remove":
            return await self._remove(entry, body, context)
        if entry.kind is ModelKind.COMMAND:
            return await self._execute(entry, method, body, context)
        return await self._fetch(entry, method, body, context)

    # -- Verbs --

    async def _insert(self, entry: RegistryEntry, body: Any, context: ModelContext) -> Any:
        factory = entry.factory
        if entry.kind is ModelKind.COMMAND or not is_exposed(factory, "create"):
            raise InvalidMethodError("insert")
        instance = await _invoke(factory.create, context)
        await instance.from_cto(body)
        await instance.save()
        return instance.to_cto()

    async def _update(self, entry: RegistryEntry, body: Any, context: ModelContext) -> Any:
        lookup = self._parse_body(UpdateBody, body, "update")
        instance = await self._lookup(entry, lookup, context)
        _require_editable(instance, "update")
        await instance.from_cto(lookup.dto)
        await instance.save()
        return instance.to_cto()

    async def _remove(self, entry: RegistryEntry, body: Any, context: ModelContext) -> None:
        lookup = self._parse_body(LookupBody, body, "remove")
        instance = await self._lookup(entry, lookup, context)
        _require_editable(instance, "remove")
        instance.remove()
        await instance.save()
        return None

    async def _execute(
        self, entry: RegistryEntry, method: str, body: Any, context: ModelContext
    ) -> Any:
        command = await entry.factory.create(context)
        await command.from_cto(body)
        name = resolve_method(command, entry.factory, method)
        result = await _invoke(getattr(command, name))
        return to_cto(result)

    async def _fetch(
        self, entry: RegistryEntry, method: str, body: Any, context: ModelContext
    ) -> Any:
        factory = entry.factory
        name = resolve_method(factory, factory, method)
        result = await _invoke(getattr(factory, name), context, derive_filter(body))
        return to_cto(result)

    # -- Helpers --

    async def _lookup(self, entry: RegistryEntry, lookup: LookupBody, context: ModelContext):
        factory = entry.factory
        if entry.kind is ModelKind.COMMAND:
            raise InvalidMethodError(lookup.method)
        name = resolve_method(factory, factory, lookup.method)
        return await _invoke(getattr(factory, name), context, lookup.filter)

    @staticmethod
    def _parse_body(schema: type[LookupBody], body: Any, method: str):
        try:
            return schema.model_validate(body)
        except ValidationError as exc:
            reason = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
            )
            raise InvalidRequestBodyError(method, reason) from exc
