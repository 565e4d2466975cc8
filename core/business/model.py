"""Business-object base classes.

A model class declares its shape and behavior through class attributes:

- ``schema``: pydantic DTO schema (camelCase aliases on the wire)
- ``dao``: data-access class, instantiated with the request session
- ``rules``: authorization rules (fetch, create, update, remove, call, read)
- ``key``: name of the key property, ``read_only``: properties never
  deserialized from a DTO

Instances hold plain data (python attribute names) plus a ModelStateMachine.
``from_cto`` validates and merges a DTO, ``to_cto`` serializes back to the
wire shape, ``save`` writes whatever the state says needs writing.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ValidationError

from core.business.context import ModelContext
from core.business.errors import (
    AuthorizationError,
    DataAccessError,
    ModelNotFoundError,
    ValidationFailedError,
)
from patterns.domain_config import NoAccessBehavior
from patterns.repository import BaseDao
from patterns.rules_engine import (
    AuthorizationAction,
    AuthorizationRule,
    BrokenRule,
    RuleSeverity,
    broken_rules_from_validation,
)
from patterns.workflow_states import ModelState, ModelStateMachine

logger = logging.getLogger("bookstore.business")


class ModelType(str, Enum):
    EDITABLE_ROOT_OBJECT = "EditableRootObject"
    EDITABLE_ROOT_COLLECTION = "EditableRootCollection"
    READ_ONLY_ROOT_OBJECT = "ReadOnlyRootObject"
    READ_ONLY_ROOT_COLLECTION = "ReadOnlyRootCollection"
    COMMAND_OBJECT = "CommandObject"


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class ModelBase:
    """Shared machinery of every business object."""

    model_type: ClassVar[ModelType]
    model_name: ClassVar[str | None] = None
    schema: ClassVar[type[BaseModel]]
    dao: ClassVar[type[BaseDao] | None] = None
    rules: ClassVar[tuple[AuthorizationRule, ...]] = ()
    key: ClassVar[str | None] = None
    read_only: ClassVar[frozenset[str]] = frozenset()

    # Members the API portal must never invoke by name.
    reserved_members: ClassVar[frozenset[str]] = frozenset(
        {"create", "fetch", "from_cto", "to_cto", "save", "remove", "call", "can", "get_name"}
    )

    def __init__(self, context: ModelContext, state: ModelState = ModelState.PRISTINE):
        self.context = context
        self.broken_rules: list[BrokenRule] = []
        self._state = ModelStateMachine(state)

    @classmethod
    def get_name(cls) -> str:
        return cls.model_name or cls.__name__

    @property
    def state(self) -> ModelState:
        return self._state.current_state

    @property
    def is_new(self) -> bool:
        return self._state.is_new

    # -- Authorization --

    def can(self, action: AuthorizationAction, target: str | None = None) -> bool:
        """Evaluate the rules guarding ``action``.

        Raises AuthorizationError when the context says so, otherwise
        records a warning broken rule and returns False.
        """
        for rule in type(self).rules:
            if not rule.applies_to(action, target):
                continue
            result = rule.evaluate(self.context.user)
            if result.passed:
                continue
            if self.context.no_access_behavior is NoAccessBehavior.THROW_ERROR:
                raise AuthorizationError(action.value, self.get_name(), result.message)
            logger.warning(
                "%s denied %s on %s: %s",
                self.context.user.user_code, action.value, self.get_name(), result.message,
            )
            self.broken_rules.append(
                BrokenRule(
                    property=target or "",
                    message=result.message,
                    rule_name=result.rule_name,
                    severity=RuleSeverity.WARNING,
                )
            )
            return False
        return True

    def _can_read(self, prop: str) -> bool:
        user = self.context.user
        return all(
            rule.evaluate(user).passed
            for rule in type(self).rules
            if rule.action is AuthorizationAction.READ_PROPERTY and rule.target == prop
        )

    # -- Data access --

    def _dao(self) -> BaseDao:
        if self.dao is None:
            raise DataAccessError(f"{self.get_name()} has no data access object")
        return self.dao(self.context.session)

    async def _run_dao(self, method: str, *args: Any) -> Any:
        dao = self._dao()
        handler = getattr(dao, method, None)
        if handler is None or method.startswith("_"):
            raise DataAccessError(f"{type(dao).__name__} has no method {method!r}")
        logger.debug("%s.%s%r", type(dao).__name__, method, args)
        return await handler(*args)

    # -- Validation and serialization --

    def _validate(self, data: Any, schema: type[BaseModel] | None = None) -> dict[str, Any]:
        schema = schema or self.schema
        try:
            return schema.model_validate(data).model_dump()
        except ValidationError as exc:
            raise ValidationFailedError(
                self.get_name(), broken_rules_from_validation(exc)
            ) from exc

    def _patch(self, dto: Any, schema: type[BaseModel] | None = None) -> dict[str, Any]:
        """Validate a DTO and return only the writable properties it sets."""
        schema = schema or self.schema
        if not isinstance(dto, dict):
            raise ValidationFailedError(
                self.get_name(),
                [BrokenRule(property="__root__", message="Expected an object")],
            )
        try:
            incoming = schema.model_validate(dto)
        except ValidationError as exc:
            raise ValidationFailedError(
                self.get_name(), broken_rules_from_validation(exc)
            ) from exc
        return incoming.model_dump(exclude_unset=True, exclude=set(self.read_only))

    def _serialize(self, data: dict[str, Any], schema: type[BaseModel] | None = None) -> dict[str, Any]:
        schema = schema or self.schema
        cto = schema.model_validate(data).model_dump(mode="json", by_alias=True)
        for name, info in schema.model_fields.items():
            if not self._can_read(name):
                cto[info.alias or name] = None
        return cto


# ---------------------------------------------------------------------------
# Single objects
# ---------------------------------------------------------------------------

class _RootObject(ModelBase):

    def __init__(self, context: ModelContext, state: ModelState = ModelState.PRISTINE):
        super().__init__(context, state)
        self._data: dict[str, Any] = {}

    @property
    def data(self) -> dict[str, Any]:
        return dict(self._data)

    @property
    def key_value(self) -> Any:
        return self._data.get(self.key) if self.key else None

    @classmethod
    async def fetch(cls, context: ModelContext, filter: Any = None, method: str | None = None):
        """Fetch an instance through the DAO method ``method`` (default ``fetch``)."""
        instance = cls(context)
        if instance.can(AuthorizationAction.FETCH):
            data = await instance._run_dao(method or "fetch", filter)
            if data is None:
                raise ModelNotFoundError(cls.get_name(), filter)
            instance._data = instance._validate(data)
        return instance

    def to_cto(self) -> dict[str, Any]:
        return self._serialize(self._data)


class ReadOnlyRootObject(_RootObject):
    model_type = ModelType.READ_ONLY_ROOT_OBJECT


class EditableRootObject(_RootObject):
    model_type = ModelType.EDITABLE_ROOT_OBJECT

    @classmethod
    async def create(cls, context: ModelContext):
        """Create a blank instance with the defaults of the DAO."""
        instance = cls(context, ModelState.CREATED)
        if instance.can(AuthorizationAction.CREATE):
            instance._data = instance._validate(await instance._dao().create())
        return instance

    async def from_cto(self, dto: Any):
        patch = self._patch(dto)
        self._data = self._validate({**self._data, **patch})
        self._state.transition(ModelState.CHANGED)
        return self

    def remove(self) -> None:
        self._state.transition(ModelState.MARKED_FOR_REMOVAL)

    async def save(self):
        """Insert, update or delete according to the state of the instance."""
        state = self.state
        if state is ModelState.MARKED_FOR_REMOVAL:
            if self.can(AuthorizationAction.REMOVE):
                await self._dao().remove(self.key_value)
                self._state.transition(ModelState.REMOVED)
        elif self.is_new:
            if self.can(AuthorizationAction.CREATE):
                self._data = self._validate(await self._dao().insert(self._data))
                self._state.transition(ModelState.PRISTINE)
        elif state is ModelState.CHANGED:
            if self.can(AuthorizationAction.UPDATE):
                self._data = self._validate(await self._dao().update(self._data))
                self._state.transition(ModelState.PRISTINE)
        return self


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------

class _RootCollection(ModelBase):
    """Collections hold items validated against ``schema`` (the item schema)."""

    def __init__(self, context: ModelContext, state: ModelState = ModelState.PRISTINE):
        super().__init__(context, state)
        self._items: list[dict[str, Any]] = []
        self.total_items = 0

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter([dict(item) for item in self._items])

    @property
    def items(self) -> list[dict[str, Any]]:
        return [dict(item) for item in self._items]

    def _load(self, result: Any) -> None:
        # DAOs may return (items, total) like a paginated repository query.
        if isinstance(result, tuple):
            rows, total = result
        else:
            rows, total = result, None
        self._items = [self._validate(row) for row in rows or []]
        self.total_items = total if total is not None else len(self._items)

    @classmethod
    async def fetch(cls, context: ModelContext, filter: Any = None, method: str | None = None):
        instance = cls(context)
        if instance.can(AuthorizationAction.FETCH):
            result = await instance._run_dao(method or "fetch_all", *(() if filter is None else (filter,)))
            instance._load(result)
        return instance

    def to_cto(self) -> list[dict[str, Any]]:
        return [self._serialize(item) for item in self._items]


class ReadOnlyRootCollection(_RootCollection):
    model_type = ModelType.READ_ONLY_ROOT_COLLECTION


class EditableRootCollection(_RootCollection):
    model_type = ModelType.EDITABLE_ROOT_COLLECTION

    def __init__(self, context: ModelContext, state: ModelState = ModelState.PRISTINE):
        super().__init__(context, state)
        self._removed_keys: list[Any] = []

    @classmethod
    async def create(cls, context: ModelContext):
        instance = cls(context, ModelState.CREATED)
        if not instance.can(AuthorizationAction.CREATE):
            logger.debug("%s created without create permission", cls.get_name())
        return instance

    async def from_cto(self, dto: Any):
        """Replace the items with the DTO list.

        Items carrying a known key are merged onto the existing item, items
        without a key are new, existing items missing from the list are
        deleted on save.
        """
        if not isinstance(dto, list):
            raise ValidationFailedError(
                self.get_name(),
                [BrokenRule(property="__root__", message="Expected a list")],
            )
        existing = {item.get(self.key): item for item in self._items}
        items = []
        for element in dto:
            key = element.get(self._key_alias()) if isinstance(element, dict) else None
            patch = self._patch(element)
            base = existing.pop(key, {}) if key is not None else {}
            if key is not None:
                patch[self.key] = key
            items.append(self._validate({**base, **patch}))
        self._removed_keys.extend(k for k in existing if k is not None)
        self._items = items
        self._state.transition(ModelState.CHANGED)
        return self

    def _key_alias(self) -> str | None:
        info = self.schema.model_fields.get(self.key) if self.key else None
        return (info.alias or self.key) if info else self.key

    def remove(self) -> None:
        self._removed_keys.extend(item.get(self.key) for item in self._items)
        self._items = []
        self._state.transition(ModelState.MARKED_FOR_REMOVAL)

    async def save(self):
        if not self._state.is_dirty:
            return self
        dao = self._dao()
        if self._removed_keys and self.can(AuthorizationAction.REMOVE):
            for key in self._removed_keys:
                await dao.remove(key)
            self._removed_keys = []
        saved = []
        for item in self._items:
            if item.get(self.key) is None:
                if self.can(AuthorizationAction.CREATE):
                    item = self._validate(await dao.insert(item))
            elif self.can(AuthorizationAction.UPDATE):
                item = self._validate(await dao.update(item))
            saved.append(item)
        self._items = saved
        self.total_items = len(saved)
        if self.state is ModelState.MARKED_FOR_REMOVAL:
            self._state.transition(ModelState.REMOVED)
        else:
            self._state.transition(ModelState.PRISTINE)
        return self


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class CommandObject(ModelBase):
    """Parameters in, result out; no persistence of its own.

    Subclasses expose their operations as async methods that delegate to
    ``call``::

        async def in_year_by_tags(self):
            return await self.call("in_year_by_tags")
    """

    model_type = ModelType.COMMAND_OBJECT

    def __init__(self, context: ModelContext, state: ModelState = ModelState.CREATED):
        super().__init__(context, state)
        self._data: dict[str, Any] = {}

    @property
    def data(self) -> dict[str, Any]:
        return dict(self._data)

    @classmethod
    async def create(cls, context: ModelContext):
        instance = cls(context)
        instance._data = instance._validate({})
        return instance

    async def from_cto(self, dto: Any):
        patch = self._patch(dto)
        self._data = self._validate({**self._data, **patch})
        self._state.transition(ModelState.CHANGED)
        return self

    async def execute(self):
        """Run the DAO ``execute`` method with the current parameters."""
        if self.can(AuthorizationAction.EXECUTE):
            self._data = self._validate(await self._run_dao("execute", dict(self._data)))
        return self

    async def call(self, method: str):
        if self.can(AuthorizationAction.CALL, method):
            self._data = self._validate(await self._run_dao(method, dict(self._data)))
        return self

    def to_cto(self) -> dict[str, Any]:
        return self._serialize(self._data)
