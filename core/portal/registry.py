"""Model registry — URI to factory mapping built once at startup.

Two ways to build it:

- ``ModelRegistry.from_factories([...])``: an explicit registration list
- ``ModelRegistry.discover("verticals.bookstore.business")``: recursive
  descent over a package, keeping every module-level factory instance

Both validate every factory the same way (non-empty URI, unique URI, method
map targets that exist) and raise a RegistrationError on the first problem.
The resulting mapping is read-only.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from dataclasses import dataclass
from types import MappingProxyType, ModuleType
from typing import Any, Iterable, Iterator, Mapping

from core.business.factory import FactoryBase, ModelKind
from core.business.model import CommandObject
from core.portal.errors import (
    DuplicateModelUriError,
    InvalidMethodMapError,
    MissingModelUriError,
    RegistrationError,
)

logger = logging.getLogger("bookstore.portal")


@dataclass(frozen=True)
class RegistryEntry:
    """A registered model: its URI, factory and dispatch kind."""

    uri: str
    factory: FactoryBase
    kind: ModelKind


class ModelRegistry:
    """Immutable URI -> RegistryEntry mapping."""

    def __init__(self, entries: Mapping[str, RegistryEntry]):
        self._entries = MappingProxyType(dict(entries))

    # -- Construction --

    @classmethod
    def from_factories(cls, factories: Iterable[FactoryBase]) -> "ModelRegistry":
        """Register an explicit list of factories."""
        entries: dict[str, RegistryEntry] = {}
        for factory in factories:
            _register(entries, factory, source=repr(factory))
        logger.info("Registered %d models", len(entries))
        return cls(entries)

    @classmethod
    def discover(cls, package: str | ModuleType) -> "ModelRegistry":
        """Import every module below ``package`` and register its factories.

        A factory object re-exported by several modules is registered once.
        """
        root = importlib.import_module(package) if isinstance(package, str) else package
        entries: dict[str, RegistryEntry] = {}
        seen: set[int] = set()
        for module in _walk_modules(root):
            for name, value in vars(module).items():
                if not isinstance(value, FactoryBase) or id(value) in seen:
                    continue
                seen.add(id(value))
                _register(entries, value, source=f"{module.__name__}.{name}")
        logger.info("Discovered %d models in %s", len(entries), root.__name__)
        return cls(entries)

    # -- Lookup --

    def get(self, uri: str) -> RegistryEntry | None:
        return self._entries.get(uri)

    def __contains__(self, uri: object) -> bool:
        return uri in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> Mapping[str, RegistryEntry]:
        return self._entries

    @property
    def uris(self) -> list[str]:
        return sorted(self._entries)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def is_exposed(target: Any, name: str) -> bool:
    """True when ``name`` is a public method the portal may call on ``target``.

    ``target`` is a factory or command instance, or a command model class.
    Only functions and bound methods count; class attributes such as
    ``schema`` or ``dao`` are callable but are never methods.
    """
    if not name or name.startswith("_"):
        return False
    if name in getattr(target, "reserved_members", frozenset()):
        return False
    member = getattr(target, name, None)
    return inspect.ismethod(member) or inspect.isfunction(member)


def _walk_modules(root: ModuleType) -> Iterator[ModuleType]:
    """Depth-first walk over a package and all of its subpackages."""
    yield root
    path = getattr(root, "__path__", None)
    if path is None:
        return
    for info in pkgutil.walk_packages(path, root.__name__ + "."):
        yield importlib.import_module(info.name)


def _register(entries: dict[str, RegistryEntry], factory: FactoryBase, source: str) -> None:
    uri = getattr(factory, "model_uri", None)
    if not isinstance(uri, str) or not uri.strip():
        raise MissingModelUriError(source)
    if uri in entries:
        raise DuplicateModelUriError(uri)

    kind = getattr(factory, "kind", None)
    if not isinstance(kind, ModelKind):
        raise RegistrationError(f"Unknown model kind of {uri}: {kind!r}")

    target: object = factory
    if kind is ModelKind.COMMAND:
        target = getattr(factory, "model", None)
        if not (isinstance(target, type) and issubclass(target, CommandObject)):
            raise RegistrationError(f"Command factory {uri} has no command model")

    for alias, method in factory.method_map.items():
        if not is_exposed(target, method):
            raise InvalidMethodMapError(uri, alias, method)

    entries[uri] = RegistryEntry(uri=uri, factory=factory, kind=kind)
    logger.debug("Registered model %s -> %r", uri, factory)
