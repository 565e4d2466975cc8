"""Test model registration: explicit lists, package discovery, validation."""
import pytest

from core.business.factory import CommandFactory, ModelKind, QueryFactory
from core.business.model import CommandObject
from core.portal import (
    DuplicateModelUriError,
    InvalidMethodMapError,
    MissingModelUriError,
    ModelRegistry,
    RegistrationError,
    is_exposed,
)
from verticals.bookstore.business import FACTORIES
from verticals.bookstore.models.schemas import FindBestsellerDto

BOOKSTORE_URIS = ["admin/book-list", "book", "book-list", "book-view", "books", "find-bestseller"]


class _Query(QueryFactory):
    def __init__(self, uri, method_map=None):
        super().__init__(uri, method_map)

    async def get_all(self, context, filter=None):
        return []


class _Command(CommandObject):
    schema = FindBestsellerDto

    async def run(self):
        return self


class _CommandFactory(CommandFactory):
    model = _Command


def test_from_factories():
    registry = ModelRegistry.from_factories(FACTORIES)
    assert registry.uris == BOOKSTORE_URIS
    assert len(registry) == 6
    assert "books" in registry
    assert registry.get("magazines") is None


def test_entry_kind():
    registry = ModelRegistry.from_factories(FACTORIES)
    assert registry.get("find-bestseller").kind is ModelKind.COMMAND
    assert registry.get("book-list").kind is ModelKind.QUERY


def test_discover_package():
    registry = ModelRegistry.discover("verticals.bookstore.business")
    assert registry.uris == BOOKSTORE_URIS


def test_entries_are_read_only():
    registry = ModelRegistry.from_factories(FACTORIES)
    with pytest.raises(TypeError):
        registry.entries["magazines"] = registry.get("books")


def test_duplicate_uri():
    with pytest.raises(DuplicateModelUriError) as exc_info:
        ModelRegistry.from_factories([_Query("sample"), _Query("sample")])
    assert exc_info.value.model_uri == "sample"


@pytest.mark.parametrize("uri", ["", "   ", None])
def test_missing_uri(uri):
    with pytest.raises(MissingModelUriError):
        ModelRegistry.from_factories([_Query(uri)])


def test_method_map_target_must_exist():
    with pytest.raises(InvalidMethodMapError) as exc_info:
        ModelRegistry.from_factories([_Query("sample", {"get-one": "get_one"})])
    assert exc_info.value.alias == "get-one"
    assert exc_info.value.target == "get_one"


def test_method_map_target_must_be_public():
    with pytest.raises(InvalidMethodMapError):
        ModelRegistry.from_factories([_Query("sample", {"init": "__init__"})])


def test_command_method_map_checked_on_model():
    registry = ModelRegistry.from_factories([_CommandFactory("run-sample", {"go": "run"})])
    assert registry.get("run-sample").kind is ModelKind.COMMAND

    with pytest.raises(InvalidMethodMapError):
        ModelRegistry.from_factories([_CommandFactory("run-sample", {"go": "get_all"})])


def test_command_factory_needs_model():
    class _Bare(CommandFactory):
        pass

    with pytest.raises(RegistrationError):
        ModelRegistry.from_factories([_Bare("bare")])


def test_method_map_target_must_not_be_reserved():
    with pytest.raises(InvalidMethodMapError):
        ModelRegistry.from_factories([_CommandFactory("run-sample", {"store": "save"})])


def test_method_map_target_must_be_a_method():
    with pytest.raises(InvalidMethodMapError):
        ModelRegistry.from_factories([_CommandFactory("run-sample", {"dto": "schema"})])


def test_is_exposed():
    assert is_exposed(_Command, "run")
    assert not is_exposed(_Command, "save")
    assert not is_exposed(_Command, "dao")
    assert is_exposed(_Query("sample"), "get_all")
    assert not is_exposed(_Query("sample"), "model_uri")
