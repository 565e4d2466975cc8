"""Test business objects: lifecycle, authorization and serialization."""
import pytest

from core.business.context import ModelContext
from core.business.errors import (
    AuthorizationError,
    ModelNotFoundError,
    ModelStateError,
    ValidationFailedError,
)
from core.business.model import ModelType
from patterns.domain_config import NoAccessBehavior
from patterns.workflow_states import ModelState
from verticals.bookstore.business.admin.book_list import AdminBookList
from verticals.bookstore.business.book import Book
from verticals.bookstore.business.book_list import BookList
from verticals.bookstore.business.book_view import BookView
from verticals.bookstore.business.books import Books
from verticals.bookstore.business.find_bestseller import FindBestseller
from verticals.bookstore.users import GUEST_USER, User


# -- Editable root object --

@pytest.mark.asyncio
async def test_create_defaults(context):
    book = await Book.create(context)
    assert book.state is ModelState.CREATED
    assert book.is_new
    assert book.data["used"] is False
    assert book.data["tags"] == []
    assert book.data["publish_date"] is not None


@pytest.mark.asyncio
async def test_insert_lifecycle(context):
    book = await Book.create(context)
    await book.from_cto({"author": "Ann Leckie", "title": "Ancillary Justice", "tags": [{"tag": "sf"}]})
    assert book.state is ModelState.CHANGED
    await book.save()
    assert book.state is ModelState.PRISTINE
    assert not book.is_new
    assert book.key_value == 7
    assert [t["tag"] for t in book.data["tags"]] == ["sf"]


@pytest.mark.asyncio
async def test_fetch_and_update(context):
    book = await Book.fetch(context, 1)
    assert book.state is ModelState.PRISTINE
    await book.from_cto({"title": "The Enemy (2nd ed.)"})
    await book.save()

    again = await Book.fetch(context, 1)
    assert again.data["title"] == "The Enemy (2nd ed.)"
    assert again.data["author"] == "Tom Wood"


@pytest.mark.asyncio
async def test_fetch_missing(context):
    with pytest.raises(ModelNotFoundError):
        await Book.fetch(context, 42)


@pytest.mark.asyncio
async def test_removed_book_cannot_change(context):
    book = await Book.fetch(context, 4)
    book.remove()
    await book.save()
    assert book.state is ModelState.REMOVED
    with pytest.raises(ModelStateError):
        await book.from_cto({"title": "East of Eden"})


@pytest.mark.asyncio
async def test_from_cto_requires_object(context):
    book = await Book.create(context)
    with pytest.raises(ValidationFailedError) as exc_info:
        await book.from_cto(["not", "an", "object"])
    assert exc_info.value.to_dict()["brokenRules"][0]["property"] == "__root__"


@pytest.mark.asyncio
async def test_to_cto_uses_camel_case(context):
    book = await Book.fetch(context, 5)
    cto = book.to_cto()
    assert cto["bookKey"] == 5
    assert cto["publishDate"].startswith("1987-01-01")
    assert "book_key" not in cto


# -- Authorization --

@pytest.mark.asyncio
async def test_fetch_denied_throws(guest_context):
    with pytest.raises(AuthorizationError) as exc_info:
        await Book.fetch(guest_context, 1)
    assert exc_info.value.message == "You are not authorized to retrieve book."


@pytest.mark.asyncio
async def test_fetch_denied_with_warning(session):
    context = ModelContext(
        user=GUEST_USER, session=session, no_access_behavior=NoAccessBehavior.SHOW_WARNING
    )
    book = await Book.fetch(context, 1)
    assert book.data == {}
    assert len(book.broken_rules) == 1
    assert book.broken_rules[0].severity.value == "warning"


@pytest.mark.asyncio
async def test_save_denied_with_warning_keeps_state(session):
    designer = User(user_code="dee", roles=("designers",))
    context = ModelContext(
        user=designer, session=session, no_access_behavior=NoAccessBehavior.SHOW_WARNING
    )
    book = await Book.create(context)
    await book.from_cto({"author": "A", "title": "T"})
    await book.save()
    assert book.state is ModelState.CHANGED
    assert book.is_new


@pytest.mark.asyncio
async def test_read_property_rule(session):
    designer = User(user_code="dee", roles=("designers",))
    view = await BookView.fetch(ModelContext(user=designer, session=session), 3)
    assert view.to_cto()["price"] is None
    assert view.data["price"] == 34.5


@pytest.mark.asyncio
async def test_read_property_rule_passes(context):
    view = await BookView.fetch(context, 3)
    assert view.to_cto()["price"] == 34.5


@pytest.mark.asyncio
async def test_admin_list_requires_administrators(session):
    designer = User(user_code="dee", roles=("designers",))
    with pytest.raises(AuthorizationError):
        await AdminBookList.fetch(ModelContext(user=designer, session=session))


# -- Collections --

@pytest.mark.asyncio
async def test_read_only_collection(context):
    books = await BookList.fetch(context)
    assert books.model_type is ModelType.READ_ONLY_ROOT_COLLECTION
    assert len(books) == 6
    assert books.total_items == 6
    assert books.items[0]["author"] == "China Mieville"


@pytest.mark.asyncio
async def test_editable_collection_save(context):
    books = await Books.fetch(context, {"from": 1, "to": 2}, "fetch_from_to")
    assert [b["book_key"] for b in books] == [1, 2]

    await books.from_cto([
        {"bookKey": 1, "title": "The Enemy", "author": "Tom Wood", "price": 5.0},
        {"author": "New Author", "title": "New Book"},
    ])
    await books.save()
    assert books.state is ModelState.PRISTINE
    assert [b["book_key"] for b in books] == [1, 7]

    with pytest.raises(ModelNotFoundError):
        await Book.fetch(context, 2)
    first = await Book.fetch(context, 1)
    assert first.data["price"] == 5.0


@pytest.mark.asyncio
async def test_editable_collection_requires_list(context):
    books = await Books.create(context)
    with pytest.raises(ValidationFailedError):
        await books.from_cto({"author": "A"})


# -- Commands --

@pytest.mark.asyncio
async def test_command_call(context):
    command = await FindBestseller.create(context)
    await command.from_cto({"tag1": "adventure", "publishYear": 2010})
    await command.in_year_by_tags()
    assert command.data["result"]["title"] == "Kraken"


@pytest.mark.asyncio
async def test_command_call_denied_with_warning(session):
    context = ModelContext(
        user=GUEST_USER, session=session, no_access_behavior=NoAccessBehavior.SHOW_WARNING
    )
    command = await FindBestseller.create(context)
    await command.from_cto({"tag1": "adventure"})
    await command.in_year_by_tags()
    assert command.data["result"] is None
    assert command.broken_rules[0].property == "in_year_by_tags"
