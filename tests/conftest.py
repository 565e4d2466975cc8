"""Shared fixtures: a seeded in-memory database per test and a portal on top."""
import pytest
import pytest_asyncio

from core.business.context import ModelContext
from core.database import Database
from core.portal import ApiPortal, ModelRegistry
from patterns.domain_config import AppConfig
from verticals.bookstore.business import FACTORIES
from verticals.bookstore.models import db_models  # noqa: F401  registers the tables
from verticals.bookstore.seed import seed
from verticals.bookstore.users import DEMO_USER, GUEST_USER, get_user


@pytest.fixture
def config():
    return AppConfig.default(user_reader=get_user)


@pytest.fixture
def registry():
    return ModelRegistry.from_factories(FACTORIES)


@pytest_asyncio.fixture
async def database():
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_all()
    async with db.session() as session:
        await seed(session)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database):
    async with database.session() as s:
        yield s


@pytest.fixture
def context(session):
    return ModelContext(user=DEMO_USER, session=session)


@pytest.fixture
def guest_context(session):
    return ModelContext(user=GUEST_USER, session=session)


@pytest.fixture
def portal(config, registry, database):
    return ApiPortal(config, registry, database)
