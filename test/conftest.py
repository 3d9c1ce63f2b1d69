"""
Pytest configuration and fixtures for the forum tests

Every test gets a fresh in-memory SQLite database and a clean set of host
extension registries, so plugin activation in one test never leaks into
another.
"""

import os
import sys
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH119, PTH120

import app.models  # noqa: E402, F401  (registers every table on Base)
from app.config import settings  # noqa: E402
from app.database import Base, get_db  # noqa: E402
from app.models.topic import Topic  # noqa: E402
from app.models.user import User  # noqa: E402
from app.plugins.events import event_bus  # noqa: E402
from app.plugins.registry import plugin_registry  # noqa: E402
from app.serializers.topic import serializer_extensions  # noqa: E402
from app.services.topic_list_service import remove_preloaded_custom_field  # noqa: E402
from app.services.topic_revisor import topic_revisor  # noqa: E402

# Test database URL (SQLite in-memory for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


def reset_extensions() -> None:
    """Undo everything plugins registered on the host singletons."""
    for name in Topic.custom_field_types.registered_names():
        Topic.custom_field_types.unregister(name)
        topic_revisor.untrack_topic_field(name)
        remove_preloaded_custom_field(name)
        if isinstance(Topic.__dict__.get(name), property):
            delattr(Topic, name)
    event_bus.clear()
    serializer_extensions.clear()
    plugin_registry.clear()


@pytest.fixture(autouse=True)
def clean_extensions(monkeypatch):
    monkeypatch.setattr(settings, "topic_custom_field_enabled", True)
    reset_extensions()
    yield
    reset_extensions()


@pytest.fixture(scope="function")
async def db() -> AsyncGenerator[AsyncSession, None]:
    """Provide a session on a freshly created schema."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def user(db: AsyncSession) -> User:
    user = User(username="alice")
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
def plugin():
    """The custom fields plugin, activated against the global host registries."""
    from app.plugins.api import PluginApi
    from app.plugins.custom_fields_plugin import CustomFieldsPlugin

    plugin = CustomFieldsPlugin()
    api = PluginApi(plugin)
    plugin.activate(api)
    plugin_registry.register(plugin, api)
    return plugin


@pytest.fixture
def query_log():
    """Collect every SQL statement executed on the test engine."""
    statements: list[str] = []

    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(test_engine.sync_engine, "before_cursor_execute", before_cursor_execute)
    yield statements
    event.remove(test_engine.sync_engine, "before_cursor_execute", before_cursor_execute)


@pytest.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with the test session injected."""
    from main import app

    async def override_get_db():
        async with TestSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
