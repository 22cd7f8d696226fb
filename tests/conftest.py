from pathlib import Path

import pytest
import pytest_asyncio

from livesync.core.db import create_engine, create_session_factory, init_models
from livesync.domains.realtime.catalog import build_registry
from livesync.domains.realtime.hub import SubscriptionHub


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'livesync.sqlite3'}"


@pytest_asyncio.fixture()
async def engine(database_url):
    engine = create_engine(database_url)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture()
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def registry():
    return build_registry()


@pytest.fixture()
def hub(registry, session_factory):
    return SubscriptionHub(registry, session_factory)
