import pytest
from httpx import ASGITransport, AsyncClient

from xmlstore.core.config import Settings
from xmlstore.core.db import create_schema
from xmlstore.db.repositories.document_repository import XmlDocumentRepository
from xmlstore.main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'xmlstore_test.db'}",
        parse_cache_size=16
    )


@pytest.fixture
async def app(settings):
    app = create_app(settings)
    await create_schema(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def session(app):
    async with app.state.session_factory() as session:
        yield session


@pytest.fixture
def repository(session):
    return XmlDocumentRepository(session)
