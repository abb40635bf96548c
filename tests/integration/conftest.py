import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain.entities  # noqa: F401  registers the tasks table
from config import ApplicationConfig
from src.adapter.services.jwt_token_verifier import JwtTokenVerifier
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.app import create_app
from src.depends import get_unit_of_work
from tests.fixtures.json_loader import TestDataLoader
from tests.utils.tokens import TEST_JWT_SECRET


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
def unit_of_work_class():
    """Overridden by tests that need a misbehaving unit of work"""
    return SqlAlchemyUnitOfWork


@pytest_asyncio.fixture
def app(session_factory, unit_of_work_class):
    app = create_app(ApplicationConfig, token_verifier=JwtTokenVerifier(jwt_secret=TEST_JWT_SECRET))

    async def override_get_unit_of_work():
        async with session_factory() as session:
            yield unit_of_work_class(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    return app


@pytest_asyncio.fixture
async def client(app):
    # Unhandled errors are answered by the app's handler instead of re-raised
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
