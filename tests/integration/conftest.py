import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers the tables on SQLModel.metadata
from config import ApplicationConfig
from src.depends import get_session

TEST_DB_URI = "sqlite+aiosqlite://"


class IntegrationConfig(ApplicationConfig):
    DB_URI = TEST_DB_URI
    API_PREFIX = "/api"
    AUTH_DISABLED = True
    AUTH_API_KEY = "test-key"
    AUTH_DEV_USER_ID = "user_integration"
    ENABLE_LOGGING_MIDDLEWARE = False
    AUTO_CREATE_TABLES = False
    INVOICE_PAGE_SIZE = 10
    FILTER_DEBOUNCE_SECONDS = 0


@pytest_asyncio.fixture(scope="function")
async def engine():
    """In-memory SQLite database shared by every connection of one test"""
    engine = create_async_engine(
        TEST_DB_URI,
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest.fixture
def app():
    from src.api.app import create_app

    return create_app(IntegrationConfig)


@pytest_asyncio.fixture
async def client(app, db_session):
    """Create test client with database session override"""

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
