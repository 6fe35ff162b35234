"""Pytest configuration and fixtures."""

import os

# Set DEBUG=true for all tests BEFORE any app imports
# This must be done before app.core.config loads settings
os.environ["DEBUG"] = "true"

import uuid
from collections.abc import AsyncGenerator, Callable, Generator
from contextlib import suppress
from pathlib import Path
from urllib.parse import quote_plus, urlunparse

import pytest
from alembic import command
from alembic.config import Config
from app.api.lines import get_line_service
from app.api.stations import get_station_service
from app.core.database import get_db, to_sync_database_url
from app.domain import Station
from app.main import app
from app.services.line_service import LineService
from app.services.station_service import StationService
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from pytest_postgresql.janitor import DatabaseJanitor
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.orm.session import SessionTransaction
from sqlalchemy.pool import NullPool

from tests.helpers.in_memory import InMemoryLineRepository, InMemoryStationRepository, InMemoryStore
from tests.helpers.types import TestDatabaseContext


# Database connection configuration for tests
DB_HOST = "localhost"
DB_PORT = 5432
DB_USER = "postgres"
DB_PASSWORD = "postgres"


@pytest.fixture(scope="session")
def db_engine() -> Generator[TestDatabaseContext]:
    """
    Create a throwaway PostgreSQL database migrated to the latest revision.

    DatabaseJanitor creates the database under a unique name and drops it at
    the end of the session. The schema comes from the Alembic migrations, so
    the constraints under test are the ones production runs with.

    Yields:
        TestDatabaseContext: Structured object containing engine, session factory, and db name
    """
    test_db_name = f"test_{uuid.uuid4().hex[:8]}"

    with DatabaseJanitor(
        user=DB_USER,
        host=DB_HOST,
        port=DB_PORT,
        dbname=test_db_name,
        version="18",  # PostgreSQL version
        password=DB_PASSWORD,
    ):
        user_part = f"{quote_plus(DB_USER)}:{quote_plus(DB_PASSWORD)}"
        host_part = f"{quote_plus(DB_HOST)}:{DB_PORT}"
        netloc = f"{user_part}@{host_part}"
        async_db_url = urlunparse(("postgresql+asyncpg", netloc, f"/{quote_plus(test_db_name)}", "", "", ""))

        # NullPool: every test runs on its own event loop
        engine = create_async_engine(async_db_url, echo=False, poolclass=NullPool)
        session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

        alembic_cfg = Config()
        alembic_dir = Path(__file__).resolve().parent.parent / "alembic"
        alembic_cfg.set_main_option("script_location", str(alembic_dir))
        alembic_cfg.set_main_option("sqlalchemy.url", to_sync_database_url(async_db_url))

        # Suppress Alembic output during tests unless debugging
        if not os.environ.get("ALEMBIC_VERBOSE"):
            alembic_cfg.set_main_option("configure_logger", "false")

        try:
            command.upgrade(alembic_cfg, "head")
        except Exception as e:
            msg = f"Alembic migration failed: {e}"
            raise RuntimeError(msg) from e

        yield TestDatabaseContext(engine=engine, session_factory=session_factory, db_name=test_db_name)


@pytest.fixture
async def db_session(db_engine: TestDatabaseContext) -> AsyncGenerator[AsyncSession]:
    """
    Create an isolated database session using nested transactions (SAVEPOINTs).

    Each test runs in a SAVEPOINT that is recreated after every commit or
    rollback, so repositories can commit (and tests can recover from an
    IntegrityError) while the outer transaction is rolled back at the end.

    Args:
        db_engine: Session-scoped test database context

    Yields:
        Async SQLAlchemy session with SAVEPOINT isolation
    """
    async with db_engine.engine.connect() as connection:
        transaction = await connection.begin()

        async_session_factory = async_sessionmaker(
            bind=connection,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        async with async_session_factory() as session:
            await session.begin_nested()

            @event.listens_for(session.sync_session, "after_transaction_end")
            def _restart_savepoint(sess: Session, trans: SessionTransaction) -> None:
                """Recreate the SAVEPOINT after it is released (committed or rolled back)."""
                if trans.nested and sess.is_active:
                    sess.begin_nested()

            yield session

        with suppress(Exception):
            if transaction.is_active:
                await transaction.rollback()


@pytest.fixture
async def db_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """
    Async HTTP client whose requests run against the test database.

    Every request shares db_session, so the app's SQL repositories and
    the test see the same uncommitted SAVEPOINT data.

    Yields:
        Async HTTP client backed by PostgreSQL
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def store() -> InMemoryStore:
    """Empty in-memory storage shared by the repositories of one test."""
    return InMemoryStore()


@pytest.fixture
def station_service(store: InMemoryStore) -> StationService:
    """StationService over in-memory storage."""
    return StationService(InMemoryStationRepository(store))


@pytest.fixture
def line_service(store: InMemoryStore) -> LineService:
    """LineService over in-memory storage."""
    return LineService(InMemoryLineRepository(store), InMemoryStationRepository(store))


@pytest.fixture
def make_station(store: InMemoryStore) -> Callable[[str], Station]:
    """
    Factory creating persisted stations directly in the store.

    Returns:
        Function taking a station name and returning the stored Station
    """

    def _make(name: str) -> Station:
        station = Station(name=name, id=uuid.uuid4())
        store.stations[station.id] = station  # type: ignore[index]
        return station

    return _make


@pytest.fixture
def override_services(line_service: LineService, station_service: StationService) -> Generator[None]:
    """Point the API's service dependencies at the in-memory services."""
    app.dependency_overrides[get_line_service] = lambda: line_service
    app.dependency_overrides[get_station_service] = lambda: station_service
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client(override_services: None) -> Generator[TestClient]:
    """
    FastAPI synchronous test client for making HTTP requests.

    Yields:
        Synchronous test client with in-memory storage
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
async def async_client(override_services: None) -> AsyncGenerator[AsyncClient]:
    """
    Async HTTP client for testing async endpoints.

    Yields:
        Async HTTP client with in-memory storage
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
