"""
Geoturismo Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets a fresh in-memory SQLite database (aiosqlite) built
       from the ORM metadata and seeded with the initial categories.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── database:        Database handle on a private in-memory SQLite
    ├── db_session:      AsyncSession on that database (rolled back on close)
    ├── mock_db_session: AsyncMock session for tests that must not touch SQL
    ├── puntos_ecuador:  three points on the equator at lon 0, 1 and 3
    └── test_client:     HTTPX AsyncClient wired to the app and `database`
"""

import os

# Settings are read at import time; override them before importing the app.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BCRYPT_ROUNDS"] = "4"

from typing import AsyncGenerator, Dict  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from geoturismo.database import Database  # noqa: E402
from geoturismo.models import Categoria  # noqa: E402
from geoturismo.models.categoria import CATEGORIAS_INICIALES  # noqa: E402
from geoturismo.schemas.punto import PuntoCreate, PuntoResponse  # noqa: E402
from geoturismo.services.punto_service import punto_service  # noqa: E402


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database, None]:
    db = Database("sqlite+aiosqlite://")
    await db.create_all()
    async with db.session() as session:
        session.add_all(
            Categoria(nombre=nombre, ambito=ambito)
            for ambito, nombres in CATEGORIAS_INICIALES.items()
            for nombre in nombres
        )
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """
    Session for service-level tests. Nothing is committed: closing the
    session rolls back whatever the test wrote.
    """
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_empty_update(mock_db_session):
            with pytest.raises(ValidationError):
                await punto_update.execute(mock_db_session, 1, {})
            mock_db_session.execute.assert_not_awaited()
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def puntos_ecuador(db_session: AsyncSession) -> Dict[str, PuntoResponse]:
    """Points A(0,0), B(0,1) and C(0,3): A-B is 1°, B-C is 2° of longitude."""
    puntos = {}
    for nombre, lon in (("A", 0.0), ("B", 1.0), ("C", 3.0)):
        puntos[nombre] = await punto_service.create_punto(
            db_session,
            PuntoCreate(nombre=f"Punto {nombre}", tipo="monumento", latitud=0.0, longitud=lon),
        )
    return puntos


@pytest_asyncio.fixture
async def test_client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient routed straight into the app.

    ASGITransport does not run the lifespan, so the test database is
    placed on app.state here.
    """
    from geoturismo.main import app

    app.state.database = database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.state.database = None
