import os

os.environ.setdefault("MODE", "test")

import pytest
from sqlalchemy import create_engine, delete, event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from httpx import AsyncClient, ASGITransport

from main import app as fastapi_app
from config import settings
import db as project_db
import db_models  # ensure models are imported
from db_base import Base
from db_models.apar import Apar
from db_models.inspection import Inspection
from db_models.inspection_item import InspectionItem
from db_models.user import User
from core.security import get_password_hash, create_access_token

TEST_DATABASE_URL = settings.DATABASE_URL


def get_sync_url(url: str) -> str:
    if url.startswith("sqlite+aiosqlite"):
        return url.replace("sqlite+aiosqlite", "sqlite")
    return url


sync_engine = create_engine(get_sync_url(TEST_DATABASE_URL))

# Use an async engine for app interactions
engine = create_async_engine(
    TEST_DATABASE_URL,
    future=True,
    echo=False,
    poolclass=NullPool  # Disable connection pooling for tests
)
AsyncSessionTest = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False
)

if engine.dialect.name == "sqlite":
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Hashed once; bcrypt is slow and users are re-seeded before every test
ADMIN_PASSWORD = "adminpass"
PETUGAS_PASSWORD = "petugaspass"
_ADMIN_HASH = get_password_hash(ADMIN_PASSWORD)
_PETUGAS_HASH = get_password_hash(PETUGAS_PASSWORD)


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture(scope="session", autouse=True)
def prepare_db():
    # Create/drop tables for tests (Destructive - use a dedicated test DB)
    Base.metadata.drop_all(bind=sync_engine)
    Base.metadata.create_all(bind=sync_engine)
    yield
    Base.metadata.drop_all(bind=sync_engine)


@pytest.fixture(autouse=True)
def reset_data(prepare_db):
    """Empty every table and recreate the two test users (admin id=1, petugas id=2)."""
    Session = sessionmaker(bind=sync_engine)
    with Session() as session:
        session.execute(delete(InspectionItem))
        session.execute(delete(Inspection))
        session.execute(delete(Apar))
        session.execute(delete(User))
        session.add_all([
            User(
                id=1,
                name="Test Admin",
                email="admin@test.com",
                hashed_password=_ADMIN_HASH,
                role="admin",
            ),
            User(
                id=2,
                name="Test Petugas",
                email="petugas@test.com",
                hashed_password=_PETUGAS_HASH,
                role="petugas",
            ),
        ])
        session.commit()
    yield


@pytest.fixture
async def db_session():
    async with AsyncSessionTest() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def async_client():
    # Override the get_session dependency to create a fresh session for each request
    async def override_get_session():
        async with AsyncSessionTest() as session:
            yield session

    fastapi_app.dependency_overrides[project_db.get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://testserver") as ac:
        yield ac

    # Clean up
    fastapi_app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def admin_token():
    """Generate an admin JWT token for tests."""
    return create_access_token(data={"sub": "1", "role": "admin"})


@pytest.fixture(scope="session")
def petugas_token():
    """Generate an officer JWT token for tests."""
    return create_access_token(data={"sub": "2", "role": "petugas"})


@pytest.fixture(scope="session")
def admin_headers(admin_token):
    """Return authorization headers for admin user."""
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture(scope="session")
def petugas_headers(petugas_token):
    """Return authorization headers for the officer."""
    return {"Authorization": f"Bearer {petugas_token}"}


# --- Payload builders shared by the endpoint tests ---

ITEM_TYPES = ["hose", "safety_pin", "content", "handle", "pressure", "funnel", "cleanliness"]


def apar_payload(**overrides) -> dict:
    data = {
        "number": "APAR-001",
        "location": "Lantai 1 - Ruang Server",
        "type": "powder",
        "capacity": "6 kg",
        "fill_date": "2024-01-15",
        "expiry_date": "2026-01-15",
        "status": "active",
        "notes": None,
    }
    data.update(overrides)
    return data


def checklist(**statuses) -> list[dict]:
    """All seven items 'good' unless overridden, e.g. checklist(hose="damaged")."""
    return [
        {"item_type": t, "status": statuses.get(t, "good"), "notes": None}
        for t in ITEM_TYPES
    ]


def inspection_payload(apar_id: int, **overrides) -> dict:
    data = {
        "apar_id": apar_id,
        "inspection_date": "2025-06-10",
        "digital_signature": "Ttd. Test Petugas",
        "notes": None,
        "items": checklist(),
    }
    data.update(overrides)
    return data
