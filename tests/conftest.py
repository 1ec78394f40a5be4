import os
from collections.abc import AsyncGenerator
from datetime import time

import pytest
import pytest_asyncio
from dotenv import load_dotenv

# Load environment variables from .env file, then fall back to an in-memory database
load_dotenv()
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("AUTH_SECRET", "test-secret-for-tests-only")
os.environ.setdefault("LOG_FORMAT", "console")

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import insert  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402
from sqlalchemy.pool import NullPool, StaticPool  # noqa: E402

from doutor_agenda.config import settings  # noqa: E402
from doutor_agenda.database import build_async_engine, get_db, is_sqlite_url  # noqa: E402
from doutor_agenda.main import app  # noqa: E402
from doutor_agenda.models import clinics, doctors, metadata, patients, users  # noqa: E402

# TEST_DATABASE_URL points the suite at a real PostgreSQL; by default every
# test gets its own in-memory SQLite database
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")

if not is_sqlite_url(TEST_DATABASE_URL) and TEST_DATABASE_URL == settings.database_url:
    raise RuntimeError(
        "TEST_DATABASE_URL is the same as DATABASE_URL; tests drop every table they touch"
    )


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session on freshly created tables."""
    if is_sqlite_url(TEST_DATABASE_URL):
        test_engine = build_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    else:
        test_engine = build_async_engine(TEST_DATABASE_URL, poolclass=NullPool)

    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
        await conn.run_sync(metadata.create_all)

    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
    await test_engine.dispose()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_user_data() -> dict:
    """Sign-up payload."""
    return {
        "name": "Maria Souza",
        "email": "maria@example.com",
        "password": "s3nha-forte",
    }


@pytest.fixture
def sample_doctor_data() -> dict:
    """Doctor available Monday to Friday, 08:00 to 18:00."""
    return {
        "name": "Dr. Carlos Lima",
        "specialty": "Cardiologia",
        "available_from_weekday": 1,
        "available_to_weekday": 5,
        "available_from_time": "08:00:00",
        "available_to_time": "18:00:00",
        "appointment_price_in_cents": 25000,
    }


@pytest.fixture
def sample_patient_data() -> dict:
    return {
        "name": "João Pereira",
        "email": "joao@example.com",
        "phone": "+5511999990000",
        "sex": "male",
    }


@pytest_asyncio.fixture
async def signed_up(client: AsyncClient, sample_user_data: dict) -> dict:
    """Register a user through the API and return the response body."""
    response = await client.post("/api/v1/auth/sign-up/email", json=sample_user_data)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def auth_headers(signed_up: dict) -> dict:
    """Bearer headers carrying the signed-up user's session token."""
    return {"Authorization": f"Bearer {signed_up['token']}"}


@pytest_asyncio.fixture
async def clinic(client: AsyncClient, auth_headers: dict) -> dict:
    """A clinic owned by the signed-up user."""
    response = await client.post(
        "/api/v1/clinics/", json={"name": "Clínica Central"}, headers=auth_headers
    )
    assert response.status_code == 201
    return response.json()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> dict:
    """Insert a user row directly."""
    result = await db_session.execute(
        insert(users)
        .values(name="Test User", email="test@example.com", email_verified=True)
        .returning(users)
    )
    await db_session.commit()
    return dict(result.mappings().one())


@pytest_asyncio.fixture
async def test_clinic(db_session: AsyncSession) -> dict:
    """Insert a clinic row directly."""
    result = await db_session.execute(
        insert(clinics).values(name="Test Clinic").returning(clinics)
    )
    await db_session.commit()
    return dict(result.mappings().one())


@pytest_asyncio.fixture
async def test_doctor(db_session: AsyncSession, test_clinic: dict) -> dict:
    """Insert a doctor row directly."""
    result = await db_session.execute(
        insert(doctors)
        .values(
            clinic_id=test_clinic["id"],
            name="Dr. Test",
            specialty="Clínico Geral",
            available_from_weekday=1,
            available_to_weekday=5,
            available_from_time=time(8, 0),
            available_to_time=time(17, 0),
            appointment_price_in_cents=15000,
        )
        .returning(doctors)
    )
    await db_session.commit()
    return dict(result.mappings().one())


@pytest_asyncio.fixture
async def test_patient(db_session: AsyncSession, test_clinic: dict) -> dict:
    """Insert a patient row directly."""
    result = await db_session.execute(
        insert(patients)
        .values(
            clinic_id=test_clinic["id"],
            name="Ana Test",
            email="ana@example.com",
            phone="+5511988887777",
            sex="female",
        )
        .returning(patients)
    )
    await db_session.commit()
    return dict(result.mappings().one())
