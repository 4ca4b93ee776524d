"""Shared test configuration and fixtures.

Every test gets its own SQLite file under ``tmp_path``:
- Tables are created fresh, so tests never see each other's rows.
- Services commit inside their locks, which a rolled-back outer transaction
  could not isolate; a throwaway database can.
"""

import uuid
from collections.abc import AsyncGenerator
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stayledger.api.deps import get_clock, get_db
from stayledger.config import settings
from stayledger.core.clock import FixedClock
from stayledger.core.records import ActorContext
from stayledger.database import Base, make_engine
from stayledger.main import app

# 09:00 in Lagos; the operating calendar's "today" is 2025-06-01.
START = datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """A fresh SQLite database with every table created."""
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'stayledger_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session for service-level tests."""
    async with session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# Clock, calendar and actor
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(START)


@pytest.fixture
def calendar():
    return settings.operating_calendar


@pytest.fixture
def tenant_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def actor(tenant_id: uuid.UUID) -> ActorContext:
    return ActorContext(tenant_id=tenant_id, role="receptionist", actor_id="ada")


@pytest.fixture
def tenant_headers(tenant_id: uuid.UUID) -> dict[str, str]:
    """Headers the gateway forwards for an authenticated receptionist."""
    return {"X-Tenant-ID": str(tenant_id), "X-Actor-Role": "receptionist", "X-Actor-ID": "ada"}


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(session_factory, clock: FixedClock) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to the test database and a fixed clock.

    Each request gets its own session, as in production, so concurrent
    requests exercise the real locking path.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures: unit and booking helpers
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_unit(client: AsyncClient, tenant_headers: dict) -> dict:
    """A 25,000/night room created via the API."""
    response = await client.post(
        "/api/v1/units",
        json={"name": "Room 101", "base_price": "25000.00", "unit_type": "ROOM", "capacity": 2},
        headers=tenant_headers,
    )
    assert response.status_code == 201, f"Failed to create test unit: {response.text}"
    return response.json()


@pytest_asyncio.fixture
async def in_house_booking(client: AsyncClient, tenant_headers: dict, test_unit: dict) -> dict:
    """A 4-night, 100,000 booking from 2025-06-01 to 2025-06-05, checked in."""
    response = await client.post(
        "/api/v1/bookings",
        json={
            "unit_id": test_unit["id"],
            "guest_id": str(uuid.uuid4()),
            "guest_name": "Chidi Okafor",
            "check_in": "2025-06-01",
            "check_out": "2025-06-05",
            "status": "CONFIRMED",
        },
        headers=tenant_headers,
    )
    assert response.status_code == 201, f"Failed to create test booking: {response.text}"
    booking = response.json()

    response = await client.post(f"/api/v1/bookings/{booking['id']}/check-in", headers=tenant_headers)
    assert response.status_code == 200, f"Failed to check in test booking: {response.text}"
    return response.json()
