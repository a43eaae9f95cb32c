"""
Shared fixtures: a throwaway SQLite database per test, seeded users and an
offer, a booking service wired to that database, and an HTTP client.
"""
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from skillswap.api.deps import get_booking_service, get_db, get_notification_service
from skillswap.core.security import Principal, create_access_token
from skillswap.database import Base
from skillswap.domain.booking_state import BookingStatus
from skillswap.main import app
from skillswap.models import Booking, Offer, User
from skillswap.services.booking_service import BookingService
from skillswap.services.notification_service import NotificationService


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/test.db")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def users(session_factory) -> dict[str, User]:
    """Booker, offer owner and an unrelated user."""
    seeded = {
        "booker": User(id=uuid4(), name="Xavier", email="xavier@skillswap.test"),
        "owner": User(id=uuid4(), name="Yasmin", email="yasmin@skillswap.test"),
        "stranger": User(id=uuid4(), name="Zoe", email="zoe@skillswap.test"),
    }
    async with session_factory() as session:
        session.add_all(seeded.values())
        await session.commit()
    return seeded


@pytest.fixture
async def offer(session_factory, users) -> Offer:
    offer = Offer(
        id=uuid4(),
        owner_id=users["owner"].id,
        title="Guitar lessons",
        description="Beginner chords and strumming",
        price=Decimal("25.00"),
    )
    async with session_factory() as session:
        session.add(offer)
        await session.commit()
    return offer


@pytest.fixture
def booker(users) -> Principal:
    return Principal(user_id=users["booker"].id, name=users["booker"].name)


@pytest.fixture
def owner(users) -> Principal:
    return Principal(user_id=users["owner"].id, name=users["owner"].name)


@pytest.fixture
def stranger(users) -> Principal:
    return Principal(user_id=users["stranger"].id, name=users["stranger"].name)


@pytest.fixture
def notifier(session_factory) -> NotificationService:
    return NotificationService(session_factory=session_factory)


@pytest.fixture
def service(notifier) -> BookingService:
    return BookingService(notifier=notifier)


@pytest.fixture
async def client(session_factory, service, notifier) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_booking_service] = lambda: service
    app.dependency_overrides[get_notification_service] = lambda: notifier

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Bearer headers for a seeded user."""

    def _headers(user: User) -> dict[str, str]:
        token = create_access_token({"sub": str(user.id), "name": user.name})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def make_booking():
    """Factory for unsaved bookings with every field populated."""
    return _make_booking


def _make_booking(status: BookingStatus = BookingStatus.ACCEPTED, **overrides) -> Booking:
    booker = User(id=uuid4(), name="Xavier", email="xavier@skillswap.test")
    owner = User(id=uuid4(), name="Yasmin", email="yasmin@skillswap.test")
    offer = Offer(id=uuid4(), owner_id=owner.id, title="Guitar lessons", price=Decimal("25.00"))
    now = datetime.now(UTC)
    fields = dict(
        id=uuid4(),
        offer_id=offer.id,
        offer_owner_id=owner.id,
        booked_by_id=booker.id,
        status=status.value,
        message="interested",
        completed_by_booker=False,
        completed_by_owner=False,
        booker_confirmed_at=None,
        owner_confirmed_at=None,
        completed_at=None,
        session_notes="",
        dispute_reason="",
        disputed_by_id=None,
        disputed_at=None,
        created_at=now,
        updated_at=now,
    )
    fields.update(overrides)
    booking = Booking(**fields)
    booking.offer = offer
    booking.booked_by = booker
    booking.offer_owner = owner
    return booking
