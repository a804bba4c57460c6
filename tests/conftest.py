import os

os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite:///:memory:")

import uuid
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import staysync.models  # noqa: F401
from staysync.database import Base, get_db
from staysync.main import app
from staysync.models.booking import Booking
from staysync.models.payment import Payment
from staysync.utils.clock import utcnow

CHECK_IN = datetime(2026, 11, 1, 14, 0, tzinfo=UTC)
CHECK_OUT = CHECK_IN + timedelta(days=3)


@pytest_asyncio.fixture
async def engine(tmp_path):
    """A fresh SQLite database file per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'staysync.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def create_pair(session_factory):
    """Insert a booking (and optionally its payment) directly, bypassing the service."""

    async def _create(
        booking_status: str = "Pending",
        booking_payment_status: str = "Unpaid",
        payment_status: str | None = None,
    ) -> tuple[uuid.UUID, uuid.UUID | None]:
        async with session_factory() as session:
            booking = Booking(
                id=uuid.uuid4(),
                check_in_date=CHECK_IN,
                check_out_date=CHECK_OUT,
                status=booking_status,
                payment_status=booking_payment_status,
            )
            session.add(booking)
            payment_id = None
            if payment_status is not None:
                payment = Payment(
                    id=uuid.uuid4(),
                    booking_id=booking.id,
                    amount=1_500_000,
                    method="cash",
                    status=payment_status,
                    paid_at=utcnow() if payment_status in ("Deposit", "Paid") else None,
                )
                session.add(payment)
                payment_id = payment.id
            await session.commit()
            return booking.id, payment_id

    return _create


@pytest.fixture
def load_pair(session_factory):
    """Read a booking and its payment back in a fresh session."""

    async def _load(booking_id: uuid.UUID) -> tuple[Booking, Payment | None]:
        from sqlalchemy import select

        async with session_factory() as session:
            booking = await session.get(Booking, booking_id)
            result = await session.execute(select(Payment).where(Payment.booking_id == booking_id))
            return booking, result.scalar_one_or_none()

    return _load


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client against the app, with the request session bound to the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
