"""
tests/conftest.py

Test fixtures for API route tests and service tests.
- Route tests: ASGI client with the database and current profile overridden
- Service tests: in-memory SQLite session with the full schema, plus a seeder
"""
import os
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Settings are read at import time; external services stay off under test
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite+aiosqlite://")
os.environ["REDIS_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["EMAILS_ENABLED"] = "false"
os.environ["LOG_TO_FILE"] = "false"

# --- Imports ---
import io
from collections.abc import AsyncGenerator, Generator
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch
from urllib.error import URLError
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from main import app
from inkconnect.appointment.models import Appointment
from inkconnect.artist.models import Artist
from inkconnect.client.models import Client
from inkconnect.core.config import settings
from inkconnect.core.context import RequestContext
from inkconnect.core.dependencies import get_current_profile
from inkconnect.database.base import Base
from inkconnect.database.enums import AppointmentStatus, UserRole
from inkconnect.database.models import Profile
from inkconnect.database.session import get_db


# --- Core Test Fixtures ---


@pytest.fixture(scope="session")
def transport() -> ASGITransport:
    """Fixture for ASGI transport."""
    return ASGITransport(app=app)


@pytest_asyncio.fixture(scope="function")
async def async_client(transport: ASGITransport) -> AsyncGenerator[AsyncClient, None]:
    """Fixture for HTTP async client."""
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# --- Fake Profile Fixtures ---


def _fake_profile(role: UserRole, email: str, full_name: str) -> Profile:
    return Profile(
        id=uuid4(),
        email=email,
        full_name=full_name,
        role=role,
        hashed_password="fakehashedpassword",
        is_active=True,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def fake_admin_profile() -> Profile:
    """Fixture for a fake studio manager."""
    return _fake_profile(UserRole.MANAGER, "manager.test@example.com", "Manager Test")


@pytest.fixture
def fake_client_profile() -> Profile:
    """Fixture for a fake client."""
    return _fake_profile(UserRole.CLIENT, "client.test@example.com", "Client Test")


@pytest.fixture
def fake_artist_profile() -> Profile:
    """Fixture for a fake artist."""
    return _fake_profile(UserRole.ARTIST, "artist.test@example.com", "Artist Test")


# --- Dependency Override Fixtures ---


@pytest_asyncio.fixture
async def override_get_db() -> AsyncGenerator[None, None]:
    """Override for the database dependency."""

    async def _override() -> AsyncGenerator[AsyncMock, None]:
        yield AsyncMock()

    app.dependency_overrides[get_db] = _override
    yield
    app.dependency_overrides.pop(get_db, None)


@pytest_asyncio.fixture
async def mock_current_admin(fake_admin_profile: Profile) -> AsyncGenerator[Profile, None]:
    """Mock the current profile as a manager."""
    app.dependency_overrides[get_current_profile] = lambda: fake_admin_profile
    yield fake_admin_profile
    app.dependency_overrides.pop(get_current_profile, None)


@pytest_asyncio.fixture
async def mock_current_client(fake_client_profile: Profile) -> AsyncGenerator[Profile, None]:
    """Mock the current profile as a client."""
    app.dependency_overrides[get_current_profile] = lambda: fake_client_profile
    yield fake_client_profile
    app.dependency_overrides.pop(get_current_profile, None)


@pytest_asyncio.fixture
async def mock_current_artist(fake_artist_profile: Profile) -> AsyncGenerator[Profile, None]:
    """Mock the current profile as an artist."""
    app.dependency_overrides[get_current_profile] = lambda: fake_artist_profile
    yield fake_artist_profile
    app.dependency_overrides.pop(get_current_profile, None)


# --- Database Fixtures (Service Tests) ---


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


class Seeder:
    """Creates persisted rows for service tests."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def profile(
        self, role: UserRole, full_name: str = "Test Person", email: str | None = None
    ) -> Profile:
        profile = Profile(
            email=email or f"{role.value}.{uuid4().hex[:8]}@example.com",
            full_name=full_name,
            role=role,
            hashed_password="fakehashedpassword",
            is_active=True,
        )
        self.db.add(profile)
        await self.db.commit()
        return profile

    async def artist(
        self,
        full_name: str = "Ink Artist",
        hourly_rate: Decimal | None = Decimal("100.00"),
        is_available: bool = True,
        specializations: list[str] | None = None,
    ) -> tuple[Profile, Artist]:
        profile = await self.profile(UserRole.ARTIST, full_name)
        artist = Artist(
            profile=profile,
            bio="",
            specializations=specializations or [],
            hourly_rate=hourly_rate,
            is_available=is_available,
        )
        self.db.add(artist)
        await self.db.commit()
        return profile, artist

    async def client(self, full_name: str = "Ink Client") -> tuple[Profile, Client]:
        profile = await self.profile(UserRole.CLIENT, full_name)
        client = Client(profile=profile)
        self.db.add(client)
        await self.db.commit()
        return profile, client

    async def appointment(
        self,
        artist: Artist,
        client: Client,
        status: AppointmentStatus = AppointmentStatus.PENDING,
        days_ahead: int = 7,
        duration_hours: Decimal = Decimal("2"),
    ) -> Appointment:
        appointment = Appointment(
            artist=artist,
            client=client,
            appointment_date=datetime.now(timezone.utc) + timedelta(days=days_ahead),
            duration_hours=duration_hours,
            status=status,
        )
        self.db.add(appointment)
        await self.db.commit()
        return appointment


@pytest.fixture
def seed(db_session: AsyncSession) -> Seeder:
    return Seeder(db_session)


def ctx_for(profile: Profile) -> RequestContext:
    return RequestContext.from_profile(profile)


@pytest.fixture
def make_ctx():
    """Build the RequestContext a route would hand to services for `profile`."""
    return ctx_for


# --- Mail Fixtures ---


@pytest.fixture
def unreachable_mail_provider() -> Generator[MagicMock, None, None]:
    """Emails enabled, but every SendGrid request fails at the transport level."""
    client_cls = MagicMock()
    client_cls.return_value.client.mail.send.post.side_effect = URLError("connection refused")
    with patch.object(settings, "EMAILS_ENABLED", True), patch.object(
        settings, "SENDGRID_API_KEY", "SG.test-key"
    ), patch("inkconnect.core.email.SendGridAPIClient", client_cls):
        yield client_cls


# --- Upload Fixtures ---


@pytest.fixture
def png_bytes() -> bytes:
    """A small valid PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (64, 48), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()
