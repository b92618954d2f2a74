"""
Pytest configuration and fixtures for the Off-Road Adventures backend tests.

This module provides shared fixtures for database, authentication, test client,
and common test data.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Add parent directory to path to import offroad modules
sys.path.insert(0, str(Path(__file__).parent.parent))

# Must be set before offroad.database builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("NOTIFICATIONS_ENABLED", "false")

from offroad.main import app
from offroad.database import Base, get_db
from offroad.models.user import User, UserRole
from offroad.models.event import Event, EventStatus, Difficulty
from offroad.config import Settings
from offroad.utils.security import hash_password
from offroad.api.utils.dependencies import get_notification_dispatcher


# ============================================================================
# Test Configuration
# ============================================================================

@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Provide test-specific settings.

    Uses in-memory SQLite database for tests.
    """
    return Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        SECRET_KEY="test-secret-key-for-testing-only",
        DEBUG=True,
        NOTIFICATIONS_ENABLED=False,
        WHATSAPP_API_URL="",
        WHATSAPP_API_TOKEN="",
        WHATSAPP_PHONE_NUMBER="",
    )


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture(scope="function")
async def async_engine(test_settings: Settings):
    """
    Create async database engine for tests.

    Uses in-memory SQLite with StaticPool to ensure all connections
    share the same in-memory database.
    """
    engine = create_async_engine(
        test_settings.DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(async_engine):
    """Session factory bound to the test engine (for code that opens its own sessions)."""
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide database session for tests.

    Creates a new session for each test and rolls back after the test.
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def mock_notifier(mocker):
    """Stand-in for the post-commit notification dispatcher."""
    notifier = mocker.Mock()
    notifier.registration_created = mocker.Mock()
    notifier.contact_submitted = mocker.Mock()
    return notifier


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession, mock_notifier) -> AsyncGenerator[AsyncClient, None]:
    """
    Provide HTTP test client.

    Overrides the database session dependency to use the test database
    and the notification dispatcher with a mock.
    """
    from offroad.api.routes import auth
    auth._login_rate_limit_cache.clear()

    async def override_get_db():
        try:
            yield db_session
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_dispatcher] = lambda: mock_notifier

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
    auth._login_rate_limit_cache.clear()


# ============================================================================
# User Fixtures
# ============================================================================

async def _create_user(db_session, name, email, phone, password, role=UserRole.USER):
    user = User(
        name=name,
        email=email,
        phone=phone,
        role=role.value,
        is_active=True,
        password_hash=hash_password(password),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create and return an admin user for testing."""
    return await _create_user(
        db_session, "Admin User", "admin@test.com", "+15550000001", "admin123", UserRole.ADMIN
    )


@pytest_asyncio.fixture
async def regular_user(db_session: AsyncSession) -> User:
    """Create and return a regular user for testing."""
    return await _create_user(
        db_session, "Rita Rider", "rider@test.com", "+15550000002", "rider123"
    )


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    """Create and return a second regular user for testing."""
    return await _create_user(
        db_session, "Otto Other", "other@test.com", "+15550000003", "other123"
    )


# ============================================================================
# Authentication Fixtures
# ============================================================================

async def login(client: AsyncClient, email: str, password: str) -> str:
    response = await client.post(
        "/api/auth/login",
        json={"email": email, "password": password}
    )
    assert response.status_code == 200
    return response.cookies.get("session_token")


@pytest_asyncio.fixture
async def admin_session_token(client: AsyncClient, admin_user: User) -> str:
    """Authenticate as admin and return session token."""
    return await login(client, "admin@test.com", "admin123")


@pytest_asyncio.fixture
async def user_session_token(client: AsyncClient, regular_user: User) -> str:
    """Authenticate as the regular user and return session token."""
    return await login(client, "rider@test.com", "rider123")


@pytest_asyncio.fixture
async def other_session_token(client: AsyncClient, other_user: User) -> str:
    """Authenticate as the second regular user and return session token."""
    return await login(client, "other@test.com", "other123")


# ============================================================================
# Event Fixtures
# ============================================================================

@pytest.fixture
def make_event(db_session: AsyncSession, admin_user: User):
    """
    Factory creating events directly in the database.

    Usage:
        event = await make_event(days_ahead=10, max_participants=1)
    """
    async def _make_event(
        days_ahead: float = 30,
        deadline_days_ahead: float = None,
        max_participants: int = 10,
        current_participants: int = 0,
        status: EventStatus = EventStatus.ACTIVE,
        price: float = 150.0,
        title: str = "Desert Dunes Adventure",
    ) -> Event:
        now = datetime.now(timezone.utc)
        if deadline_days_ahead is None:
            deadline_days_ahead = days_ahead / 2
        event = Event(
            title=title,
            description="A full day of guided dune driving with lunch and recovery support.",
            short_description="Guided dune driving day",
            date=now + timedelta(days=days_ahead),
            registration_deadline=now + timedelta(days=deadline_days_ahead),
            duration="1 day",
            location_address="Red Rock Desert Base Camp",
            location_latitude=36.1,
            location_longitude=-115.2,
            price=price,
            max_participants=max_participants,
            current_participants=current_participants,
            difficulty=Difficulty.INTERMEDIATE.value,
            status=status.value,
            images=[],
            equipment=["Recovery straps"],
            requirements=["Valid license"],
            includes=["Lunch"],
            tags=["desert"],
            created_by_id=admin_user.id,
        )
        db_session.add(event)
        await db_session.commit()
        await db_session.refresh(event)
        return event

    return _make_event


@pytest_asyncio.fixture
async def active_event(make_event) -> Event:
    """An upcoming active event with ten seats."""
    return await make_event()


# ============================================================================
# Payload Fixtures
# ============================================================================

@pytest.fixture
def participant_details() -> dict:
    """Valid participant details for a registration."""
    return {
        "name": "Rita Rider",
        "email": "Rita.Rider@Test.com",
        "phone": "+15550000002",
        "emergency_contact": {
            "name": "Sam Rider",
            "phone": "+15550000009",
            "relationship": "Spouse",
        },
        "medical_conditions": "None",
        "experience": "Some Experience",
        "vehicle_details": {
            "make": "Toyota",
            "model": "Land Cruiser",
            "year": 2018,
            "modifications": "Lift kit, winch",
        },
    }


@pytest.fixture
def event_payload() -> dict:
    """Valid body for creating an event."""
    now = datetime.now(timezone.utc)
    return {
        "title": "Mountain Pass Expedition",
        "description": "Two days crossing the high mountain passes with an overnight camp.",
        "short_description": "Two day mountain crossing",
        "date": (now + timedelta(days=20)).isoformat(),
        "registration_deadline": (now + timedelta(days=10)).isoformat(),
        "location": {
            "address": "Pine Ridge Trailhead",
            "coordinates": {"latitude": 39.5, "longitude": -106.0},
        },
        "price": 299.0,
        "max_participants": 12,
        "difficulty": "Advanced",
        "duration": "2 days",
        "images": [{"url": "https://img.test/pass.jpg", "alt": "Pass", "is_primary": True}],
        "equipment": ["Winch"],
        "requirements": ["Snorkel"],
        "includes": ["Camp dinner"],
        "tags": [" Mountain ", "CAMPING"],
    }


# ============================================================================
# Markers
# ============================================================================

def pytest_configure(config):
    """
    Configure pytest markers.
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "security: mark test as a security test"
    )
    config.addinivalue_line(
        "markers", "auth: mark test as an authentication test"
    )
