"""
Unit tests for AuthService.

Tests account registration, authentication, session creation, validation,
invalidation, profile and password changes, and admin bootstrapping.
"""

import pytest
from datetime import datetime, timedelta, timezone
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from offroad.services.auth_service import AuthService
from offroad.services.errors import ConflictError, ValidationError
from offroad.models.user import User, UserRole
from offroad.models.session import Session
from offroad.schemas.auth import RegisterRequest, ProfileUpdate
from offroad.tasks.session_cleanup import delete_expired_sessions
from offroad.utils.security import hash_password, verify_password


@pytest.mark.unit
@pytest.mark.asyncio
class TestAuthServiceRegistration:
    """Test account creation."""

    async def test_register_user(self, db_session: AsyncSession):
        """Test a new account is a regular, active user."""
        service = AuthService(db_session)

        user = await service.register_user(RegisterRequest(
            name="Nina Newcomer",
            email="Nina@Test.com",
            phone="+15550000100",
            password="secret123"
        ))

        assert user.id is not None
        assert user.email == "nina@test.com"
        assert user.role == UserRole.USER.value
        assert user.is_admin is False
        assert verify_password("secret123", user.password_hash)

    async def test_register_duplicate_email(self, db_session: AsyncSession, regular_user: User):
        service = AuthService(db_session)

        with pytest.raises(ConflictError) as exc_info:
            await service.register_user(RegisterRequest(
                name="Copy Cat",
                email="RIDER@test.com",
                phone="+15550000101",
                password="secret123"
            ))

        assert "email" in exc_info.value.message

    async def test_register_duplicate_phone(self, db_session: AsyncSession, regular_user: User):
        service = AuthService(db_session)

        with pytest.raises(ConflictError) as exc_info:
            await service.register_user(RegisterRequest(
                name="Copy Cat",
                email="copy@test.com",
                phone="+15550000002",
                password="secret123"
            ))

        assert "phone" in exc_info.value.message


@pytest.mark.unit
@pytest.mark.asyncio
class TestAuthServiceAuthentication:
    """Test user authentication operations."""

    async def test_authenticate_with_email(self, db_session: AsyncSession, admin_user: User):
        """Test authenticating user with email, case-insensitively."""
        service = AuthService(db_session)

        user = await service.authenticate_user("ADMIN@test.com", "admin123")

        assert user is not None
        assert user.id == admin_user.id

    async def test_authenticate_wrong_password(self, db_session: AsyncSession, admin_user: User):
        service = AuthService(db_session)

        assert await service.authenticate_user(admin_user.email, "wrongpassword") is None

    async def test_authenticate_nonexistent_user(self, db_session: AsyncSession):
        service = AuthService(db_session)

        assert await service.authenticate_user("nobody@test.com", "password") is None

    async def test_authenticate_inactive_user(self, db_session: AsyncSession):
        """Test authentication fails for inactive user."""
        service = AuthService(db_session)

        db_session.add(User(
            name="Inactive User",
            email="inactive@test.com",
            phone="+15550000199",
            role=UserRole.USER.value,
            is_active=False,
            password_hash=hash_password("password123")
        ))
        await db_session.commit()

        assert await service.authenticate_user("inactive@test.com", "password123") is None


@pytest.mark.unit
@pytest.mark.asyncio
class TestAuthServiceSessions:
    """Test session lifecycle."""

    async def test_create_and_validate_session(self, db_session: AsyncSession, regular_user: User):
        service = AuthService(db_session, session_expiry_hours=2)

        token, expires_at = await service.create_session(
            regular_user.id, ip_address="10.0.0.1", user_agent="pytest"
        )

        assert token
        assert expires_at - datetime.now(timezone.utc) <= timedelta(hours=2)

        user = await service.validate_session(token)
        assert user.id == regular_user.id

    async def test_validate_unknown_token(self, db_session: AsyncSession):
        service = AuthService(db_session)

        assert await service.validate_session("not-a-real-token") is None

    async def test_expired_session_deactivated(self, db_session: AsyncSession, regular_user: User):
        """Test an expired session fails validation and is marked inactive."""
        service = AuthService(db_session)
        db_session.add(Session(
            session_token="expired-token",
            user_id=regular_user.id,
            expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
            is_active=True
        ))
        await db_session.commit()

        assert await service.validate_session("expired-token") is None

        stored = (await db_session.execute(
            select(Session).where(Session.session_token == "expired-token")
        )).scalar_one()
        assert stored.is_active is False

    async def test_invalidate_session(self, db_session: AsyncSession, regular_user: User):
        service = AuthService(db_session)
        token, _ = await service.create_session(regular_user.id)

        assert await service.invalidate_session(token) is True
        assert await service.validate_session(token) is None
        assert await service.invalidate_session("missing") is False

    async def test_invalidate_all_but_current(self, db_session: AsyncSession, regular_user: User):
        service = AuthService(db_session)
        keep, _ = await service.create_session(regular_user.id)
        drop1, _ = await service.create_session(regular_user.id)
        drop2, _ = await service.create_session(regular_user.id)

        revoked = await service.invalidate_all_user_sessions(regular_user.id, except_token=keep)

        assert revoked == 2
        assert await service.validate_session(keep) is not None
        assert await service.validate_session(drop1) is None
        assert await service.validate_session(drop2) is None

    async def test_cleanup_removes_expired_and_inactive(
        self, db_session: AsyncSession, regular_user: User
    ):
        service = AuthService(db_session)
        live, _ = await service.create_session(regular_user.id)
        dead, _ = await service.create_session(regular_user.id)
        await service.invalidate_session(dead)
        db_session.add(Session(
            session_token="old-token",
            user_id=regular_user.id,
            expires_at=datetime.now(timezone.utc) - timedelta(days=1),
            is_active=True
        ))
        await db_session.commit()

        deleted = await delete_expired_sessions(db_session)

        assert deleted == 2
        remaining = (await db_session.execute(select(Session.session_token))).scalars().all()
        assert remaining == [live]


@pytest.mark.unit
@pytest.mark.asyncio
class TestAuthServiceProfile:
    """Test profile and password changes."""

    async def test_update_profile(self, db_session: AsyncSession, regular_user: User):
        service = AuthService(db_session)

        user = await service.update_profile(
            regular_user, ProfileUpdate(name="Rita Q. Rider", profile_image="https://img.test/me.png")
        )

        assert user.name == "Rita Q. Rider"
        assert user.profile_image == "https://img.test/me.png"
        assert user.phone == "+15550000002"

    async def test_update_profile_phone_taken(
        self, db_session: AsyncSession, regular_user: User, other_user: User
    ):
        service = AuthService(db_session)

        with pytest.raises(ConflictError):
            await service.update_profile(regular_user, ProfileUpdate(phone=other_user.phone))

    async def test_change_password_revokes_other_sessions(
        self, db_session: AsyncSession, regular_user: User
    ):
        service = AuthService(db_session)
        current, _ = await service.create_session(regular_user.id)
        other, _ = await service.create_session(regular_user.id)

        await service.change_password(
            regular_user, "rider123", "newpass456", keep_session_token=current
        )

        assert await service.authenticate_user("rider@test.com", "newpass456") is not None
        assert await service.authenticate_user("rider@test.com", "rider123") is None
        assert await service.validate_session(current) is not None
        assert await service.validate_session(other) is None

    async def test_change_password_wrong_current(self, db_session: AsyncSession, regular_user: User):
        service = AuthService(db_session)

        with pytest.raises(ValidationError) as exc_info:
            await service.change_password(regular_user, "not-my-password", "newpass456")

        assert exc_info.value.errors[0].field == "current_password"


@pytest.mark.unit
@pytest.mark.asyncio
class TestEnsureAdmin:
    """Test admin bootstrapping."""

    async def test_creates_admin_when_none_exists(self, db_session: AsyncSession):
        service = AuthService(db_session)

        admin = await service.ensure_admin("Boss@Test.com", "boss1234", "Boss", "+15550000500")

        assert admin.email == "boss@test.com"
        assert admin.is_admin is True

    async def test_promotes_existing_user(self, db_session: AsyncSession, regular_user: User):
        service = AuthService(db_session)

        admin = await service.ensure_admin("rider@test.com", "ignored", "Ignored", "+15550000501")

        assert admin.id == regular_user.id
        assert admin.is_admin is True

    async def test_noop_when_admin_exists(self, db_session: AsyncSession, admin_user: User):
        service = AuthService(db_session)

        assert await service.ensure_admin("second@test.com", "pass1234", "Second", "+15550000502") is None
