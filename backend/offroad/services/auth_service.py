"""Authentication service for accounts and session management."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from offroad.models.user import User, UserRole
from offroad.models.session import Session
from offroad.schemas.auth import RegisterRequest, ProfileUpdate
from offroad.services.errors import ConflictError, ValidationError, FieldError
from offroad.services.rules import as_utc
from offroad.utils.security import hash_password, verify_password, generate_session_token

logger = logging.getLogger(__name__)


class AuthService:
    """Service for handling accounts, authentication and sessions."""

    def __init__(self, session: AsyncSession, session_expiry_hours: int = 24):
        """
        Initialize auth service.

        Args:
            session: Database session
            session_expiry_hours: Hours until session expires (default 24)
        """
        self.session = session
        self.session_expiry_hours = session_expiry_hours

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_user_by_phone(self, phone: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.phone == phone)
        )
        return result.scalar_one_or_none()

    async def register_user(self, data: RegisterRequest) -> User:
        """
        Create a regular user account.

        Raises:
            ConflictError: Email or phone already in use
        """
        if await self.get_user_by_email(data.email):
            raise ConflictError("User with this email already exists")
        if await self.get_user_by_phone(data.phone):
            raise ConflictError("User with this phone number already exists")

        user = User(
            name=data.name,
            email=data.email.lower(),
            phone=data.phone,
            password_hash=hash_password(data.password),
            role=UserRole.USER.value,
            is_active=True,
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("User with this email or phone number already exists") from e
        await self.session.refresh(user)

        logger.info(f"Registered user {user.id} ({user.email})")
        return user

    async def authenticate_user(
        self,
        email: str,
        password: str
    ) -> Optional[User]:
        """
        Authenticate a user by email and password.

        Returns:
            User object if authentication successful, None otherwise
        """
        user = await self.get_user_by_email(email)

        if not user:
            return None

        if not user.is_active:
            return None

        if not user.password_hash:
            return None

        if not verify_password(password, user.password_hash):
            return None

        return user

    async def create_session(
        self,
        user_id: int,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> Tuple[str, datetime]:
        """
        Create a new session for a user.

        Returns:
            Tuple of (session_token, expires_at)
        """
        session_token = generate_session_token()
        expires_at = datetime.now(timezone.utc) + timedelta(hours=self.session_expiry_hours)

        session = Session(
            session_token=session_token,
            user_id=user_id,
            expires_at=expires_at,
            ip_address=ip_address,
            user_agent=user_agent,
            is_active=True
        )

        self.session.add(session)
        await self.session.commit()

        return session_token, expires_at

    async def validate_session(
        self,
        session_token: str
    ) -> Optional[User]:
        """
        Validate a session token and return the associated user.

        Returns:
            User object if session is valid, None otherwise
        """
        result = await self.session.execute(
            select(Session).where(
                Session.session_token == session_token,
                Session.is_active == True
            )
        )
        session = result.scalar_one_or_none()

        if not session:
            return None

        if as_utc(session.expires_at) < datetime.now(timezone.utc):
            session.is_active = False
            await self.session.commit()
            return None

        result = await self.session.execute(
            select(User).where(User.id == session.user_id)
        )
        user = result.scalar_one_or_none()

        if not user or not user.is_active:
            return None

        return user

    async def invalidate_session(
        self,
        session_token: str
    ) -> bool:
        """
        Invalidate a session (logout).

        Returns:
            True if session was invalidated, False if not found
        """
        result = await self.session.execute(
            select(Session).where(Session.session_token == session_token)
        )
        session = result.scalar_one_or_none()

        if not session:
            return False

        session.is_active = False
        await self.session.commit()

        return True

    async def invalidate_all_user_sessions(
        self,
        user_id: int,
        except_token: Optional[str] = None
    ) -> int:
        """Invalidate every active session of a user, optionally keeping one."""
        query = select(Session).where(
            Session.user_id == user_id,
            Session.is_active == True
        )
        if except_token:
            query = query.where(Session.session_token != except_token)
        sessions = (await self.session.execute(query)).scalars().all()

        for session in sessions:
            session.is_active = False

        await self.session.commit()

        return len(sessions)

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        """
        Update the caller's own profile.

        Raises:
            ConflictError: The new phone number belongs to another account
        """
        fields = data.model_dump(exclude_unset=True, exclude_none=True)

        if "phone" in fields and fields["phone"] != user.phone:
            existing = await self.get_user_by_phone(fields["phone"])
            if existing and existing.id != user.id:
                raise ConflictError("Phone number is already in use")

        for key, value in fields.items():
            setattr(user, key, value)

        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def change_password(
        self,
        user: User,
        current_password: str,
        new_password: str,
        keep_session_token: Optional[str] = None
    ) -> None:
        """
        Change the caller's password and log out their other sessions.

        Raises:
            ValidationError: Current password is wrong
        """
        if not verify_password(current_password, user.password_hash):
            raise ValidationError(
                "Current password is incorrect",
                [FieldError("current_password", "Current password is incorrect")]
            )

        user.password_hash = hash_password(new_password)
        await self.session.commit()

        revoked = await self.invalidate_all_user_sessions(user.id, except_token=keep_session_token)
        logger.info(f"User {user.id} changed password, {revoked} other sessions revoked")

    async def ensure_admin(
        self,
        email: str,
        password: str,
        name: str,
        phone: str
    ) -> Optional[User]:
        """
        Create the initial admin account if no admin exists yet.

        Returns:
            The created admin, or None when an admin already exists
        """
        result = await self.session.execute(
            select(User).where(User.role == UserRole.ADMIN.value).limit(1)
        )
        if result.scalar_one_or_none():
            return None

        existing = await self.get_user_by_email(email)
        if existing:
            existing.role = UserRole.ADMIN.value
            await self.session.commit()
            logger.info(f"Promoted existing user {existing.email} to admin")
            return existing

        admin = User(
            name=name,
            email=email.lower(),
            phone=phone,
            password_hash=hash_password(password),
            role=UserRole.ADMIN.value,
            is_active=True,
        )
        self.session.add(admin)
        await self.session.commit()
        await self.session.refresh(admin)
        logger.info(f"Created admin user {admin.email}")
        return admin
