"""FastAPI dependencies for authentication and authorization."""
from typing import Optional
from fastapi import Cookie, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from offroad.database import get_db
from offroad.models.user import User
from offroad.services.auth_service import AuthService
from offroad.config import get_settings


settings = get_settings()


async def get_auth_service(
    db: AsyncSession = Depends(get_db)
) -> AuthService:
    """
    Dependency to get auth service.

    Args:
        db: Database session

    Returns:
        AuthService instance
    """
    return AuthService(
        session=db,
        session_expiry_hours=settings.SESSION_EXPIRY_HOURS
    )


async def get_session_token(
    session_token: Optional[str] = Cookie(None, alias="session_token")
) -> Optional[str]:
    """Extract session token from cookie."""
    return session_token


async def get_current_user(
    session_token: Optional[str] = Depends(get_session_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get the current authenticated user.

    Raises:
        HTTPException: If not authenticated or session invalid
    """
    if not session_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Cookie"},
        )

    user = await auth_service.validate_session(session_token)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
            headers={"WWW-Authenticate": "Cookie"},
        )

    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Get the current active user.

    Raises:
        HTTPException: If user is not active
    """
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )
    return current_user


async def get_current_admin_user(
    current_user: User = Depends(get_current_active_user)
) -> User:
    """
    Get the current admin user.

    Admins manage events, every registration, the gallery and the contact
    inbox.

    Raises:
        HTTPException: If user is not an admin
    """
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized. Admin access required."
        )
    return current_user


async def get_optional_user(
    session_token: Optional[str] = Depends(get_session_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[User]:
    """
    Get the current user if authenticated, otherwise None.

    Used by public endpoints that show admins more (e.g. draft events).
    """
    if not session_token:
        return None

    return await auth_service.validate_session(session_token)
