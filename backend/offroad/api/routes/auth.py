"""Authentication API routes."""
import logging
from datetime import datetime, timezone, timedelta
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Response, Request

from offroad.dependencies import (
    get_auth_service,
    get_current_active_user,
    get_session_token
)
from offroad.services.auth_service import AuthService
from offroad.models.user import User
from offroad.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    UserResponse,
    SessionInfo,
    ProfileUpdate,
    PasswordChangeRequest,
    PasswordChangeResponse,
)
from offroad.config import get_settings
from offroad.api.utils.request import extract_client_metadata
from offroad.api.exceptions import unauthorized


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["Authentication"])
settings = get_settings()

# Rate limiting storage (in production, use Redis)
# Key: IP address, Value: list of login attempt timestamps
_login_rate_limit_cache: dict = {}


def check_login_rate_limit(
    ip_address: str,
    window_minutes: int = 15,
    max_attempts: int = 5
) -> bool:
    """
    Check if IP address has exceeded login rate limit.

    Returns:
        True if rate limit exceeded, False if OK to proceed
    """
    now = datetime.now(timezone.utc)
    cache_key = f"login_{ip_address}"

    if cache_key not in _login_rate_limit_cache:
        _login_rate_limit_cache[cache_key] = []

    window_start = now - timedelta(minutes=window_minutes)
    _login_rate_limit_cache[cache_key] = [
        ts for ts in _login_rate_limit_cache[cache_key] if ts > window_start
    ]

    if len(_login_rate_limit_cache[cache_key]) >= max_attempts:
        return True

    _login_rate_limit_cache[cache_key].append(now)
    return False


def clear_login_rate_limit(ip_address: str) -> None:
    """Clear login rate limit for an IP address after successful login."""
    cache_key = f"login_{ip_address}"
    if cache_key in _login_rate_limit_cache:
        del _login_rate_limit_cache[cache_key]


def _set_session_cookie(response: Response, session_token: str) -> None:
    response.set_cookie(
        key="session_token",
        value=session_token,
        httponly=True,
        secure=not settings.DEBUG,  # HTTPS only in production
        samesite="lax",
        max_age=settings.SESSION_EXPIRY_HOURS * 3600,
        path="/"
    )


@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Create a user account and log it in.

    Raises:
        ConflictError: Email or phone already registered
    """
    user = await auth_service.register_user(data)

    ip_address, user_agent = extract_client_metadata(request)
    session_token, expires_at = await auth_service.create_session(
        user_id=user.id,
        ip_address=ip_address,
        user_agent=user_agent
    )
    _set_session_cookie(response, session_token)

    return LoginResponse(
        message="User registered successfully",
        user=UserResponse.model_validate(user),
        expires_at=expires_at
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Authenticate user and create session.

    Rate limited to 5 attempts per 15 minutes per IP address.

    Raises:
        HTTPException: If authentication fails or rate limit exceeded
    """
    ip_address, user_agent = extract_client_metadata(request)

    if check_login_rate_limit(ip_address):
        logger.warning(f"Login rate limit exceeded for {ip_address}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts. Please wait 15 minutes before trying again."
        )

    user = await auth_service.authenticate_user(
        email=login_data.email,
        password=login_data.password
    )

    if not user:
        logger.info(f"Failed login for {login_data.email} from {ip_address}")
        raise unauthorized("Invalid email or password")

    clear_login_rate_limit(ip_address)

    session_token, expires_at = await auth_service.create_session(
        user_id=user.id,
        ip_address=ip_address,
        user_agent=user_agent
    )
    _set_session_cookie(response, session_token)

    return LoginResponse(
        message="Login successful",
        user=UserResponse.model_validate(user),
        expires_at=expires_at
    )


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    session_token: Optional[str] = Depends(get_session_token),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Invalidate the current session and clear the cookie."""
    if session_token:
        await auth_service.invalidate_session(session_token)

    response.delete_cookie(key="session_token", path="/")
    return LogoutResponse(message="Logout successful")


@router.get("/me", response_model=SessionInfo)
async def get_me(
    current_user: User = Depends(get_current_active_user)
):
    """Get the logged-in user."""
    return SessionInfo(
        user=UserResponse.model_validate(current_user),
        is_admin=current_user.is_admin
    )


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Update the caller's name, phone or profile image."""
    user = await auth_service.update_profile(current_user, data)
    return UserResponse.model_validate(user)


@router.post("/password/change", response_model=PasswordChangeResponse)
async def change_password(
    data: PasswordChangeRequest,
    current_user: User = Depends(get_current_active_user),
    session_token: Optional[str] = Depends(get_session_token),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Change the caller's password.

    Every other session of the user is logged out; the current one stays.
    """
    await auth_service.change_password(
        current_user,
        data.current_password,
        data.new_password,
        keep_session_token=session_token
    )
    return PasswordChangeResponse(message="Password changed successfully")
