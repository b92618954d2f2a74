"""Security utilities for password hashing and token generation."""
import secrets
from passlib.context import CryptContext

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain_password, hashed_password)


def generate_session_token(nbytes: int = 32) -> str:
    """Generate an opaque, URL-safe session token."""
    return secrets.token_urlsafe(nbytes)
