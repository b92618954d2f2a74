"""Application configuration management."""
from pydantic_settings import BaseSettings
from functools import lru_cache
import subprocess
import logging


class Settings(BaseSettings):
    """Application settings."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./offroad.db"

    @property
    def async_database_url(self) -> str:
        """Get DATABASE_URL with asyncpg driver for async SQLAlchemy.

        Converts postgresql:// to postgresql+asyncpg:// automatically.
        SQLite URLs (used for local development and tests) pass through.
        """
        if self.DATABASE_URL.startswith("postgresql://"):
            return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)
        return self.DATABASE_URL

    @property
    def is_sqlite(self) -> bool:
        return self.async_database_url.startswith("sqlite")

    # Application
    ENVIRONMENT: str = "development"  # development, staging, or production
    SECRET_KEY: str = ""
    DEBUG: bool = False
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    FRONTEND_URL: str = "http://localhost:3000"

    # Default Admin User (optional - for automatic bootstrapping on startup)
    ADMIN_EMAIL: str = ""  # If set, creates the admin user on startup when no admin exists
    ADMIN_PASSWORD: str = ""  # Required if ADMIN_EMAIL is set
    ADMIN_NAME: str = "Administrator"
    ADMIN_PHONE: str = "+1234567890"

    # Session Configuration
    SESSION_EXPIRY_HOURS: int = 24 * 7

    # Registration rules
    CANCELLATION_CUTOFF_DAYS: int = 3

    # WhatsApp Cloud API (optional - notifications are skipped when unset)
    WHATSAPP_API_URL: str = ""
    WHATSAPP_API_TOKEN: str = ""
    WHATSAPP_PHONE_NUMBER: str = ""
    WHATSAPP_TIMEOUT_SECONDS: float = 10.0
    NOTIFICATIONS_ENABLED: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def get_version() -> str:
    """
    Get application version string.

    In staging: Returns version with commit hash (e.g., "v1.0.0+abc1234")
    In production: Returns clean version (e.g., "v1.0.0")
    """
    from offroad.version import VERSION

    settings = get_settings()
    version_str = f"v{VERSION}"

    if settings.ENVIRONMENT == "staging":
        try:
            commit_hash = subprocess.check_output(
                ["git", "rev-parse", "--short=7", "HEAD"],
                stderr=subprocess.DEVNULL,
                text=True
            ).strip()
            version_str = f"{version_str}+{commit_hash}"
        except (subprocess.CalledProcessError, FileNotFoundError):
            logger = logging.getLogger(__name__)
            logger.warning("Could not retrieve git commit hash for version string")

    return version_str
