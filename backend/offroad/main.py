"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from offroad.config import get_settings, get_version
from offroad.api.exceptions import from_domain_error
from offroad.api.routes import auth, events, registrations, contact, gallery
from offroad.dependencies import get_current_admin_user
from offroad.services.errors import DomainError, ValidationError
from offroad.tasks import start_scheduler, stop_scheduler, list_jobs


# Configure logging - force INFO level even if uvicorn configured it already
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logging.getLogger().setLevel(logging.INFO)

# Silence SQLAlchemy query logging (too verbose)
logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
logging.getLogger('sqlalchemy.pool').setLevel(logging.WARNING)

# Silence passlib bcrypt version warning (known compatibility issue with bcrypt 4.x)
logging.getLogger('passlib.handlers.bcrypt').setLevel(logging.ERROR)

settings = get_settings()
logger = logging.getLogger(__name__)


async def bootstrap_admin() -> None:
    """Create the configured admin account when no admin exists yet."""
    if not (settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
        logger.info("  Admin bootstrap: Skipped (ADMIN_EMAIL not configured)")
        return

    from offroad.database import AsyncSessionLocal
    from offroad.services.auth_service import AuthService

    try:
        async with AsyncSessionLocal() as session:
            admin = await AuthService(session).ensure_admin(
                email=settings.ADMIN_EMAIL,
                password=settings.ADMIN_PASSWORD,
                name=settings.ADMIN_NAME,
                phone=settings.ADMIN_PHONE,
            )
        if admin:
            logger.info("  Admin bootstrap: Created initial admin user %s", admin.email)
        else:
            logger.info("  Admin bootstrap: Skipped (admin users already exist)")
    except Exception as e:
        # Startup continues without the admin account
        logger.error("  Admin bootstrap: Failed - %s", e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    logger.info("Off-Road Adventures API %s starting...", get_version())
    logger.info("  Environment: %s", settings.ENVIRONMENT.upper())
    logger.info("  Database: %s", settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured')
    logger.info("  Session expiry: %d hours", settings.SESSION_EXPIRY_HOURS)
    logger.info("  WhatsApp notifications: %s", "enabled" if settings.NOTIFICATIONS_ENABLED else "disabled")

    await bootstrap_admin()

    logger.info("  Background scheduler: Starting...")
    try:
        await start_scheduler()
        logger.info("  Background scheduler: Started successfully")
    except Exception as e:
        logger.error("  Background scheduler: Failed to start - %s", e)

    yield

    logger.info("Off-Road Adventures API shutting down...")
    try:
        await stop_scheduler()
        logger.info("  Background scheduler: Stopped")
    except Exception as e:
        logger.error("  Background scheduler: Error during shutdown - %s", e)


app = FastAPI(
    title="Off-Road Adventures API",
    description="Events, registrations, gallery and contact inbox for an off-road adventure company",
    version="1.0.0",
    docs_url="/api/docs" if settings.DEBUG else None,  # Disable docs in production
    redoc_url="/api/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)


app.include_router(auth.router)
app.include_router(events.router)
app.include_router(registrations.router)
app.include_router(contact.router)
app.include_router(gallery.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": get_version()}


@app.get("/api/admin/scheduler/jobs")
async def get_scheduled_jobs(current_user=Depends(get_current_admin_user)):
    """Get list of scheduled background jobs."""
    return {"jobs": list_jobs()}


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    """Translate service-layer errors into their HTTP status."""
    http_exc = from_domain_error(exc)
    content = {"detail": http_exc.detail}
    if isinstance(exc, ValidationError):
        content["errors"] = [error.as_dict() for error in exc.errors]
    return JSONResponse(status_code=http_exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request data as a 400 with one entry per field."""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(location) or "request",
            "message": error.get("msg", "Invalid value"),
        })
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation errors", "errors": errors}
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    if settings.DEBUG:
        import traceback
        return JSONResponse(
            status_code=500,
            content={
                "detail": str(exc),
                "traceback": traceback.format_exc()
            }
        )
    else:
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"}
        )
