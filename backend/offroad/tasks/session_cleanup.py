"""Session cleanup background job - removes expired sessions."""
import logging
from datetime import datetime, timezone
from sqlalchemy import delete
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from offroad.database import AsyncSessionLocal
from offroad.models.session import Session


logger = logging.getLogger(__name__)


async def delete_expired_sessions(session, now: datetime = None) -> int:
    """Delete expired or logged-out sessions. Returns the number removed."""
    now = now or datetime.now(timezone.utc)
    result = await session.execute(
        delete(Session).where(
            (Session.expires_at < now) |
            (Session.is_active == False)
        )
    )
    await session.commit()
    return result.rowcount


async def session_cleanup_job():
    """Hourly job: purge sessions that can no longer authenticate anyone."""
    logger.info("Starting session cleanup job...")
    start_time = datetime.now(timezone.utc)

    try:
        async with AsyncSessionLocal() as session:
            deleted_count = await delete_expired_sessions(session, start_time)

        duration = (datetime.now(timezone.utc) - start_time).total_seconds()
        logger.info(
            "Session cleanup completed: %d sessions deleted in %.2f seconds",
            deleted_count, duration
        )

    except Exception as e:
        logger.error("Session cleanup job failed: %s", str(e))
        raise


def schedule_session_cleanup_job(scheduler: AsyncIOScheduler):
    """Register the session cleanup job with the scheduler."""
    scheduler.add_job(
        session_cleanup_job,
        'interval',
        hours=1,
        id='session_cleanup',
        name='Session Cleanup',
        replace_existing=True,
        max_instances=1,
        coalesce=True
    )

    logger.info("Scheduled session cleanup job to run every hour")
