"""Background tasks and job scheduler."""
from offroad.tasks.scheduler import (
    get_scheduler,
    start_scheduler,
    stop_scheduler,
    list_jobs,
)
from offroad.tasks.session_cleanup import session_cleanup_job
from offroad.tasks.notifications import (
    NotificationDispatcher,
    send_registration_notification,
    send_contact_notification,
)

__all__ = [
    "get_scheduler",
    "start_scheduler",
    "stop_scheduler",
    "list_jobs",
    "session_cleanup_job",
    "NotificationDispatcher",
    "send_registration_notification",
    "send_contact_notification",
]
