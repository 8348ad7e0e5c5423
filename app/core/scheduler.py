import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.jobstores.memory import MemoryJobStore

from app.core.config import settings

logger = logging.getLogger(__name__)

CLEANUP_JOB_ID = "presence-cleanup"

scheduler = BackgroundScheduler(
    jobstores={"default": MemoryJobStore()},
    job_defaults={"coalesce": True, "max_instances": 1},
)


def run_presence_cleanup():
    """Drop connections that stopped sending heartbeats."""
    from app.services.connected_users_service import connected_users_service

    try:
        removed = connected_users_service.remove_inactive_users(
            settings.PRESENCE_CLEANUP_MINUTES
        )
        if removed:
            logger.info(f"Presence cleanup removed {removed} connections")
    except Exception as e:
        logger.error(f"Presence cleanup failed: {e}")


def start_scheduler():
    """Start the scheduler with the periodic presence cleanup job."""
    scheduler.add_job(
        run_presence_cleanup,
        "interval",
        seconds=settings.PRESENCE_CLEANUP_INTERVAL_SECONDS,
        id=CLEANUP_JOB_ID,
        replace_existing=True,
    )
    scheduler.start()
    logger.info("APScheduler started for presence cleanup")


def shutdown_scheduler():
    """Gracefully shut down the scheduler."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("APScheduler shut down")
