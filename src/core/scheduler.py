"""APScheduler integration for housekeeping tasks."""

import logging

import pytz
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from src.core.config import settings
from src.core.uploads import sweep_stale_uploads

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = AsyncIOScheduler(timezone=pytz.timezone(settings.timezone))


def configure_scheduler() -> None:
    """Configure all scheduled jobs."""
    # Remove uploads orphaned by a crashed or killed worker
    scheduler.add_job(
        sweep_stale_uploads,
        trigger=IntervalTrigger(
            minutes=settings.upload_sweep_interval_minutes,
            timezone=pytz.timezone(settings.timezone),
        ),
        id="sweep_stale_uploads",
        name="Sweep Stale Uploads",
        replace_existing=True,
    )

    logger.info(
        f"Scheduled stale upload sweep every "
        f"{settings.upload_sweep_interval_minutes} minutes "
        f"(max age {settings.upload_max_age_minutes} minutes)"
    )


def start_scheduler() -> None:
    """Start the scheduler."""
    configure_scheduler()
    if not scheduler.running:
        scheduler.start()
    logger.info("Scheduler started")


def shutdown_scheduler() -> None:
    """Shutdown the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("Scheduler shutdown")
