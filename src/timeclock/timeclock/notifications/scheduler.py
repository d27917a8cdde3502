from __future__ import annotations

import logging
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler

from .engine import NotificationEngine

logger = logging.getLogger(__name__)

# Process-wide: the Flask reloader and repeated create_app() calls must not
# start a second scheduler.
_scheduler: Optional[BackgroundScheduler] = None


def start_scheduler(engine: NotificationEngine, *, enabled: bool, time_zone: str) -> Optional[BackgroundScheduler]:
    """Run the reminder engine once a minute in a background thread.

    - No-op when `enabled` is false
    - No-op when a scheduler is already running in this process
    """
    global _scheduler

    if not enabled:
        logger.info("APScheduler disabled via settings (ENABLE_SCHEDULER=0)")
        return None

    if _scheduler is not None:
        logger.info("APScheduler already running, skipping initialization")
        return _scheduler

    logger.info("Starting APScheduler...")
    scheduler = BackgroundScheduler(timezone=time_zone)
    scheduler.add_job(
        run_notification_check,
        trigger="interval",
        minutes=1,
        args=[engine],
        id="check_and_send_notifications",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    _scheduler = scheduler

    logger.info("APScheduler started: reminder check scheduled every minute")
    return scheduler


def run_notification_check(engine: NotificationEngine) -> None:
    """Job wrapper; keeps business logic in the engine."""
    try:
        engine.check_and_send_notifications()
    except Exception:
        logger.exception("Scheduled notification check failed")
