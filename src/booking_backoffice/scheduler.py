"""Interval scheduling for background jobs."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from booking_backoffice.errors import StoreUnavailableError
from booking_backoffice.services.holds import HoldExpirySweeper

logger = logging.getLogger(__name__)

HOLD_SWEEP_JOB_ID = "sweep_expired_holds"


def run_hold_sweep(sweeper: HoldExpirySweeper) -> None:
    """Run one sweep from the timer, logging instead of raising."""
    try:
        sweeper.sweep()
    except StoreUnavailableError:
        logger.exception("Hold sweep failed; holds stay active until the next run")


def build_scheduler(
    sweeper: HoldExpirySweeper, interval_seconds: int
) -> AsyncIOScheduler:
    """Create a scheduler with the hold sweep registered but not started."""
    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(
        run_hold_sweep,
        "interval",
        seconds=interval_seconds,
        args=[sweeper],
        id=HOLD_SWEEP_JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    return scheduler
