from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler

from .config import settings
from .ingest import Aggregator

logger = logging.getLogger(__name__)

JOB_ID = "aggregate"


def refresh(aggregator: Aggregator) -> None:
    """One scheduled cycle. Errors are logged; the previous snapshot stays published."""
    try:
        aggregator.run_cycle()
    except Exception as e:
        logger.exception("aggregation cycle failed: %s", e)


def build_scheduler(aggregator: Aggregator, minutes: Optional[int] = None) -> BackgroundScheduler:
    every = max(1, int(minutes or settings.refresh_every_min))
    sched = BackgroundScheduler(timezone=settings.tz)

    # First run fires immediately; max_instances=1 makes a tick that lands while a
    # cycle is still running get skipped instead of overlapping it.
    sched.add_job(
        refresh,
        "interval",
        args=[aggregator],
        minutes=every,
        id=JOB_ID,
        next_run_time=dt.datetime.now(dt.timezone.utc),
        max_instances=1,
        coalesce=True,
    )
    logger.info("scheduler configured REFRESH_EVERY_MIN=%s TZ=%s", every, settings.tz)
    return sched
