"""Daily timer for the question of the day batch (runs inside the app's event loop)."""
import asyncio
import logging
from datetime import datetime, time, timedelta, timezone

from mentorquest.core.clock import Clock
from mentorquest.services import qotd

logger = logging.getLogger(__name__)


def seconds_until(now: datetime, hour: int, minute: int) -> float:
    """Seconds from now to the next HH:MM UTC (tomorrow if already past)."""
    now = now.astimezone(timezone.utc)
    target = datetime.combine(now.date(), time(hour, minute), tzinfo=timezone.utc)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


def run_once(session_factory, clock: Clock) -> qotd.BatchSummary:
    db = session_factory()
    try:
        return qotd.run_scheduled_selection(db, clock)
    finally:
        db.close()


async def daily_loop(session_factory, clock: Clock, hour: int, minute: int) -> None:
    while True:
        delay = seconds_until(clock.now(), hour, minute)
        logger.info("next question of the day run in %.0f seconds", delay)
        await asyncio.sleep(delay)
        try:
            await asyncio.to_thread(run_once, session_factory, clock)
        except Exception:
            # the next day's run starts from scratch
            logger.exception("scheduled question of the day run failed")
        # step past the target minute so the same slot is not picked twice
        await asyncio.sleep(60)
