from __future__ import annotations

from typing import Awaitable, Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from loguru import logger


def build_scheduler(
    times: list[tuple[int, int]],
    timezone: str,
    job: Callable[[], Awaitable[object]],
) -> AsyncIOScheduler:
    """One cron job per ``(hour, minute)``; each fire runs the same job as ``/make``."""

    async def _scheduled_run() -> None:
        try:
            result = await job()
            logger.info(f"[Scheduler] Scheduled run finished: {result}")
        except Exception as e:
            logger.exception(f"[Scheduler] Scheduled run failed: {e}")

    scheduler = AsyncIOScheduler(timezone=timezone)
    for hour, minute in times:
        scheduler.add_job(
            _scheduled_run,
            CronTrigger(hour=hour, minute=minute, timezone=timezone),
            id=f"riddle_{hour:02d}{minute:02d}",
            max_instances=1,
            coalesce=True,
        )
        logger.info(f"[Scheduler] Daily run at {hour:02d}:{minute:02d} {timezone}")
    return scheduler
