"""Job scheduler for periodic ticker maintenance."""

from __future__ import annotations

from typing import TYPE_CHECKING

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from tickrtime.core.logging import get_logger

if TYPE_CHECKING:
    from tickrtime.processing.tickers import TickerSyncer

logger = get_logger(__name__)

TICKER_SYNC_JOB_ID = "ticker_sync"


def create_scheduler() -> AsyncIOScheduler:
    """Create a new scheduler instance."""
    return AsyncIOScheduler(timezone="UTC")


async def ticker_sync_job(syncer: TickerSyncer) -> None:
    """Refresh the ticker universe from exchange listings."""
    try:
        stats = await syncer.run()
        logger.info(
            "Scheduled ticker sync finished",
            inserted=stats.inserted,
            delisted=stats.delisted_marked,
            enriched=stats.enriched,
        )
    except Exception:
        logger.exception("Ticker sync job failed")


def schedule_ticker_sync(scheduler: AsyncIOScheduler, syncer: TickerSyncer, hour: int) -> None:
    """Register the daily ticker sync at ``hour``:00 UTC."""
    scheduler.add_job(
        ticker_sync_job,
        CronTrigger(hour=hour, minute=0, timezone="UTC"),
        args=[syncer],
        id=TICKER_SYNC_JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    logger.info("Ticker sync scheduled", hour_utc=hour)
