"""Tests for scheduler jobs (scheduler.py)."""

from unittest.mock import AsyncMock, MagicMock

from apscheduler.triggers.cron import CronTrigger

from tickrtime.processing.tickers import SyncStats
from tickrtime.scheduler import (
    TICKER_SYNC_JOB_ID,
    create_scheduler,
    schedule_ticker_sync,
    ticker_sync_job,
)


class TestCreateScheduler:
    def test_creates_scheduler(self) -> None:
        scheduler = create_scheduler()
        assert scheduler is not None
        assert str(scheduler.timezone) == "UTC"


class TestScheduleTickerSync:
    def test_registers_daily_cron_job(self) -> None:
        scheduler = MagicMock()
        syncer = MagicMock()

        schedule_ticker_sync(scheduler, syncer, hour=6)

        args, kwargs = scheduler.add_job.call_args
        assert args[0] is ticker_sync_job
        assert isinstance(args[1], CronTrigger)
        assert kwargs["args"] == [syncer]
        assert kwargs["id"] == TICKER_SYNC_JOB_ID


class TestTickerSyncJob:
    async def test_runs_sync(self) -> None:
        syncer = AsyncMock()
        syncer.run.return_value = SyncStats(inserted=2)

        await ticker_sync_job(syncer)

        syncer.run.assert_awaited_once()

    async def test_swallows_failures(self) -> None:
        syncer = AsyncMock()
        syncer.run.side_effect = RuntimeError("boom")

        # Should not raise
        await ticker_sync_job(syncer)
