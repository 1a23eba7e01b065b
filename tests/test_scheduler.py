"""
Unit tests for sweep timing and the background scheduler.
"""

import asyncio
from datetime import datetime, timedelta

import pytest

from config import SchedulerConfig
from scheduler import SweepScheduler, next_daily_run, next_weekly_run


class TestRunTimes:

    def test_daily_later_today(self):
        assert next_daily_run(datetime(2025, 3, 12, 9, 30), 23, 0) == datetime(2025, 3, 12, 23, 0)

    def test_daily_rolls_to_tomorrow(self):
        assert next_daily_run(datetime(2025, 3, 12, 9, 30), 0, 0) == datetime(2025, 3, 13, 0, 0)

    def test_daily_exact_time_is_next_day(self):
        assert next_daily_run(datetime(2025, 3, 13, 0, 0), 0, 0) == datetime(2025, 3, 14, 0, 0)

    def test_weekly_next_monday(self):
        # 2025-03-12 is a Wednesday
        assert next_weekly_run(datetime(2025, 3, 12, 9, 30), 0, 0, 0) == datetime(2025, 3, 17, 0, 0)

    def test_weekly_later_same_day(self):
        assert next_weekly_run(datetime(2025, 3, 12, 9, 30), 2, 18, 0) == datetime(2025, 3, 12, 18, 0)

    def test_weekly_same_day_passed(self):
        assert next_weekly_run(datetime(2025, 3, 12, 19, 0), 2, 18, 0) == datetime(2025, 3, 19, 18, 0)


class RecordingManager:
    """Stands in for QuestLifecycleManager and records sweep calls."""

    def __init__(self, fail_daily=False):
        self.calls = []
        self.fail_daily = fail_daily

    async def expire_and_renew(self, now=None):
        self.calls.append(("daily", now))
        if self.fail_daily:
            raise RuntimeError("sweep exploded")

    async def weekly_sweep(self, now=None):
        self.calls.append(("weekly", now))


@pytest.mark.asyncio
class TestSweepScheduler:

    async def test_nothing_due(self):
        manager = RecordingManager()
        scheduler = SweepScheduler(manager, SchedulerConfig())
        scheduler.plan(datetime(2025, 3, 12, 9, 30))

        assert await scheduler.run_due_jobs(datetime(2025, 3, 12, 12, 0)) == []
        assert manager.calls == []

    async def test_daily_fires_once(self):
        manager = RecordingManager()
        scheduler = SweepScheduler(manager, SchedulerConfig())
        scheduler.plan(datetime(2025, 3, 12, 9, 30))
        midnight = datetime(2025, 3, 13, 0, 0, 30)

        assert await scheduler.run_due_jobs(midnight) == ["daily"]
        assert await scheduler.run_due_jobs(midnight + timedelta(minutes=1)) == []
        assert scheduler.next_daily == datetime(2025, 3, 14, 0, 0)

    async def test_monday_runs_both(self):
        manager = RecordingManager()
        scheduler = SweepScheduler(manager, SchedulerConfig())
        scheduler.plan(datetime(2025, 3, 16, 22, 0))
        monday = datetime(2025, 3, 17, 0, 1)

        ran = await scheduler.run_due_jobs(monday)

        assert ran == ["daily", "weekly"]
        assert manager.calls == [("daily", monday), ("weekly", monday)]
        assert scheduler.next_weekly == datetime(2025, 3, 24, 0, 0)

    async def test_failing_sweep_rescheduled(self):
        manager = RecordingManager(fail_daily=True)
        scheduler = SweepScheduler(manager, SchedulerConfig())
        scheduler.plan(datetime(2025, 3, 12, 9, 30))

        ran = await scheduler.run_due_jobs(datetime(2025, 3, 13, 0, 0))

        assert ran == ["daily"]
        assert scheduler.next_daily == datetime(2025, 3, 14, 0, 0)

    async def test_start_and_stop(self):
        scheduler = SweepScheduler(RecordingManager(), SchedulerConfig(check_interval_seconds=5))

        await scheduler.start()
        assert scheduler.status == "running"
        await asyncio.sleep(0)
        await scheduler.stop()

        assert scheduler.status == "stopped"
        assert scheduler.next_daily is not None
