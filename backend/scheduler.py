"""
Solo Leveling Life System - Sweep Scheduler
Background asyncio loop that fires the nightly and weekly quest sweeps
"""

import asyncio
from datetime import datetime, timedelta
from typing import List, Optional

from config import SchedulerConfig, get_scheduler_config
from logger import logger
from quests import QuestLifecycleManager


# ============================================
# RUN TIME HELPERS
# ============================================

def next_daily_run(now: datetime, hour: int, minute: int) -> datetime:
    """First hour:minute strictly after `now`."""
    candidate = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


def next_weekly_run(now: datetime, weekday: int, hour: int, minute: int) -> datetime:
    """First `weekday` (0 = Monday) at hour:minute strictly after `now`."""
    candidate = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    candidate += timedelta(days=(weekday - now.weekday()) % 7)
    if candidate <= now:
        candidate += timedelta(days=7)
    return candidate


# ============================================
# SCHEDULER SERVICE
# ============================================

class SweepScheduler:
    """Background service that runs quest sweeps when they come due."""

    def __init__(self, manager: QuestLifecycleManager, config: Optional[SchedulerConfig] = None):
        self.manager = manager
        self.config = config or get_scheduler_config()
        self.running = False
        self._task: Optional[asyncio.Task] = None
        self.next_daily: Optional[datetime] = None
        self.next_weekly: Optional[datetime] = None

    @property
    def status(self) -> str:
        return "running" if self.running else "stopped"

    def plan(self, now: datetime) -> None:
        """Compute the next run of each sweep from `now`."""
        self.next_daily = next_daily_run(now, self.config.daily_hour, self.config.daily_minute)
        self.next_weekly = next_weekly_run(
            now, self.config.weekly_weekday, self.config.daily_hour, self.config.daily_minute
        )

    async def start(self):
        """Start the scheduler."""
        if self.running:
            return

        self.plan(datetime.now())
        self.running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info(
            f"Sweep scheduler started ({self.config.check_interval_seconds}s interval, "
            f"next daily {self.next_daily:%Y-%m-%d %H:%M}, next weekly {self.next_weekly:%Y-%m-%d %H:%M})"
        )

    async def stop(self):
        """Stop the scheduler."""
        self.running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Sweep scheduler stopped")

    async def run_due_jobs(self, now: datetime) -> List[str]:
        """
        Run every sweep whose time has come and schedule its next run.

        Returns the names of the sweeps that ran. A failing sweep is logged
        and rescheduled like a successful one.
        """
        if self.next_daily is None or self.next_weekly is None:
            self.plan(now)

        ran: List[str] = []

        if now >= self.next_daily:
            try:
                await self.manager.expire_and_renew(now)
            except Exception:
                logger.exception("Daily quest sweep failed")
            self.next_daily = next_daily_run(now, self.config.daily_hour, self.config.daily_minute)
            ran.append("daily")

        if now >= self.next_weekly:
            try:
                await self.manager.weekly_sweep(now)
            except Exception:
                logger.exception("Weekly quest sweep failed")
            self.next_weekly = next_weekly_run(
                now, self.config.weekly_weekday, self.config.daily_hour, self.config.daily_minute
            )
            ran.append("weekly")

        return ran

    async def _run_loop(self):
        """Main loop that wakes up and runs due sweeps."""
        while self.running:
            await self.run_due_jobs(datetime.now())
            await asyncio.sleep(self.config.check_interval_seconds)
