"""
Solo Leveling Life System - Quest Lifecycle
Daily/weekly assignment, nightly expire-and-renew, weekly sweep and new-user setup
"""

import asyncio
from datetime import date, datetime, timedelta
from typing import Any, Awaitable, List, Optional, Tuple

from config import QuestConfig, SchedulerConfig, get_quest_config, get_scheduler_config
from exceptions import NotFound, ValidationError
from logger import logger
from models import (
    AssignedQuest,
    Difficulty,
    GenerationResult,
    InitializationResult,
    PlaceholderQuest,
    QuestType,
    Stat,
    SweepReport,
    WeeklySweepReport,
)
from quest_selector import QuestSelector
from store import QuestStore


# ============================================
# FALLBACK CONTENT
# ============================================

DAILY_PLACEHOLDERS: List[PlaceholderQuest] = [
    PlaceholderQuest(
        title="Morning Routine",
        description="Start your day with a structured morning routine",
        base_xp=25, difficulty=Difficulty.EASY, related_stat="Stamina",
    ),
    PlaceholderQuest(
        title="Study/Practice for 30 minutes",
        description="Dedicate 30 focused minutes to learning something in your field",
        base_xp=35, difficulty=Difficulty.MEDIUM, related_stat="Intelligence",
    ),
    PlaceholderQuest(
        title="Physical Exercise",
        description="Get moving with at least 20 minutes of exercise",
        base_xp=30, difficulty=Difficulty.MEDIUM, related_stat="Strength",
    ),
    PlaceholderQuest(
        title="Skill Development",
        description="Work on a skill that moves you toward your goals",
        base_xp=40, difficulty=Difficulty.MEDIUM, related_stat="Intelligence",
    ),
    PlaceholderQuest(
        title="Healthy Meal Planning",
        description="Plan and prepare a nutritious meal",
        base_xp=20, difficulty=Difficulty.EASY, related_stat="Wisdom",
    ),
    PlaceholderQuest(
        title="Goal Review & Planning",
        description="Review your progress and plan tomorrow's priorities",
        base_xp=25, difficulty=Difficulty.EASY, related_stat="Wisdom",
    ),
    PlaceholderQuest(
        title="Creative Activity",
        description="Spend time on a creative project or hobby",
        base_xp=30, difficulty=Difficulty.MEDIUM, related_stat="Charisma",
    ),
    PlaceholderQuest(
        title="Evening Reflection",
        description="Reflect on today's wins and lessons",
        base_xp=20, difficulty=Difficulty.EASY, related_stat="Wisdom",
    ),
]

WEEKLY_PLACEHOLDERS: List[PlaceholderQuest] = [
    PlaceholderQuest(
        title="Complete 5 Daily Quests",
        description="Finish at least five daily quests this week",
        base_xp=200, difficulty=Difficulty.MEDIUM, related_stat="Stamina",
    ),
    PlaceholderQuest(
        title="Weekly Skill Master Challenge",
        description="Finish a substantial project or lesson in your field",
        base_xp=300, difficulty=Difficulty.HARD, related_stat="Intelligence",
    ),
    PlaceholderQuest(
        title="Consistency Champion",
        description="Complete at least one quest every day this week",
        base_xp=250, difficulty=Difficulty.MEDIUM, related_stat="Wisdom",
    ),
]

DEFAULT_STATS: List[Stat] = [
    Stat(stat_name="Strength", stat_icon="💪", current_value=10, max_value=100),
    Stat(stat_name="Intelligence", stat_icon="🧠", current_value=10, max_value=100),
    Stat(stat_name="Agility", stat_icon="⚡", current_value=10, max_value=100),
    Stat(stat_name="Stamina", stat_icon="❤️", current_value=10, max_value=100),
    Stat(stat_name="Wisdom", stat_icon="📚", current_value=10, max_value=100),
    Stat(stat_name="Charisma", stat_icon="✨", current_value=10, max_value=100),
]


def week_start(day: date) -> date:
    """Monday of the ISO week containing `day`."""
    return day - timedelta(days=day.weekday())


# ============================================
# LIFECYCLE MANAGER
# ============================================

class QuestLifecycleManager:
    """Assigns, expires, renews and cleans up quests."""

    def __init__(
        self,
        store: QuestStore,
        selector: Optional[QuestSelector] = None,
        config: Optional[QuestConfig] = None,
        scheduler_config: Optional[SchedulerConfig] = None
    ):
        self.store = store
        self.config = config or get_quest_config()
        self.scheduler_config = scheduler_config or get_scheduler_config()
        self.selector = selector or QuestSelector(self.config.similarity_threshold)

    def _target_count(self, quest_type: QuestType) -> int:
        if quest_type == QuestType.DAILY:
            return self.config.daily_count
        return self.config.weekly_count

    def _expiry(self, quest_type: QuestType, now: datetime) -> datetime:
        if quest_type == QuestType.DAILY:
            return now + timedelta(hours=self.config.daily_expiry_hours)
        return now + timedelta(days=self.config.weekly_expiry_days)

    async def generate(
        self,
        user_id: int,
        quest_type: QuestType,
        now: Optional[datetime] = None
    ) -> GenerationResult:
        """
        Replace a user's current batch of one quest type.

        Clearing the old batch and inserting the new one share a
        transaction. An empty selection falls back to the generic
        placeholder quests.

        Raises:
            NotFound: No adventurer profile for user_id
            ValidationError: The profile has no field of interest
        """
        now = now or datetime.now()
        target = self._target_count(quest_type)
        expires_at = self._expiry(quest_type, now)

        async with self.store.transaction():
            # Locks the profile row so concurrent batches for one user run one at a time
            profile = await self.store.get_user_progress(user_id, for_update=True)
            if profile is None:
                raise NotFound("Adventurer profile not found", {"user_id": user_id})
            if not profile.field_of_interest:
                raise ValidationError("Field of interest is required", {"user_id": user_id})

            category = profile.field_of_interest
            cleared = await self.store.delete_assigned_quests(user_id, quest_type)

            primary = await self.store.fetch_templates(category, quest_type)
            backfill = []
            if quest_type == QuestType.DAILY and self.config.backfill_pool_size:
                backfill = await self.store.fetch_templates(
                    None, quest_type,
                    exclude_category=category,
                    limit=self.config.backfill_pool_size,
                )

            selected = self.selector.select(primary, backfill, target)

            quests: List[AssignedQuest] = []
            if selected:
                for template in selected:
                    quests.append(await self.store.insert_assigned_quest(
                        user_id, template.id, quest_type, now.date(), expires_at
                    ))
            else:
                placeholders = DAILY_PLACEHOLDERS if quest_type == QuestType.DAILY else WEEKLY_PLACEHOLDERS
                for placeholder in placeholders[:target]:
                    quests.append(await self.store.insert_assigned_quest(
                        user_id, None, quest_type, now.date(), expires_at, placeholder=placeholder
                    ))

        if not selected:
            logger.warning(f"No {quest_type.value} templates for '{category}', assigned placeholders to user {user_id}")
        elif len(selected) < target:
            logger.warning(f"Only {len(selected)}/{target} unique {quest_type.value} quests available for user {user_id}")
        logger.debug(f"User {user_id}: cleared {cleared}, assigned {len(quests)} {quest_type.value} quests")

        return GenerationResult(
            user_id=user_id,
            quest_type=quest_type,
            quests=quests,
            used_placeholders=not selected,
        )

    async def _run_for_user(self, user_id: int, work: Awaitable[Any]) -> Tuple[bool, Any]:
        """Run one user's sweep work under the per-user timeout."""
        try:
            result = await asyncio.wait_for(work, timeout=self.scheduler_config.user_timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(
                f"User {user_id} exceeded {self.scheduler_config.user_timeout_seconds}s, skipped"
            )
            return False, None
        except Exception:
            logger.exception(f"Sweep work failed for user {user_id}")
            return False, None
        return True, result

    async def expire_and_renew(self, now: Optional[datetime] = None) -> SweepReport:
        """
        Nightly sweep.

        Flags stale daily quests expired, gives a fresh daily batch to every
        adventurer left without one, and purges old uncompleted rows.
        Running it twice in a row changes nothing the second time.
        """
        now = now or datetime.now()
        report = SweepReport(started_at=now)

        report.expired = await self.store.expire_daily_quests(now)

        users = await self.store.list_users_without_active_daily(now)
        report.users_considered = len(users)

        for user_id in users:
            ok, _ = await self._run_for_user(user_id, self.generate(user_id, QuestType.DAILY, now))
            if ok:
                report.renewed += 1
                logger.debug(f"Renewed daily quests for user {user_id}")
            else:
                report.failed += 1
                report.failed_user_ids.append(user_id)

        report.purged = await self.store.purge_expired_quests(
            now - timedelta(days=self.config.retention_days)
        )

        logger.info(
            f"Daily sweep: {report.expired} expired, {report.renewed}/{report.users_considered} "
            f"users renewed, {report.failed} failed, {report.purged} purged"
        )
        return report

    async def _weekly_for_user(self, user_id: int, now: datetime, since: date) -> bool:
        async with self.store.transaction():
            await self.store.get_user_progress(user_id, for_update=True)
            if await self.store.count_weekly_quests_since(user_id, since):
                return False

            await self.store.delete_assigned_quests(
                user_id, QuestType.WEEKLY, only_expired=True, now=now
            )
            await self.generate(user_id, QuestType.WEEKLY, now)
        return True

    async def weekly_sweep(self, now: Optional[datetime] = None) -> WeeklySweepReport:
        """Assign weekly quests to adventurers who have none this week."""
        now = now or datetime.now()
        since = week_start(now.date())
        report = WeeklySweepReport(started_at=now)

        users = await self.store.list_active_adventurers()
        report.users_considered = len(users)

        for user_id in users:
            ok, generated = await self._run_for_user(user_id, self._weekly_for_user(user_id, now, since))
            if not ok:
                report.failed += 1
                report.failed_user_ids.append(user_id)
            elif generated:
                report.generated += 1
                logger.debug(f"Generated weekly quests for user {user_id}")
            else:
                report.skipped += 1

        logger.info(
            f"Weekly sweep: {report.generated} generated, {report.skipped} skipped, "
            f"{report.failed} failed of {report.users_considered} users"
        )
        return report

    async def initialize_user(self, user_id: int, now: Optional[datetime] = None) -> InitializationResult:
        """
        First-time setup: stats plus a daily and a weekly batch.

        Does nothing for a user who has ever been assigned a quest.
        """
        now = now or datetime.now()

        async with self.store.transaction():
            profile = await self.store.get_user_progress(user_id, for_update=True)
            if profile is None:
                raise NotFound("Adventurer profile not found", {"user_id": user_id})

            if await self.store.count_assigned_quests(user_id):
                return InitializationResult(user_id=user_id, already_initialized=True)

            stats = await self.store.fetch_stat_templates(profile.field_of_interest) or DEFAULT_STATS
            stats_created = await self.store.create_stats(user_id, stats)
            daily = await self.generate(user_id, QuestType.DAILY, now)
            weekly = await self.generate(user_id, QuestType.WEEKLY, now)

        logger.info(f"Initialized quest system for user {user_id}")
        return InitializationResult(
            user_id=user_id,
            daily_quests=len(daily.quests),
            weekly_quests=len(weekly.quests),
            stats_created=stats_created,
        )

    async def list_active_quests(
        self,
        user_id: int,
        quest_type: QuestType,
        now: Optional[datetime] = None
    ) -> List[AssignedQuest]:
        return await self.store.list_active_quests(user_id, quest_type, now or datetime.now())
