"""
Solo Leveling Life System - Streak Tracker
Day-over-day activity streaks, daily checkins and streak notifications
"""

from datetime import date, timedelta
from typing import Optional

from config import StreakConfig, get_streak_config
from exceptions import NotFound
from logger import logger
from models import QuestType, StreakDetails, StreakUpdate, UserProgress
from notifications import Notifier
from store import QuestStore

RECENT_CHECKIN_DAYS = 7


def is_milestone(streak_days: int, config: StreakConfig) -> bool:
    """Fixed milestones, then every recurring multiple above the last one."""
    if streak_days in config.milestones:
        return True
    last_fixed = max(config.milestones, default=0)
    return streak_days > last_fixed and streak_days % config.recurring_milestone == 0


def next_streak(progress: UserProgress, today: date) -> StreakUpdate:
    """Pure streak transition for activity on `today`."""
    previous = progress.streak_days
    last = progress.last_activity_date
    broken = False

    if last == today:
        current = previous
    elif last == today - timedelta(days=1):
        current = previous + 1
    else:
        current = 1
        broken = last is not None

    return StreakUpdate(
        current_streak=current,
        previous_streak=previous,
        longest_streak=max(progress.longest_streak, current),
        streak_broken=broken,
        is_new_record=current > progress.longest_streak,
    )


class StreakTracker:
    """Updates streaks when a quest is completed."""

    def __init__(
        self,
        store: QuestStore,
        notifier: Optional[Notifier] = None,
        config: Optional[StreakConfig] = None
    ):
        self.store = store
        self.config = config or get_streak_config()
        self.notifier = notifier or Notifier(store, self.config)

    async def record_activity(
        self,
        user_id: int,
        quest_type: QuestType,
        xp_earned: int,
        today: Optional[date] = None,
        progress: Optional[UserProgress] = None
    ) -> StreakUpdate:
        """
        Record one completed quest for today.

        Args:
            user_id: Adventurer completing the quest
            quest_type: Type of the completed quest
            xp_earned: XP added to today's checkin
            today: Calendar date of the activity, defaults to the local date
            progress: Profile as read before this completion touched it

        Returns:
            StreakUpdate describing the transition
        """
        today = today or date.today()
        if progress is None:
            progress = await self.store.get_user_progress(user_id)
            if progress is None:
                raise NotFound("Adventurer profile not found", {"user_id": user_id})

        await self.store.upsert_daily_checkin(user_id, today, xp_earned)

        update = next_streak(progress, today)
        await self.store.update_streak(
            user_id, update.current_streak, update.longest_streak, today
        )

        if update.current_streak != update.previous_streak:
            logger.debug(
                f"User {user_id} streak {update.previous_streak} -> {update.current_streak} "
                f"({quest_type.value} quest)"
            )
            if is_milestone(update.current_streak, self.config):
                await self.notifier.streak_milestone(user_id, update.current_streak)

        if update.streak_broken and update.previous_streak > self.config.reset_warning_threshold:
            await self.notifier.streak_reset(user_id, update.previous_streak)

        return update

    async def get_streak_details(self, user_id: int, today: Optional[date] = None) -> StreakDetails:
        today = today or date.today()
        progress = await self.store.get_user_progress(user_id)
        if progress is None:
            raise NotFound("Adventurer profile not found", {"user_id": user_id})

        checkins = await self.store.list_checkins(
            user_id, today - timedelta(days=RECENT_CHECKIN_DAYS - 1)
        )
        last = progress.last_activity_date
        alive = last is not None and last >= today - timedelta(days=1)

        return StreakDetails(
            user_id=user_id,
            current_streak=progress.streak_days if alive else 0,
            longest_streak=progress.longest_streak,
            last_activity_date=last,
            completed_today=last == today,
            is_alive=alive,
            recent_checkins=checkins,
        )
