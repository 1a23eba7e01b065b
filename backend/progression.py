"""
Solo Leveling Life System - Progression Engine
Quest completion: XP, level-ups, stat growth, streaks and achievements
"""

import math
from datetime import datetime
from typing import Optional, Tuple

from achievements import AchievementEvaluator
from config import ProgressionConfig, get_progression_config
from exceptions import AlreadyCompleted, NotFound
from logger import logger
from models import AssignedQuest, CompletionResult, QuestType, UserProgress
from notifications import Notifier
from store import QuestStore
from streaks import StreakTracker


def exp_to_next_level(level: int, config: Optional[ProgressionConfig] = None) -> int:
    """XP needed to clear `level`: floor(base * multiplier^(level-1))."""
    config = config or get_progression_config()
    return math.floor(config.base_exp * config.level_multiplier ** (level - 1))


def apply_experience(
    progress: UserProgress,
    xp: int,
    config: Optional[ProgressionConfig] = None
) -> Tuple[UserProgress, int]:
    """
    Add XP to a profile and resolve any number of level-ups.

    Returns the updated copy and the number of levels gained. The input
    profile is not modified.
    """
    config = config or get_progression_config()

    level = progress.current_level
    current_exp = progress.current_exp + xp
    threshold = progress.exp_to_next_level

    while current_exp >= threshold:
        current_exp -= threshold
        level += 1
        threshold = exp_to_next_level(level, config)

    updated = progress.model_copy(update={
        "current_level": level,
        "total_exp": progress.total_exp + xp,
        "current_exp": current_exp,
        "exp_to_next_level": threshold,
    })
    return updated, level - progress.current_level


def quest_reward(quest: AssignedQuest, config: Optional[ProgressionConfig] = None) -> int:
    """Template XP (or the XP stored on a placeholder row), else the type default."""
    if quest.base_xp is not None:
        return quest.base_xp

    config = config or get_progression_config()
    if quest.quest_type == QuestType.DAILY:
        return config.default_daily_xp
    if quest.quest_type == QuestType.WEEKLY:
        return config.default_weekly_xp
    return config.default_xp


class ProgressionEngine:
    """Applies everything that follows from completing one quest."""

    def __init__(
        self,
        store: QuestStore,
        config: Optional[ProgressionConfig] = None,
        streaks: Optional[StreakTracker] = None,
        achievements: Optional[AchievementEvaluator] = None,
        notifier: Optional[Notifier] = None
    ):
        self.store = store
        self.config = config or get_progression_config()
        self.notifier = notifier or Notifier(store)
        self.streaks = streaks or StreakTracker(store, self.notifier)
        self.achievements = achievements or AchievementEvaluator(store, self.notifier)

    async def complete_quest(
        self,
        user_id: int,
        quest_id: int,
        now: Optional[datetime] = None
    ) -> CompletionResult:
        """
        Complete a quest for a user.

        All writes share one transaction; any failure leaves the quest
        uncompleted and the profile untouched.

        Raises:
            AlreadyCompleted: The quest belongs to the user but is already done
            NotFound: The quest does not exist, is someone else's, or the
                profile is missing
        """
        now = now or datetime.now()

        async with self.store.transaction():
            quest = await self.store.mark_completed(user_id, quest_id, now)
            if quest is None:
                existing = await self.store.get_assigned_quest(user_id, quest_id)
                if existing is not None and existing.is_completed:
                    raise AlreadyCompleted(quest_id, user_id)
                raise NotFound(
                    "Quest not found",
                    {"quest_id": quest_id, "user_id": user_id},
                )

            progress = await self.store.get_user_progress(user_id, for_update=True)
            if progress is None:
                raise NotFound("Adventurer profile not found", {"user_id": user_id})

            xp = quest_reward(quest, self.config)
            await self.store.record_completion(user_id, quest, xp)

            # Streak sees the profile as it was before this completion
            streak = await self.streaks.record_activity(
                user_id, quest.quest_type, xp, today=now.date(), progress=progress
            )

            updated, levels_gained = apply_experience(progress, xp, self.config)
            await self.store.save_user_progress(updated)

            if levels_gained:
                await self.store.record_level_up(
                    user_id, progress.current_level, updated.current_level, updated.total_exp, now
                )
                await self.notifier.level_up(user_id, updated.current_level, levels_gained)

            stat_increased = None
            if quest.related_stat and self.config.stat_increment:
                stat = await self.store.increment_stat(
                    user_id, quest.related_stat, self.config.stat_increment
                )
                if stat is not None:
                    stat_increased = stat.stat_name

            new_achievements = await self.achievements.evaluate(
                user_id, updated.current_level, updated.total_exp, streak.current_streak
            )

        if levels_gained:
            logger.info(f"User {user_id} leveled up {progress.current_level} -> {updated.current_level}")
        logger.info(f"User {user_id} completed quest {quest_id} for {xp} XP")

        return CompletionResult(
            quest_id=quest_id,
            xp_gained=xp,
            leveled_up=levels_gained > 0,
            new_level=updated.current_level,
            levels_gained=levels_gained,
            total_exp=updated.total_exp,
            current_exp=updated.current_exp,
            exp_to_next_level=updated.exp_to_next_level,
            stat_increased=stat_increased,
            new_achievements=new_achievements,
            streak=streak,
        )
