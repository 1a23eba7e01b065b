"""
Solo Leveling Life System - Achievement System
Fixed rule table evaluated after every quest completion
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from logger import logger
from models import (
    AchievementAward,
    AchievementCategory,
    AchievementRarity,
    EarnedAchievement,
)
from notifications import Notifier
from store import QuestStore


# ============================================
# ACHIEVEMENT DEFINITIONS
# ============================================

# Evaluated in declaration order; ids match the seeded achievements table
ACHIEVEMENT_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    "first_steps": {
        "id": 1,
        "name": "First Steps",
        "description": "Complete your first quest",
        "icon": "👣",
        "category": AchievementCategory.QUEST,
        "threshold_value": 1,
        "rarity": AchievementRarity.COMMON,
    },
    "week_warrior": {
        "id": 2,
        "name": "Week Warrior",
        "description": "Maintain a 7-day streak",
        "icon": "🔥",
        "category": AchievementCategory.STREAK,
        "threshold_value": 7,
        "rarity": AchievementRarity.COMMON,
    },
    "level_5_hunter": {
        "id": 3,
        "name": "Level 5 Hunter",
        "description": "Reach level 5",
        "icon": "⚔️",
        "category": AchievementCategory.LEVEL,
        "threshold_value": 5,
        "rarity": AchievementRarity.COMMON,
    },
    "level_10_fighter": {
        "id": 4,
        "name": "Level 10 Fighter",
        "description": "Reach level 10",
        "icon": "🛡️",
        "category": AchievementCategory.LEVEL,
        "threshold_value": 10,
        "rarity": AchievementRarity.RARE,
    },
    "elite_hunter": {
        "id": 8,
        "name": "Elite Hunter",
        "description": "Reach level 20",
        "icon": "🏹",
        "category": AchievementCategory.LEVEL,
        "threshold_value": 20,
        "rarity": AchievementRarity.EPIC,
    },
    "shadow_monarch": {
        "id": 10,
        "name": "Shadow Monarch",
        "description": "Reach level 50",
        "icon": "👑",
        "category": AchievementCategory.LEVEL,
        "threshold_value": 50,
        "rarity": AchievementRarity.LEGENDARY,
    },
    "quest_master": {
        "id": 5,
        "name": "Quest Master",
        "description": "Complete 50 quests",
        "icon": "📜",
        "category": AchievementCategory.QUEST,
        "threshold_value": 50,
        "rarity": AchievementRarity.RARE,
    },
    "dedication": {
        "id": 6,
        "name": "Dedication",
        "description": "Maintain a 30-day streak",
        "icon": "💎",
        "category": AchievementCategory.STREAK,
        "threshold_value": 30,
        "rarity": AchievementRarity.EPIC,
    },
    "power_surge": {
        "id": 7,
        "name": "Power Surge",
        "description": "Earn 1000 total XP",
        "icon": "⚡",
        "category": AchievementCategory.XP,
        "threshold_value": 1000,
        "rarity": AchievementRarity.RARE,
    },
    "stat_master": {
        "id": 9,
        "name": "Stat Master",
        "description": "Max out any stat",
        "icon": "🌟",
        "category": AchievementCategory.STAT,
        "threshold_value": 1,
        "rarity": AchievementRarity.EPIC,
    },
}


def achievement_catalog() -> List[Dict[str, Any]]:
    """All achievements in evaluation order, for display."""
    return [
        {
            "id": data["id"],
            "code": code,
            "name": data["name"],
            "description": data["description"],
            "icon": data["icon"],
            "category": data["category"].value,
            "threshold_value": data["threshold_value"],
            "rarity": data["rarity"].value,
        }
        for code, data in ACHIEVEMENT_DEFINITIONS.items()
    ]


# ============================================
# ACHIEVEMENT EVALUATOR
# ============================================

class AchievementEvaluator:
    """Checks every rule for a user and awards the ones newly satisfied."""

    def __init__(self, store: QuestStore, notifier: Optional[Notifier] = None):
        self.store = store
        self.notifier = notifier or Notifier(store)

    async def evaluate(
        self,
        user_id: int,
        level: int,
        total_exp: int,
        streak_days: Optional[int] = None
    ) -> List[EarnedAchievement]:
        """
        Award every satisfied achievement the user does not hold yet.

        Args:
            user_id: Adventurer to evaluate
            level: Level after the triggering completion
            total_exp: Total XP after the triggering completion
            streak_days: Current streak; read from the profile when omitted

        Returns:
            Achievements awarded by this call, in rule order
        """
        if streak_days is None:
            progress = await self.store.get_user_progress(user_id)
            streak_days = progress.streak_days if progress else 0

        values = {
            AchievementCategory.LEVEL: level,
            AchievementCategory.XP: total_exp,
            AchievementCategory.STREAK: streak_days,
            AchievementCategory.QUEST: await self.store.count_completed_quests(user_id),
            AchievementCategory.STAT: 1 if await self.store.has_maxed_stat(user_id) else 0,
        }

        earned: List[EarnedAchievement] = []
        for code, data in ACHIEVEMENT_DEFINITIONS.items():
            if values[data["category"]] < data["threshold_value"]:
                continue

            awarded = await self._award_achievement(user_id, code, data)
            if awarded:
                earned.append(awarded)

        if earned:
            logger.info(f"User {user_id} earned {', '.join(a.name for a in earned)}")
        return earned

    async def _award_achievement(
        self,
        user_id: int,
        code: str,
        data: Dict[str, Any]
    ) -> Optional[EarnedAchievement]:
        """Award an achievement if not already earned."""
        if await self.store.has_achievement(user_id, data["id"]):
            return None

        # Insert-if-absent, so a concurrent award of the same pair is a no-op
        if not await self.store.award_achievement(user_id, data["id"], datetime.now()):
            return None

        await self.notifier.achievement_unlocked(user_id, data["name"], data["description"])

        return EarnedAchievement(
            achievement_id=data["id"],
            code=code,
            name=data["name"],
            description=data["description"],
            icon=data["icon"],
        )


async def list_user_achievements(store: QuestStore, user_id: int) -> List[AchievementAward]:
    return await store.list_user_achievements(user_id)
