"""
Solo Leveling Life System - Notifications
Best-effort in-app notifications for achievements, streaks and level-ups
"""

from datetime import timedelta
from typing import List, Optional

from config import StreakConfig, get_streak_config
from exceptions import QuestSystemError
from logger import logger
from models import Notification, NotificationType
from store import QuestStore


class Notifier:
    """
    Emits notifications inside a savepoint.

    A failed insert is rolled back on its own and logged; the surrounding
    completion or sweep carries on.
    """

    def __init__(self, store: QuestStore, config: Optional[StreakConfig] = None):
        self.store = store
        self.config = config or get_streak_config()

    async def notify(
        self,
        user_id: int,
        notification_type: NotificationType,
        title: str,
        message: str,
        ttl: timedelta
    ) -> Optional[Notification]:
        try:
            async with self.store.transaction():
                notification = await self.store.emit_notification(
                    user_id, notification_type, title, message, ttl
                )
        except QuestSystemError as e:
            logger.warning(f"Notification '{title}' for user {user_id} dropped: {e}")
            return None
        except Exception:
            logger.exception(f"Unexpected error sending notification '{title}' to user {user_id}")
            return None

        logger.debug(f"Notified user {user_id}: {title}")
        return notification

    async def achievement_unlocked(self, user_id: int, name: str, description: str) -> Optional[Notification]:
        return await self.notify(
            user_id,
            NotificationType.ACHIEVEMENT,
            f"Achievement Unlocked: {name}!",
            f"Congratulations! You've earned the '{name}' achievement. {description}",
            timedelta(days=self.config.achievement_ttl_days),
        )

    async def level_up(self, user_id: int, new_level: int, levels_gained: int) -> Optional[Notification]:
        gained = f" (+{levels_gained} levels)" if levels_gained > 1 else ""
        return await self.notify(
            user_id,
            NotificationType.LEVEL_UP,
            f"Level Up! You reached level {new_level}",
            f"Your power grows, Hunter. You are now level {new_level}{gained}.",
            timedelta(days=self.config.achievement_ttl_days),
        )

    async def streak_milestone(self, user_id: int, streak_days: int) -> Optional[Notification]:
        return await self.notify(
            user_id,
            NotificationType.STREAK_MILESTONE,
            f"{streak_days}-Day Streak!",
            f"You've completed quests {streak_days} days in a row. Keep the momentum going!",
            timedelta(days=self.config.notification_ttl_days),
        )

    async def streak_reset(self, user_id: int, previous_streak: int) -> Optional[Notification]:
        return await self.notify(
            user_id,
            NotificationType.STREAK_RESET,
            "Streak Reset",
            f"Your {previous_streak}-day streak has ended. Complete a quest every day to build a new one!",
            timedelta(days=self.config.notification_ttl_days),
        )


async def get_user_notifications(store: QuestStore, user_id: int, unread_only: bool = False) -> List[Notification]:
    return await store.list_notifications(user_id, unread_only)
