"""
Solo Leveling Life System - Persistence Port
The narrow storage interface the quest and progression services depend on.
PostgresQuestStore in database.py is the production implementation.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from typing import AsyncContextManager, List, Optional

from models import (
    AchievementAward,
    AssignedQuest,
    DailyCheckin,
    Notification,
    NotificationType,
    PlaceholderQuest,
    QuestTemplate,
    QuestType,
    Stat,
    UserProgress,
)


class QuestStore(ABC):
    """
    Storage operations used by the rules engine.

    Every write may raise PersistenceFailure. Callers group writes with
    transaction(); a nested transaction() is a savepoint that rolls back
    on its own without aborting the outer one.
    """

    @abstractmethod
    def transaction(self) -> AsyncContextManager[None]:
        ...

    # ----- templates and assigned quests -----

    @abstractmethod
    async def fetch_templates(
        self,
        category: Optional[str],
        quest_type: QuestType,
        exclude_category: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[QuestTemplate]:
        """Active templates of a type, filtered to one category or away from one."""
        ...

    @abstractmethod
    async def insert_assigned_quest(
        self,
        user_id: int,
        template_id: Optional[int],
        quest_type: QuestType,
        assigned_date: date,
        expires_at: datetime,
        placeholder: Optional[PlaceholderQuest] = None
    ) -> AssignedQuest:
        ...

    @abstractmethod
    async def delete_assigned_quests(
        self,
        user_id: int,
        quest_type: QuestType,
        only_expired: bool = False,
        now: Optional[datetime] = None
    ) -> int:
        """
        Default: delete the user's rows of this type not yet flagged expired.
        only_expired: delete only rows flagged expired or past expires_at.
        """
        ...

    @abstractmethod
    async def mark_completed(
        self, user_id: int, quest_id: int, completed_at: datetime
    ) -> Optional[AssignedQuest]:
        """Atomic check-and-set; None when missing, foreign or already completed."""
        ...

    @abstractmethod
    async def get_assigned_quest(self, user_id: int, quest_id: int) -> Optional[AssignedQuest]:
        ...

    @abstractmethod
    async def record_completion(self, user_id: int, quest: AssignedQuest, xp: int) -> None:
        ...

    @abstractmethod
    async def count_completed_quests(self, user_id: int) -> int:
        ...

    @abstractmethod
    async def list_active_quests(
        self, user_id: int, quest_type: QuestType, now: datetime
    ) -> List[AssignedQuest]:
        ...

    @abstractmethod
    async def count_assigned_quests(self, user_id: int) -> int:
        ...

    @abstractmethod
    async def count_weekly_quests_since(self, user_id: int, since: date) -> int:
        ...

    # ----- checkins -----

    @abstractmethod
    async def upsert_daily_checkin(self, user_id: int, checkin_date: date, xp_delta: int) -> DailyCheckin:
        ...

    @abstractmethod
    async def list_checkins(self, user_id: int, since: date) -> List[DailyCheckin]:
        ...

    # ----- profile and progression -----

    @abstractmethod
    async def get_user_progress(self, user_id: int, for_update: bool = False) -> Optional[UserProgress]:
        ...

    @abstractmethod
    async def save_user_progress(self, progress: UserProgress) -> None:
        """Persist level, total_exp, current_exp and exp_to_next_level."""
        ...

    @abstractmethod
    async def update_streak(
        self, user_id: int, streak_days: int, longest_streak: int, last_activity_date: date
    ) -> None:
        ...

    @abstractmethod
    async def record_level_up(
        self, user_id: int, old_level: int, new_level: int, total_exp: int, achieved_at: datetime
    ) -> None:
        ...

    # ----- stats -----

    @abstractmethod
    async def increment_stat(self, user_id: int, stat_name: str, delta: int) -> Optional[Stat]:
        """Raise a stat clamped at its max; None when the user has no such stat."""
        ...

    @abstractmethod
    async def get_stats(self, user_id: int) -> List[Stat]:
        ...

    @abstractmethod
    async def has_maxed_stat(self, user_id: int) -> bool:
        ...

    @abstractmethod
    async def create_stats(self, user_id: int, stats: List[Stat]) -> int:
        ...

    @abstractmethod
    async def fetch_stat_templates(self, category: Optional[str]) -> List[Stat]:
        ...

    # ----- achievements -----

    @abstractmethod
    async def has_achievement(self, user_id: int, achievement_id: int) -> bool:
        ...

    @abstractmethod
    async def award_achievement(self, user_id: int, achievement_id: int, earned_at: datetime) -> bool:
        """Insert-if-absent; False when the pair already existed."""
        ...

    @abstractmethod
    async def list_user_achievements(self, user_id: int) -> List[AchievementAward]:
        ...

    # ----- notifications -----

    @abstractmethod
    async def emit_notification(
        self,
        user_id: int,
        notification_type: NotificationType,
        title: str,
        message: str,
        ttl: timedelta
    ) -> Notification:
        ...

    @abstractmethod
    async def list_notifications(self, user_id: int, unread_only: bool = False) -> List[Notification]:
        ...

    # ----- sweeps -----

    @abstractmethod
    async def list_active_adventurers(self) -> List[int]:
        ...

    @abstractmethod
    async def list_users_without_active_daily(self, now: datetime) -> List[int]:
        ...

    @abstractmethod
    async def expire_daily_quests(self, now: datetime) -> int:
        ...

    @abstractmethod
    async def purge_expired_quests(self, cutoff: datetime) -> int:
        ...
