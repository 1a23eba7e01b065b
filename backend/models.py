"""
Solo Leveling Life System - Pydantic Models (v2 syntax)
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field


# ============================================
# ENUMS
# ============================================

class QuestType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class NotificationType(str, Enum):
    ACHIEVEMENT = "achievement"
    STREAK_MILESTONE = "streak_milestone"
    STREAK_RESET = "streak_reset"
    LEVEL_UP = "level_up"


class AchievementRarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class AchievementCategory(str, Enum):
    QUEST = "quest"
    STREAK = "streak"
    LEVEL = "level"
    XP = "xp"
    STAT = "stat"


# ============================================
# QUEST MODELS
# ============================================

class QuestTemplate(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    title: str
    description: Optional[str] = None
    base_xp: int
    difficulty: Difficulty = Difficulty.MEDIUM
    related_stat: Optional[str] = None
    field_name: str
    quest_type: QuestType
    is_active: bool = True


class PlaceholderQuest(BaseModel):
    """Generic quest used when the template catalog has nothing to offer."""
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    base_xp: int
    difficulty: Difficulty
    related_stat: Optional[str] = None


class AssignedQuest(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    template_id: Optional[int] = None
    quest_type: QuestType
    assigned_date: date
    expires_at: datetime
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    is_expired: bool = False
    xp_awarded: Optional[int] = None
    # Joined from the template, or stored on the row for placeholder quests
    title: Optional[str] = None
    description: Optional[str] = None
    base_xp: Optional[int] = None
    difficulty: Optional[Difficulty] = None
    related_stat: Optional[str] = None


# ============================================
# PROGRESS MODELS
# ============================================

class UserProgress(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    full_name: Optional[str] = None
    field_of_interest: Optional[str] = None
    current_level: int = Field(default=1, ge=1)
    total_exp: int = 0
    current_exp: int = 0
    exp_to_next_level: int = 100
    streak_days: int = 0
    longest_streak: int = 0
    last_activity_date: Optional[date] = None


class Stat(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stat_name: str
    stat_icon: Optional[str] = None
    current_value: int
    max_value: int = 100


class DailyCheckin(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    checkin_date: date
    quests_completed: int = 0
    xp_earned: int = 0


class AchievementAward(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    achievement_id: int
    code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    earned_at: datetime


class Notification(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    notification_type: NotificationType
    title: str
    message: str
    is_read: bool = False
    created_at: datetime
    expires_at: Optional[datetime] = None


# ============================================
# RESULT MODELS
# ============================================

class StreakUpdate(BaseModel):
    current_streak: int
    previous_streak: int = 0
    longest_streak: int
    streak_broken: bool = False
    is_new_record: bool = False


class StreakDetails(BaseModel):
    user_id: int
    current_streak: int
    longest_streak: int
    last_activity_date: Optional[date] = None
    completed_today: bool = False
    # False once a full day has passed without activity
    is_alive: bool = False
    recent_checkins: List[DailyCheckin] = Field(default_factory=list)


class EarnedAchievement(BaseModel):
    achievement_id: int
    code: str
    name: str
    description: str
    icon: str


class CompletionResult(BaseModel):
    quest_id: int
    xp_gained: int
    leveled_up: bool
    new_level: int
    levels_gained: int = 0
    total_exp: int
    current_exp: int
    exp_to_next_level: int
    stat_increased: Optional[str] = None
    new_achievements: List[EarnedAchievement] = Field(default_factory=list)
    streak: StreakUpdate


class GenerationResult(BaseModel):
    user_id: int
    quest_type: QuestType
    quests: List[AssignedQuest] = Field(default_factory=list)
    used_placeholders: bool = False


class InitializationResult(BaseModel):
    user_id: int
    already_initialized: bool = False
    daily_quests: int = 0
    weekly_quests: int = 0
    stats_created: int = 0


class SweepReport(BaseModel):
    started_at: datetime
    expired: int = 0
    users_considered: int = 0
    renewed: int = 0
    failed: int = 0
    purged: int = 0
    failed_user_ids: List[int] = Field(default_factory=list)


class WeeklySweepReport(BaseModel):
    started_at: datetime
    users_considered: int = 0
    generated: int = 0
    skipped: int = 0
    failed: int = 0
    failed_user_ids: List[int] = Field(default_factory=list)


# ============================================
# API RESPONSE MODELS
# ============================================

class HealthStatus(BaseModel):
    status: str = "healthy"
    version: str = "1.0.0"
    database: str = "connected"
    scheduler: str = "stopped"
