"""
Solo Leveling Life System - Configuration Management
Supports .env files and runtime configuration for quests, progression, streaks and scheduling.
"""

from typing import Dict, Any, List
from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


# ============================================
# QUEST GENERATION CONFIGURATION
# ============================================

class QuestConfig(BaseSettings):
    """Quest batch sizes, uniqueness rules and expiry windows."""

    daily_count: int = Field(
        default=8,
        ge=1,
        le=20,
        description="Number of daily quests assigned per batch"
    )
    weekly_count: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Number of weekly quests assigned per batch"
    )
    similarity_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Titles more similar than this are treated as duplicates"
    )
    backfill_pool_size: int = Field(
        default=20,
        ge=0,
        le=200,
        description="Max templates pulled from other categories when a category runs short"
    )
    daily_expiry_hours: int = Field(
        default=24,
        ge=1,
        le=72,
        description="Lifetime of a daily quest batch"
    )
    weekly_expiry_days: int = Field(
        default=7,
        ge=1,
        le=14,
        description="Lifetime of a weekly quest batch"
    )
    retention_days: int = Field(
        default=7,
        ge=1,
        le=365,
        description="Expired, uncompleted quests older than this are deleted"
    )

    model_config = {
        "env_prefix": "QUEST_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }


# ============================================
# PROGRESSION CONFIGURATION
# ============================================

class ProgressionConfig(BaseSettings):
    """XP curve and fallback rewards."""

    base_exp: int = Field(
        default=100,
        ge=1,
        description="XP needed to go from level 1 to level 2"
    )
    level_multiplier: float = Field(
        default=1.5,
        gt=1.0,
        le=5.0,
        description="Geometric growth of the XP threshold per level"
    )
    default_daily_xp: int = Field(
        default=30,
        ge=0,
        description="Reward for a daily quest with no template"
    )
    default_weekly_xp: int = Field(
        default=200,
        ge=0,
        description="Reward for a weekly quest with no template"
    )
    default_xp: int = Field(
        default=50,
        ge=0,
        description="Reward for any other quest with no template"
    )
    stat_increment: int = Field(
        default=1,
        ge=0,
        le=10,
        description="Points added to the related stat on completion"
    )

    model_config = {
        "env_prefix": "PROGRESSION_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }


# ============================================
# STREAK CONFIGURATION
# ============================================

class StreakConfig(BaseSettings):
    """Streak milestones and notification lifetimes."""

    milestones: List[int] = Field(
        default_factory=lambda: [7, 30],
        description="Streak lengths that always trigger a milestone notification"
    )
    recurring_milestone: int = Field(
        default=50,
        ge=1,
        description="Above the last fixed milestone, every multiple of this is a milestone"
    )
    reset_warning_threshold: int = Field(
        default=7,
        ge=0,
        description="A broken streak longer than this triggers a reset warning"
    )
    notification_ttl_days: int = Field(
        default=7,
        ge=1,
        description="Lifetime of streak notifications"
    )
    achievement_ttl_days: int = Field(
        default=30,
        ge=1,
        description="Lifetime of achievement and level-up notifications"
    )

    model_config = {
        "env_prefix": "STREAK_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }


# ============================================
# SCHEDULER CONFIGURATION
# ============================================

class SchedulerConfig(BaseSettings):
    """Background sweep timing."""

    enabled: bool = Field(
        default=True,
        description="Run the sweep scheduler inside the API process"
    )
    check_interval_seconds: int = Field(
        default=60,
        ge=5,
        le=3600,
        description="How often the scheduler wakes up to look for due sweeps"
    )
    daily_hour: int = Field(
        default=0,
        ge=0,
        le=23,
        description="Hour of the nightly expire-and-renew sweep"
    )
    daily_minute: int = Field(
        default=0,
        ge=0,
        le=59,
        description="Minute of the nightly expire-and-renew sweep"
    )
    weekly_weekday: int = Field(
        default=0,
        ge=0,
        le=6,
        description="Weekday of the weekly sweep (0 = Monday)"
    )
    user_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=600,
        description="Per-user budget inside a sweep before it is skipped"
    )

    model_config = {
        "env_prefix": "SCHEDULER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }


# ============================================
# CACHED CONFIGURATION INSTANCES
# ============================================

@lru_cache()
def get_quest_config() -> QuestConfig:
    """Get cached quest configuration instance."""
    return QuestConfig()


@lru_cache()
def get_progression_config() -> ProgressionConfig:
    """Get cached progression configuration instance."""
    return ProgressionConfig()


@lru_cache()
def get_streak_config() -> StreakConfig:
    """Get cached streak configuration instance."""
    return StreakConfig()


@lru_cache()
def get_scheduler_config() -> SchedulerConfig:
    """Get cached scheduler configuration instance."""
    return SchedulerConfig()


def reload_config():
    """Clear configuration cache and reload from environment."""
    get_quest_config.cache_clear()
    get_progression_config.cache_clear()
    get_streak_config.cache_clear()
    get_scheduler_config.cache_clear()


# ============================================
# CONFIGURATION SUMMARY
# ============================================

def get_config_summary() -> Dict[str, Any]:
    """
    Get a summary of all configuration values.
    Useful for debugging and the admin config endpoint.
    """
    quest = get_quest_config()
    progression = get_progression_config()
    streak = get_streak_config()
    scheduler = get_scheduler_config()

    return {
        "quests": {
            "daily_count": quest.daily_count,
            "weekly_count": quest.weekly_count,
            "similarity_threshold": quest.similarity_threshold,
            "backfill_pool_size": quest.backfill_pool_size,
            "daily_expiry_hours": quest.daily_expiry_hours,
            "weekly_expiry_days": quest.weekly_expiry_days,
            "retention_days": quest.retention_days,
        },
        "progression": {
            "base_exp": progression.base_exp,
            "level_multiplier": progression.level_multiplier,
            "default_xp": {
                "daily": progression.default_daily_xp,
                "weekly": progression.default_weekly_xp,
                "other": progression.default_xp,
            },
            "stat_increment": progression.stat_increment,
        },
        "streaks": {
            "milestones": streak.milestones,
            "recurring_milestone": streak.recurring_milestone,
            "reset_warning_threshold": streak.reset_warning_threshold,
        },
        "scheduler": {
            "enabled": scheduler.enabled,
            "daily_at": f"{scheduler.daily_hour:02d}:{scheduler.daily_minute:02d}",
            "weekly_weekday": scheduler.weekly_weekday,
            "user_timeout_seconds": scheduler.user_timeout_seconds,
        },
    }
