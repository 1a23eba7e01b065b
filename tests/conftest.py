"""
Shared fixtures for the quest system test suite.

Services are wired against InMemoryQuestStore with deterministic
randomness and explicit configuration, so nothing here touches
PostgreSQL or the process environment.
"""

import os
import random
from datetime import datetime

import pytest

from config import ProgressionConfig, QuestConfig, SchedulerConfig, StreakConfig
from progression import ProgressionEngine
from quest_selector import QuestSelector
from quests import QuestLifecycleManager
from streaks import StreakTracker
from notifications import Notifier

from tests.fakes import InMemoryQuestStore


def pytest_configure(config):
    """Configure pytest environment."""
    os.environ.setdefault("LOG_LEVEL", "DEBUG")


FITNESS_TITLES = [
    "Run 5 kilometers",
    "Do 50 push-ups",
    "Stretch for 15 minutes",
    "Swim twenty laps",
    "Cycle to work",
    "Hold a plank for two minutes",
    "Jump rope session",
    "Yoga flow at sunrise",
    "Climb the stairs ten times",
    "Lift weights for an hour",
    "Walk 10000 steps",
    "Practice boxing combos",
    "Rowing machine intervals",
    "Hike a local trail",
    "Core workout circuit",
    "Dance cardio class",
    "Foam roll recovery",
    "Sprint hill repeats",
    "Kettlebell swings",
    "Balance drills on one leg",
]

STUDY_TITLES = [
    "Read a chapter of a textbook",
    "Solve three math problems",
    "Review flashcards",
    "Write a one-page essay",
    "Watch a lecture recording",
    "Summarize yesterday's notes",
    "Teach a concept to a friend",
    "Practice a foreign language",
    "Complete an online quiz",
    "Outline next week's study plan",
]


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 3, 12, 9, 30)


@pytest.fixture
def store() -> InMemoryQuestStore:
    return InMemoryQuestStore()


@pytest.fixture
def quest_config() -> QuestConfig:
    return QuestConfig()


@pytest.fixture
def progression_config() -> ProgressionConfig:
    return ProgressionConfig()


@pytest.fixture
def streak_config() -> StreakConfig:
    return StreakConfig()


@pytest.fixture
def scheduler_config() -> SchedulerConfig:
    return SchedulerConfig(user_timeout_seconds=0.2)


@pytest.fixture
def selector(quest_config) -> QuestSelector:
    return QuestSelector(quest_config.similarity_threshold, random.Random(1234))


@pytest.fixture
def lifecycle(store, selector, quest_config, scheduler_config) -> QuestLifecycleManager:
    return QuestLifecycleManager(store, selector, quest_config, scheduler_config)


@pytest.fixture
def notifier(store, streak_config) -> Notifier:
    return Notifier(store, streak_config)


@pytest.fixture
def tracker(store, notifier, streak_config) -> StreakTracker:
    return StreakTracker(store, notifier, streak_config)


@pytest.fixture
def engine(store, progression_config, tracker, notifier) -> ProgressionEngine:
    return ProgressionEngine(store, progression_config, streaks=tracker, notifier=notifier)


@pytest.fixture
def fitness_templates(store):
    return [store.add_template(title) for title in FITNESS_TITLES]


@pytest.fixture
def study_templates(store):
    return [
        store.add_template(title, field_name="Study", related_stat="Intelligence")
        for title in STUDY_TITLES
    ]
