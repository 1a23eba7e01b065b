"""
Tests for settings loading and the database helpers that need no server.
"""

import pytest
from pydantic import ValidationError as SettingsError

from config import QuestConfig, get_config_summary, get_quest_config, reload_config
from database import _rowcount, get_database_url


@pytest.fixture(autouse=True)
def fresh_config():
    reload_config()
    yield
    reload_config()


class TestSettings:

    def test_defaults(self):
        config = QuestConfig()
        assert (config.daily_count, config.weekly_count) == (8, 3)
        assert config.similarity_threshold == 0.7
        assert config.backfill_pool_size == 20

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("QUEST_DAILY_COUNT", "5")
        monkeypatch.setenv("QUEST_SIMILARITY_THRESHOLD", "0.8")
        reload_config()

        config = get_quest_config()

        assert config.daily_count == 5
        assert config.similarity_threshold == 0.8

    def test_cached_until_reload(self, monkeypatch):
        first = get_quest_config()
        monkeypatch.setenv("QUEST_WEEKLY_COUNT", "4")

        assert get_quest_config() is first
        reload_config()
        assert get_quest_config().weekly_count == 4

    def test_out_of_range_rejected(self):
        with pytest.raises(SettingsError):
            QuestConfig(similarity_threshold=1.5)

    def test_summary_sections(self):
        summary = get_config_summary()
        assert set(summary) == {"quests", "progression", "streaks", "scheduler"}
        assert summary["scheduler"]["daily_at"] == "00:00"


class TestDatabaseHelpers:

    @pytest.mark.parametrize("status, expected", [
        ("UPDATE 3", 3),
        ("DELETE 0", 0),
        ("INSERT 0 1", 1),
        ("", 0),
    ])
    def test_rowcount(self, status, expected):
        assert _rowcount(status) == expected

    def test_database_url_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@example:5432/quests")
        assert get_database_url() == "postgresql://u:p@example:5432/quests"

    def test_database_url_default(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        assert get_database_url().endswith("/solo_leveling")
