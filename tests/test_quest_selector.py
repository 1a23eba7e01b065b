"""
Unit tests for shuffling and unique quest selection.
"""

import random
from itertools import combinations

import pytest

from models import QuestTemplate, QuestType
from quest_selector import QuestSelector, shuffle
from similarity import similarity

from tests.conftest import FITNESS_TITLES, STUDY_TITLES


def make_templates(titles, field_name="Fitness", start_id=1):
    return [
        QuestTemplate(
            id=start_id + i,
            title=title,
            base_xp=30,
            field_name=field_name,
            quest_type=QuestType.DAILY,
        )
        for i, title in enumerate(titles)
    ]


class TestShuffle:
    """Fisher-Yates shuffle."""

    def test_same_elements(self):
        items = list(range(20))
        result = shuffle(items, random.Random(3))
        assert sorted(result) == items

    def test_input_not_modified(self):
        items = [1, 2, 3, 4, 5]
        shuffle(items, random.Random(3))
        assert items == [1, 2, 3, 4, 5]

    def test_deterministic_with_seed(self):
        items = list(range(10))
        assert shuffle(items, random.Random(9)) == shuffle(items, random.Random(9))

    def test_empty_and_single(self):
        assert shuffle([]) == []
        assert shuffle(["only"]) == ["only"]


class TestQuestSelector:
    """Greedy unique selection with backfill."""

    def test_full_primary_pool(self):
        """20 distinct templates, target 8: exactly 8, unique ids, non-similar titles."""
        selector = QuestSelector(0.7, random.Random(42))
        chosen = selector.select(make_templates(FITNESS_TITLES), [], 8)

        assert len(chosen) == 8
        assert len({t.id for t in chosen}) == 8
        for a, b in combinations(chosen, 2):
            assert similarity(a.title.lower(), b.title.lower()) <= 0.7

    def test_backfill_fills_remainder(self):
        """Primary pool of 2 plus backfill of 10: 8 items, both primary included."""
        primary = make_templates(FITNESS_TITLES[:2])
        backfill = make_templates(STUDY_TITLES, field_name="Study", start_id=100)

        chosen = QuestSelector(0.7, random.Random(5)).select(primary, backfill, 8)

        assert len(chosen) == 8
        ids = {t.id for t in chosen}
        assert {1, 2} <= ids

    def test_short_batch_returned_as_is(self):
        primary = make_templates(FITNESS_TITLES[:3])
        chosen = QuestSelector(0.7, random.Random(5)).select(primary, [], 8)
        assert len(chosen) == 3

    def test_near_duplicates_collapsed(self):
        """Only one of a cluster of near-identical titles survives."""
        primary = make_templates(["Morning Run", "Morning Runs", "morning run ", "Read a book"])
        chosen = QuestSelector(0.7, random.Random(11)).select(primary, [], 8)

        titles = [t.title for t in chosen]
        assert len(titles) == 2
        assert "Read a book" in titles

    def test_duplicate_ids_skipped(self):
        template = make_templates(["Do 50 push-ups"])[0]
        chosen = QuestSelector().select([template, template], [template], 8)
        assert chosen == [template]

    def test_backfill_similar_to_primary_rejected(self):
        primary = make_templates(["Morning Run"])
        backfill = make_templates(["Morning Runs", "Read a book"], field_name="Study", start_id=50)

        chosen = QuestSelector(0.7, random.Random(2)).select(primary, backfill, 8)

        assert sorted(t.title for t in chosen) == ["Morning Run", "Read a book"]

    @pytest.mark.parametrize("target", [0, -1])
    def test_non_positive_target(self, target):
        assert QuestSelector().select(make_templates(FITNESS_TITLES), [], target) == []

    def test_state_is_call_scoped(self):
        """A second call does not remember titles from the first."""
        selector = QuestSelector(0.7, random.Random(8))
        pool = make_templates(FITNESS_TITLES[:5])

        first = selector.select(pool, [], 5)
        second = selector.select(pool, [], 5)

        assert {t.id for t in first} == {t.id for t in second}
