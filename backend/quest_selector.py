"""
Solo Leveling Life System - Quest Selector
Random, duplicate-free picking of quest templates with cross-category backfill
"""

import random
from typing import List, Optional, Sequence, Set, TypeVar

from models import QuestTemplate
from similarity import DEFAULT_SIMILARITY_THRESHOLD, is_unique, normalize_title

T = TypeVar("T")


def shuffle(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Fisher-Yates shuffle on a copy; the input is left untouched."""
    rng = rng or random
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


class QuestSelector:
    """Picks a batch of mutually distinct templates."""

    def __init__(
        self,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
        rng: Optional[random.Random] = None
    ):
        self.similarity_threshold = similarity_threshold
        self.rng = rng

    def select(
        self,
        primary_pool: Sequence[QuestTemplate],
        backfill_pool: Sequence[QuestTemplate],
        target_count: int
    ) -> List[QuestTemplate]:
        """
        Choose up to target_count templates, primary pool first.

        The batch may come back short when both pools run dry; callers
        decide how to fill the gap.
        """
        if target_count <= 0:
            return []

        selected: List[QuestTemplate] = []
        used_ids: Set[int] = set()
        used_titles: Set[str] = set()

        self._fill(shuffle(primary_pool, self.rng), target_count, selected, used_ids, used_titles)

        if len(selected) < target_count and backfill_pool:
            self._fill(shuffle(backfill_pool, self.rng), target_count, selected, used_ids, used_titles)

        return shuffle(selected, self.rng)[:target_count]

    def _fill(
        self,
        candidates: List[QuestTemplate],
        target_count: int,
        selected: List[QuestTemplate],
        used_ids: Set[int],
        used_titles: Set[str]
    ) -> None:
        for template in candidates:
            if len(selected) >= target_count:
                break
            if template.id in used_ids:
                continue
            if not is_unique(template.title, used_titles, self.similarity_threshold):
                continue

            selected.append(template)
            used_ids.add(template.id)
            used_titles.add(normalize_title(template.title))
