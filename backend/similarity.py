"""
Solo Leveling Life System - Title Similarity
Levenshtein-based scoring used to keep near-duplicate quests out of a batch
"""

from typing import Iterable

from logger import logger

DEFAULT_SIMILARITY_THRESHOLD = 0.7


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance over the full DP matrix. Case-sensitive."""
    rows = len(a) + 1
    cols = len(b) + 1
    matrix = [[0] * cols for _ in range(rows)]

    for i in range(rows):
        matrix[i][0] = i
    for j in range(cols):
        matrix[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            matrix[i][j] = min(
                matrix[i - 1][j] + 1,         # deletion
                matrix[i][j - 1] + 1,         # insertion
                matrix[i - 1][j - 1] + cost,  # substitution
            )

    return matrix[rows - 1][cols - 1]


def similarity(a: str, b: str) -> float:
    """Normalized similarity in [0, 1]; two empty strings are identical."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - levenshtein_distance(a, b)) / longest


def normalize_title(title: str) -> str:
    return title.lower().strip()


def is_unique(
    candidate: str,
    existing_titles: Iterable[str],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD
) -> bool:
    """
    Check a quest title against titles already chosen for a batch.

    Args:
        candidate: Raw title of the quest being considered
        existing_titles: Normalized (lowercase, trimmed) titles already accepted
        threshold: Similarity above which two titles count as duplicates

    Returns:
        False on an exact normalized match or any title above the threshold
    """
    normalized = normalize_title(candidate)

    for existing in existing_titles:
        if normalized == existing:
            logger.debug(f"Rejected '{candidate}': exact duplicate")
            return False
        score = similarity(normalized, existing)
        if score > threshold:
            logger.debug(f"Rejected '{candidate}': {score:.2f} similar to '{existing}'")
            return False

    return True
