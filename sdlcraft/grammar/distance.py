# FILE: sdlcraft/grammar/distance.py
"""
Edit distance helpers for typo correction.

Plain Levenshtein distance (insert / delete / substitute, each cost 1) over
Unicode code points. Dictionaries are tiny (<= 10 words) and tokens short,
so the quadratic table is never a concern.
"""
from __future__ import annotations
from typing import Iterable, List, Optional, Tuple

from .config import RepairThresholds, DEFAULT_THRESHOLDS


def levenshtein_distance(s1: str, s2: str) -> int:
    """
    Minimum number of single-character edits turning s1 into s2.

    Case-sensitive; callers fold case first when they need to.
    """
    if s1 == s2:
        return 0
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    previous = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1, start=1):
        current = [i] + [0] * len(s2)
        for j, c2 in enumerate(s2, start=1):
            cost = 0 if c1 == c2 else 1
            current[j] = min(
                previous[j] + 1,          # deletion
                current[j - 1] + 1,       # insertion
                previous[j - 1] + cost,   # substitution
            )
        previous = current
    return previous[-1]


def find_typo_candidates(
    word: str,
    dictionary: Iterable[str],
    max_distance: int = 2,
) -> List[Tuple[str, int]]:
    """
    Dictionary entries within max_distance of word, exact matches excluded.

    Returns:
        [(entry, distance), ...] in dictionary order
    """
    folded = word.casefold()
    candidates = []
    for entry in dictionary:
        distance = levenshtein_distance(folded, entry.casefold())
        if 0 < distance <= max_distance:
            candidates.append((entry, distance))
    return candidates


def closest_candidates(
    word: str,
    dictionary: Iterable[str],
    max_distance: int = 2,
) -> Tuple[List[str], Optional[int]]:
    """
    Only the minimal-distance typo candidates.

    Returns:
        (entries, distance) - ([], None) when nothing is close enough
    """
    candidates = find_typo_candidates(word, dictionary, max_distance)
    if not candidates:
        return [], None
    best = min(distance for _, distance in candidates)
    return [entry for entry, distance in candidates if distance == best], best


def confidence_for_distance(
    distance: int,
    thresholds: RepairThresholds = DEFAULT_THRESHOLDS,
) -> float:
    """Quantized confidence for a correction at the given edit distance."""
    if distance <= 0:
        return thresholds.already_valid
    if distance == 1:
        return thresholds.distance_one
    if distance == 2:
        return thresholds.distance_two
    return thresholds.distance_far


__all__ = [
    "levenshtein_distance",
    "find_typo_candidates",
    "closest_candidates",
    "confidence_for_distance",
]
