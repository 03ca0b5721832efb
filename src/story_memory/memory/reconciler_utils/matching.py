"""
Similarity scoring and candidate matching for the story reconciler.

Names and descriptions are the only keys the extraction model gives us, and
they drift in casing, phrasing and completeness between calls. This module
provides the normalized edit-distance score used to decide whether two
strings describe the same thing, plus the two greedy matching rules built on
top of it:

- ``find_first_match``: the first candidate at or above the threshold wins.
  Used when merging events and notable actions.
- ``find_best_match``: the highest-scoring candidate wins, if it clears the
  threshold. Used by the snapshot differ.

The two rules pair items differently on ambiguous input and are kept separate.
"""

from typing import Callable, List, Optional, Sequence, Set, Tuple, TypeVar

from ...config import SIMILARITY_THRESHOLD

T = TypeVar("T")


def levenshtein(a: str, b: str) -> int:
    """Classic unit-cost edit distance between two strings (in code points)."""
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Keep the shorter string on the row axis
    if len(b) > len(a):
        a, b = b, a

    previous = list(range(len(b) + 1))
    current = [0] * (len(b) + 1)

    for i in range(1, len(a) + 1):
        current[0] = i
        char_a = a[i - 1]
        for j in range(1, len(b) + 1):
            cost = 0 if char_a == b[j - 1] else 1
            current[j] = min(
                previous[j] + 1,  # deletion
                current[j - 1] + 1,  # insertion
                previous[j - 1] + cost,  # substitution
            )
        previous, current = current, previous

    return previous[len(b)]


def similarity(a: str, b: str) -> float:
    """Return a score between 0 and 1 (1 = identical after trim + lowercase)."""
    a = a.strip().lower()
    b = b.strip().lower()
    if not a and not b:
        return 1.0
    return 1.0 - levenshtein(a, b) / max(len(a), len(b))


def character_key(name: str) -> str:
    """Identity key for a character name."""
    return name.strip().lower()


def find_first_match(
    candidates: Sequence[T],
    is_match: Callable[[T], bool],
) -> Optional[int]:
    """Index of the first candidate accepted by ``is_match``, or None."""
    for index, candidate in enumerate(candidates):
        if is_match(candidate):
            return index
    return None


def find_first_similar(
    text: str,
    candidates: Sequence[str],
    threshold: float = SIMILARITY_THRESHOLD,
) -> Optional[int]:
    """Index of the first candidate whose similarity to ``text`` clears the threshold."""
    return find_first_match(
        candidates, lambda candidate: similarity(candidate, text) >= threshold
    )


def find_best_match(
    candidates: Sequence[T],
    score: Callable[[T], float],
    used: Set[int],
    threshold: float = SIMILARITY_THRESHOLD,
) -> Optional[Tuple[int, float]]:
    """
    Find the highest-scoring unused candidate.

    Only a strictly greater score replaces the current best, so ties keep the
    earliest candidate. Returns ``(index, score)`` when the best score reaches
    the threshold, otherwise None.
    """
    best_index = -1
    best_score = 0.0
    for index, candidate in enumerate(candidates):
        if index in used:
            continue
        candidate_score = score(candidate)
        if candidate_score > best_score:
            best_index, best_score = index, candidate_score

    if best_index >= 0 and best_score >= threshold:
        return best_index, best_score
    return None


def pair_best_matches(
    left: List[T],
    right: List[T],
    score: Callable[[T, T], float],
    threshold: float = SIMILARITY_THRESHOLD,
    used_left: Optional[Set[int]] = None,
    used_right: Optional[Set[int]] = None,
) -> List[Tuple[int, int]]:
    """
    Greedily pair each unused left item with its best unused right item.

    Left items are visited in order and claim their partner immediately, so
    the result is not an optimal assignment. ``used_left``/``used_right`` are
    updated with every paired index.
    """
    used_left = used_left if used_left is not None else set()
    used_right = used_right if used_right is not None else set()

    pairs = []
    for i, item in enumerate(left):
        if i in used_left:
            continue
        match = find_best_match(
            right, lambda other: score(item, other), used_right, threshold
        )
        if match is None:
            continue
        j, _ = match
        used_left.add(i)
        used_right.add(j)
        pairs.append((i, j))
    return pairs
