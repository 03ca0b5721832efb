"""
Story Reconciler Components - similarity scoring and matching rules.

This module provides the normalized edit-distance similarity and the greedy
first-match / best-match helpers shared by the reconciler and the differ.
"""

from .matching import (
    character_key,
    find_best_match,
    find_first_match,
    find_first_similar,
    levenshtein,
    pair_best_matches,
    similarity,
)

__all__ = [
    "levenshtein",
    "similarity",
    "character_key",
    "find_first_match",
    "find_first_similar",
    "find_best_match",
    "pair_best_matches",
]
