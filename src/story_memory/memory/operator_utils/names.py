"""
Heuristic character-name detection.

Used as a local fallback when the names-only extraction call fails or returns
nothing. It is deliberately conservative: a capitalised phrase of one to three
words must appear at least twice to count as a name.
"""

import logging
import re
from collections import Counter
from typing import List

from ..models import NameCharacter

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+){0,2}\b")

# Sentence-initial words that are capitalised but are not names
_COMMON_WORDS = {"the", "and"}

MIN_OCCURRENCES = 2


def detect_names_heuristically(text: str) -> List[str]:
    """Return candidate names seen at least twice, most frequent first."""
    counts: Counter = Counter()
    for match in _NAME_PATTERN.findall(text):
        if len(match) < 3 or match.lower() in _COMMON_WORDS:
            continue
        counts[match] += 1

    return [name for name, count in counts.most_common() if count >= MIN_OCCURRENCES]


def heuristic_name_characters(text: str) -> List[NameCharacter]:
    """Build names-only characters from the heuristic detector."""
    logger.debug("Using heuristic name detection on %d characters", len(text))
    characters = [
        NameCharacter(name=name.strip())
        for name in detect_names_heuristically(text)
        if name.strip()
    ]
    logger.debug("Heuristic name detection found %d names", len(characters))
    return characters
