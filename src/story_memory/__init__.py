"""
Story Memory Package

Reconciliation and diffing for story summaries extracted chunk by chunk by a
language model.

This package provides:
- Character and timeline models for extracted summaries
- Reconciliation of partial per-chunk snapshots into one canonical summary
- Word-level snapshot diffs for reviewing what a re-extraction changed
- Boundary helpers: text chunking, JSON parsing, heuristic name detection

Example usage:

## Accumulating a summary

```python
from story_memory import Reconciler, chunk_text, parse_summary

reconciler = Reconciler()
for chunk_id, chunk in enumerate(chunk_text(story_text)):
    raw = extract(chunk)  # call the language model
    reconciler.reconcile(parse_summary(raw), chunk_id=str(chunk_id))

summary = reconciler.summary
```

## Comparing two snapshots

```python
from story_memory import diff_summaries, print_summary_diff

diff = diff_summaries(before, after)
print_summary_diff(diff, changes_only=True)
```

Matching uses a normalized edit-distance similarity with a 0.70 cutoff for
events and notable actions (``story_memory.config.SIMILARITY_THRESHOLD``).
"""

from .config import (
    DEFAULT_CHUNK_LIMIT,
    FORBID_SIMILARITY_THRESHOLD,
    SIMILARITY_THRESHOLD,
    Settings,
    load_settings,
)
from .diff import (
    ChangeType,
    CharacterDiff,
    EventChange,
    FieldDiff,
    Op,
    StringDiff,
    SummaryDiff,
    WordDelta,
    diff_characters,
    diff_summaries,
    diff_timelines,
    fuzzy_list_diff,
    print_summary_diff,
    render_string_diff,
    tokenize_words,
    word_diff,
)
from .memory import (
    Character,
    Event,
    ForbiddenChunks,
    NameCharacter,
    PhysicalDescription,
    Reconciler,
    SexualCharacteristics,
    Summary,
    Timeline,
    chunk_paragraphs,
    chunk_text,
    dedupe_by_name,
    detect_names_heuristically,
    levenshtein,
    merge_characters,
    merge_name_characters,
    merge_summaries,
    merge_timelines,
    parse_name_characters,
    parse_summary,
    reconcile_summaries,
    similarity,
)

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "SIMILARITY_THRESHOLD",
    "FORBID_SIMILARITY_THRESHOLD",
    "DEFAULT_CHUNK_LIMIT",
    "Settings",
    "load_settings",
    # Data models
    "Character",
    "PhysicalDescription",
    "SexualCharacteristics",
    "Event",
    "Timeline",
    "Summary",
    "NameCharacter",
    # Reconciliation
    "Reconciler",
    "reconcile_summaries",
    "merge_summaries",
    "merge_characters",
    "merge_timelines",
    "merge_name_characters",
    "dedupe_by_name",
    "similarity",
    "levenshtein",
    # Pipeline boundary
    "ForbiddenChunks",
    "chunk_text",
    "chunk_paragraphs",
    "parse_summary",
    "parse_name_characters",
    "detect_names_heuristically",
    # Diffing
    "ChangeType",
    "Op",
    "WordDelta",
    "StringDiff",
    "FieldDiff",
    "CharacterDiff",
    "EventChange",
    "SummaryDiff",
    "diff_summaries",
    "diff_characters",
    "diff_timelines",
    "fuzzy_list_diff",
    "word_diff",
    "tokenize_words",
    "render_string_diff",
    "print_summary_diff",
]
