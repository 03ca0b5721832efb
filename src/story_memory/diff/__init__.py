"""Snapshot diffing: structured change reports between two summaries."""

from .differ import (
    CHARACTER_FIELDS,
    diff_characters,
    diff_summaries,
    diff_timelines,
    fuzzy_list_diff,
)
from .models import (
    ChangeType,
    CharacterDiff,
    EventChange,
    FieldDiff,
    Op,
    StringDiff,
    SummaryDiff,
    WordDelta,
)
from .render import print_summary_diff, render_string_diff
from .tokenizer import tokenize_words
from .word_diff import coalesce_spaces, insert_only, word_diff

__all__ = [
    # Diff models
    "ChangeType",
    "Op",
    "WordDelta",
    "StringDiff",
    "FieldDiff",
    "CharacterDiff",
    "EventChange",
    "SummaryDiff",
    # Diff computation
    "CHARACTER_FIELDS",
    "diff_summaries",
    "diff_characters",
    "diff_timelines",
    "fuzzy_list_diff",
    "word_diff",
    "insert_only",
    "coalesce_spaces",
    "tokenize_words",
    # Rendering
    "render_string_diff",
    "print_summary_diff",
]
