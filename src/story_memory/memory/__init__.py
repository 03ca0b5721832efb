"""Story memory core components."""

from .forbids import Forbid, ForbiddenChunks
from .models import (
    Character,
    Event,
    NameCharacter,
    NameExtraction,
    PhysicalDescription,
    SexualCharacteristics,
    Summary,
    Timeline,
)
from .operator_utils import (
    chunk_paragraphs,
    chunk_text,
    clean_json,
    detect_names_heuristically,
    extract_json_from_output,
    heuristic_name_characters,
    parse_name_characters,
    parse_summary,
)
from .reconciler import (
    Reconciler,
    dedupe_by_name,
    merge_character,
    merge_characters,
    merge_name_characters,
    merge_summaries,
    merge_timelines,
    reconcile_summaries,
)
from .reconciler_utils import levenshtein, similarity

__all__ = [
    # Core data models
    "Character",
    "Event",
    "NameCharacter",
    "NameExtraction",
    "PhysicalDescription",
    "SexualCharacteristics",
    "Summary",
    "Timeline",
    # Reconciliation
    "Reconciler",
    "dedupe_by_name",
    "merge_character",
    "merge_characters",
    "merge_name_characters",
    "merge_summaries",
    "merge_timelines",
    "reconcile_summaries",
    # Similarity
    "levenshtein",
    "similarity",
    # Refused chunks
    "Forbid",
    "ForbiddenChunks",
    # Utility functions
    "chunk_text",
    "chunk_paragraphs",
    "clean_json",
    "extract_json_from_output",
    "parse_summary",
    "parse_name_characters",
    "detect_names_heuristically",
    "heuristic_name_characters",
]
