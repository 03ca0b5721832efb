"""
Operator utilities for the story memory pipeline.

Helpers that sit at the boundary with the extraction model: chunking the input
text, parsing the model's JSON output, and a heuristic name detector used when
the model fails.
"""

from .chunk import chunk_paragraphs, chunk_text, split_by_space
from .names import detect_names_heuristically, heuristic_name_characters
from .utils import (
    clean_json,
    extract_json_from_output,
    parse_name_characters,
    parse_summary,
)

__all__ = [
    "chunk_text",
    "chunk_paragraphs",
    "split_by_space",
    "detect_names_heuristically",
    "heuristic_name_characters",
    "clean_json",
    "extract_json_from_output",
    "parse_summary",
    "parse_name_characters",
]
