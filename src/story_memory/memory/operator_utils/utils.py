"""
Utility functions for turning raw extraction output into models.

The extraction model is asked for JSON, but it often wraps the payload in
markdown code fences. These helpers strip the fences, decode the JSON and
validate it into the summary models.
"""

import json
from typing import List

from ..models import NameCharacter, NameExtraction, Summary


def clean_json(text: str) -> str:
    """Remove a surrounding markdown code block from LLM output."""
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        if len(lines) >= 2:
            if lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].startswith("```"):
                lines = lines[:-1]
            text = "\n".join(lines)
    return text.strip()


def extract_json_from_output(text: str) -> dict:
    """Extract the JSON object from LLM output."""
    try:
        data = json.loads(clean_json(text))
    except json.JSONDecodeError as e:
        raise ValueError(f"Error extracting JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def parse_summary(text: str) -> Summary:
    """Parse LLM output text into a Summary object."""
    return Summary.model_validate(extract_json_from_output(text))


def parse_name_characters(text: str) -> List[NameCharacter]:
    """Parse the names-only extraction output into NameCharacter objects."""
    return NameExtraction.model_validate(extract_json_from_output(text)).characters
