"""
Configuration for the story memory engine.

The similarity thresholds are part of the observable contract: they decide
what counts as "the same event" or "the same notable action". They are exposed
here as named constants and every matching function accepts an override.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Fuzzy-match cutoff for notable actions and timeline events
SIMILARITY_THRESHOLD = 0.70

# Cutoff for skipping a chunk that resembles one the model already refused
FORBID_SIMILARITY_THRESHOLD = 0.80

# Maximum chunk length in code points handed to the extraction model
DEFAULT_CHUNK_LIMIT = 8192 * 4


class Settings(BaseModel):
    """Runtime settings read from the environment (and an optional .env file)."""

    log_level: str = Field(default="INFO", description="Root logging level")
    chunk_limit: int = Field(
        default=DEFAULT_CHUNK_LIMIT, gt=0, description="Chunk size in code points"
    )
    similarity_threshold: float = Field(
        default=SIMILARITY_THRESHOLD,
        ge=0.0,
        le=1.0,
        description="Fuzzy-match cutoff used by merge and diff",
    )

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Load settings from ``STORY_MEMORY_*`` environment variables.

    Raises:
        pydantic.ValidationError: If a value is malformed or out of range
    """
    load_dotenv(env_file)

    values = {}
    log_level = os.getenv("STORY_MEMORY_LOG_LEVEL")
    if log_level:
        values["log_level"] = log_level
    chunk_limit = os.getenv("STORY_MEMORY_CHUNK_LIMIT")
    if chunk_limit:
        values["chunk_limit"] = chunk_limit
    threshold = os.getenv("STORY_MEMORY_SIMILARITY_THRESHOLD")
    if threshold:
        values["similarity_threshold"] = threshold

    return Settings(**values)
