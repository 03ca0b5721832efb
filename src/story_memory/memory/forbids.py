"""
Registry of chunks the extraction model refused to process.

When the model refuses a chunk, re-sending the same (or nearly the same) text
only wastes a call. The pipeline records refusals here and checks each new
chunk against them before calling the model.
"""

import base64
import gzip
import logging
from typing import Dict, Optional

from pydantic import BaseModel, Field

from ..config import FORBID_SIMILARITY_THRESHOLD
from .reconciler_utils.matching import similarity

logger = logging.getLogger(__name__)


def compress_to_base64(text: str) -> str:
    """Gzip text and encode it as Base64 so it is safe to store in JSON."""
    return base64.b64encode(gzip.compress(text.encode("utf-8"))).decode("ascii")


def decompress_from_base64(encoded: str) -> str:
    """Decode Base64 and decompress gzip-compressed text."""
    return gzip.decompress(base64.b64decode(encoded)).decode("utf-8")


class Forbid(BaseModel):
    """A refused chunk and why it was refused."""

    reason: str = Field(description="Why the chunk was refused")
    text: str = Field(description="The refused chunk text")
    compressed: str = Field(default="", description="Gzip+Base64 copy of the text")
    error: Optional[str] = Field(default=None, description="Upstream error message")
    raw: str = Field(default="", description="Raw model output, if any")


class ForbiddenChunks:
    """Refused chunks keyed by chunk identifier."""

    def __init__(self, threshold: float = FORBID_SIMILARITY_THRESHOLD):
        self.threshold = threshold
        self.entries: Dict[str, Forbid] = {}

    def __contains__(self, chunk_id: str) -> bool:
        return chunk_id in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def add(
        self,
        chunk_id: str,
        text: str,
        reason: str,
        error: Optional[str] = None,
        raw: str = "",
    ) -> Forbid:
        """Record a refused chunk."""
        entry = Forbid(
            reason=reason,
            text=text,
            compressed=compress_to_base64(text),
            error=error,
            raw=raw,
        )
        self.entries[chunk_id] = entry
        return entry

    def find_similar(self, chunk: str) -> Optional[Forbid]:
        """Return a recorded refusal whose text resembles ``chunk``, if any."""
        for entry in self.entries.values():
            if similarity(entry.text, chunk) >= self.threshold:
                return entry
        return None

    def check(self, chunk_id: str, chunk: str) -> Optional[Forbid]:
        """
        Decide whether a chunk should be skipped.

        A chunk is skipped when its identifier was already refused, or when it
        resembles a refused chunk; in the second case it is recorded under its
        own identifier, inheriting the earlier error.
        """
        if chunk_id in self.entries:
            return self.entries[chunk_id]

        similar = self.find_similar(chunk)
        if similar is None:
            return None

        logger.info("Skipping chunk %s: similar to forbidden content", chunk_id)
        return self.add(
            chunk_id,
            chunk,
            reason="similar to forbidden content",
            error=similar.error,
            raw=similar.raw,
        )
