"""
Chunking utilities for the extraction pipeline.

The extraction model has a limited context window, so story text is split into
chunks before each call. Lengths are measured in code points.
"""

import logging
import re
from typing import Dict, List, Tuple

from ...config import DEFAULT_CHUNK_LIMIT

logger = logging.getLogger(__name__)

_PARAGRAPH_BREAK = re.compile(r"\n{2,}")
_PARAGRAPH_JOINER = "\n\n"


def _last_whitespace_before(text: str, limit: int) -> int:
    """Index of the last whitespace among the first ``limit`` characters, or -1."""
    for index in range(min(limit, len(text)) - 1, -1, -1):
        if text[index].isspace():
            return index
    return -1


def split_by_space(text: str, limit: int) -> List[str]:
    """Split text into pieces of at most ``limit`` characters at whitespace.

    A run with no whitespace before the limit is hard-cut at the limit.
    """
    text = text.strip()
    if not text:
        return []
    if len(text) <= limit:
        return [text]

    parts = []
    while text:
        if len(text) <= limit:
            parts.append(text)
            break
        cut = _last_whitespace_before(text, limit)
        if cut <= 0:
            parts.append(text[:limit].strip())
            text = text[limit:].strip()
            continue
        parts.append(text[:cut].strip())
        text = text[cut:].lstrip()
    return parts


def chunk_text(text: str, limit: int = DEFAULT_CHUNK_LIMIT) -> List[str]:
    """
    Split text into chunks of at most ``limit`` characters.

    Paragraphs (blank-line separated) are the preferred unit, then single lines,
    then the whole text. Units are packed greedily with their original joiner;
    a unit that is too long on its own is split at whitespace.

    Args:
        text: Story text
        limit: Maximum chunk length in characters

    Returns:
        List of non-empty chunks
    """
    text = text.strip()
    if not text:
        return []
    if len(text) <= limit:
        return [text]

    if _PARAGRAPH_BREAK.search(text):
        blocks = _PARAGRAPH_BREAK.split(text)
        joiner = _PARAGRAPH_JOINER
    elif "\n" in text:
        blocks = text.split("\n")
        joiner = "\n"
    else:
        blocks = [text]
        joiner = " "

    chunks: List[str] = []
    current = ""

    def append_piece(piece: str) -> None:
        nonlocal current
        piece = piece.strip()
        if not piece:
            return
        if not current:
            if len(piece) <= limit:
                current = piece
                return
            for part in split_by_space(piece, limit):
                if not current:
                    current = part
                elif len(current) + len(joiner) + len(part) <= limit:
                    current = current + joiner + part
                else:
                    chunks.append(current)
                    current = part
            return
        if len(current) + len(joiner) + len(piece) <= limit:
            current = current + joiner + piece
            return
        chunks.append(current)
        current = ""
        append_piece(piece)

    for block in blocks:
        block = block.strip()
        if not block:
            continue
        if len(block) <= limit:
            append_piece(block)
        else:
            for part in split_by_space(block, limit):
                append_piece(part)

    if current.strip():
        chunks.append(current)

    logger.debug("Split %d characters into %d chunks", len(text), len(chunks))
    return chunks


def chunk_paragraphs(
    paragraphs: Dict[str, str], limit: int = DEFAULT_CHUNK_LIMIT
) -> List[List[Tuple[int, str]]]:
    """
    Group numbered paragraphs into chunks of at most ``limit`` characters.

    Paragraphs are ordered by their integer key and joined with a blank line
    when measuring. A paragraph longer than the limit becomes its own chunk.
    Keys that are not integers are skipped.

    Args:
        paragraphs: Mapping of paragraph number (as a string) to text
        limit: Maximum chunk length in characters

    Returns:
        List of chunks, each a list of ``(index, text)`` tuples
    """
    if limit <= 0 or not paragraphs:
        return []

    numbered = []
    for key, text in paragraphs.items():
        text = text.strip()
        if not text:
            continue
        try:
            index = int(key)
        except ValueError:
            logger.warning("Could not parse paragraph key to int: %s", key)
            continue
        numbered.append((index, text))
    if not numbered:
        return []

    numbered.sort(key=lambda item: item[0])

    chunks: List[List[Tuple[int, str]]] = []
    current: List[Tuple[int, str]] = []
    current_len = 0

    for index, text in numbered:
        length = len(text)

        if length > limit:
            if current:
                chunks.append(current)
                current, current_len = [], 0
            chunks.append([(index, text)])
            continue

        added = length + (len(_PARAGRAPH_JOINER) if current_len > 0 else 0)
        if current_len + added <= limit:
            current.append((index, text))
            current_len += added
        else:
            if current:
                chunks.append(current)
            current = [(index, text)]
            current_len = length

    if current:
        chunks.append(current)

    return chunks
