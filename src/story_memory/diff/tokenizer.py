"""Word tokenizer used as the comparison unit for word-level diffs."""

from typing import List

SPACE = 0
WORD = 1
PUNCT = 2

_WORD_EXTRA = {"_", "-", "'"}


def char_class(ch: str) -> int:
    """Classify a character as whitespace, word or other punctuation."""
    if ch.isspace():
        return SPACE
    if ch.isalpha() or ch.isnumeric() or ch in _WORD_EXTRA:
        return WORD
    return PUNCT


def tokenize_words(text: str) -> List[str]:
    """
    Split text into runs of whitespace, word characters and punctuation.

    Consecutive characters of the same class form one token, so
    ``"".join(tokenize_words(text)) == text`` always holds.
    """
    tokens: List[str] = []
    current: List[str] = []
    kind = None
    for ch in text:
        ch_kind = char_class(ch)
        if kind is not None and ch_kind != kind:
            tokens.append("".join(current))
            current = []
        kind = ch_kind
        current.append(ch)
    if current:
        tokens.append("".join(current))
    return tokens
