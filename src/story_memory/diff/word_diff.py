"""
Word-level string diffs.

Text fields are compared token by token (see ``tokenizer``) so edits render as
small readable spans rather than whole replaced lines or scrambled characters.
"""

from typing import List, Optional

from .models import Op, StringDiff, WordDelta
from .tokenizer import tokenize_words


def insert_only(new: str) -> StringDiff:
    """Diff for a value that did not exist before."""
    return StringDiff(old="", new=new, deltas=[WordDelta(op=Op.INSERT, text=new)])


def _lcs_table(old_tokens: List[str], new_tokens: List[str]) -> List[List[int]]:
    """``table[i][j]`` is the common-subsequence length of the first i and j tokens."""
    table = [[0] * (len(new_tokens) + 1) for _ in range(len(old_tokens) + 1)]
    for i, old_token in enumerate(old_tokens, start=1):
        row, prev = table[i], table[i - 1]
        for j, new_token in enumerate(new_tokens, start=1):
            if old_token == new_token:
                row[j] = prev[j - 1] + 1
            else:
                row[j] = max(row[j - 1], prev[j])
    return table


def _align(old_tokens: List[str], new_tokens: List[str]) -> List[WordDelta]:
    """
    Classify every token as common, old-only or new-only.

    Shared leading and trailing tokens are taken as common up front; the middle
    is aligned on a longest common subsequence. Within a changed span deletions
    come before insertions.
    """
    prefix = 0
    limit = min(len(old_tokens), len(new_tokens))
    while prefix < limit and old_tokens[prefix] == new_tokens[prefix]:
        prefix += 1
    suffix = 0
    while (
        suffix < limit - prefix
        and old_tokens[-1 - suffix] == new_tokens[-1 - suffix]
    ):
        suffix += 1

    old_mid = old_tokens[prefix : len(old_tokens) - suffix]
    new_mid = new_tokens[prefix : len(new_tokens) - suffix]
    table = _lcs_table(old_mid, new_mid)

    # Walk back from the end; insertions are taken first so they land after
    # deletions once the list is reversed.
    middle: List[WordDelta] = []
    i, j = len(old_mid), len(new_mid)
    while i > 0 or j > 0:
        if i > 0 and j > 0 and old_mid[i - 1] == new_mid[j - 1]:
            middle.append(WordDelta(op=Op.EQUAL, text=old_mid[i - 1]))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or table[i][j - 1] >= table[i - 1][j]):
            middle.append(WordDelta(op=Op.INSERT, text=new_mid[j - 1]))
            j -= 1
        else:
            middle.append(WordDelta(op=Op.DELETE, text=old_mid[i - 1]))
            i -= 1
    middle.reverse()

    head = [WordDelta(op=Op.EQUAL, text=t) for t in old_tokens[:prefix]]
    tail = [
        WordDelta(op=Op.EQUAL, text=t)
        for t in old_tokens[len(old_tokens) - suffix :]
    ]
    return head + middle + tail


def coalesce_spaces(deltas: List[WordDelta]) -> List[WordDelta]:
    """
    Merge adjacent deltas of the same operation.

    Whitespace-only equal runs never stand alone: they are folded into
    whichever run is being accumulated, so an inserted clause keeps its
    leading space.
    """
    out: List[WordDelta] = []
    current_op: Optional[Op] = None
    buffer: List[str] = []

    def flush() -> None:
        if buffer:
            out.append(WordDelta(op=current_op, text="".join(buffer)))
            buffer.clear()

    for delta in deltas:
        if delta.op == Op.EQUAL and not delta.text.strip():
            buffer.append(delta.text)
            continue
        if current_op is not None and delta.op != current_op:
            flush()
        current_op = delta.op
        buffer.append(delta.text)

    if current_op is None:
        current_op = Op.EQUAL
    flush()
    return out


def word_diff(old: str, new: str) -> StringDiff:
    """Compute a word-level diff between two strings."""
    if old == new:
        return StringDiff(old=old, new=new, deltas=[WordDelta(op=Op.EQUAL, text=old)])
    deltas = _align(tokenize_words(old), tokenize_words(new))
    return StringDiff(old=old, new=new, deltas=coalesce_spaces(deltas))
