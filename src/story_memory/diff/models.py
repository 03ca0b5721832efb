"""
Data models for snapshot diffs.

A SummaryDiff is a one-shot structural comparison of two summaries: each
character and event is classified as added, removed, modified or unchanged, and
changed text fields carry a word-level diff.
"""

from enum import IntEnum
from typing import Dict, List

from pydantic import BaseModel, Field


class ChangeType(IntEnum):
    UNCHANGED = 0
    ADDED = 1
    REMOVED = 2
    MODIFIED = 3


class Op(IntEnum):
    EQUAL = 0
    INSERT = 1
    DELETE = 2


class WordDelta(BaseModel):
    """A run of tokens that is kept, inserted or deleted."""

    op: Op
    text: str


class StringDiff(BaseModel):
    """Word-level diff between two versions of a text field."""

    old: str = ""
    new: str = ""
    deltas: List[WordDelta] = Field(default_factory=list)


class FieldDiff(BaseModel):
    """A changed field, addressed by a dotted path such as 'PhysicalDescription.Hair'."""

    path: str
    diff: StringDiff


class CharacterDiff(BaseModel):
    name: str
    state: ChangeType
    field_diffs: List[FieldDiff] = Field(default_factory=list)
    notable_add: List[str] = Field(default_factory=list)
    notable_del: List[str] = Field(default_factory=list)
    notable_edit: List[StringDiff] = Field(default_factory=list)


class EventChange(BaseModel):
    date: str
    key: str
    state: ChangeType
    field_diffs: List[FieldDiff] = Field(default_factory=list)


class SummaryDiff(BaseModel):
    """Changes between two summaries, characters by name and events by date."""

    characters: List[CharacterDiff] = Field(default_factory=list)
    events: List[EventChange] = Field(default_factory=list)

    def counts(self) -> Dict[str, Dict[str, int]]:
        """Count characters and events per change type."""
        result = {
            "characters": {state.name.lower(): 0 for state in ChangeType},
            "events": {state.name.lower(): 0 for state in ChangeType},
        }
        for character in self.characters:
            result["characters"][character.state.name.lower()] += 1
        for event in self.events:
            result["events"][event.state.name.lower()] += 1
        return result

    @property
    def has_changes(self) -> bool:
        """True when anything was added, removed or modified."""
        return any(c.state != ChangeType.UNCHANGED for c in self.characters) or any(
            e.state != ChangeType.UNCHANGED for e in self.events
        )
