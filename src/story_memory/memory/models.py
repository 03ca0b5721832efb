"""
Core data models for the story memory system.

This module contains the structures the extraction model fills in for each
text chunk: characters with their descriptive attributes, and a timeline of
dated events. Field names follow the JSON the model is asked to emit, and every
field has a blank default so partial output still validates.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class ExtractedModel(BaseModel):
    """Base for models filled from LLM output; null values fall back to defaults."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class PhysicalDescription(ExtractedModel):
    """Physical attributes; values may carry an asterisk when interpolated."""

    height: str = Field(default="", description="Height as stated or estimated")
    build: str = Field(default="", description="Body build or physique")
    hair: str = Field(default="", description="Hair color/style if stated")
    other: str = Field(default="", description="Any additional physical details")


class SexualCharacteristics(ExtractedModel):
    """Sexual characteristics; the two length fields are absent when unknown."""

    genitalia: str = Field(default="", description="Genital description")
    penis_length_flaccid: Optional[str] = Field(
        default=None, description="Length when flaccid (string to allow ranges/notes)"
    )
    penis_length_erect: Optional[str] = Field(
        default=None, description="Length when erect (string to allow ranges/notes)"
    )
    pubic_hair: str = Field(default="", description="Pubic hair description")
    other: str = Field(default="", description="Other relevant characteristics")


class Character(ExtractedModel):
    """Class to represent a character extracted from the story."""

    name: str = Field(default="", description="Canonical character name")
    aliases: List[str] = Field(
        default_factory=list, description="Nicknames or alternative names"
    )
    kind: str = Field(default="", description="Prominence: main, major or minor")
    role: str = Field(default="", description="One-sentence role description")
    age: str = Field(default="", description="Age as stated or estimated")
    gender: str = Field(default="", description="Gender as stated or estimated")
    species: str = Field(default="", description="Species if stated or relevant")
    personality: str = Field(default="", description="Key personality traits")
    physical_description: PhysicalDescription = Field(
        default_factory=PhysicalDescription
    )
    sexual_characteristics: SexualCharacteristics = Field(
        default_factory=SexualCharacteristics
    )
    notable_actions: List[str] = Field(
        default_factory=list, description="Most significant actions taken"
    )

    @property
    def key(self) -> str:
        """Identity key used to match the same character across snapshots."""
        return self.name.strip().lower()


class Event(ExtractedModel):
    """Class to represent a single event on a timeline date."""

    time: str = Field(default="", description="Time of event (e.g. '7:30am')")
    description: str = Field(default="", description="Brief description")
    characters_involved: List[str] = Field(
        default_factory=list, description="Character names involved in this event"
    )

    @property
    def key(self) -> str:
        """Identity key: trimmed time and description, or "(blank)"."""
        time = self.time.strip()
        description = self.description.strip()
        if not time and not description:
            return "(blank)"
        return f"{time}|{description}"


class Timeline(ExtractedModel):
    """Events that happened on one date. Dates are opaque strings."""

    date: str = Field(default="", description="Date of events, e.g. 'June 22, 2009'")
    events: List[Event] = Field(default_factory=list)


class Summary(ExtractedModel):
    """
    The accumulated story summary.

    Built incrementally from per-chunk extractions; after reconciliation no two
    characters share an identity key.
    """

    characters: List[Character] = Field(default_factory=list)
    timeline: List[Timeline] = Field(default_factory=list)

    @classmethod
    def from_json(cls, json_data: dict) -> "Summary":
        """Create a Summary from JSON data."""
        return cls(**json_data)

    def get_character(self, name: str) -> Optional[Character]:
        """Find a character by name, ignoring case and surrounding whitespace."""
        key = name.strip().lower()
        for character in self.characters:
            if character.key == key:
                return character
        return None

    def get_events(self, date: str) -> List[Event]:
        """Return every event recorded under the given date."""
        events = []
        for timeline in self.timeline:
            if timeline.date == date:
                events.extend(timeline.events)
        return events


class NameCharacter(ExtractedModel):
    """Lightweight character produced by the names-only extraction pass."""

    name: str = Field(default="")
    aliases: List[str] = Field(default_factory=list)


class NameExtraction(ExtractedModel):
    """Envelope returned by the names-only extraction pass."""

    characters: List[NameCharacter] = Field(default_factory=list)
