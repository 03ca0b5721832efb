"""
Story Memory Reconciler.

This module merges per-chunk extraction batches into one canonical, accumulated
story summary. The extraction model sees one chunk at a time, so each batch is a
partial and noisy snapshot of the same underlying facts; reconciliation decides
which records describe the same character or event and how their fields combine.

All merge functions are copy-on-write: they never mutate their arguments and
always return freshly built lists.
"""

import logging
from typing import Dict, List, Optional

from tqdm import tqdm

from ..config import SIMILARITY_THRESHOLD
from .models import Character, Event, NameCharacter, Summary, Timeline
from .reconciler_utils.matching import (
    character_key,
    find_first_match,
    find_first_similar,
    similarity,
)

logger = logging.getLogger(__name__)


# Character reconciliation


def dedupe_by_name(characters: List[Character]) -> List[Character]:
    """Drop blank names and keep only the first character per identity key."""
    seen = set()
    out = []
    for character in characters:
        name = character.name.strip()
        if not name:
            continue
        key = name.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(character.model_copy(update={"name": name}, deep=True))
    return out


def _prefer(update: Optional[str], current: Optional[str]) -> Optional[str]:
    """The update wins when it carries a value; a blank never erases a fact."""
    return update if update else current


def _union_aliases(name: str, *alias_lists: List[str]) -> List[str]:
    """Case-insensitive alias union that never repeats the canonical name."""
    seen = {character_key(name)}
    out = []
    for aliases in alias_lists:
        for alias in aliases:
            alias = alias.strip()
            key = alias.lower()
            if not alias or key in seen:
                continue
            seen.add(key)
            out.append(alias)
    return out


def _merge_notable_actions(
    current: List[str], updates: List[str], threshold: float
) -> List[str]:
    """
    Fuzzy union of notable actions.

    Each update action is compared against the retained list in order; the
    first one at or above the threshold is the same action and is replaced
    only when the update is strictly longer. Anything unmatched is appended.
    """
    if not updates:
        return list(current)

    out = [action.strip() for action in current if action.strip()]
    for action in updates:
        action = action.strip()
        if not action:
            continue
        index = find_first_similar(action, out, threshold)
        if index is None:
            out.append(action)
        elif len(action) > len(out[index]):
            out[index] = action
    return out


def merge_character(
    base: Character, update: Character, threshold: float = SIMILARITY_THRESHOLD
) -> Character:
    """Merge one update into a matching base character, returning a new object."""
    physical = base.physical_description
    new_physical = update.physical_description
    sexual = base.sexual_characteristics
    new_sexual = update.sexual_characteristics

    return Character(
        name=base.name,
        aliases=_union_aliases(base.name, base.aliases, update.aliases),
        kind=_prefer(update.kind, base.kind),
        role=_prefer(update.role, base.role),
        age=_prefer(update.age, base.age),
        gender=_prefer(update.gender, base.gender),
        species=_prefer(update.species, base.species),
        personality=_prefer(update.personality, base.personality),
        physical_description=physical.model_copy(
            update={
                "height": _prefer(new_physical.height, physical.height),
                "build": _prefer(new_physical.build, physical.build),
                "hair": _prefer(new_physical.hair, physical.hair),
                "other": _prefer(new_physical.other, physical.other),
            }
        ),
        sexual_characteristics=sexual.model_copy(
            update={
                "genitalia": _prefer(new_sexual.genitalia, sexual.genitalia),
                "penis_length_flaccid": _prefer(
                    new_sexual.penis_length_flaccid, sexual.penis_length_flaccid
                ),
                "penis_length_erect": _prefer(
                    new_sexual.penis_length_erect, sexual.penis_length_erect
                ),
                "pubic_hair": _prefer(new_sexual.pubic_hair, sexual.pubic_hair),
                "other": _prefer(new_sexual.other, sexual.other),
            }
        ),
        notable_actions=_merge_notable_actions(
            base.notable_actions, update.notable_actions, threshold
        ),
    )


def merge_characters(
    base: List[Character],
    updates: List[Character],
    threshold: float = SIMILARITY_THRESHOLD,
) -> List[Character]:
    """
    Merge a new character batch into an accumulated character list.

    Characters are matched by identity key (trimmed, lowercased name). Base
    ordering is preserved; newly introduced characters follow in the order
    they were first seen.

    Args:
        base: Accumulated characters
        updates: Characters extracted from the latest chunk
        threshold: Similarity cutoff for treating two notable actions as one

    Returns:
        A new list; neither argument is modified
    """
    merged: Dict[str, Character] = {}
    order: List[str] = []

    for character in base:
        key = character.key
        if not key:
            continue
        if key in merged:
            merged[key] = merge_character(merged[key], character, threshold)
            continue
        merged[key] = character.model_copy(
            update={"aliases": _union_aliases(character.name, character.aliases)},
            deep=True,
        )
        order.append(key)

    added = 0
    for update in dedupe_by_name(updates):
        key = update.key
        if key in merged:
            merged[key] = merge_character(merged[key], update, threshold)
        else:
            merged[key] = update.model_copy(
                update={"aliases": _union_aliases(update.name, update.aliases)}
            )
            order.append(key)
            added += 1

    logger.debug(
        "Merged %d update characters into %d base characters (%d new)",
        len(updates),
        len(base),
        added,
    )
    return [merged[key] for key in order]


def merge_name_characters(
    base: List[NameCharacter], updates: List[NameCharacter]
) -> List[NameCharacter]:
    """
    Merge names-only characters: match by identity key and union aliases.

    Aliases are trimmed and deduplicated by exact text; an alias equal to the
    character's name (ignoring case) is skipped.
    """
    out = [character.model_copy(deep=True) for character in base]
    index = {}
    for i, character in enumerate(out):
        key = character_key(character.name)
        if key:
            index.setdefault(key, i)

    for update in updates:
        name = update.name.strip()
        if not name:
            continue

        key = name.lower()
        if key in index:
            target = out[index[key]]
            aliases = list(target.aliases)
            seen = {alias.strip() for alias in aliases if alias.strip()}
        else:
            target = None
            aliases = []
            seen = set()

        for alias in update.aliases:
            alias = alias.strip()
            if not alias or alias.lower() == key or alias in seen:
                continue
            seen.add(alias)
            aliases.append(alias)

        if target is not None:
            out[index[key]] = target.model_copy(update={"aliases": aliases})
        else:
            out.append(NameCharacter(name=name, aliases=aliases))
            index[key] = len(out) - 1

    return out


# Timeline reconciliation


def _is_same_event(existing: Event, new: Event, threshold: float) -> bool:
    return (
        similarity(existing.description, new.description) >= threshold
        or similarity(existing.time, new.time) >= threshold
    )


def merge_timelines(
    base: List[Timeline],
    updates: List[Timeline],
    threshold: float = SIMILARITY_THRESHOLD,
) -> List[Timeline]:
    """
    Merge new dated events into an accumulated timeline.

    Events are bucketed by exact date string. Within a bucket the first
    existing event whose description or time clears the threshold is the same
    event: its description is replaced only by a strictly longer one and its
    time is filled only when empty. ``characters_involved`` is left untouched
    on a match. Unmatched events are appended. The result is sorted by date
    string; dates are never parsed.
    """
    buckets: Dict[str, List[Event]] = {}
    for timeline in base:
        bucket = buckets.setdefault(timeline.date, [])
        bucket.extend(event.model_copy(deep=True) for event in timeline.events)

    matched = 0
    for timeline in updates:
        bucket = buckets.setdefault(timeline.date, [])
        for new_event in timeline.events:
            index = find_first_match(
                bucket,
                lambda existing: _is_same_event(existing, new_event, threshold),
            )
            if index is None:
                bucket.append(new_event.model_copy(deep=True))
                continue

            matched += 1
            existing = bucket[index]
            changes = {}
            if len(new_event.description) > len(existing.description):
                changes["description"] = new_event.description
            if existing.time == "" and new_event.time != "":
                changes["time"] = new_event.time
            if changes:
                bucket[index] = existing.model_copy(update=changes)

    logger.debug(
        "Merged timeline: %d dates, %d update events matched existing ones",
        len(buckets),
        matched,
    )
    return [
        Timeline(date=date, events=events)
        for date, events in sorted(buckets.items(), key=lambda item: item[0])
    ]


def merge_summaries(
    base: Summary, update: Summary, threshold: float = SIMILARITY_THRESHOLD
) -> Summary:
    """Merge both the characters and the timeline of an update batch."""
    return Summary(
        characters=merge_characters(base.characters, update.characters, threshold),
        timeline=merge_timelines(base.timeline, update.timeline, threshold),
    )


class Reconciler:
    """
    Accumulates per-chunk extraction batches into one canonical summary.

    Formula: Summary_new = Reconciler(Summary_old, batch)

    A reconciler owns a single story's summary and is meant to be driven
    serially by the summarization pipeline; each call replaces the held summary
    with a freshly built one.
    """

    def __init__(
        self,
        summary: Optional[Summary] = None,
        threshold: float = SIMILARITY_THRESHOLD,
    ):
        """
        Initialize the reconciler.

        Args:
            summary: Existing accumulated summary to continue from
            threshold: Similarity cutoff for events and notable actions
        """
        self.summary = (
            summary.model_copy(deep=True) if summary is not None else Summary()
        )
        self.threshold = threshold
        self.chunks_reconciled = 0

    def reconcile(self, batch: Summary, chunk_id: Optional[str] = None) -> Summary:
        """
        Reconcile one extraction batch with the accumulated summary.

        Args:
            batch: Characters and timeline extracted from one chunk
            chunk_id: Optional identifier used in log messages

        Returns:
            The updated accumulated summary
        """
        self.summary = merge_summaries(self.summary, batch, self.threshold)
        self.chunks_reconciled += 1
        logger.debug(
            "Reconciled chunk %s: %d characters, %d dates",
            chunk_id if chunk_id is not None else self.chunks_reconciled,
            len(self.summary.characters),
            len(self.summary.timeline),
        )
        return self.summary

    def get_statistics(self) -> dict:
        """Get statistics about the accumulated summary."""
        return {
            "chunks": self.chunks_reconciled,
            "characters": len(self.summary.characters),
            "dates": len(self.summary.timeline),
            "events": sum(len(t.events) for t in self.summary.timeline),
            "notable_actions": sum(
                len(c.notable_actions) for c in self.summary.characters
            ),
        }


def reconcile_summaries(
    batches: List[Summary],
    base: Optional[Summary] = None,
    threshold: float = SIMILARITY_THRESHOLD,
    show_progress: bool = False,
) -> Summary:
    """
    Fold a sequence of per-chunk batches into one summary.

    Args:
        batches: Extraction batches in chunk order
        base: Optional summary to start from
        threshold: Similarity cutoff for events and notable actions
        show_progress: Display a tqdm progress bar

    Returns:
        The reconciled summary
    """
    reconciler = Reconciler(base, threshold=threshold)
    for chunk_idx, batch in enumerate(
        tqdm(batches, desc="Reconciling chunks", disable=not show_progress)
    ):
        reconciler.reconcile(batch, chunk_id=str(chunk_idx))

    stats = reconciler.get_statistics()
    logger.info(
        "Reconciled %d chunks: %d characters, %d events",
        stats["chunks"],
        stats["characters"],
        stats["events"],
    )
    return reconciler.summary
