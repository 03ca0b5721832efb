"""
Snapshot differ.

Compares two full summaries (for example before and after a re-extraction
pass) and reports what changed. Characters are joined on their identity key;
events are joined by date and then paired within a date in two phases, exact
key first and fuzzy similarity second.

Fuzzy pairing here takes the best-scoring candidate, unlike the reconciler,
which takes the first candidate above the threshold.
"""

from typing import Callable, Dict, List, Optional, Tuple

from ..config import SIMILARITY_THRESHOLD
from ..memory.models import Character, Event, Summary, Timeline
from ..memory.reconciler_utils.matching import (
    find_best_match,
    pair_best_matches,
    similarity,
)
from .models import (
    ChangeType,
    CharacterDiff,
    EventChange,
    FieldDiff,
    StringDiff,
    SummaryDiff,
)
from .word_diff import insert_only, word_diff

# Compared character fields, in report order
CHARACTER_FIELDS: List[Tuple[str, Callable[[Character], Optional[str]]]] = [
    ("Age", lambda c: c.age),
    ("Gender", lambda c: c.gender),
    ("Role", lambda c: c.role),
    ("Personality", lambda c: c.personality),
    ("PhysicalDescription.Height", lambda c: c.physical_description.height),
    ("PhysicalDescription.Build", lambda c: c.physical_description.build),
    ("PhysicalDescription.Hair", lambda c: c.physical_description.hair),
    ("PhysicalDescription.Other", lambda c: c.physical_description.other),
    ("SexualCharacteristics.Genitalia", lambda c: c.sexual_characteristics.genitalia),
    ("SexualCharacteristics.PubicHair", lambda c: c.sexual_characteristics.pubic_hair),
    ("SexualCharacteristics.Other", lambda c: c.sexual_characteristics.other),
    (
        "SexualCharacteristics.PenisLengthFlaccid",
        lambda c: c.sexual_characteristics.penis_length_flaccid,
    ),
    (
        "SexualCharacteristics.PenisLengthErect",
        lambda c: c.sexual_characteristics.penis_length_erect,
    ),
]


def _text(value: Optional[str]) -> str:
    return "" if value is None else value


def fuzzy_list_diff(
    old: List[str], new: List[str], threshold: float = SIMILARITY_THRESHOLD
) -> Tuple[List[str], List[str], List[StringDiff]]:
    """
    Diff two lists of short strings allowing for rewording.

    Each old item, in order, is paired with its most similar unused new item
    when that similarity reaches the threshold; a paired item whose text
    changed becomes an edit. Unpaired old items are deletions and unpaired new
    items are additions.

    Returns:
        ``(adds, dels, edits)``
    """
    adds: List[str] = []
    dels: List[str] = []
    edits: List[StringDiff] = []
    used = set()

    for item in old:
        match = find_best_match(
            new, lambda candidate: similarity(item, candidate), used, threshold
        )
        if match is None:
            dels.append(item)
            continue
        j, _ = match
        used.add(j)
        if item != new[j]:
            edits.append(word_diff(item, new[j]))

    for j, item in enumerate(new):
        if j not in used:
            adds.append(item)

    return adds, dels, edits


def _added_character(character: Character) -> CharacterDiff:
    return CharacterDiff(
        name=character.name,
        state=ChangeType.ADDED,
        field_diffs=[
            FieldDiff(path=path, diff=insert_only(_text(get(character))))
            for path, get in CHARACTER_FIELDS
        ],
        notable_add=list(character.notable_actions),
    )


def _compare_characters(
    old: Character, new: Character, threshold: float
) -> CharacterDiff:
    field_diffs = []
    for path, get in CHARACTER_FIELDS:
        old_value, new_value = _text(get(old)), _text(get(new))
        if old_value != new_value:
            field_diffs.append(FieldDiff(path=path, diff=word_diff(old_value, new_value)))

    adds, dels, edits = fuzzy_list_diff(
        old.notable_actions, new.notable_actions, threshold
    )

    changed = field_diffs or adds or dels or edits
    return CharacterDiff(
        name=new.name,
        state=ChangeType.MODIFIED if changed else ChangeType.UNCHANGED,
        field_diffs=field_diffs,
        notable_add=adds,
        notable_del=dels,
        notable_edit=edits,
    )


def diff_characters(
    old: List[Character],
    new: List[Character],
    threshold: float = SIMILARITY_THRESHOLD,
) -> List[CharacterDiff]:
    """
    Diff two character lists, joined on identity key and sorted by name.

    Args:
        old: Characters before
        new: Characters after
        threshold: Similarity cutoff for pairing notable actions

    Returns:
        One CharacterDiff per identity key present on either side
    """
    old_by_key: Dict[str, Character] = {c.key: c for c in old}
    new_by_key: Dict[str, Character] = {c.key: c for c in new}

    out = []
    for key in {**old_by_key, **new_by_key}:
        before = old_by_key.get(key)
        after = new_by_key.get(key)
        if after is None:
            out.append(CharacterDiff(name=before.name, state=ChangeType.REMOVED))
        elif before is None:
            out.append(_added_character(after))
        else:
            out.append(_compare_characters(before, after, threshold))

    out.sort(key=lambda diff: diff.name)
    return out


def _event_field_diffs(old: Event, new: Event) -> List[FieldDiff]:
    field_diffs = []
    if old.time != new.time:
        field_diffs.append(FieldDiff(path="Time", diff=word_diff(old.time, new.time)))
    if old.description != new.description:
        field_diffs.append(
            FieldDiff(
                path="Description", diff=word_diff(old.description, new.description)
            )
        )
    return field_diffs


def _added_event(date: str, event: Event) -> EventChange:
    return EventChange(
        date=date,
        key=event.key,
        state=ChangeType.ADDED,
        field_diffs=[
            FieldDiff(path="Time", diff=insert_only(event.time)),
            FieldDiff(path="Description", diff=insert_only(event.description)),
        ],
    )


def _removed_event(date: str, event: Event) -> EventChange:
    return EventChange(date=date, key=event.key, state=ChangeType.REMOVED)


def _event_similarity(old: Event, new: Event) -> float:
    return max(
        similarity(old.description, new.description),
        similarity(old.time, new.time),
    )


def _diff_date(
    date: str, old_events: List[Event], new_events: List[Event], threshold: float
) -> List[EventChange]:
    """Pair the events of one date: exact key, then best fuzzy match."""
    out = []
    used_old = set()
    used_new = set()

    for i, old_event in enumerate(old_events):
        for j, new_event in enumerate(new_events):
            if j in used_new or old_event.key != new_event.key:
                continue
            field_diffs = _event_field_diffs(old_event, new_event)
            out.append(
                EventChange(
                    date=date,
                    key=old_event.key,
                    state=ChangeType.MODIFIED if field_diffs else ChangeType.UNCHANGED,
                    field_diffs=field_diffs,
                )
            )
            used_old.add(i)
            used_new.add(j)
            break

    for i, j in pair_best_matches(
        old_events, new_events, _event_similarity, threshold, used_old, used_new
    ):
        out.append(
            EventChange(
                date=date,
                key=new_events[j].key,
                state=ChangeType.MODIFIED,
                field_diffs=_event_field_diffs(old_events[i], new_events[j]),
            )
        )

    out.extend(
        _removed_event(date, event)
        for i, event in enumerate(old_events)
        if i not in used_old
    )
    out.extend(
        _added_event(date, event)
        for j, event in enumerate(new_events)
        if j not in used_new
    )
    return out


def diff_timelines(
    old: List[Timeline],
    new: List[Timeline],
    threshold: float = SIMILARITY_THRESHOLD,
) -> List[EventChange]:
    """
    Diff two timelines, joined on date and sorted by (date, key).

    Args:
        old: Timeline before
        new: Timeline after
        threshold: Similarity cutoff for fuzzy event pairing

    Returns:
        One EventChange per event on either side (paired events count once)
    """
    old_by_date: Dict[str, Timeline] = {t.date: t for t in old}
    new_by_date: Dict[str, Timeline] = {t.date: t for t in new}

    out: List[EventChange] = []
    for date in {**old_by_date, **new_by_date}:
        before = old_by_date.get(date)
        after = new_by_date.get(date)
        if after is None:
            out.extend(_removed_event(date, event) for event in before.events)
        elif before is None:
            out.extend(_added_event(date, event) for event in after.events)
        else:
            out.extend(_diff_date(date, before.events, after.events, threshold))

    out.sort(key=lambda change: (change.date, change.key))
    return out


def diff_summaries(
    old: Summary, new: Summary, threshold: float = SIMILARITY_THRESHOLD
) -> SummaryDiff:
    """Compute the structured change report between two summaries."""
    return SummaryDiff(
        characters=diff_characters(old.characters, new.characters, threshold),
        events=diff_timelines(old.timeline, new.timeline, threshold),
    )
