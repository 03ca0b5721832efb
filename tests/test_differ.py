"""Tests for the snapshot differ."""

from story_memory.diff import (
    CHARACTER_FIELDS,
    ChangeType,
    Op,
    diff_characters,
    diff_summaries,
    diff_timelines,
    fuzzy_list_diff,
)
from story_memory.memory import Character, Event, Summary, Timeline


def _ops(string_diff):
    return [(delta.op, delta.text) for delta in string_diff.deltas]


def _field(diff, path):
    for field in diff.field_diffs:
        if field.path == path:
            return field.diff
    return None


def test_identical_summaries_have_no_changes(summary):
    diff = diff_summaries(summary, summary.model_copy(deep=True))
    assert all(c.state == ChangeType.UNCHANGED for c in diff.characters)
    assert all(e.state == ChangeType.UNCHANGED for e in diff.events)
    assert len(diff.characters) == 2
    assert len(diff.events) == 3
    assert not diff.has_changes
    counts = diff.counts()
    assert counts["characters"]["unchanged"] == 2
    assert counts["events"]["modified"] == 0


def test_modified_character_fields():
    old = [Character(name="Jane", age="17")]
    new = [Character(name="jane", age="18", role="Student")]

    diffs = diff_characters(old, new)
    assert len(diffs) == 1
    jane = diffs[0]
    assert jane.state == ChangeType.MODIFIED
    assert [f.path for f in jane.field_diffs] == ["Age", "Role"]

    age = _field(jane, "Age")
    assert (age.old, age.new) == ("17", "18")
    assert _ops(age) == [(Op.DELETE, "17"), (Op.INSERT, "18")]

    role = _field(jane, "Role")
    assert role.old == ""
    assert _ops(role) == [(Op.INSERT, "Student")]


def test_optional_fields_compare_as_text():
    old = [Character(name="Mark")]
    new = [
        Character.model_validate(
            {"name": "Mark", "sexual_characteristics": {"penis_length_erect": "6in"}}
        )
    ]
    mark = diff_characters(old, new)[0]
    assert [f.path for f in mark.field_diffs] == ["SexualCharacteristics.PenisLengthErect"]
    assert _ops(mark.field_diffs[0].diff) == [(Op.INSERT, "6in")]


def test_added_character_has_every_field(jane):
    diffs = diff_characters([], [jane])
    added = diffs[0]
    assert added.state == ChangeType.ADDED
    assert [f.path for f in added.field_diffs] == [path for path, _ in CHARACTER_FIELDS]
    assert len(added.field_diffs) == 13
    for field in added.field_diffs:
        assert field.diff.old == ""
        assert len(field.diff.deltas) == 1
        assert field.diff.deltas[0].op == Op.INSERT
    assert _field(added, "PhysicalDescription.Hair").new == "Red, curly"
    assert _field(added, "SexualCharacteristics.PenisLengthFlaccid").new == ""
    assert added.notable_add == jane.notable_actions


def test_removed_character_has_no_field_diffs(jane):
    removed = diff_characters([jane], [])[0]
    assert removed.state == ChangeType.REMOVED
    assert removed.name == "Jane"
    assert removed.field_diffs == []


def test_disjoint_character_sets():
    old = [Character(name="Amy"), Character(name="Ben")]
    new = [Character(name="Cal"), Character(name="Dee"), Character(name="Eve")]
    diffs = diff_characters(old, new)
    states = [d.state for d in diffs]
    assert states.count(ChangeType.REMOVED) == 2
    assert states.count(ChangeType.ADDED) == 3
    assert ChangeType.MODIFIED not in states
    assert [d.name for d in diffs] == ["Amy", "Ben", "Cal", "Dee", "Eve"]


def test_notable_action_rewording_is_an_edit():
    old = [Character(name="Jane", notable_actions=["Saved the neighbor's dog"])]
    new = [Character(name="Jane", notable_actions=["Saved the neighbor's dog bravely"])]
    jane = diff_characters(old, new)[0]
    assert jane.state == ChangeType.MODIFIED
    assert jane.notable_add == []
    assert jane.notable_del == []
    assert len(jane.notable_edit) == 1
    assert _ops(jane.notable_edit[0]) == [
        (Op.EQUAL, "Saved the neighbor's dog"),
        (Op.INSERT, " bravely"),
    ]


def test_fuzzy_list_diff_below_threshold():
    adds, dels, edits = fuzzy_list_diff(
        ["Saved the dog"], ["Saved the neighbor's dog bravely"]
    )
    assert adds == ["Saved the neighbor's dog bravely"]
    assert dels == ["Saved the dog"]
    assert edits == []


def test_fuzzy_list_diff_prefers_best_match():
    adds, dels, edits = fuzzy_list_diff(
        ["Walked the dog"], ["Walked the cat", "Walked the dogs"]
    )
    assert adds == ["Walked the cat"]
    assert dels == []
    assert [(e.old, e.new) for e in edits] == [("Walked the dog", "Walked the dogs")]


def test_fuzzy_list_diff_identical_lists():
    assert fuzzy_list_diff(["a", "b"], ["a", "b"]) == ([], [], [])
    assert fuzzy_list_diff([], []) == ([], [], [])


def test_event_rewording_is_modified():
    old = [Timeline(date="June 1", events=[Event(time="7am", description="Woke up")])]
    new = [
        Timeline(
            date="June 1",
            events=[Event(time="7am", description="Woke up and showered")],
        )
    ]
    changes = diff_timelines(old, new)
    assert len(changes) == 1
    change = changes[0]
    assert change.state == ChangeType.MODIFIED
    assert change.key == "7am|Woke up and showered"
    assert [f.path for f in change.field_diffs] == ["Description"]
    assert _ops(change.field_diffs[0].diff) == [
        (Op.EQUAL, "Woke up"),
        (Op.INSERT, " and showered"),
    ]


def test_event_fuzzy_phase_takes_best_candidate():
    old = [
        Timeline(date="June 1", events=[Event(time="5pm", description="Walked the dog")])
    ]
    new = [
        Timeline(
            date="June 1",
            events=[
                Event(time="6pm", description="Walked the cat"),
                Event(time="6pm", description="Walked the dogs"),
            ],
        )
    ]
    changes = {c.key: c for c in diff_timelines(old, new)}
    assert changes["6pm|Walked the dogs"].state == ChangeType.MODIFIED
    assert [f.path for f in changes["6pm|Walked the dogs"].field_diffs] == [
        "Time",
        "Description",
    ]
    assert changes["6pm|Walked the cat"].state == ChangeType.ADDED


def test_exact_key_pairs_before_fuzzy():
    old = [
        Timeline(
            date="June 1",
            events=[
                Event(time="7am", description="Woke up"),
                Event(time="7am", description="Woke up and showered"),
            ],
        )
    ]
    new = [
        Timeline(
            date="June 1",
            events=[Event(time="7am", description="Woke up and showered")],
        )
    ]
    changes = diff_timelines(old, new)
    states = {c.key: c.state for c in changes}
    assert states == {
        "7am|Woke up": ChangeType.REMOVED,
        "7am|Woke up and showered": ChangeType.UNCHANGED,
    }


def test_dates_on_one_side_only():
    old = [Timeline(date="June 1", events=[Event(time="7am", description="Woke up")])]
    new = [Timeline(date="June 3", events=[Event(time="", description="Left town")])]
    changes = diff_timelines(old, new)
    assert [(c.date, c.key, c.state) for c in changes] == [
        ("June 1", "7am|Woke up", ChangeType.REMOVED),
        ("June 3", "|Left town", ChangeType.ADDED),
    ]
    assert changes[0].field_diffs == []
    added = changes[1]
    assert [f.path for f in added.field_diffs] == ["Time", "Description"]
    assert _ops(added.field_diffs[1].diff) == [(Op.INSERT, "Left town")]


def test_blank_event_key():
    new = [Timeline(date="June 1", events=[Event()])]
    changes = diff_timelines([], new)
    assert changes[0].key == "(blank)"


def test_events_sorted_by_date_then_key():
    new = [
        Timeline(
            date="June 2",
            events=[Event(time="9pm", description="B"), Event(time="1am", description="A")],
        ),
        Timeline(date="June 1", events=[Event(time="noon", description="C")]),
    ]
    changes = diff_timelines([], new)
    assert [(c.date, c.key) for c in changes] == [
        ("June 1", "noon|C"),
        ("June 2", "1am|A"),
        ("June 2", "9pm|B"),
    ]


def test_diff_does_not_mutate_inputs(summary):
    other = summary.model_copy(deep=True)
    other.characters[0].age = "18"
    other.timeline[0].events[0].description = "Woke up late"
    before = summary.model_dump()
    other_before = other.model_dump()

    diff = diff_summaries(summary, other)

    assert diff.has_changes
    assert summary.model_dump() == before
    assert other.model_dump() == other_before


def test_summary_diff_serializes(summary):
    other = Summary(characters=[Character(name="Zoe")])
    diff = diff_summaries(summary, other)
    payload = diff.model_dump(mode="json")
    assert payload["characters"][0]["state"] == int(ChangeType.REMOVED)
    assert {c["name"] for c in payload["characters"]} == {"Jane", "Mark", "Zoe"}
