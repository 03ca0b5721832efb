"""
Terminal rendering for snapshot diffs.

A thin presentation layer over ``SummaryDiff``: insertions are green and
underlined, deletions red with strike-through, and every character or event is
tagged with its change type.
"""

from typing import Optional

from rich.console import Console
from rich.text import Text

from .models import ChangeType, Op, StringDiff, SummaryDiff

INSERT_STYLE = "green underline"
DELETE_STYLE = "red strike"

STATE_TAGS = {
    ChangeType.ADDED: ("[+]", "green"),
    ChangeType.REMOVED: ("[-]", "red"),
    ChangeType.MODIFIED: ("[~]", "yellow"),
    ChangeType.UNCHANGED: ("[=]", "dim"),
}


def render_string_diff(diff: StringDiff) -> Text:
    """Render a word diff as styled text."""
    text = Text()
    for delta in diff.deltas:
        if delta.op == Op.INSERT:
            text.append(delta.text, style=INSERT_STYLE)
        elif delta.op == Op.DELETE:
            text.append(delta.text, style=DELETE_STYLE)
        else:
            text.append(delta.text)
    return text


def _tag(state: ChangeType) -> Text:
    label, style = STATE_TAGS[state]
    return Text(label, style=style)


def print_summary_diff(
    diff: SummaryDiff,
    console: Optional[Console] = None,
    changes_only: bool = False,
) -> None:
    """
    Print a summary diff.

    Args:
        diff: The diff to render
        console: Console to print to (defaults to a new stdout console)
        changes_only: Skip unchanged characters and events
    """
    console = console or Console()

    characters = [
        c
        for c in diff.characters
        if not changes_only or c.state != ChangeType.UNCHANGED
    ]
    events = [
        e for e in diff.events if not changes_only or e.state != ChangeType.UNCHANGED
    ]

    if characters:
        console.print(Text("Characters", style="cyan"))
        for character in characters:
            console.print(Text.assemble("  ", _tag(character.state), " ", character.name))
            for field in character.field_diffs:
                console.print(
                    Text.assemble(
                        f"    {field.path}: ", render_string_diff(field.diff)
                    )
                )
            for action in character.notable_del:
                console.print(
                    Text.assemble("    Notable: ", (action, DELETE_STYLE))
                )
            for action in character.notable_add:
                console.print(
                    Text.assemble("    Notable: ", (action, INSERT_STYLE))
                )
            for edit in character.notable_edit:
                console.print(Text.assemble("    Notable*: ", render_string_diff(edit)))

    if events:
        console.print(Text("Events", style="cyan"))
        current_date = None
        for event in events:
            if event.date != current_date:
                current_date = event.date
                console.print(Text(f"  {current_date}", style="dim"))
            console.print(Text.assemble("    ", _tag(event.state), " ", event.key))
            for field in event.field_diffs:
                console.print(
                    Text.assemble(
                        f"      {field.path}: ", render_string_diff(field.diff)
                    )
                )
