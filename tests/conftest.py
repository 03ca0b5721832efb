import pytest

from story_memory.memory import (
    Character,
    Event,
    PhysicalDescription,
    SexualCharacteristics,
    Summary,
    Timeline,
)


@pytest.fixture
def jane():
    return Character(
        name="Jane",
        aliases=["Janie"],
        kind="main",
        role="Babysitter",
        age="17",
        gender="female",
        personality="Cautious and kind",
        physical_description=PhysicalDescription(height="5'6\"", hair="Red, curly"),
        sexual_characteristics=SexualCharacteristics(other="None mentioned"),
        notable_actions=["Saved the neighbor's dog", "Drove to the lake"],
    )


@pytest.fixture
def mark():
    return Character(
        name="Mark",
        role="Neighbor",
        age="19",
        sexual_characteristics=SexualCharacteristics(penis_length_flaccid="3in*"),
        notable_actions=["Mowed the lawn"],
    )


@pytest.fixture
def summary(jane, mark):
    return Summary(
        characters=[jane, mark],
        timeline=[
            Timeline(
                date="June 1, 2009",
                events=[
                    Event(time="7am", description="Woke up", characters_involved=["Jane"]),
                    Event(time="9pm", description="Went to bed"),
                ],
            ),
            Timeline(
                date="June 2, 2009",
                events=[Event(time="noon", description="Picnic by the lake")],
            ),
        ],
    )
