from story_memory.memory import Character, Event, NameExtraction, Summary


def test_summary_creation(summary):
    assert len(summary.characters) == 2
    assert summary.get_character("  JANE ") is not None
    assert summary.get_character("Nobody") is None
    assert len(summary.get_events("June 1, 2009")) == 2
    assert summary.get_events("June 3, 2009") == []


def test_character_key_is_trimmed_lowercase():
    assert Character(name="  Mary Jane ").key == "mary jane"


def test_event_key():
    assert Event(time=" 7am ", description=" Woke up ").key == "7am|Woke up"
    assert Event(time="", description="Woke up").key == "|Woke up"
    assert Event(time="  ", description="").key == "(blank)"


def test_nulls_fall_back_to_defaults():
    summary = Summary.from_json(
        {
            "characters": [
                {
                    "name": "Jane",
                    "age": None,
                    "aliases": None,
                    "sexual_characteristics": {"penis_length_erect": None},
                }
            ],
            "timeline": None,
        }
    )
    jane = summary.characters[0]
    assert jane.age == ""
    assert jane.aliases == []
    assert jane.sexual_characteristics.penis_length_erect is None
    assert summary.timeline == []


def test_name_extraction_envelope():
    names = NameExtraction.model_validate(
        {"characters": [{"name": "Jane", "aliases": ["Janie"]}]}
    )
    assert names.characters[0].aliases == ["Janie"]


if __name__ == "__main__":
    test_character_key_is_trimmed_lowercase()
    test_event_key()
    test_nulls_fall_back_to_defaults()
    print("✅ Models working correctly!")
