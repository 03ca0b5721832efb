import pytest
from pydantic import ValidationError

from story_memory.config import (
    DEFAULT_CHUNK_LIMIT,
    SIMILARITY_THRESHOLD,
    load_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "STORY_MEMORY_LOG_LEVEL",
        "STORY_MEMORY_CHUNK_LIMIT",
        "STORY_MEMORY_SIMILARITY_THRESHOLD",
    ):
        # setenv first so the teardown also removes values loaded from .env files
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults(tmp_path):
    settings = load_settings(str(tmp_path / "missing.env"))
    assert settings.log_level == "INFO"
    assert settings.chunk_limit == DEFAULT_CHUNK_LIMIT
    assert settings.similarity_threshold == SIMILARITY_THRESHOLD == 0.70


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("STORY_MEMORY_LOG_LEVEL", "debug")
    monkeypatch.setenv("STORY_MEMORY_CHUNK_LIMIT", "4096")
    settings = load_settings(str(tmp_path / "missing.env"))
    assert settings.log_level == "DEBUG"
    assert settings.chunk_limit == 4096


def test_env_file_is_loaded(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("STORY_MEMORY_SIMILARITY_THRESHOLD=0.85\n")
    settings = load_settings(str(env_file))
    assert settings.similarity_threshold == 0.85


def test_invalid_threshold_rejected(monkeypatch, tmp_path):
    monkeypatch.setenv("STORY_MEMORY_SIMILARITY_THRESHOLD", "1.5")
    with pytest.raises(ValidationError):
        load_settings(str(tmp_path / "missing.env"))


def test_malformed_values_rejected(monkeypatch, tmp_path):
    monkeypatch.setenv("STORY_MEMORY_CHUNK_LIMIT", "lots")
    with pytest.raises(ValidationError):
        load_settings(str(tmp_path / "missing.env"))


def test_unknown_log_level_rejected(monkeypatch, tmp_path):
    monkeypatch.setenv("STORY_MEMORY_LOG_LEVEL", "loud")
    with pytest.raises(ValidationError):
        load_settings(str(tmp_path / "missing.env"))
