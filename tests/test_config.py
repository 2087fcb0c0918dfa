"""Tests for configuration loading, saving and position metadata."""
from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from quizgen.config import (
    DEFAULTS,
    GENERIC_DIFFICULTY_TEXT,
    Settings,
    get_position_metadata,
    load_settings,
    save_settings,
)

ENV_VARS = (
    "GEMINI_MODEL",
    "GEMINI_API_BASE_URL",
    "GEMINI_TEMPERATURE",
    "GEMINI_MAX_OUTPUT_TOKENS",
    "AI_QUIZ_PROMPT_TEMPLATE",
    "QUIZGEN_LOG_DIR",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.model == "gemini-2.0-flash"
        assert s.max_retries == 3
        assert s.retry_delay == 1.0
        assert s.request_timeout == 60.0
        assert s.strict_validation is False

    def test_to_dict(self):
        d = Settings().to_dict()
        assert d["model"] == DEFAULTS["model"]
        assert set(d) == set(DEFAULTS)

    def test_to_dict_roundtrip(self):
        s = Settings(model="gemini-1.5-pro", max_retries=5)
        s2 = Settings(**s.to_dict())
        assert s2.model == "gemini-1.5-pro"
        assert s2.max_retries == 5

    def test_log_dir_path(self):
        assert Settings().log_dir_full_path is None
        s = Settings(log_dir="logs")
        assert s.log_dir_full_path == s.project_root / "logs"


class TestLoadSaveSettings:
    def test_load_from_file(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"model": "gemini-1.5-pro", "max_retries": 5}))

        with patch("quizgen.config.CONFIG_PATH", config_path):
            s = load_settings()
        assert s.model == "gemini-1.5-pro"
        assert s.max_retries == 5
        # Defaults for unspecified fields
        assert s.temperature == 0.7

    def test_load_missing_file(self, tmp_path):
        with patch("quizgen.config.CONFIG_PATH", tmp_path / "nonexistent.json"):
            s = load_settings()
        assert s.model == DEFAULTS["model"]

    def test_save_creates_file(self, tmp_path):
        config_path = tmp_path / "config.json"
        with patch("quizgen.config.CONFIG_PATH", config_path):
            save_settings(Settings(model="gemini-1.5-flash"))

        data = json.loads(config_path.read_text())
        assert data["model"] == "gemini-1.5-flash"

    def test_unknown_keys_ignored(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"model": "m", "unknown_key": "value"}))

        with patch("quizgen.config.CONFIG_PATH", config_path):
            s = load_settings()
        assert s.model == "m"
        assert not hasattr(s, "unknown_key")

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"model": "from-file", "temperature": 0.2}))
        monkeypatch.setenv("GEMINI_MODEL", "from-env")
        monkeypatch.setenv("GEMINI_MAX_OUTPUT_TOKENS", "2048")

        with patch("quizgen.config.CONFIG_PATH", config_path):
            s = load_settings()
        assert s.model == "from-env"
        assert s.max_output_tokens == 2048
        assert s.temperature == 0.2

    def test_invalid_env_value_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GEMINI_TEMPERATURE", "warm")
        with patch("quizgen.config.CONFIG_PATH", tmp_path / "nonexistent.json"):
            s = load_settings()
        assert s.temperature == DEFAULTS["temperature"]


class TestPositionMetadata:
    def test_known_position(self):
        meta = get_position_metadata("Senior")
        assert "scalable systems" in meta.difficulty_text
        assert "senior developer" in meta.instruction
        assert meta.level == 5

    def test_unknown_position(self):
        meta = get_position_metadata("wizard")
        assert meta.difficulty_text == GENERIC_DIFFICULTY_TEXT
        assert meta.level == 3

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("POSITION_DIFFICULTY_TEXT_JUNIOR", "custom text")
        monkeypatch.setenv("POSITION_LEVEL_JUNIOR", "3.5")
        meta = get_position_metadata("junior")
        assert meta.difficulty_text == "custom text"
        assert meta.level == 3.5
        assert "junior developer" in meta.instruction

    def test_invalid_level_env_falls_back(self, monkeypatch):
        monkeypatch.setenv("POSITION_LEVEL_INTERN", "high")
        assert get_position_metadata("intern").level == 1
