"""Tests for the command line entry point."""
from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest

from quizgen.__main__ import _parse_flag, _read_existing, main


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    for var in ("GEMINI_MODEL", "GEMINI_TEMPERATURE", "GEMINI_MAX_OUTPUT_TOKENS",
                "AI_QUIZ_PROMPT_TEMPLATE", "QUIZGEN_LOG_DIR"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    with patch("quizgen.config.CONFIG_PATH", tmp_path / "config.json"):
        yield


class TestHelpers:
    def test_parse_flag(self):
        args = ["--topic", "Go", "--strict", "--count"]
        assert _parse_flag(args, "--topic", None) == "Go"
        assert _parse_flag(args, "--count", "10") == "10"
        assert _parse_flag(args, "--language", None) is None

    def test_read_existing(self, tmp_path):
        path = tmp_path / "existing.txt"
        path.write_text("What is a closure?\n\n  What is hoisting?  \n")
        assert _read_existing(str(path)) == ["What is a closure?", "What is hoisting?"]

    def test_read_existing_missing_file(self, tmp_path):
        assert _read_existing(str(tmp_path / "nope.txt")) == []
        assert _read_existing(None) == []


class TestCommands:
    def test_unknown_command(self, capsys):
        assert main(["frobnicate"]) == 1
        assert "Unknown command" in capsys.readouterr().out

    def test_config(self, capsys):
        assert main(["config"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["model"] == "gemini-2.0-flash"
        assert data["max_retries"] == 3

    def test_parse(self, tmp_path, capsys, fenced_response):
        path = tmp_path / "response.txt"
        path.write_text(fenced_response)

        assert main(["parse", str(path)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["questions"][0]["difficulty"] == "easy"
        assert data["warnings"] == []

    def test_parse_strict_failure(self, tmp_path, capsys, valid_entry):
        path = tmp_path / "response.txt"
        path.write_text(json.dumps([dict(valid_entry, options=["a", "b"])]))

        assert main(["parse", str(path), "--strict"]) == 1
        assert "Error: Question 1" in capsys.readouterr().err

    def test_parse_without_file(self, capsys):
        assert main(["parse"]) == 1
        assert "Usage" in capsys.readouterr().out

    def test_generate(self, tmp_path, capsys, fenced_response):
        existing = tmp_path / "existing.txt"
        existing.write_text("What is a closure?\n")
        output = tmp_path / "out.json"

        with patch("quizgen.providers.llm_gemini.GeminiProvider.generate",
                   new_callable=AsyncMock, return_value=fenced_response) as gen:
            code = main(["generate", "--topic", "JavaScript", "--position", "junior",
                         "--existing", str(existing), "--count", "3",
                         "--output", str(output)])

        assert code == 0
        prompt = gen.await_args.args[0]
        assert "Generate 3 unique" in prompt
        assert "- What is a closure?" in prompt
        assert json.loads(output.read_text())["questions"][0]["question"] == "Q1"
        assert f"Wrote 1 questions to {output}" in capsys.readouterr().out

    def test_generate_without_api_key(self, monkeypatch, capsys):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        assert main(["generate", "--topic", "Go"]) == 1
        assert "GEMINI_API_KEY" in capsys.readouterr().err

    @pytest.mark.parametrize("count", ["ten", "0"])
    def test_generate_bad_count(self, capsys, count):
        assert main(["generate", "--count", count]) == 1
        assert "--count must be a positive integer" in capsys.readouterr().err

    def test_generate_bad_question_format(self, tmp_path, capsys, fenced_response):
        (tmp_path / "config.json").write_text(json.dumps({"question_format_path": "missing.json"}))
        with patch("quizgen.providers.llm_gemini.GeminiProvider.generate",
                   new_callable=AsyncMock, return_value=fenced_response):
            assert main(["generate"]) == 1
        assert "Failed to load question format" in capsys.readouterr().err
