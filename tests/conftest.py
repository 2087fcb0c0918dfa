"""Shared test fixtures."""
from __future__ import annotations

import json

import pytest


@pytest.fixture
def valid_entry():
    """A well-formed question entry as the generator would emit it."""
    return {
        "question": "Which keyword defines a generator function in Python?",
        "options": ["yield", "return", "async", "lambda"],
        "correctAnswer": 0,
        "explanation": "A function containing yield becomes a generator.",
        "difficulty": "easy",
        "category": "Generators",
    }


@pytest.fixture
def fenced_response():
    """The fenced single-question response used in the end-to-end scenarios."""
    return (
        "```json\n"
        '[{"question":"Q1","options":["a","b","c","d"],"correctAnswer":1,'
        '"explanation":"e","difficulty":"EASY","category":"Cat"}]\n'
        "```"
    )


@pytest.fixture
def prose_response():
    """The same question, un-fenced and preceded by chatter."""
    return (
        'Sure! Here are the questions: [ {"question":"Q1","options":["a","b","c","d"],'
        '"correctAnswer":1,"explanation":"e","difficulty":"EASY","category":"Cat"} ]'
    )


@pytest.fixture
def gemini_envelope():
    """Build a generateContent response body around *text*."""

    def _make(text):
        return {
            "candidates": [
                {
                    "content": {"parts": [{"text": text}], "role": "model"},
                    "finishReason": "STOP",
                }
            ],
            "usageMetadata": {"candidatesTokenCount": 42},
        }

    return _make


@pytest.fixture
def questions_json(valid_entry):
    second = dict(valid_entry, question="What does len([]) return?", correctAnswer=2,
                  options=["None", "-1", "0", "an error"], category="Builtins")
    return json.dumps([valid_entry, second])
